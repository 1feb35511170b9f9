from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Literal

from pydantic import Field, field_validator
from pydantic_core.core_schema import ValidationInfo
from pydantic_settings import BaseSettings, SettingsConfigDict
from dotenv import load_dotenv

from clawd_provisioner.utils.logging import get_logger

logger = get_logger(__name__)

WriteStrategy = Literal["lock", "optimistic", "race"]


def load_env(env_file: str | Path | None = None) -> None:
	"""Load environment variables from an `.env` file if present."""
	env_path = Path(env_file) if env_file else Path(".env")
	if env_path.exists():
		load_dotenv(env_path)


class Settings(BaseSettings):
	"""Provisioning settings loaded from environment variables.

	Instances are frozen; use :func:`resolve_settings` to build one with
	dashboard-registry fallbacks and CLI overrides applied.
	"""

	model_config = SettingsConfigDict(env_prefix="", case_sensitive=False,
	                                  populate_by_name=True, frozen=True)

	agents_base_dir: str | None = Field(
	    default=None,
	    alias="CLAWD_AGENTS_DIR",
	    description="Directory that holds one workspace per agent",
	)
	default_workspace: str | None = Field(
	    default=None,
	    alias="CLAWD_DEFAULT_WORKSPACE",
	    description="Workspace of the primary agent, source of shared files",
	)
	dashboard_registry: str = Field(
	    "agents.json",
	    alias="CLAWD_DASHBOARD_REGISTRY",
	    description="Dashboard agent registry JSON file",
	)
	gateway_home: str = Field(
	    "~/.clawdbot",
	    alias="CLAWDBOT_HOME",
	    description="Gateway state directory holding clawdbot.json",
	)
	gateway_bin: str = Field(
	    "clawdbot",
	    alias="CLAWDBOT_BIN",
	    description="Gateway CLI executable",
	)
	main_agent_id: str = Field(
	    "main",
	    alias="CLAWD_MAIN_AGENT",
	    description="Agent allowed to spawn every provisioned agent",
	)
	telegram_api_base: str = Field(
	    "https://api.telegram.org",
	    alias="TELEGRAM_API_BASE",
	    description="Telegram Bot API base URL",
	)
	telegram_timeout_seconds: int = Field(
	    10,
	    alias="TELEGRAM_TIMEOUT_SECONDS",
	    description="Timeout for the bot token identity check",
	)
	system_event_timeout_seconds: int = Field(
	    5,
	    alias="SYSTEM_EVENT_TIMEOUT_SECONDS",
	    description="Timeout for the system-event reload fallback",
	)
	config_write_strategy: WriteStrategy = Field(
	    "lock",
	    alias="CONFIG_WRITE_STRATEGY",
	    description="Concurrency strategy for gateway config writes",
	)
	config_write_attempts: int = Field(
	    3,
	    alias="CONFIG_WRITE_ATTEMPTS",
	    description="Attempts for the optimistic write strategy",
	)
	operator_name: str = Field(
	    "Miguel",
	    alias="CLAWD_OPERATOR_NAME",
	    description="Human the new agent is introduced to",
	)
	log_level: str = Field("warning", alias="LOG_LEVEL",
	                       description="Log level")

	@field_validator("config_write_strategy", mode="before")
	@classmethod
	def normalize_strategy(cls, v: Any) -> Any:
		if isinstance(v, str):
			return v.strip().lower()
		return v

	@field_validator("telegram_timeout_seconds",
	                 "system_event_timeout_seconds", "config_write_attempts")
	@classmethod
	def validate_positive(cls, v: Any, info: "ValidationInfo") -> Any:
		if int(v) <= 0:
			raise ValueError(f"{info.field_name} must be > 0")
		return v

	@property
	def agents_base_path(self) -> Path:
		"""Return the agents base directory, defaulting to ~/clawd-agents."""
		return Path(self.agents_base_dir or "~/clawd-agents").expanduser()

	@property
	def default_workspace_path(self) -> Path:
		"""Return the default workspace, defaulting to ~/clawd."""
		return Path(self.default_workspace or "~/clawd").expanduser()

	@property
	def registry_path(self) -> Path:
		return Path(self.dashboard_registry).expanduser()

	@property
	def gateway_home_path(self) -> Path:
		return Path(self.gateway_home).expanduser()

	@property
	def gateway_config_path(self) -> Path:
		"""Return the shared gateway config file path."""
		return self.gateway_home_path / "clawdbot.json"

	def sessions_dir(self, agent_id: str) -> Path:
		"""Return the per-agent session directory the gateway expects."""
		return self.gateway_home_path / "agents" / agent_id / "sessions"


def _registry_defaults(path: Path) -> dict[str, str]:
	"""Read base-dir and default-workspace fallbacks from the registry."""
	if not path.exists():
		return {}
	try:
		data = json.loads(path.read_text(encoding="utf-8"))
	except (OSError, ValueError) as exc:
		logger.debug("ignoring unreadable registry %s: %s", path, exc)
		return {}
	if not isinstance(data, dict):
		return {}
	defaults: dict[str, str] = {}
	base_dir = data.get("agentsBaseDir")
	if isinstance(base_dir, str) and base_dir:
		defaults["agents_base_dir"] = base_dir
	agents = data.get("agents")
	if isinstance(agents, list) and agents and isinstance(agents[0], dict):
		workspace = agents[0].get("workspace")
		if isinstance(workspace, str) and workspace:
			defaults["default_workspace"] = workspace
	return defaults


def resolve_settings(
    settings: Settings | None = None,
    overrides: dict[str, Any] | None = None,
) -> Settings:
	"""Resolve settings once: environment, then overrides, then registry.

	Explicit values (environment or CLI overrides) win over the
	registry's ``agentsBaseDir`` and first agent workspace; unset values
	fall back to them.

	Parameters:
		settings: Pre-built settings; loaded from the environment if None.
		overrides: Field-name keyed values; None entries are ignored.

	Returns:
		A frozen Settings instance.
	"""
	settings = settings or Settings()
	update = {k: v for k, v in (overrides or {}).items() if v is not None}
	if update:
		settings = settings.model_copy(update=update)
	fallbacks = _registry_defaults(settings.registry_path)
	missing = {
	    k: v for k, v in fallbacks.items() if getattr(settings, k) is None
	}
	if missing:
		settings = settings.model_copy(update=missing)
	return settings


__all__ = ["Settings", "WriteStrategy", "load_env", "resolve_settings"]
