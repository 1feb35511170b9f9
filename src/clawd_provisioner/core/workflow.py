"""
Agent provisioning workflow.

Runs the provisioning steps in order, records each outcome in the step
log, and stops at the first fatal outcome. Only name validation, the
existence guard, workspace creation and an explicit Telegram token
rejection are fatal; every other failure degrades to a warning line.

No step is rolled back. A token rejected after the workspace and the
gateway registration were created leaves both in place; a retry then
stops at the existence guard.
"""

from __future__ import annotations

import socket
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Any, Callable, Iterable

from clawd_provisioner.core.dashboard import DashboardEntry, register_agent
from clawd_provisioner.core.gateway_config import (
    ConfigChanges,
    apply_provisioning,
    gateway_endpoint,
)
from clawd_provisioner.core.json_store import JsonDocumentStore
from clawd_provisioner.core.scaffold import (
    build_template_context,
    copy_shared_files,
    create_workspace_tree,
    write_documents,
)
from clawd_provisioner.core.steps import StepLog
from clawd_provisioner.errors import (
    ConfigConflictError,
    GatewayCLIError,
    TelegramVerificationError,
)
from clawd_provisioner.integrations.gateway_cli import GatewayCLI
from clawd_provisioner.integrations.reload import GatewayReloader
from clawd_provisioner.integrations.telegram import TelegramVerifier
from clawd_provisioner.models.config import Settings, resolve_settings
from clawd_provisioner.models.outcome import Step, StepOutcome
from clawd_provisioner.models.request import AgentRequest
from clawd_provisioner.models.result import ProvisionResult
from clawd_provisioner.models.workspace_template import WorkspaceTemplate
from clawd_provisioner.utils.logging import get_logger
from clawd_provisioner.utils.paths import agent_workspace, display_path
from clawd_provisioner.utils.protocols import (
    GatewayCLIProtocol,
    ReloaderProtocol,
    TokenVerifierProtocol,
)

logger = get_logger(__name__)


def _utc_today() -> date:
	return datetime.now(timezone.utc).date()


def _short(exc: BaseException, limit: int = 80) -> str:
	return str(exc)[:limit]


class Provisioner:
	"""Provision one agent per call against fixed settings and clients."""

	def __init__(
	    self,
	    settings: Settings,
	    cli: GatewayCLIProtocol | None = None,
	    verifier: TokenVerifierProtocol | None = None,
	    reloader: ReloaderProtocol | None = None,
	    *,
	    today: Callable[[], date] = _utc_today,
	    hostname: Callable[[], str] = socket.gethostname,
	    templates: Iterable[WorkspaceTemplate] | None = None,
	) -> None:
		self.settings = settings
		self.cli = cli or GatewayCLI(settings.gateway_bin)
		self.verifier = verifier or TelegramVerifier(
		    settings.telegram_api_base,
		    timeout=settings.telegram_timeout_seconds)
		self.reloader = reloader or GatewayReloader(
		    self.cli, event_timeout=settings.system_event_timeout_seconds)
		self.config_store = JsonDocumentStore(
		    settings.gateway_config_path,
		    strategy=settings.config_write_strategy,
		    attempts=settings.config_write_attempts)
		# Only the gateway config is shared with other writers.
		self.registry_store = JsonDocumentStore(settings.registry_path,
		                                        strategy="race")
		self._today = today
		self._hostname = hostname
		self._templates = list(templates) if templates is not None else None

	def provision(self, request: AgentRequest) -> ProvisionResult:
		"""Run the whole workflow for one request."""
		agent_id = request.agent_id
		if not agent_id:
			return ProvisionResult.failed("Invalid name",
			                              ["❌ Name is invalid"])

		guard = self.check_existing(agent_id)
		if guard.is_fatal:
			return ProvisionResult.failed(guard.error or "Agent already exists",
			                              guard.lines)

		log = StepLog()
		workspace = self.settings.agents_base_path / agent_id
		log.add(f"📁 Creating workspace at {display_path(workspace)}")
		outcome = log.record(self.create_workspace(request, workspace))
		if outcome.is_fatal:
			return ProvisionResult.failed(outcome.error or "", log.lines)

		log.record(self.register_agent(request, workspace))
		log.record(self.set_identity(request))

		log.add("🔄 Configuring agent permissions")
		telegram = log.record(self.verify_telegram(request.telegram_token))
		if telegram.is_fatal:
			return ProvisionResult.failed(telegram.error or "", log.lines)
		verified = bool(telegram.data.get("verified"))

		endpoint: dict[str, Any] = {}
		log.record(
		    self.update_config(agent_id, request.telegram_token, verified,
		                       endpoint))
		log.record(self.update_dashboard(request, workspace, endpoint))
		log.record(self.reload_gateway())

		display = request.display_name
		log.add(f"🎉 {display} is ready!")
		has_telegram = bool(request.telegram_token)
		return ProvisionResult(
		    ok=True,
		    id=agent_id,
		    name=display,
		    emoji=request.emoji,
		    workspace=str(workspace),
		    model=request.model,
		    has_telegram=has_telegram,
		    message=(f"{display} is live! Open Telegram and message the bot "
		             "to start chatting." if has_telegram else
		             f"{display} is live! Add a Telegram bot later to chat "
		             "directly."),
		    steps=log.lines,
		)

	def check_existing(self, agent_id: str) -> StepOutcome:
		"""Fail if the gateway already knows the agent id."""
		try:
			agents = self.cli.list_agents()
		except GatewayCLIError as exc:
			return StepOutcome.failure(Step.EXISTENCE_GUARD, "unavailable",
			                           reason=str(exc))
		if any(a.get("id") == agent_id for a in agents):
			return StepOutcome.failure(
			    Step.EXISTENCE_GUARD,
			    "conflict",
			    f'❌ Agent "{agent_id}" already exists',
			    reason=f"{agent_id} is registered",
			    error="Agent already exists",
			)
		return StepOutcome.success(Step.EXISTENCE_GUARD)

	def create_workspace(self, request: AgentRequest,
	                     workspace: Path) -> StepOutcome:
		"""Create the tree, write documents and copy shared files.

		Directory creation and document writes share one failure boundary.
		"""
		try:
			agent_workspace(self.settings.agents_base_path, request.agent_id)
			create_workspace_tree(workspace)
			context = build_template_context(
			    request,
			    workspace,
			    today=self._today(),
			    machine=self._hostname(),
			    operator=self.settings.operator_name,
			)
			written = write_documents(workspace, context, self._templates)
			copied = copy_shared_files(self.settings.default_workspace_path,
			                           workspace)
		except (OSError, ValueError) as exc:
			return StepOutcome.failure(
			    Step.CREATE_WORKSPACE,
			    "error",
			    reason=str(exc),
			    error=f"Failed to create workspace: {exc}",
			)
		return StepOutcome.success(Step.CREATE_WORKSPACE,
		                           "📝 Writing identity files",
		                           written=written, copied=copied)

	def register_agent(self, request: AgentRequest,
	                   workspace: Path) -> StepOutcome:
		start = "🔗 Registering with gateway"
		try:
			self.cli.add_agent(request.agent_id, workspace, request.model)
		except GatewayCLIError as exc:
			return StepOutcome.failure(
			    Step.REGISTER_AGENT, "error", start,
			    f"⚠️ Registration warning: {_short(exc, 100)}",
			    reason=str(exc))
		return StepOutcome.success(Step.REGISTER_AGENT, start,
		                           "✅ Agent registered")

	def set_identity(self, request: AgentRequest) -> StepOutcome:
		start = f"{request.emoji} Setting identity"
		try:
			self.cli.set_identity(request.agent_id, request.display_name,
			                      request.emoji)
		except GatewayCLIError as exc:
			return StepOutcome.failure(Step.SET_IDENTITY, "error", start,
			                           f"⚠️ Identity warning: {_short(exc)}",
			                           reason=str(exc))
		return StepOutcome.success(Step.SET_IDENTITY, start)

	def verify_telegram(self, token: str | None) -> StepOutcome:
		"""Check the bot token before any config is touched."""
		if not token:
			return StepOutcome.success(Step.VERIFY_TELEGRAM, verified=False)
		start = "📱 Verifying Telegram bot token"
		try:
			identity = self.verifier.verify(token)
		except TelegramVerificationError as exc:
			return StepOutcome.failure(
			    Step.VERIFY_TELEGRAM, "unreachable", start,
			    f"⚠️ Telegram verification failed: {_short(exc)}",
			    reason=str(exc))
		if not identity.valid:
			return StepOutcome.failure(
			    Step.VERIFY_TELEGRAM,
			    "rejected",
			    start,
			    "❌ Telegram token is invalid",
			    reason="token rejected by Telegram",
			    error="Invalid Telegram bot token",
			)
		return StepOutcome.success(Step.VERIFY_TELEGRAM, start,
		                           f"✅ Verified: @{identity.username}",
		                           verified=True, username=identity.username)

	def update_config(
	    self,
	    agent_id: str,
	    token: str | None,
	    verified: bool,
	    endpoint: dict[str, Any],
	) -> StepOutcome:
		"""Apply every gateway config mutation in one read-modify-write.

		Fills ``endpoint`` with the gateway port and auth token of the
		document that was written.
		"""
		sessions_dir = self.settings.sessions_dir(agent_id)

		def mutate(config: dict[str, Any]) -> ConfigChanges:
			changes = apply_provisioning(
			    config,
			    agent_id,
			    main_agent_id=self.settings.main_agent_id,
			    telegram_token=token if verified else None,
			)
			sessions_dir.mkdir(parents=True, exist_ok=True)
			endpoint["port"], endpoint["token"] = gateway_endpoint(config)
			return changes

		try:
			changes = self.config_store.update(mutate)
		except (OSError, ValueError, TypeError, AttributeError,
		        ConfigConflictError) as exc:
			return StepOutcome.failure(Step.UPDATE_CONFIG, "error",
			                           f"⚠️ Config update: {_short(exc)}",
			                           reason=str(exc))
		for note in changes.notes:
			logger.info("config update: %s", note)

		lines = ["✅ Cross-agent permissions configured"]
		if verified:
			lines.append(f'📱 Telegram bound as account "{agent_id}"')
		elif token:
			lines.append("⏭️ Telegram binding skipped (verification failed)")
		else:
			lines.append("⏭️ Telegram skipped")
		return StepOutcome.success(Step.UPDATE_CONFIG, *lines,
		                           binding_added=changes.binding_added)

	def update_dashboard(self, request: AgentRequest, workspace: Path,
	                     endpoint: dict[str, Any]) -> StepOutcome:
		start = "🏰 Adding to Clawd Control"
		try:
			if "port" not in endpoint:
				port, token = gateway_endpoint(self.config_store.read())
			else:
				port, token = endpoint["port"], endpoint["token"]
			entry = DashboardEntry(
			    id=request.agent_id,
			    name=request.display_name,
			    emoji=request.emoji,
			    port=port,
			    token=token,
			    workspace=str(workspace),
			    machine=self._hostname(),
			)
			added = register_agent(self.registry_store, entry)
		except (OSError, ValueError, TypeError, AttributeError,
		        ConfigConflictError) as exc:
			return StepOutcome.failure(Step.UPDATE_DASHBOARD, "error", start,
			                           f"⚠️ Dashboard: {_short(exc)}",
			                           reason=str(exc))
		return StepOutcome.success(Step.UPDATE_DASHBOARD, start,
		                           "✅ Dashboard updated", added=added)

	def reload_gateway(self) -> StepOutcome:
		start = "🔄 Reloading gateway config"
		result = self.reloader.reload()
		if result.mechanism == "signal":
			return StepOutcome.success(Step.RELOAD_GATEWAY, start, result.line,
			                           mechanism=result.mechanism)
		outcome = StepOutcome.failure(Step.RELOAD_GATEWAY, "error", start,
		                              result.line,
		                              reason=f"fell back to {result.mechanism}")
		outcome.data["mechanism"] = result.mechanism
		return outcome


def provision_agent(request: AgentRequest,
                    settings: Settings | None = None) -> ProvisionResult:
	"""Provision an agent with default clients built from settings."""
	return Provisioner(settings or resolve_settings()).provision(request)


__all__ = ["Provisioner", "provision_agent"]
