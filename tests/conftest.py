"""Shared fixtures and fake collaborators for provisioning tests."""

from __future__ import annotations

import json
from datetime import date
from pathlib import Path

import pytest

from clawd_provisioner.core.workflow import Provisioner
from clawd_provisioner.errors import GatewayCLIError, TelegramVerificationError
from clawd_provisioner.integrations.reload import ReloadResult, SIGNAL_LINE
from clawd_provisioner.integrations.telegram import BotIdentity
from clawd_provisioner.models.config import Settings


class FakeGatewayCLI:
	"""In-memory gateway CLI; ``fail`` names methods that raise."""

	def __init__(self, agents=None, fail=()):
		self.agents = list(agents or [])
		self.fail = set(fail)
		self.calls: list[tuple] = []

	def _call(self, name, *args):
		self.calls.append((name, *args))
		if name in self.fail:
			raise GatewayCLIError(f"{name} failed")

	def list_agents(self):
		self._call("list_agents")
		return [dict(a) for a in self.agents]

	def add_agent(self, agent_id, workspace, model):
		self._call("add_agent", agent_id, str(workspace), model)
		self.agents.append({"id": agent_id})
		return "{}"

	def set_identity(self, agent_id, name, emoji):
		self._call("set_identity", agent_id, name, emoji)
		return ""

	def system_event(self, text, timeout=None):
		self._call("system_event", text, timeout)
		return ""


class FakeVerifier:
	"""Returns a fixed BotIdentity or raises a fixed error."""

	def __init__(self, identity=None, error=None):
		self.identity = identity or BotIdentity(valid=True,
		                                        username="nova_bot")
		self.error = error
		self.tokens: list[str] = []

	def verify(self, token):
		self.tokens.append(token)
		if self.error:
			raise TelegramVerificationError(self.error)
		return self.identity


class FakeReloader:

	def __init__(self, result=None):
		self.result = result or ReloadResult("signal", SIGNAL_LINE)
		self.calls = 0

	def reload(self):
		self.calls += 1
		return self.result


@pytest.fixture
def env_paths(tmp_path: Path) -> dict[str, Path]:
	"""Gateway home with a config listing only ``main``, plus a registry."""
	gateway_home = tmp_path / ".clawdbot"
	gateway_home.mkdir()
	config_path = gateway_home / "clawdbot.json"
	config_path.write_text(json.dumps({"agents": {
	    "list": [{
	        "id": "main"
	    }]
	}}),
	                       encoding="utf-8")
	registry = tmp_path / "agents.json"
	registry.write_text(json.dumps({"agents": []}), encoding="utf-8")
	default_ws = tmp_path / "clawd"
	default_ws.mkdir()
	return {
	    "base": tmp_path / "clawd-agents",
	    "gateway_home": gateway_home,
	    "config": config_path,
	    "registry": registry,
	    "default_workspace": default_ws,
	}


@pytest.fixture
def settings(env_paths) -> Settings:
	return Settings(
	    agents_base_dir=str(env_paths["base"]),
	    default_workspace=str(env_paths["default_workspace"]),
	    dashboard_registry=str(env_paths["registry"]),
	    gateway_home=str(env_paths["gateway_home"]),
	)


@pytest.fixture
def make_provisioner(settings):
	"""Build a Provisioner with fakes; keyword args replace defaults."""

	def _make(cli=None, verifier=None, reloader=None, settings_=None):
		return Provisioner(
		    settings_ or settings,
		    cli or FakeGatewayCLI(),
		    verifier or FakeVerifier(),
		    reloader or FakeReloader(),
		    today=lambda: date(2026, 10, 17),
		    hostname=lambda: "testhost",
		)

	return _make
