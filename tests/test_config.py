import json

import pytest

from clawd_provisioner.models.config import Settings, resolve_settings


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
	for var in ("CLAWD_AGENTS_DIR", "CLAWD_DEFAULT_WORKSPACE",
	            "CLAWD_DASHBOARD_REGISTRY", "CLAWDBOT_HOME",
	            "CONFIG_WRITE_STRATEGY", "LOG_LEVEL"):
		monkeypatch.delenv(var, raising=False)


def test_defaults(monkeypatch, tmp_path):
	monkeypatch.setenv("HOME", str(tmp_path))
	cfg = Settings()
	assert cfg.gateway_bin == "clawdbot"
	assert cfg.main_agent_id == "main"
	assert cfg.config_write_strategy == "lock"
	assert cfg.system_event_timeout_seconds == 5
	assert cfg.agents_base_path == tmp_path / "clawd-agents"
	assert cfg.default_workspace_path == tmp_path / "clawd"
	assert cfg.gateway_config_path == tmp_path / ".clawdbot" / "clawdbot.json"
	assert cfg.sessions_dir("nova") == (tmp_path / ".clawdbot" / "agents" /
	                                    "nova" / "sessions")


def test_env_aliases(monkeypatch):
	monkeypatch.setenv("CLAWD_AGENTS_DIR", "/srv/agents")
	monkeypatch.setenv("CONFIG_WRITE_STRATEGY", "Optimistic")
	cfg = Settings()
	assert cfg.agents_base_dir == "/srv/agents"
	assert cfg.config_write_strategy == "optimistic"


def test_rejects_unknown_strategy():
	with pytest.raises(ValueError):
		Settings(CONFIG_WRITE_STRATEGY="yolo")


def test_rejects_non_positive_timeout():
	with pytest.raises(ValueError):
		Settings(SYSTEM_EVENT_TIMEOUT_SECONDS=0)


def test_settings_are_frozen():
	cfg = Settings()
	with pytest.raises(ValueError):
		cfg.gateway_bin = "other"


def test_resolve_uses_registry_fallbacks(tmp_path):
	registry = tmp_path / "agents.json"
	registry.write_text(json.dumps({
	    "agentsBaseDir": "/data/agents",
	    "agents": [{
	        "id": "main",
	        "workspace": "/data/clawd"
	    }],
	}),
	                    encoding="utf-8")
	cfg = resolve_settings(Settings(dashboard_registry=str(registry)))
	assert cfg.agents_base_dir == "/data/agents"
	assert cfg.default_workspace == "/data/clawd"


def test_resolve_env_beats_registry(tmp_path, monkeypatch):
	registry = tmp_path / "agents.json"
	registry.write_text(json.dumps({"agentsBaseDir": "/data/agents"}),
	                    encoding="utf-8")
	monkeypatch.setenv("CLAWD_AGENTS_DIR", "/env/agents")
	cfg = resolve_settings(Settings(dashboard_registry=str(registry)))
	assert cfg.agents_base_dir == "/env/agents"


def test_resolve_overrides_skip_none(tmp_path):
	cfg = resolve_settings(
	    Settings(dashboard_registry=str(tmp_path / "missing.json")),
	    overrides={
	        "agents_base_dir": str(tmp_path / "a"),
	        "default_workspace": None,
	    },
	)
	assert cfg.agents_base_dir == str(tmp_path / "a")
	assert cfg.default_workspace is None


def test_resolve_ignores_broken_registry(tmp_path):
	registry = tmp_path / "agents.json"
	registry.write_text("{not json", encoding="utf-8")
	cfg = resolve_settings(Settings(dashboard_registry=str(registry)))
	assert cfg.agents_base_dir is None
