import copy

import pytest

from clawd_provisioner.core.gateway_config import (
    DEFAULT_GATEWAY_PORT,
    allow_spawn,
    apply_provisioning,
    bind_telegram_account,
    enable_agent_to_agent,
    gateway_endpoint,
    set_spawn_targets,
)


def _config():
	return {"agents": {"list": [{"id": "main"}]}}


def test_allow_spawn_adds_once():
	cfg = _config()
	assert allow_spawn(cfg, "main", "nova") is True
	assert allow_spawn(cfg, "main", "nova") is False
	assert cfg["agents"]["list"][0]["subagents"]["allowAgents"] == ["nova"]


def test_allow_spawn_missing_parent():
	cfg = {"agents": {"list": []}}
	assert allow_spawn(cfg, "main", "nova") is False
	assert cfg == {"agents": {"list": []}}


def test_allow_spawn_tolerates_missing_agents_key():
	assert allow_spawn({}, "main", "nova") is False


def test_set_spawn_targets_overwrites():
	cfg = {"agents": {"list": [{"id": "nova", "subagents": {"allowAgents": ["x"]}}]}}
	assert set_spawn_targets(cfg, "nova", ["main"]) is True
	assert cfg["agents"]["list"][0]["subagents"]["allowAgents"] == ["main"]


def test_bind_telegram_account_dedups_binding():
	cfg = _config()
	assert bind_telegram_account(cfg, "nova", "1:a") is True
	assert bind_telegram_account(cfg, "nova", "1:b") is False
	assert len(cfg["bindings"]) == 1
	assert list(cfg["channels"]["telegram"]["accounts"]) == ["nova"]
	assert cfg["channels"]["telegram"]["accounts"]["nova"]["botToken"] == "1:b"


def test_bind_telegram_keeps_existing_channel_settings():
	cfg = {"channels": {"telegram": {"enabled": False, "accounts": {"old": {}}}}}
	bind_telegram_account(cfg, "nova", "1:a")
	telegram = cfg["channels"]["telegram"]
	assert telegram["enabled"] is False
	assert set(telegram["accounts"]) == {"old", "nova"}


def test_enable_agent_to_agent_preserves_other_keys():
	cfg = {"tools": {"agentToAgent": {"enabled": False, "max": 3}}}
	enable_agent_to_agent(cfg)
	assert cfg["tools"]["agentToAgent"] == {"enabled": True, "max": 3}


def test_gateway_endpoint_defaults():
	assert gateway_endpoint({}) == (DEFAULT_GATEWAY_PORT, "")
	assert gateway_endpoint({"gateway": {"port": 1, "auth": {"token": "t"}}}) == (1, "t")


def test_apply_provisioning_twice_is_stable():
	cfg = _config()
	apply_provisioning(cfg, "nova", telegram_token="1:a")
	snapshot = copy.deepcopy(cfg)
	changes = apply_provisioning(cfg, "nova", telegram_token="1:a")
	assert cfg == snapshot
	assert changes.main_allow_added is False
	assert changes.binding_added is False
	assert cfg["agents"]["list"][0]["subagents"]["allowAgents"] == ["nova"]
	assert cfg["bindings"] == [{
	    "agentId": "nova",
	    "match": {"channel": "telegram", "accountId": "nova"},
	}]


def test_apply_provisioning_without_token():
	cfg = _config()
	changes = apply_provisioning(cfg, "nova")
	assert changes.telegram_bound is False
	assert "channels" not in cfg
	assert "bindings" not in cfg
	assert cfg["tools"]["agentToAgent"]["enabled"] is True
	assert changes.notes == ["agent 'nova' not in agents.list"]


@pytest.mark.parametrize("config", [
    {"agents": {"list": [{"id": "main", "subagents": None}]}},
    {"agents": {"list": [{"id": "main", "subagents": {"allowAgents": None}}]}},
    {"agents": {"list": [{"id": "main"}]}, "bindings": None},
    {"agents": {"list": [{"id": "main"}]}, "tools": {"agentToAgent": None}},
    {"agents": {"list": [{"id": "main"}]}, "channels": None},
    {"agents": {"list": [{"id": "main"}]}, "channels": {"telegram": None}},
    {"agents": {"list": [{"id": "main"}]}, "bindings": [None, {"match": None}]},
])
def test_apply_provisioning_replaces_null_sections(config):
	changes = apply_provisioning(config, "nova", telegram_token="1:a")
	assert changes.main_allow_added is True
	assert changes.binding_added is True
	assert config["agents"]["list"][0]["subagents"]["allowAgents"] == ["nova"]
	assert config["channels"]["telegram"]["accounts"]["nova"]["botToken"] == "1:a"
	assert config["tools"]["agentToAgent"]["enabled"] is True


def test_agents_list_null_is_not_listed():
	cfg = {"agents": {"list": None}}
	assert allow_spawn(cfg, "main", "nova") is False
	assert set_spawn_targets(cfg, "nova", ["main"]) is False


def test_gateway_endpoint_ignores_malformed_values():
	assert gateway_endpoint({"gateway": None}) == (DEFAULT_GATEWAY_PORT, "")
	assert gateway_endpoint({"gateway": {"port": "x", "auth": "t"}}) == (
	    DEFAULT_GATEWAY_PORT, "")
