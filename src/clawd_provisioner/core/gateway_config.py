"""
Gateway config mutations.

In-memory edits applied to the shared ``clawdbot.json`` document during
provisioning. Every function is idempotent against the same document so
a repeated (or optimistically re-applied) update never duplicates
entries.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

TELEGRAM_CHANNEL = "telegram"

TELEGRAM_ACCOUNT_DEFAULTS: dict[str, Any] = {
    "enabled": True,
    "dmPolicy": "pairing",
    "groupPolicy": "allowlist",
    "streamMode": "partial",
}

DEFAULT_GATEWAY_PORT = 18789


def _child_dict(parent: dict[str, Any], key: str) -> dict[str, Any]:
	"""Return ``parent[key]``, replacing a missing or non-object value."""
	value = parent.get(key)
	if not isinstance(value, dict):
		value = parent[key] = {}
	return value


def _child_list(parent: dict[str, Any], key: str) -> list[Any]:
	"""Return ``parent[key]``, replacing a missing or non-array value."""
	value = parent.get(key)
	if not isinstance(value, list):
		value = parent[key] = []
	return value


def _find_agent(config: dict[str, Any], agent_id: str) -> dict[str, Any] | None:
	agents = config.get("agents")
	if not isinstance(agents, dict):
		return None
	entries = agents.get("list")
	if not isinstance(entries, list):
		return None
	for entry in entries:
		if isinstance(entry, dict) and entry.get("id") == agent_id:
			return entry
	return None


def allow_spawn(config: dict[str, Any], parent_id: str,
                child_id: str) -> bool:
	"""Add ``child_id`` to the parent's sub-agent allow-list once.

	Returns:
		True if the allow-list changed; False if already present or the
		parent agent is not listed.
	"""
	parent = _find_agent(config, parent_id)
	if parent is None:
		return False
	allow = _child_list(_child_dict(parent, "subagents"), "allowAgents")
	if child_id in allow:
		return False
	allow.append(child_id)
	return True


def set_spawn_targets(config: dict[str, Any], agent_id: str,
                      targets: list[str]) -> bool:
	"""Overwrite an agent's sub-agent allow-list.

	Returns:
		True if the agent is listed and its allow-list was set.
	"""
	agent = _find_agent(config, agent_id)
	if agent is None:
		return False
	_child_dict(agent, "subagents")["allowAgents"] = list(targets)
	return True


def bind_telegram_account(config: dict[str, Any], agent_id: str,
                          bot_token: str) -> bool:
	"""Register a Telegram account keyed by agent id and route it.

	The account entry is (re)set with the policy defaults; the binding
	record is appended only if no binding with the same agent, channel
	and account exists.

	Returns:
		True if a new binding record was added.
	"""
	channels = _child_dict(config, "channels")
	if not isinstance(channels.get(TELEGRAM_CHANNEL), dict):
		channels[TELEGRAM_CHANNEL] = {"enabled": True}
	accounts = _child_dict(channels[TELEGRAM_CHANNEL], "accounts")
	accounts[agent_id] = {**TELEGRAM_ACCOUNT_DEFAULTS, "botToken": bot_token}

	bindings = _child_list(config, "bindings")
	for binding in bindings:
		if not isinstance(binding, dict):
			continue
		match = binding.get("match")
		if not isinstance(match, dict):
			continue
		if (binding.get("agentId") == agent_id
		    and match.get("channel") == TELEGRAM_CHANNEL
		    and match.get("accountId") == agent_id):
			return False
	bindings.append({
	    "agentId": agent_id,
	    "match": {
	        "channel": TELEGRAM_CHANNEL,
	        "accountId": agent_id
	    },
	})
	return True


def enable_agent_to_agent(config: dict[str, Any]) -> None:
	"""Turn on agent-to-agent messaging; never turned off here."""
	_child_dict(_child_dict(config, "tools"), "agentToAgent")["enabled"] = True


def gateway_endpoint(config: dict[str, Any]) -> tuple[int, str]:
	"""Return the gateway (port, auth token) with dashboard defaults."""
	gateway = config.get("gateway")
	if not isinstance(gateway, dict):
		gateway = {}
	auth = gateway.get("auth")
	port = gateway.get("port")
	if not isinstance(port, int) or isinstance(port, bool) or port <= 0:
		port = DEFAULT_GATEWAY_PORT
	token = auth.get("token") if isinstance(auth, dict) else None
	return port, token if isinstance(token, str) else ""


@dataclass
class ConfigChanges:
	"""What a provisioning update changed in the gateway config."""

	main_allow_added: bool = False
	agent_allow_set: bool = False
	telegram_bound: bool = False
	binding_added: bool = False
	notes: list[str] = field(default_factory=list)


def apply_provisioning(
    config: dict[str, Any],
    agent_id: str,
    *,
    main_agent_id: str = "main",
    telegram_token: str | None = None,
) -> ConfigChanges:
	"""Apply every provisioning mutation to a loaded config.

	Parameters:
		config: The decoded gateway config, mutated in place.
		agent_id: The new agent's id.
		main_agent_id: Agent that may spawn the new one and vice versa.
		telegram_token: Verified bot token, or None to skip the binding.

	Returns:
		A ConfigChanges summary.
	"""
	changes = ConfigChanges()
	changes.main_allow_added = allow_spawn(config, main_agent_id, agent_id)
	changes.agent_allow_set = set_spawn_targets(config, agent_id,
	                                            [main_agent_id])
	if telegram_token:
		changes.binding_added = bind_telegram_account(config, agent_id,
		                                              telegram_token)
		changes.telegram_bound = True
	enable_agent_to_agent(config)
	if _find_agent(config, main_agent_id) is None:
		changes.notes.append(f"agent {main_agent_id!r} not in agents.list")
	if not changes.agent_allow_set:
		changes.notes.append(f"agent {agent_id!r} not in agents.list")
	return changes


__all__ = [
    "TELEGRAM_CHANNEL",
    "TELEGRAM_ACCOUNT_DEFAULTS",
    "DEFAULT_GATEWAY_PORT",
    "allow_spawn",
    "set_spawn_targets",
    "bind_telegram_account",
    "enable_agent_to_agent",
    "gateway_endpoint",
    "ConfigChanges",
    "apply_provisioning",
]
