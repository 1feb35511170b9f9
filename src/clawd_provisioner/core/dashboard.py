"""
Dashboard registry updates.

Adds the new agent to the dashboard's ``agents.json`` so it shows up
with the connection details of the local gateway.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel

from clawd_provisioner.core.json_store import JsonDocumentStore

LOOPBACK_HOST = "127.0.0.1"


class DashboardEntry(BaseModel):
	"""One agent in the dashboard registry."""

	id: str
	name: str
	emoji: str
	host: str = LOOPBACK_HOST
	port: int
	token: str = ""
	workspace: str
	machine: str


def add_entry(registry: dict[str, Any], entry: DashboardEntry) -> bool:
	"""Append ``entry`` unless an agent with its id is already listed.

	Returns:
		True if the entry was appended.
	"""
	agents = registry.get("agents")
	if not isinstance(agents, list):
		agents = registry["agents"] = []
	if any(isinstance(a, dict) and a.get("id") == entry.id for a in agents):
		return False
	agents.append(entry.model_dump())
	return True


def register_agent(store: JsonDocumentStore, entry: DashboardEntry) -> bool:
	"""Read the registry, add the entry if absent and write it back."""
	return store.update(lambda registry: add_entry(registry, entry))


__all__ = ["LOOPBACK_HOST", "DashboardEntry", "add_entry", "register_agent"]
