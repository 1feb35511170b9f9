"""
Protocol definitions for dependency injection.

Defines Protocol classes for the gateway CLI, the bot token verifier and
the gateway reloader so the workflow can be tested with fakes.
"""

from __future__ import annotations

from pathlib import Path
from typing import Protocol, Any


class GatewayCLIProtocol(Protocol):
	"""
	Protocol for the gateway command-line interface.

	Methods raise ``GatewayCLIError`` on failure.
	"""

	def list_agents(self) -> list[dict[str, Any]]:
		"""Return the registered agents."""
		...

	def add_agent(self, agent_id: str, workspace: Path | str,
	              model: str) -> Any:
		"""Register an agent."""
		...

	def set_identity(self, agent_id: str, name: str, emoji: str) -> Any:
		"""Set an agent's display identity."""
		...

	def system_event(self, text: str, timeout: float | None = None) -> Any:
		"""Post a system event to the gateway."""
		...


class TokenVerifierProtocol(Protocol):
	"""Protocol for the messaging-channel token check."""

	def verify(self, token: str) -> Any:
		"""Return a BotIdentity or raise TelegramVerificationError."""
		...


class ReloaderProtocol(Protocol):
	"""Protocol for notifying the gateway to reload its config."""

	def reload(self) -> Any:
		"""Return a ReloadResult; never raises."""
		...


__all__ = [
    "GatewayCLIProtocol",
    "TokenVerifierProtocol",
    "ReloaderProtocol",
]
