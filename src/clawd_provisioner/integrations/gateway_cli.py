"""
Gateway CLI wrapper.

Runs the ``clawdbot`` command-line interface with an argument vector and
turns non-zero exits, missing binaries, timeouts and unparsable output
into ``GatewayCLIError``.
"""

from __future__ import annotations

import json
import subprocess
from pathlib import Path
from typing import Any, Callable

from clawd_provisioner.errors import GatewayCLIError
from clawd_provisioner.utils.logging import get_logger

logger = get_logger(__name__)

DEFAULT_BINARY = "clawdbot"

_OUTPUT_TAIL = 500


class GatewayCLI:
	"""Thin client over the gateway's command-line interface."""

	def __init__(
	    self,
	    binary: str = DEFAULT_BINARY,
	    runner: Callable[..., subprocess.CompletedProcess] = subprocess.run,
	) -> None:
		self.binary = binary
		self._runner = runner

	def _run(self, *args: str, timeout: float | None = None) -> str:
		cmd = [self.binary, *args]
		logger.debug("running %s", " ".join(cmd[:3]))
		try:
			proc = self._runner(cmd, capture_output=True, text=True,
			                    timeout=timeout, check=False)
		except FileNotFoundError as exc:
			raise GatewayCLIError(f"{self.binary} not found") from exc
		except subprocess.TimeoutExpired as exc:
			raise GatewayCLIError(
			    f"{self.binary} {args[0]} timed out after {timeout}s") from exc
		except OSError as exc:
			raise GatewayCLIError(f"{self.binary} failed: {exc}") from exc
		output = ((proc.stdout or "") + (proc.stderr or "")).strip()
		if proc.returncode != 0:
			raise GatewayCLIError(
			    f"{' '.join(cmd[:3])} exited {proc.returncode}: "
			    f"{output[-_OUTPUT_TAIL:]}",
			    returncode=proc.returncode,
			    output=output,
			)
		return proc.stdout or ""

	def list_agents(self) -> list[dict[str, Any]]:
		"""Return the gateway's agent list.

		Accepts either a bare JSON list or an object with an ``agents``
		list.
		"""
		out = self._run("agents", "list", "--json")
		try:
			data = json.loads(out)
		except ValueError as exc:
			raise GatewayCLIError(
			    f"unparsable agents list: {out[:_OUTPUT_TAIL]}") from exc
		if isinstance(data, dict):
			data = data.get("agents", [])
		if not isinstance(data, list):
			raise GatewayCLIError("agents list is not a JSON array")
		return [a for a in data if isinstance(a, dict)]

	def add_agent(self, agent_id: str, workspace: Path | str,
	              model: str) -> str:
		"""Register an agent with its workspace and model."""
		return self._run("agents", "add", agent_id, "--workspace",
		                 str(workspace), "--model", model, "--non-interactive",
		                 "--json")

	def set_identity(self, agent_id: str, name: str, emoji: str) -> str:
		"""Set the agent's display name and emoji."""
		return self._run("agents", "set-identity", agent_id, "--name", name,
		                 "--emoji", emoji)

	def system_event(self, text: str, timeout: float | None = None) -> str:
		"""Post an immediate system event to the running gateway."""
		return self._run("system", "event", "--mode", "now", "--text", text,
		                 timeout=timeout)


__all__ = ["GatewayCLI", "DEFAULT_BINARY"]
