"""
Gateway hot-reload notification.

Tries an ordered list of mechanisms to make the running gateway pick up
the edited config:

1. ``SIGUSR1`` to the gateway process, which reloads config in place and
   keeps active sessions.
2. A ``clawdbot system event`` nudge with a bounded wait.
3. Nothing left: the operator is told to restart the gateway.

No outcome is fatal.
"""

from __future__ import annotations

import os
import re
import signal
from dataclasses import dataclass
from typing import Callable, Iterable, Pattern

import psutil

from clawd_provisioner.errors import GatewayCLIError
from clawd_provisioner.integrations.gateway_cli import GatewayCLI
from clawd_provisioner.utils.logging import get_logger

logger = get_logger(__name__)

# Searched in order; the first pattern with a match wins.
GATEWAY_PATTERNS: tuple[Pattern[str], ...] = (
    re.compile(r"clawdbot.*gateway"),
    re.compile(r"node.*clawdbot"),
)

RELOAD_EVENT_TEXT = "New agent created — config reloaded"
SIGNAL_LINE = "✅ Config reloaded (sessions preserved)"
EVENT_LINE = ("⚠️ Config reload signal sent — gateway will pick up changes "
              "on next cycle")
MANUAL_LINE = ("⚠️ Could not signal gateway — restart manually: "
               "clawdbot gateway restart")


def find_gateway_pid(
    patterns: Iterable[Pattern[str]] = GATEWAY_PATTERNS,
    process_iter: Callable[..., Iterable[psutil.Process]] = psutil.process_iter,
) -> int | None:
	"""Find the gateway PID by matching process command lines."""
	own_pid = os.getpid()
	for pattern in patterns:
		for proc in process_iter(["pid", "cmdline"]):
			try:
				info = proc.info
			except (psutil.NoSuchProcess, psutil.AccessDenied):
				continue
			pid = info.get("pid")
			cmdline = info.get("cmdline") or []
			if pid == own_pid or not cmdline:
				continue
			if pattern.search(" ".join(str(a) for a in cmdline)):
				return pid
	return None


@dataclass(frozen=True)
class ReloadResult:
	"""Which mechanism reached the gateway, and the step-log line."""

	mechanism: str  # signal|system_event|manual
	line: str

	@property
	def preserved_sessions(self) -> bool:
		return self.mechanism == "signal"


class GatewayReloader:
	"""Notify the running gateway to reload its configuration."""

	def __init__(
	    self,
	    cli: GatewayCLI,
	    event_timeout: float = 5.0,
	    find_pid: Callable[[], int | None] = find_gateway_pid,
	    send_signal: Callable[[int, int], None] = os.kill,
	) -> None:
		self.cli = cli
		self.event_timeout = event_timeout
		self._find_pid = find_pid
		self._send_signal = send_signal

	def _signal(self) -> str:
		pid = self._find_pid()
		if pid is None:
			raise ProcessLookupError("gateway process not found")
		self._send_signal(pid, signal.SIGUSR1)
		logger.info("sent SIGUSR1 to gateway pid %d", pid)
		return SIGNAL_LINE

	def _system_event(self) -> str:
		self.cli.system_event(RELOAD_EVENT_TEXT, timeout=self.event_timeout)
		return EVENT_LINE

	def mechanisms(self) -> list[tuple[str, Callable[[], str]]]:
		return [("signal", self._signal), ("system_event", self._system_event)]

	def reload(self) -> ReloadResult:
		"""Try each mechanism in order until one succeeds."""
		for name, attempt in self.mechanisms():
			try:
				return ReloadResult(name, attempt())
			except (OSError, psutil.Error, GatewayCLIError) as exc:
				logger.warning("gateway reload via %s failed: %s", name, exc)
		return ReloadResult("manual", MANUAL_LINE)


__all__ = [
    "GATEWAY_PATTERNS",
    "GatewayReloader",
    "ReloadResult",
    "find_gateway_pid",
    "SIGNAL_LINE",
    "EVENT_LINE",
    "MANUAL_LINE",
]
