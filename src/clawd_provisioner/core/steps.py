"""Append-only step log returned with every provisioning result."""

from __future__ import annotations

from clawd_provisioner.models.outcome import StepOutcome
from clawd_provisioner.utils.logging import get_logger

logger = get_logger(__name__)


class StepLog:
	"""Ordered human-readable status lines for one provisioning run."""

	def __init__(self) -> None:
		self._lines: list[str] = []
		self.outcomes: list[StepOutcome] = []

	def add(self, line: str) -> None:
		self._lines.append(line)

	def record(self, outcome: StepOutcome) -> StepOutcome:
		"""Append an outcome's lines and log degraded or fatal reasons."""
		self.outcomes.append(outcome)
		self._lines.extend(outcome.lines)
		if outcome.is_fatal:
			logger.error("%s failed: %s", outcome.step.value, outcome.reason)
		elif outcome.is_degraded:
			logger.warning("%s degraded: %s", outcome.step.value,
			               outcome.reason)
		else:
			logger.info("%s ok", outcome.step.value)
		return outcome

	@property
	def lines(self) -> list[str]:
		return list(self._lines)

	def __len__(self) -> int:
		return len(self._lines)


__all__ = ["StepLog"]
