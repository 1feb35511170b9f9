"""
Step outcome model.

Defines the tagged outcome of a single provisioning step and the table
that classifies each step failure as fatal or degraded.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class Severity(str, Enum):
	"""Outcome severity of a provisioning step."""

	OK = "ok"
	DEGRADED = "degraded"  # logged, workflow continues
	FATAL = "fatal"  # workflow aborts with a failure result


class Step(str, Enum):
	"""Provisioning steps in execution order."""

	VALIDATE_NAME = "validate_name"
	EXISTENCE_GUARD = "existence_guard"
	CREATE_WORKSPACE = "create_workspace"
	REGISTER_AGENT = "register_agent"
	SET_IDENTITY = "set_identity"
	VERIFY_TELEGRAM = "verify_telegram"
	UPDATE_CONFIG = "update_config"
	UPDATE_DASHBOARD = "update_dashboard"
	RELOAD_GATEWAY = "reload_gateway"


# (step, failure kind) -> severity
STEP_FAILURE_SEVERITY: dict[tuple[Step, str], Severity] = {
    (Step.VALIDATE_NAME, "invalid"): Severity.FATAL,
    (Step.EXISTENCE_GUARD, "conflict"): Severity.FATAL,
    # an unavailable agent list is read as "no conflicting agent"
    (Step.EXISTENCE_GUARD, "unavailable"): Severity.DEGRADED,
    (Step.CREATE_WORKSPACE, "error"): Severity.FATAL,
    (Step.REGISTER_AGENT, "error"): Severity.DEGRADED,
    (Step.SET_IDENTITY, "error"): Severity.DEGRADED,
    (Step.VERIFY_TELEGRAM, "rejected"): Severity.FATAL,
    (Step.VERIFY_TELEGRAM, "unreachable"): Severity.DEGRADED,
    (Step.UPDATE_CONFIG, "error"): Severity.DEGRADED,
    (Step.UPDATE_DASHBOARD, "error"): Severity.DEGRADED,
    (Step.RELOAD_GATEWAY, "error"): Severity.DEGRADED,
}


def classify_failure(step: Step, kind: str) -> Severity:
	"""Look up the severity of a step failure.

	Raises:
		KeyError: If the (step, kind) pair is not classified.
	"""
	return STEP_FAILURE_SEVERITY[(step, kind)]


class StepOutcome(BaseModel):
	"""Tagged result of one provisioning step."""

	step: Step
	severity: Severity = Severity.OK
	lines: list[str] = Field(default_factory=list,
	                         description="Step-log lines for this step")
	reason: str | None = Field(default=None,
	                           description="Failure reason, if any")
	error: str | None = Field(
	    default=None,
	    description="Caller-facing error message for fatal outcomes")
	data: dict[str, Any] = Field(default_factory=dict)

	@classmethod
	def success(cls, step: Step, *lines: str, **data: Any) -> "StepOutcome":
		return cls(step=step, lines=list(lines), data=data)

	@classmethod
	def failure(
	    cls,
	    step: Step,
	    kind: str,
	    *lines: str,
	    reason: str | None = None,
	    error: str | None = None,
	) -> "StepOutcome":
		"""Build a failed outcome whose severity comes from the table."""
		return cls(
		    step=step,
		    severity=classify_failure(step, kind),
		    lines=list(lines),
		    reason=reason,
		    error=error,
		)

	@property
	def is_fatal(self) -> bool:
		return self.severity is Severity.FATAL

	@property
	def is_degraded(self) -> bool:
		return self.severity is Severity.DEGRADED


__all__ = [
    "Severity",
    "Step",
    "STEP_FAILURE_SEVERITY",
    "classify_failure",
    "StepOutcome",
]
