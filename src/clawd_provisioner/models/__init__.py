"""
Clawd Provisioner models.

This subpackage contains Pydantic models for settings, requests, step
outcomes, results and workspace templates.

Key models:
    - Settings: Provisioning settings loaded from environment
    - AgentRequest: Caller-supplied description of the new agent
    - StepOutcome: Tagged outcome of one provisioning step
    - ProvisionResult: Structured result with the step log
    - WorkspaceTemplate: Workspace document template
"""

from .config import Settings, WriteStrategy, load_env, resolve_settings
from .request import AgentRequest
from .outcome import (
    Severity,
    Step,
    StepOutcome,
    STEP_FAILURE_SEVERITY,
    classify_failure,
)
from .result import ProvisionResult
from .workspace_template import WorkspaceTemplate

__all__ = [
    "Settings",
    "WriteStrategy",
    "load_env",
    "resolve_settings",
    "AgentRequest",
    "Severity",
    "Step",
    "StepOutcome",
    "STEP_FAILURE_SEVERITY",
    "classify_failure",
    "ProvisionResult",
    "WorkspaceTemplate",
]
