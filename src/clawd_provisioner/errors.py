"""
Provisioner exception hierarchy.

Errors raised by the external-collaborator wrappers. The workflow turns
them into step outcomes; they only escape to callers that use the
integrations directly.
"""

from __future__ import annotations


class ProvisionerError(Exception):
	"""Base exception for provisioning errors."""


class GatewayCLIError(ProvisionerError):
	"""Raised when a gateway CLI invocation fails or returns bad output."""

	def __init__(self, message: str, returncode: int | None = None,
	             output: str = "") -> None:
		super().__init__(message)
		self.returncode = returncode
		self.output = output


class TelegramVerificationError(ProvisionerError):
	"""Raised when the Telegram identity check cannot be completed."""


class ConfigConflictError(ProvisionerError):
	"""Raised when the gateway config changed underneath an optimistic write."""


__all__ = [
    "ProvisionerError",
    "GatewayCLIError",
    "TelegramVerificationError",
    "ConfigConflictError",
]
