"""
Provision result model.

Defines the structured result returned by the provisioning workflow.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class ProvisionResult(BaseModel):
	"""
	Result of a provisioning run.

	On success carries the resolved agent details and a user-facing
	message; on failure an error description. The step log is always
	present.
	"""

	ok: bool
	id: str | None = None
	name: str | None = None
	emoji: str | None = None
	workspace: str | None = None
	model: str | None = None
	has_telegram: bool | None = Field(default=None,
	                                  serialization_alias="hasTelegram")
	message: str | None = None
	error: str | None = None
	steps: list[str] = Field(default_factory=list)

	@classmethod
	def failed(cls, error: str, steps: list[str]) -> "ProvisionResult":
		return cls(ok=False, error=error, steps=list(steps))

	def to_payload(self) -> dict[str, Any]:
		"""Return the JSON payload with unset fields omitted."""
		return self.model_dump(by_alias=True, exclude_none=True)


__all__ = ["ProvisionResult"]
