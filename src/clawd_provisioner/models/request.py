"""
Agent request model.

Defines the caller-supplied request describing the agent to provision.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

from clawd_provisioner.utils.identifiers import (
    derive_agent_id,
    derive_display_name,
)


class AgentRequest(BaseModel):
	"""Immutable request for a new agent.

	The name is not validated here; an empty derived id is reported by the
	workflow as a failure result rather than a validation error.
	"""

	model_config = ConfigDict(frozen=True)

	name: str = Field(description="Agent name, source of id and display name")
	emoji: str = Field(default="🤖", description="Display emoji")
	soul: str | None = Field(default=None,
	                         description="Personality text for SOUL.md")
	model: str = Field(description="Model identifier for the gateway")
	telegram_token: str | None = Field(default=None,
	                                   description="Optional bot token")

	@field_validator("soul", "telegram_token")
	@classmethod
	def blank_to_none(cls, v: str | None) -> str | None:
		if v is None:
			return v
		v = v.strip()
		return v or None

	@property
	def agent_id(self) -> str:
		return derive_agent_id(self.name)

	@property
	def display_name(self) -> str:
		return derive_display_name(self.name)


__all__ = ["AgentRequest"]
