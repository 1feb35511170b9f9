"""
Workspace template model.

Defines the WorkspaceTemplate Pydantic model for workspace documents
loaded from markdown files with frontmatter.
"""

from __future__ import annotations

from string import Template
from typing import Mapping

from pydantic import BaseModel, Field, field_validator


class WorkspaceTemplate(BaseModel):
	"""Workspace document template loaded from markdown frontmatter."""

	target: str = Field(description="File name inside the workspace")
	order: int = Field(default=100, description="Write order")
	body: str = Field(description="Template body with ${placeholders}")

	@field_validator("target")
	@classmethod
	def validate_target(cls, v: str) -> str:
		if not v or "/" in v or "\\" in v or v in {".", ".."}:
			raise ValueError("target must be a plain file name")
		return v

	def render(self, context: Mapping[str, str]) -> str:
		"""Substitute placeholders; unknown ones are left verbatim."""
		return Template(self.body).safe_substitute(context)


__all__ = ["WorkspaceTemplate"]
