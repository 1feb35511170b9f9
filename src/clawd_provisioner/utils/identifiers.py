"""
Agent identifier derivation.

The agent id keys every downstream registry: workspace directory name,
gateway agent id, config keys and dashboard entry id.
"""

from __future__ import annotations

import re

INVALID_ID_CHARS_RE = re.compile(r"[^a-z0-9-]")


def derive_agent_id(name: str) -> str:
	"""Lowercase the name and drop every character outside ``[a-z0-9-]``.

	An empty return value means the name is invalid.
	"""
	return INVALID_ID_CHARS_RE.sub("", name.lower())


def derive_display_name(name: str) -> str:
	"""Upper-case the first character, leaving the rest unchanged."""
	return name[:1].upper() + name[1:]


__all__ = ["derive_agent_id", "derive_display_name", "INVALID_ID_CHARS_RE"]
