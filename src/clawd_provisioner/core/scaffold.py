"""
Workspace scaffolding.

Creates the agent workspace directory tree, writes the identity and
memory documents, and copies shared onboarding files from the default
workspace. Documents are never overwritten.
"""

from __future__ import annotations

import shutil
from datetime import date
from pathlib import Path
from typing import Iterable

from clawd_provisioner.loaders.templates import load_workspace_templates
from clawd_provisioner.models.request import AgentRequest
from clawd_provisioner.models.workspace_template import WorkspaceTemplate
from clawd_provisioner.utils.logging import get_logger
from clawd_provisioner.utils.paths import display_path

logger = get_logger(__name__)

WORKSPACE_SUBDIRS = ("memory", "skills", "scripts", ".credentials")
SHARED_FILES = ("AGENTS.md", "USER.md")


def write_if_missing(path: Path, content: str) -> bool:
	"""Write content to path unless the file already exists.

	Returns:
		True if the file was written, False if it already existed.
	"""
	if path.exists():
		return False
	path.write_text(content, encoding="utf-8")
	return True


def create_workspace_tree(workspace: Path) -> None:
	"""Create the workspace and its fixed subdirectories.

	Raises:
		OSError: If any directory cannot be created.
	"""
	for sub in WORKSPACE_SUBDIRS:
		(workspace / sub).mkdir(parents=True, exist_ok=True)


def build_template_context(
    request: AgentRequest,
    workspace: Path,
    *,
    today: date,
    machine: str,
    operator: str,
) -> dict[str, str]:
	"""Build the placeholder values for the workspace templates."""
	soul = request.soul
	return {
	    "agent_id": request.agent_id,
	    "display_name": request.display_name,
	    "emoji": request.emoji,
	    "model": request.model,
	    "soul_intro": soul or "Define your personality here.",
	    "soul_vibe": soul or "*(Define your personality, tone, and style here)*",
	    "identity_vibe": soul or "(customize me)",
	    "today": today.isoformat(),
	    "machine": machine,
	    "operator": operator,
	    "workspace_display": display_path(workspace),
	}


def write_documents(
    workspace: Path,
    context: dict[str, str],
    templates: Iterable[WorkspaceTemplate] | None = None,
) -> list[str]:
	"""Render and write each template that has no file yet.

	Returns:
		Target names that were written.
	"""
	if templates is None:
		templates = load_workspace_templates()
	written: list[str] = []
	for tpl in templates:
		if write_if_missing(workspace / tpl.target, tpl.render(context)):
			written.append(tpl.target)
		else:
			logger.debug("keeping existing %s", workspace / tpl.target)
	return written


def copy_shared_files(default_workspace: Path, workspace: Path) -> list[str]:
	"""Copy onboarding files from the default workspace when absent.

	A missing source file is skipped silently.

	Returns:
		File names that were copied.
	"""
	copied: list[str] = []
	for name in SHARED_FILES:
		src = default_workspace / name
		dst = workspace / name
		if src.exists() and not dst.exists():
			shutil.copyfile(src, dst)
			copied.append(name)
	return copied


__all__ = [
    "WORKSPACE_SUBDIRS",
    "SHARED_FILES",
    "write_if_missing",
    "create_workspace_tree",
    "build_template_context",
    "write_documents",
    "copy_shared_files",
]
