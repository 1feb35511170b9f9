"""
Workspace template loading utilities.

Provides functions for splitting YAML frontmatter from markdown and
loading the bundled workspace document templates.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from clawd_provisioner.models.workspace_template import WorkspaceTemplate
from clawd_provisioner.utils.paths import resolve_asset_path

DEFAULT_TEMPLATE_DIR = "templates/workspace"


def split_frontmatter(text: str) -> tuple[dict[str, Any], str]:
	"""
	Split YAML frontmatter from markdown body.

	Parameters:
		text: The full markdown file content.

	Returns:
		Tuple of (frontmatter dict, body text). Returns an empty dict
		and the original text if no valid frontmatter is found.
	"""
	lines = text.splitlines()
	if len(lines) < 3 or lines[0].strip() != "---":
		return {}, text

	end_idx = next(
	    (i for i, ln in enumerate(lines[1:], start=1) if ln.strip() == "---"),
	    -1)
	if end_idx < 0:
		return {}, text

	try:
		meta = yaml.safe_load("\n".join(lines[1:end_idx])) or {}
	except yaml.YAMLError:
		return {}, text
	if not isinstance(meta, dict):
		return {}, text

	body = "\n".join(lines[end_idx + 1:]).strip("\n") + "\n"
	return meta, body


def load_template(path: str | Path) -> WorkspaceTemplate:
	"""
	Load one workspace template from a markdown file.

	Parameters:
		path: Path to the template file.

	Returns:
		WorkspaceTemplate with target, order and body.

	Raises:
		ValueError: If the file has no frontmatter naming a target.
	"""
	path = Path(path)
	meta, body = split_frontmatter(path.read_text(encoding="utf-8"))
	if "target" not in meta:
		raise ValueError(f"template {path} has no target in frontmatter")
	return WorkspaceTemplate(body=body, **meta)


def load_workspace_templates(
        directory: str | Path | None = None) -> list[WorkspaceTemplate]:
	"""
	Load every ``*.md`` template in a directory, sorted by write order.

	Parameters:
		directory: Template directory; the bundled set if None.

	Returns:
		Templates ordered by (order, target).
	"""
	root = (Path(directory)
	        if directory else resolve_asset_path(DEFAULT_TEMPLATE_DIR))
	templates = [load_template(p) for p in sorted(root.glob("*.md"))]
	return sorted(templates, key=lambda t: (t.order, t.target))


__all__ = [
    "DEFAULT_TEMPLATE_DIR",
    "split_frontmatter",
    "load_template",
    "load_workspace_templates",
]
