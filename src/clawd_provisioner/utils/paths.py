"""
Workspace and asset path helpers.

Agent workspaces live one level below the agents base directory and are
named after the agent id; bundled assets resolve against the package.
"""

from __future__ import annotations

from pathlib import Path

# Root of the clawd_provisioner package directory.
PACKAGE_DIR: Path = Path(__file__).resolve().parent.parent


def resolve_asset_path(relative_path: str) -> Path:
	"""Resolve an asset path as given, else relative to the package.

	Parameters:
		relative_path: Absolute, cwd-relative, or package-relative path
			like ``templates/workspace``.
	"""
	p = Path(relative_path)
	if p.exists():
		return p
	return PACKAGE_DIR / relative_path


def ensure_within(base: Path, path: Path) -> Path:
	"""Return path unchanged, or raise ValueError if it leaves base."""
	resolved_base = base.resolve()
	resolved_path = path.resolve()
	if not resolved_path.is_relative_to(resolved_base):
		raise ValueError(f"Path {resolved_path} escapes base {resolved_base}")
	return path


def agent_workspace(base: Path, agent_id: str) -> Path:
	"""
	Return the workspace directory for an agent id.

	Parameters:
		base: Agents base directory.
		agent_id: Derived agent id; must be a single path component.

	Returns:
		``base / agent_id``.

	Raises:
		ValueError: If the id is empty, a dot entry, contains a separator,
			or the result escapes base.
	"""
	if agent_id in ("", ".", "..") or Path(agent_id).name != agent_id:
		raise ValueError(f"Invalid workspace name {agent_id!r}")
	return ensure_within(base, base / agent_id)


def display_path(path: Path) -> str:
	"""Render a path with the home directory collapsed to ``~``."""
	try:
		return "~/" + path.relative_to(Path.home()).as_posix()
	except ValueError:
		return str(path)


__all__ = [
    "PACKAGE_DIR",
    "agent_workspace",
    "display_path",
    "ensure_within",
    "resolve_asset_path",
]
