"""File and resource loading utilities.

Key modules:
    - templates: Workspace document templates with YAML frontmatter
"""

from .templates import split_frontmatter, load_template, load_workspace_templates

__all__ = [
    "split_frontmatter",
    "load_template",
    "load_workspace_templates",
]
