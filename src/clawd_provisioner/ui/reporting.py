"""
Result rendering utilities.

Provides functions for rendering a ProvisionResult to the terminal with
Rich, or as a JSON payload.
"""

from __future__ import annotations

import json

from rich import box
from rich.console import Console
from rich.table import Table
from rich.text import Text

from clawd_provisioner.models.result import ProvisionResult


def _line_style(line: str) -> str | None:
	if line.startswith("❌"):
		return "bold red"
	if line.startswith("⚠️"):
		return "yellow"
	if line.startswith(("✅", "🎉")):
		return "green"
	if line.startswith("⏭️"):
		return "dim"
	return None


def render_steps(result: ProvisionResult) -> Text:
	"""Render the step log, one styled line per step."""
	text = Text()
	for line in result.steps:
		text.append(line + "\n", style=_line_style(line))
	return text


def render_summary(result: ProvisionResult) -> Table:
	"""Render the resolved agent details of a successful result."""
	table = Table(box=box.SIMPLE, show_header=False)
	table.add_column("Field", style="bold")
	table.add_column("Value")
	table.add_row("Id", result.id or "")
	table.add_row("Name", f"{result.emoji or ''} {result.name or ''}".strip())
	table.add_row("Workspace", result.workspace or "")
	table.add_row("Model", result.model or "")
	table.add_row("Telegram", "yes" if result.has_telegram else "no")
	return table


def print_result(result: ProvisionResult,
                 console: Console | None = None) -> None:
	"""Print the step log followed by the outcome."""
	console = console or Console()
	console.print(render_steps(result), end="")
	if result.ok:
		console.print(render_summary(result))
		console.print(Text(result.message or "", style="bold green"))
	else:
		console.print(Text.assemble(("Error: ", "bold red"), result.error
		                            or ""))


def result_json(result: ProvisionResult) -> str:
	"""Serialize the result payload as indented JSON."""
	return json.dumps(result.to_payload(), indent=2, ensure_ascii=False)


__all__ = ["render_steps", "render_summary", "print_result", "result_json"]
