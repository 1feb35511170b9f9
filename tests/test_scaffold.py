from datetime import date

from clawd_provisioner.core.scaffold import (
    WORKSPACE_SUBDIRS,
    build_template_context,
    copy_shared_files,
    create_workspace_tree,
    write_documents,
    write_if_missing,
)
from clawd_provisioner.models.request import AgentRequest


def test_write_if_missing_never_overwrites(tmp_path):
	p = tmp_path / "SOUL.md"
	assert write_if_missing(p, "first") is True
	assert write_if_missing(p, "second") is False
	assert p.read_text(encoding="utf-8") == "first"


def test_create_workspace_tree_is_idempotent(tmp_path):
	ws = tmp_path / "agents" / "nova"
	create_workspace_tree(ws)
	create_workspace_tree(ws)
	for sub in WORKSPACE_SUBDIRS:
		assert (ws / sub).is_dir()


def test_context_without_soul_uses_placeholders(tmp_path):
	req = AgentRequest(name="nova", model="m", emoji="🌟")
	ctx = build_template_context(req, tmp_path / "nova",
	                             today=date(2026, 1, 2), machine="host",
	                             operator="Ana")
	assert ctx["display_name"] == "Nova"
	assert ctx["soul_intro"] == "Define your personality here."
	assert ctx["identity_vibe"] == "(customize me)"
	assert ctx["today"] == "2026-01-02"
	assert ctx["operator"] == "Ana"


def test_write_documents_keeps_existing(tmp_path):
	req = AgentRequest(name="nova", model="m", soul="calm")
	ws = tmp_path / "nova"
	create_workspace_tree(ws)
	(ws / "SOUL.md").write_text("mine", encoding="utf-8")
	ctx = build_template_context(req, ws, today=date(2026, 1, 2),
	                             machine="host", operator="Ana")
	written = write_documents(ws, ctx)
	assert "SOUL.md" not in written
	assert len(written) == 7
	assert (ws / "SOUL.md").read_text(encoding="utf-8") == "mine"
	tasks = (ws / "TASKS.md").read_text(encoding="utf-8")
	assert "Introduce yourself to Ana" in tasks
	assert write_documents(ws, ctx) == []


def test_copy_shared_files(tmp_path):
	default_ws = tmp_path / "clawd"
	default_ws.mkdir()
	(default_ws / "AGENTS.md").write_text("agents", encoding="utf-8")
	ws = tmp_path / "nova"
	ws.mkdir()
	assert copy_shared_files(default_ws, ws) == ["AGENTS.md"]
	(default_ws / "AGENTS.md").write_text("changed", encoding="utf-8")
	assert copy_shared_files(default_ws, ws) == []
	assert (ws / "AGENTS.md").read_text(encoding="utf-8") == "agents"


def test_copy_shared_files_missing_default_workspace(tmp_path):
	ws = tmp_path / "nova"
	ws.mkdir()
	assert copy_shared_files(tmp_path / "nope", ws) == []
