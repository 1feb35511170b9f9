import json

import pytest

from clawd_provisioner.core.json_store import JsonDocumentStore
from clawd_provisioner.errors import ConfigConflictError


def _write(path, data):
	path.write_text(json.dumps(data), encoding="utf-8")


def _append(item):

	def mutate(doc):
		doc.setdefault("items", []).append(item)
		return len(doc["items"])

	return mutate


@pytest.mark.parametrize("strategy", ["race", "lock", "optimistic"])
def test_update_reads_once_and_writes_once(tmp_path, strategy):
	path = tmp_path / "doc.json"
	_write(path, {"items": ["a"]})
	store = JsonDocumentStore(path, strategy=strategy)
	assert store.update(_append("b")) == 2
	assert json.loads(path.read_text(encoding="utf-8")) == {"items": ["a", "b"]}


def test_write_is_indented_and_keeps_unicode(tmp_path):
	path = tmp_path / "doc.json"
	store = JsonDocumentStore(path, strategy="race")
	store.write({"emoji": "🌟"})
	text = path.read_text(encoding="utf-8")
	assert text == '{\n  "emoji": "🌟"\n}\n'
	assert list(tmp_path.iterdir()) == [path]


def test_lock_strategy_uses_sidecar(tmp_path):
	path = tmp_path / "doc.json"
	_write(path, {})
	JsonDocumentStore(path, strategy="lock").update(_append("x"))
	assert (tmp_path / "doc.json.lock").exists()


def test_read_rejects_non_object(tmp_path):
	path = tmp_path / "doc.json"
	_write(path, [1, 2])
	with pytest.raises(ValueError):
		JsonDocumentStore(path).read()


def test_missing_file_raises_oserror(tmp_path):
	store = JsonDocumentStore(tmp_path / "missing.json", strategy="race")
	with pytest.raises(OSError):
		store.update(_append("x"))


def test_unknown_strategy(tmp_path):
	with pytest.raises(ValueError):
		JsonDocumentStore(tmp_path / "doc.json", strategy="yolo")


def test_optimistic_reapplies_after_concurrent_write(tmp_path):
	path = tmp_path / "doc.json"
	_write(path, {"items": []})
	calls = []

	def mutate(doc):
		calls.append(list(doc.get("items", [])))
		if len(calls) == 1:
			# another writer lands between our read and write
			_write(path, {"items": ["theirs"]})
		doc.setdefault("items", []).append("ours")

	store = JsonDocumentStore(path, strategy="optimistic", attempts=3)
	store.update(mutate)
	assert calls == [[], ["theirs"]]
	assert json.loads(path.read_text(encoding="utf-8")) == {
	    "items": ["theirs", "ours"]
	}


def test_optimistic_gives_up(tmp_path):
	path = tmp_path / "doc.json"
	_write(path, {"n": 0})
	counter = {"n": 0}

	def mutate(doc):
		counter["n"] += 1
		_write(path, {"n": counter["n"]})

	store = JsonDocumentStore(path, strategy="optimistic", attempts=2)
	with pytest.raises(ConfigConflictError):
		store.update(mutate)
	assert counter["n"] == 2
	assert json.loads(path.read_text(encoding="utf-8")) == {"n": 2}
