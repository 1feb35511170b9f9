"""
JSON document store with a read-modify-write contract.

The gateway config is shared with the gateway process and any other tool
that edits it. ``JsonDocumentStore.update`` reads the document once,
applies a mutation in memory and writes it back once, guarded by one of
three strategies:

- ``race``: no coordination; a concurrent writer between read and write
  loses its changes (last writer wins).
- ``lock``: advisory ``flock`` on a sidecar ``<file>.lock`` held across
  the read-modify-write window. Only cooperating writers are excluded.
- ``optimistic``: fingerprint the file on read and re-check it before the
  write; on mismatch re-read and re-apply, up to ``attempts`` times.
"""

from __future__ import annotations

import contextlib
import fcntl
import hashlib
import json
import os
import tempfile
from pathlib import Path
from typing import Any, Callable, Iterator, TypeVar

from clawd_provisioner.errors import ConfigConflictError
from clawd_provisioner.models.config import WriteStrategy
from clawd_provisioner.utils.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

Mutation = Callable[[dict[str, Any]], T]


def _fingerprint(raw: bytes) -> str:
	return hashlib.sha256(raw).hexdigest()


class JsonDocumentStore:
	"""A JSON object stored in a single file."""

	def __init__(self, path: Path, strategy: WriteStrategy = "lock",
	             attempts: int = 3) -> None:
		if strategy not in ("lock", "optimistic", "race"):
			raise ValueError(f"unknown write strategy: {strategy}")
		self.path = Path(path)
		self.strategy = strategy
		self.attempts = max(1, attempts)

	@property
	def lock_path(self) -> Path:
		return self.path.with_name(self.path.name + ".lock")

	def _read_raw(self) -> bytes:
		return self.path.read_bytes()

	@staticmethod
	def _decode(raw: bytes, path: Path) -> dict[str, Any]:
		data = json.loads(raw.decode("utf-8"))
		if not isinstance(data, dict):
			raise ValueError(f"{path} does not contain a JSON object")
		return data

	def read(self) -> dict[str, Any]:
		"""Read and decode the document.

		Raises:
			OSError: If the file cannot be read.
			ValueError: If the content is not a JSON object.
		"""
		return self._decode(self._read_raw(), self.path)

	def write(self, data: dict[str, Any]) -> None:
		"""Replace the file with ``data`` as 2-space indented JSON."""
		payload = json.dumps(data, indent=2, ensure_ascii=False) + "\n"
		fd, tmp = tempfile.mkstemp(dir=self.path.parent,
		                           prefix=f".{self.path.name}.",
		                           suffix=".tmp")
		try:
			with os.fdopen(fd, "w", encoding="utf-8") as fh:
				fh.write(payload)
			if self.path.exists():
				os.chmod(tmp, self.path.stat().st_mode & 0o777)
			os.replace(tmp, self.path)
		except BaseException:
			with contextlib.suppress(FileNotFoundError):
				os.unlink(tmp)
			raise

	@contextlib.contextmanager
	def _locked(self) -> Iterator[None]:
		with open(self.lock_path, "a") as fh:
			fcntl.flock(fh.fileno(), fcntl.LOCK_EX)
			try:
				yield
			finally:
				fcntl.flock(fh.fileno(), fcntl.LOCK_UN)

	def update(self, mutate: Mutation[T]) -> T:
		"""Read once, apply ``mutate`` in memory, write once.

		``mutate`` may run more than once under the optimistic strategy,
		each time against a freshly read document.

		Returns:
			Whatever ``mutate`` returns for the document that was written.

		Raises:
			ConfigConflictError: If optimistic retries are exhausted.
		"""
		if self.strategy == "lock":
			with self._locked():
				return self._apply(mutate)
		if self.strategy == "optimistic":
			return self._apply_optimistic(mutate)
		return self._apply(mutate)

	def _apply(self, mutate: Mutation[T]) -> T:
		data = self.read()
		result = mutate(data)
		self.write(data)
		return result

	def _apply_optimistic(self, mutate: Mutation[T]) -> T:
		for attempt in range(1, self.attempts + 1):
			raw = self._read_raw()
			data = self._decode(raw, self.path)
			result = mutate(data)
			if _fingerprint(self._read_raw()) != _fingerprint(raw):
				logger.warning("%s changed during update (attempt %d/%d)",
				               self.path, attempt, self.attempts)
				continue
			self.write(data)
			return result
		raise ConfigConflictError(
		    f"{self.path} kept changing; gave up after {self.attempts} attempts")


__all__ = ["JsonDocumentStore", "Mutation"]
