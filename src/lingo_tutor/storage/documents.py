"""JSON document collections (one file per document, fcntl.flock + atomic write)."""

import fcntl
import json
import os
import re
import tempfile
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

import structlog

logger = structlog.get_logger()

_DOC_ID_RE = re.compile(r"^[A-Za-z0-9_-]{1,128}$")


class JsonCollection:
    """A directory of JSON documents keyed by id.

    Args:
        directory: Where the documents live; created if missing.
    """

    def __init__(self, directory: Path):
        self.directory = directory
        self.directory.mkdir(parents=True, exist_ok=True)
        self._lock_path = directory / ".lock"

    def path_for(self, doc_id: str) -> Path:
        if not _DOC_ID_RE.match(doc_id):
            raise ValueError(f"Invalid document id: {doc_id!r}")
        return self.directory / f"{doc_id}.json"

    @contextmanager
    def locked(self) -> Iterator[None]:
        """Hold the collection write lock for a read-modify-write sequence."""
        with open(self._lock_path, "w") as lock_file:
            fcntl.flock(lock_file, fcntl.LOCK_EX)
            try:
                yield
            finally:
                fcntl.flock(lock_file, fcntl.LOCK_UN)

    def load(self, doc_id: str) -> dict | None:
        path = self.path_for(doc_id)
        if not path.exists():
            return None
        with open(path, encoding="utf-8") as f:
            fcntl.flock(f, fcntl.LOCK_SH)
            data = json.load(f)
            fcntl.flock(f, fcntl.LOCK_UN)
        return data

    def save(self, doc_id: str, data: dict) -> None:
        path = self.path_for(doc_id)
        with tempfile.NamedTemporaryFile(
            "w", dir=self.directory, delete=False, suffix=".tmp", encoding="utf-8"
        ) as tmp:
            json.dump(data, tmp, default=str)
        os.replace(tmp.name, path)

    def exists(self, doc_id: str) -> bool:
        return self.path_for(doc_id).exists()

    def iter_documents(self) -> Iterator[dict]:
        for path in sorted(self.directory.glob("*.json")):
            try:
                yield json.loads(path.read_text(encoding="utf-8"))
            except json.JSONDecodeError:
                logger.warning("document_parse_error", path=str(path))


class DocumentStore:
    """Root of the document store: a directory holding one folder per collection."""

    def __init__(self, root: Path):
        self.root = root
        self.root.mkdir(parents=True, exist_ok=True)

    def collection(self, name: str) -> JsonCollection:
        return JsonCollection(self.root / name)
