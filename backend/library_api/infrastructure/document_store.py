"""Document Store — synchronous JSON document with collection-level operations.

Invariants:
    - The whole document lives in memory; write() persists it in full
    - Every public operation runs under the store's lock (one mutation at a time)
    - Records returned to callers are copies; mutating them never touches the store
    - Storage failures surface as DocumentStoreError, never raw OSError
    - Only strict JSON is persisted (NaN/Infinity fail the write)
    - A failed write() discards every change made since the last good write

Design Decisions:
    - Storage adapters (file, memory) behind one Protocol: routes and tests share
      the same DocumentStore, only the backing storage differs
    - Atomic rename-on-write: a crash mid-write leaves the previous file intact
    - No cross-operation locking: find-then-assign sequences in callers may race
"""

import copy
import json
import logging
import os
import tempfile
import threading
from pathlib import Path
from typing import Any, Callable, Protocol

from fastapi import Request

from library_api.core.errors import DocumentStoreError

logger = logging.getLogger(__name__)

Record = dict[str, Any]
Predicate = Callable[[Record], bool]


class Storage(Protocol):
    """Contract for document persistence."""
    def read(self) -> dict | None: ...
    def write(self, data: dict) -> None: ...


class JSONFileStorage:
    """Persists the document as a single JSON file."""

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def read(self) -> dict | None:
        if not self.path.exists():
            return None
        with self.path.open("r", encoding="utf-8") as f:
            return json.load(f)

    def write(self, data: dict) -> None:
        payload = json.dumps(data, indent=2, ensure_ascii=False, allow_nan=False)
        directory = self.path.parent
        directory.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{self.path.name}.", suffix=".tmp", dir=directory,
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(payload)
            os.replace(tmp_name, self.path)
        except BaseException:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise


class MemoryStorage:
    """Keeps the document in memory (tests, ephemeral runs)."""

    def __init__(self, initial: dict | None = None):
        self._data = copy.deepcopy(initial) if initial is not None else None

    def read(self) -> dict | None:
        return copy.deepcopy(self._data)

    def write(self, data: dict) -> None:
        # Round-trip through json so unserialisable values fail like the file does
        self._data = json.loads(json.dumps(data, allow_nan=False))


def where(**fields: Any) -> Predicate:
    """Predicate matching records whose fields equal the given values."""
    def predicate(record: Record) -> bool:
        return all(record.get(key) == value for key, value in fields.items())
    return predicate


class DocumentStore:
    """In-memory JSON document persisted through a Storage adapter."""

    def __init__(self, storage: Storage):
        self.storage = storage
        self._lock = threading.RLock()
        self._data: dict[str, Any] = self._load()
        self._saved = copy.deepcopy(self._data)

    @classmethod
    def open(cls, path: str | Path) -> "DocumentStore":
        """Open a store backed by the JSON file at ``path``."""
        return cls(JSONFileStorage(path))

    def _load(self) -> dict[str, Any]:
        try:
            data = self.storage.read()
        except (OSError, ValueError) as e:
            logger.error(f"Document store read failed: {e}")
            raise DocumentStoreError("read", e) from e
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise DocumentStoreError(
                "read", TypeError("document root must be a JSON object"),
            )
        return data

    def _records(self, name: str) -> list[Record]:
        records = self._data.setdefault(name, [])
        if not isinstance(records, list):
            raise DocumentStoreError(
                "read", TypeError(f"collection '{name}' is not a list"),
            )
        return records

    def defaults(self, defaults: dict[str, Any]) -> None:
        """Set missing top-level keys and persist."""
        with self._lock:
            for key, value in defaults.items():
                self._data.setdefault(key, copy.deepcopy(value))
            self.write()

    def collection(self, name: str) -> list[Record]:
        with self._lock:
            return copy.deepcopy(self._data.get(name, []))

    def find(self, name: str, predicate: Predicate) -> Record | None:
        """First record matching ``predicate``, or None."""
        with self._lock:
            for record in self._data.get(name, []):
                if predicate(record):
                    return copy.deepcopy(record)
            return None

    def push(self, name: str, record: Record) -> Record:
        with self._lock:
            self._records(name).append(copy.deepcopy(record))
            return copy.deepcopy(record)

    def assign(
        self, name: str, predicate: Predicate, fields: dict[str, Any],
    ) -> Record | None:
        """Shallow-merge ``fields`` into the first matching record."""
        with self._lock:
            for record in self._records(name):
                if predicate(record):
                    record.update(copy.deepcopy(fields))
                    return copy.deepcopy(record)
            return None

    def remove(self, name: str, predicate: Predicate) -> list[Record]:
        """Remove every matching record; returns the removed records."""
        with self._lock:
            records = self._records(name)
            removed = [r for r in records if predicate(r)]
            records[:] = [r for r in records if not predicate(r)]
            return removed

    def write(self) -> None:
        """Persist the whole document.

        On failure the in-memory document is rolled back to the last state
        that was read or written successfully, so unsaved changes never
        outlive a failed write.
        """
        with self._lock:
            try:
                self.storage.write(self._data)
            except (OSError, TypeError, ValueError) as e:
                logger.error(f"Document store write failed: {e}")
                self._data = copy.deepcopy(self._saved)
                raise DocumentStoreError("write", e) from e
            self._saved = copy.deepcopy(self._data)

    def health_check(self) -> bool:
        """True when the backing storage can be read (readiness check)."""
        try:
            self.storage.read()
            return True
        except Exception as e:
            logger.error(f"Document store health check failed: {e}")
            return False


def get_store(request: Request) -> DocumentStore:
    """FastAPI dependency for the process-wide document store."""
    store = getattr(request.app.state, "store", None)
    if store is None:
        raise RuntimeError("Document store not initialized")
    return store
