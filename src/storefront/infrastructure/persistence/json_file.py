"""Shared plumbing for the JSON-file-backed repositories.

Each repository owns one JSON file holding a list of records.  Every
read-modify-write runs under a re-entrant lock keyed by the file's path,
so two repository instances pointing at the same file (one per request,
say) still serialize their writes.  The lock covers one process only.
"""

from __future__ import annotations

import json
import os
import threading
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path

from storefront.domain.exceptions import UnexpectedError

_locks: dict[Path, threading.RLock] = {}
_locks_guard = threading.Lock()


def lock_for(path: Path) -> threading.RLock:
    key = path.resolve()
    with _locks_guard:
        lock = _locks.get(key)
        if lock is None:
            lock = _locks[key] = threading.RLock()
        return lock


def new_id() -> str:
    return uuid.uuid4().hex


def parse_datetime(value: str | None) -> datetime | None:
    return datetime.fromisoformat(value) if value else None


def format_datetime(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


class JsonFileRepository:
    """Base class: locking, loading and atomic persisting of one record file."""

    def __init__(self, file_path: Path) -> None:
        self._file_path = Path(file_path)
        self._lock = lock_for(self._file_path)
        self._ensure_file()

    @contextmanager
    def _transaction(self) -> Iterator[list[dict]]:
        """Yield the records under the file lock; persist them on clean exit.

        If the body raises, nothing is written.
        """
        with self._lock:
            records = self._load_raw()
            yield records
            self._persist_raw(records)

    def _snapshot(self) -> list[dict]:
        with self._lock:
            return self._load_raw()

    @staticmethod
    def _index_of(records: list[dict], record_id: str) -> int | None:
        for i, raw in enumerate(records):
            if raw["id"] == record_id:
                return i
        return None

    # --- File helpers ---------------------------------------------------------

    def _load_raw(self) -> list[dict]:
        try:
            return json.loads(self._file_path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise UnexpectedError(f"Could not read {self._file_path.name}: {exc}") from exc

    def _persist_raw(self, records: list[dict]) -> None:
        tmp_path = self._file_path.with_suffix(self._file_path.suffix + ".tmp")
        try:
            tmp_path.write_text(json.dumps(records, indent=2) + "\n", encoding="utf-8")
            os.replace(tmp_path, self._file_path)
        except OSError as exc:
            raise UnexpectedError(f"Could not write {self._file_path.name}: {exc}") from exc

    def _ensure_file(self) -> None:
        with self._lock:
            if self._file_path.exists():
                return
            try:
                self._file_path.parent.mkdir(parents=True, exist_ok=True)
                self._file_path.write_text("[]", encoding="utf-8")
            except OSError as exc:
                raise UnexpectedError(
                    f"Could not create {self._file_path.name}: {exc}"
                ) from exc
