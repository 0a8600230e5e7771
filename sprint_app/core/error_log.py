"""Append-only error log for sprint closing failures.

The processor only ever calls ``record``. Reading and clearing belong to the
presentation layer.
"""

from __future__ import annotations

import json
from collections.abc import MutableMapping
from pathlib import Path
from typing import Any, Protocol

from .config import SETTINGS
from .models import ErrorRecord


class ErrorSink(Protocol):
    def record(self, record: ErrorRecord) -> None: ...


def _decode(payload: str | None) -> list[ErrorRecord]:
    if not payload:
        return []
    data = json.loads(payload)
    if not isinstance(data, list):
        raise ValueError(f"Error log slot holds {type(data).__name__}, expected a list")
    return [ErrorRecord.from_dict(item) for item in data if isinstance(item, dict)]


def _encode(records: list[ErrorRecord]) -> str:
    return json.dumps([r.to_dict() for r in records])


class SlotErrorLog:
    """Error log stored as a JSON array under one named key of a mapping.

    In the app the mapping is ``st.session_state``.
    """

    def __init__(self, storage: MutableMapping[str, Any], slot: str | None = None):
        self._storage = storage
        self._slot = slot or SETTINGS.error_log_slot
        if not self._storage.get(self._slot):
            self._storage[self._slot] = "[]"

    def record(self, record: ErrorRecord) -> None:
        records = self.read()
        records.append(record)
        self._storage[self._slot] = _encode(records)

    def read(self) -> list[ErrorRecord]:
        return _decode(self._storage.get(self._slot))

    def clear(self) -> None:
        self._storage[self._slot] = "[]"

    def __len__(self) -> int:
        return len(self.read())


class FileErrorLog:
    """Error log persisted to a JSON file so it survives restarts."""

    def __init__(self, path: str | Path | None = None):
        self.path = Path(path or SETTINGS.error_log_path)

    def record(self, record: ErrorRecord) -> None:
        records = self.read()
        records.append(record)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(_encode(records), encoding="utf-8")

    def read(self) -> list[ErrorRecord]:
        if not self.path.exists():
            return []
        return _decode(self.path.read_text(encoding="utf-8"))

    def clear(self) -> None:
        if self.path.exists():
            self.path.write_text("[]", encoding="utf-8")

    def __len__(self) -> int:
        return len(self.read())


def open_error_log(storage: MutableMapping[str, Any], path: str | Path | None = None) -> SlotErrorLog | FileErrorLog:
    """File-backed log when a path is configured, otherwise the session slot."""
    if path:
        return FileErrorLog(path)
    return SlotErrorLog(storage)
