"""Append-only audit log of normalized event records.

Records are stored as JSON Lines: each dispatch appends exactly one line and
existing lines are never rewritten. Appends to one file are serialized with a
lock shared by every store on that path, so worker threads may each hold
their own `AuditLogStore`.

This is intentionally minimal. If/when we need multi-process writers or
rotation, this should move to a database table with a sequence column.
"""

from __future__ import annotations

import json
import logging
import threading
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field

from github_event_dispatcher.errors import LogStoreError

logger = logging.getLogger(__name__)


class LogRecord(BaseModel):
    timestamp: str
    event: str
    data: dict[str, Any] = Field(default_factory=dict)


_locks_guard = threading.Lock()
_path_locks: dict[Path, threading.Lock] = {}


def _lock_for(path: Path) -> threading.Lock:
    key = path.resolve()
    with _locks_guard:
        return _path_locks.setdefault(key, threading.Lock())


def _utc_iso_now() -> str:
    return datetime.now(tz=UTC).isoformat()


@dataclass
class AuditLogStore:
    path: Path

    def __post_init__(self) -> None:
        self._lock = _lock_for(self.path)

    def append(self, event: str, data: dict[str, Any]) -> LogRecord:
        """Append one `{timestamp, event, data}` record.

        Raises:
            LogStoreError: if the log file cannot be written.
        """

        record = LogRecord(timestamp=_utc_iso_now(), event=event, data=data)
        line = json.dumps(record.model_dump(mode="json"), ensure_ascii=False) + "\n"
        with self._lock:
            try:
                self.path.parent.mkdir(parents=True, exist_ok=True)
                with self.path.open("a", encoding="utf-8") as fh:
                    fh.write(line)
            except OSError as exc:
                raise LogStoreError(f"Failed to append to audit log {self.path}: {exc}") from exc
        return record

    def load(self) -> list[LogRecord]:
        """Return every record in write order."""

        with self._lock:
            if not self.path.exists():
                return []
            lines = self.path.read_text(encoding="utf-8").splitlines()

        records: list[LogRecord] = []
        for lineno, line in enumerate(lines, start=1):
            if not line.strip():
                continue
            try:
                records.append(LogRecord.model_validate(json.loads(line)))
            except ValueError:
                logger.warning(
                    "Skipping unreadable audit log line",
                    extra={"path": str(self.path), "line": lineno},
                )
        return records

    def tail(self, limit: int) -> list[LogRecord]:
        """Return the most recent `limit` records, oldest first."""

        if limit <= 0:
            return []
        return self.load()[-limit:]
