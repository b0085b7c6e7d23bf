"""Structured recording of raw webhook events."""

from __future__ import annotations

import json
import logging
import threading
from collections.abc import Mapping
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from github_event_dispatcher.errors import RecordError

logger = logging.getLogger(__name__)

# Dedicated channel so raw-event lines can be routed separately from diagnostics.
event_logger = logging.getLogger("github_event_dispatcher.events")


class EventRecorder:
    """Record every accepted event as received.

    Each call emits one structured log line and appends the full payload to a
    JSON Lines archive, so the audit log can stay small (normalized records
    only) while the original deliveries remain available for replay.
    """

    def __init__(self, archive_path: Path) -> None:
        self._archive_path = archive_path
        self._lock = threading.Lock()

    @property
    def archive_path(self) -> Path:
        return self._archive_path

    def record(self, event_type: str, payload: Mapping[str, Any]) -> None:
        """Persist the raw payload for `event_type`.

        Raises:
            RecordError: if the payload cannot be serialized or written.
        """

        repository = payload.get("repository")
        repo_name = repository.get("full_name") if isinstance(repository, Mapping) else None
        event_logger.info(
            "Event received",
            extra={"event": event_type, "action": payload.get("action"), "repo": repo_name},
        )

        entry = {
            "timestamp": datetime.now(tz=UTC).isoformat(),
            "event": event_type,
            "payload": payload,
        }
        try:
            line = json.dumps(entry, ensure_ascii=False) + "\n"
        except (TypeError, ValueError) as exc:
            raise RecordError(f"Event payload is not JSON-serializable: {exc}") from exc

        with self._lock:
            try:
                self._archive_path.parent.mkdir(parents=True, exist_ok=True)
                with self._archive_path.open("a", encoding="utf-8") as fh:
                    fh.write(line)
            except OSError as exc:
                raise RecordError(
                    f"Failed to archive {event_type} event to {self._archive_path}: {exc}"
                ) from exc
