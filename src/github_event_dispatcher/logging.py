"""JSON-lines logging for the dispatcher.

Every log line is one JSON object, so webhook handling can be followed with
`jq` or shipped to a log collector unchanged. Context such as the event kind,
repository or delivery id is passed with `extra=` and lands under `"extra"`.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import UTC, datetime
from typing import Any, TextIO

# Fields present on every LogRecord; anything else arrived through `extra=`.
_BUILTIN_RECORD_FIELDS: frozenset[str] = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", None, None))
) | {"asctime", "message", "taskName"}

# HTTP client libraries used by the Slack notifier and the GitHub trigger.
_CLIENT_LOGGERS = ("github", "urllib3")


def _context_fields(record: logging.LogRecord) -> dict[str, Any]:
    return {
        key: value
        for key, value in vars(record).items()
        if key not in _BUILTIN_RECORD_FIELDS and not key.startswith("_")
    }


class JsonFormatter(logging.Formatter):
    """One JSON document per record: time, level, logger, message, context."""

    def format(self, record: logging.LogRecord) -> str:  # noqa: A003 (record)
        line: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        context = _context_fields(record)
        if context:
            line["extra"] = context

        if record.exc_info:
            line["exception"] = self.formatException(record.exc_info)

        # Payload fragments (datetimes, enums) are rendered with str().
        return json.dumps(line, ensure_ascii=False, default=str)


def configure_logging(level: str, *, stream: TextIO | None = None) -> None:
    """Send all dispatcher logging to `stream` (stdout by default) as JSON lines.

    Safe to call more than once: the root logger ends up with a single handler.
    """

    root = logging.getLogger()
    root.handlers.clear()

    handler = logging.StreamHandler(stream=stream or sys.stdout)
    handler.setFormatter(JsonFormatter())
    root.addHandler(handler)
    root.setLevel(level.upper())

    for name in _CLIENT_LOGGERS:
        logging.getLogger(name).setLevel(max(root.level, logging.INFO))
