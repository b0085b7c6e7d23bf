"""Test configuration and fixtures."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from pathlib import Path
from typing import Any

import pytest

from github_event_dispatcher.dispatcher import EventDispatcher
from github_event_dispatcher.integrations.cicd import LoggingTrigger
from github_event_dispatcher.integrations.notifier import LoggingNotifier
from github_event_dispatcher.integrations.recorder import EventRecorder
from github_event_dispatcher.storage.log_store import AuditLogStore


@pytest.fixture(autouse=True)
def _restore_root_logger() -> Iterator[None]:
    """Undo `configure_logging` calls made by the code under test."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def state_dir(tmp_path: Path) -> Path:
    """Provide a temporary state directory."""
    path = tmp_path / "dispatcher_state"
    path.mkdir()
    return path


@pytest.fixture
def log_store(state_dir: Path) -> AuditLogStore:
    return AuditLogStore(state_dir / "logs.jsonl")


@pytest.fixture
def recorder(state_dir: Path) -> EventRecorder:
    return EventRecorder(state_dir / "events.jsonl")


@pytest.fixture
def notifier() -> LoggingNotifier:
    return LoggingNotifier()


@pytest.fixture
def trigger() -> LoggingTrigger:
    return LoggingTrigger()


@pytest.fixture
def dispatcher(
    recorder: EventRecorder,
    log_store: AuditLogStore,
    notifier: LoggingNotifier,
    trigger: LoggingTrigger,
) -> EventDispatcher:
    """Dispatcher wired to local, in-memory collaborators."""
    return EventDispatcher(
        recorder=recorder, log_store=log_store, notifier=notifier, trigger=trigger
    )


@pytest.fixture
def push_payload() -> dict[str, Any]:
    return {
        "ref": "refs/heads/main",
        "after": "abc123",
        "commits": [
            {"id": "c1", "message": "Update settings", "added": [".env"], "modified": []},
        ],
        "repository": {"full_name": "org/repo"},
        "pusher": {"name": "alice"},
    }


@pytest.fixture
def pull_request_payload() -> dict[str, Any]:
    return {
        "action": "opened",
        "pull_request": {
            "number": 5,
            "title": "Add feature",
            "base": {"ref": "main"},
            "head": {"ref": "feature"},
            "user": {"login": "bob"},
            "merged": False,
        },
        "repository": {"full_name": "org/repo"},
    }
