"""Error types surfaced by the dispatcher and its collaborators."""

from __future__ import annotations


class DispatchError(Exception):
    """Base class for every failure a dispatch call can surface."""


class InvalidPayload(DispatchError, ValueError):
    """Raised when an event payload is missing a field its kind requires.

    No side effects have been issued when this is raised.
    """

    def __init__(self, reason: str, *, event: str | None = None) -> None:
        self.reason = reason
        self.event = event
        super().__init__(f"Invalid payload: {reason}")


class RecordError(DispatchError):
    """The structured event recorder failed."""


class LogStoreError(DispatchError, OSError):
    """Appending to the local audit log failed."""


class NotifyError(DispatchError):
    """The notification channel rejected or failed to deliver a message."""


class TriggerError(DispatchError):
    """The CI/CD pipeline trigger failed."""
