"""Typed GitHub webhook payloads, one variant per supported event kind."""

from github_event_dispatcher.events.models import (
    EventKind,
    EventPayload,
    parse_event,
    resolve_event_kind,
)

__all__ = ["EventKind", "EventPayload", "parse_event", "resolve_event_kind"]
