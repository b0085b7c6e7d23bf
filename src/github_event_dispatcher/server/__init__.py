"""FastAPI server adapter for github-event-dispatcher.

This module exposes the dispatcher over HTTP.

Design intent:
- Keep dispatch logic in `github_event_dispatcher.dispatcher`
- Keep transport concerns (routing, header parsing, status mapping) here
"""

from __future__ import annotations

__all__ = ["create_app"]

from github_event_dispatcher.server.app import create_app
