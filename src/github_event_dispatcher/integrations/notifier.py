"""Chat channel notifications."""

from __future__ import annotations

import logging
from collections import deque
from typing import Protocol

import requests

from github_event_dispatcher.errors import NotifyError

logger = logging.getLogger(__name__)


class Notifier(Protocol):
    """Deliver a human-readable message to an external channel."""

    def notify(self, message: str) -> None: ...

    def close(self) -> None: ...


class SlackNotifier:
    """Post messages to a Slack incoming webhook."""

    def __init__(
        self,
        *,
        webhook_url: str,
        timeout_seconds: float = 10.0,
        session: requests.Session | None = None,
    ) -> None:
        if not webhook_url:
            raise ValueError("Slack webhook URL is required")

        self._webhook_url = webhook_url
        self._timeout = timeout_seconds
        self._session = session or requests.Session()

    def notify(self, message: str) -> None:
        try:
            resp = self._session.post(
                self._webhook_url, json={"text": message}, timeout=self._timeout
            )
            resp.raise_for_status()
        except requests.RequestException as exc:
            raise NotifyError(f"Slack notification failed: {exc}") from exc
        logger.info("Slack notification sent", extra={"chars": len(message)})

    def close(self) -> None:
        self._session.close()


class LoggingNotifier:
    """Fallback used when no chat channel is configured.

    Messages are logged; the most recent `history` are also kept in memory.
    """

    def __init__(self, history: int = 100) -> None:
        self.messages: deque[str] = deque(maxlen=history)

    def notify(self, message: str) -> None:
        self.messages.append(message)
        logger.info("Notification (no channel configured)", extra={"notification": message})

    def close(self) -> None:
        pass
