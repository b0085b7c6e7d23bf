"""Assemble a dispatcher from settings."""

from __future__ import annotations

import logging

from github_event_dispatcher.config import DispatcherSettings
from github_event_dispatcher.dispatcher import EventDispatcher
from github_event_dispatcher.integrations.cicd import (
    CICDTrigger,
    GitHubDispatchTrigger,
    LoggingTrigger,
)
from github_event_dispatcher.integrations.notifier import LoggingNotifier, Notifier, SlackNotifier
from github_event_dispatcher.integrations.recorder import EventRecorder
from github_event_dispatcher.storage.log_store import AuditLogStore

logger = logging.getLogger(__name__)


def create_notifier(settings: DispatcherSettings) -> Notifier:
    if settings.slack_webhook_url.strip():
        logger.info("Using Slack notifier")
        return SlackNotifier(
            webhook_url=settings.slack_webhook_url.strip(),
            timeout_seconds=settings.http_timeout_seconds,
        )
    logger.info("SLACK_WEBHOOK_URL not set; notifications will only be logged")
    return LoggingNotifier()


def create_trigger(settings: DispatcherSettings) -> CICDTrigger:
    if settings.github_token.strip():
        logger.info(
            "Using GitHub repository_dispatch CI/CD trigger",
            extra={"event_type": settings.cicd_event_type},
        )
        return GitHubDispatchTrigger(
            token=settings.github_token.strip(),
            base_url=settings.github_base_url,
            event_type=settings.cicd_event_type,
            target_repository=settings.cicd_target_repo,
        )
    logger.info("DISPATCHER_GITHUB_TOKEN not set; CI/CD triggers will only be logged")
    return LoggingTrigger()


def build_dispatcher(settings: DispatcherSettings) -> EventDispatcher:
    """Create a dispatcher wired to the collaborators `settings` enables."""

    return EventDispatcher(
        recorder=EventRecorder(settings.event_archive_file),
        log_store=AuditLogStore(settings.audit_log_file),
        notifier=create_notifier(settings),
        trigger=create_trigger(settings),
    )
