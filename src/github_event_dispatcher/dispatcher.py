"""Event dispatcher: one entry point per supported webhook event kind.

Every dispatch is linear and stateless:

    validate -> record -> append audit log -> notify (conditional) -> trigger (push only)

Validation failures raise `InvalidPayload` before any side effect. Collaborator
failures propagate unchanged; side effects already issued (e.g. a sent
notification) are not undone.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any, TypeVar

from github_event_dispatcher.errors import DispatchError, InvalidPayload
from github_event_dispatcher.events.models import (
    DeploymentStatusEvent,
    EventKind,
    EventPayload,
    IssueCommentEvent,
    PullRequestEvent,
    PushEvent,
    RepositoryRenameEvent,
    SecurityAdvisoryEvent,
    VulnerabilityAlertEvent,
    parse_event,
)
from github_event_dispatcher.integrations.cicd import CICDJob, CICDTrigger
from github_event_dispatcher.integrations.notifier import Notifier
from github_event_dispatcher.integrations.recorder import EventRecorder
from github_event_dispatcher.storage.log_store import AuditLogStore

logger = logging.getLogger(__name__)

_E = TypeVar("_E", bound=EventPayload)


@dataclass(frozen=True, slots=True)
class DispatchResult:
    """Which side effects a dispatch call performed."""

    event: str
    recorded: bool
    notification: str | None = None
    triggered: bool = False

    @property
    def notified(self) -> bool:
        return self.notification is not None

    def to_json(self) -> dict[str, object]:
        return {
            "event": self.event,
            "recorded": self.recorded,
            "notified": self.notified,
            "notification": self.notification,
            "triggered": self.triggered,
        }


class EventDispatcher:
    """Route webhook payloads to their per-kind handler."""

    def __init__(
        self,
        *,
        recorder: EventRecorder,
        log_store: AuditLogStore,
        notifier: Notifier,
        trigger: CICDTrigger,
    ) -> None:
        self._recorder = recorder
        self._log_store = log_store
        self._notifier = notifier
        self._trigger = trigger

        self._handlers: dict[EventKind, Callable[[Mapping[str, Any]], DispatchResult]] = {
            EventKind.PUSH: self.handle_push,
            EventKind.PULL_REQUEST: self.handle_pull_request,
            EventKind.ISSUE_COMMENT: self.handle_issue_comment,
            EventKind.SECURITY_ADVISORY: self.handle_security_advisory,
            EventKind.REPOSITORY_VULNERABILITY_ALERT: self.handle_repository_vulnerability_alert,
            EventKind.REPOSITORY_RENAME: self.handle_repository_rename,
            EventKind.DEPLOYMENT_STATUS: self.handle_deployment_status,
        }

    @property
    def log_store(self) -> AuditLogStore:
        return self._log_store

    def close(self) -> None:
        """Release the notifier's and trigger's outbound connections."""

        self._notifier.close()
        self._trigger.close()

    def dispatch(self, kind: EventKind | str, payload: Mapping[str, Any]) -> DispatchResult:
        """Dispatch `payload` to the handler for `kind`.

        Raises:
            ValueError: if `kind` is not a supported event kind.
            DispatchError: if validation or any side effect fails.
        """

        try:
            resolved = EventKind(kind)
        except ValueError:
            raise ValueError(f"Unsupported event kind: {kind!r}") from None
        return self._handlers[resolved](payload)

    # --- handlers -----------------------------------------------------------

    def handle_push(self, payload: Mapping[str, Any]) -> DispatchResult:
        return self._handle(EventKind.PUSH, payload, self._on_push)

    def handle_pull_request(self, payload: Mapping[str, Any]) -> DispatchResult:
        return self._handle(EventKind.PULL_REQUEST, payload, self._on_pull_request)

    def handle_issue_comment(self, payload: Mapping[str, Any]) -> DispatchResult:
        return self._handle(EventKind.ISSUE_COMMENT, payload, self._on_issue_comment)

    def handle_security_advisory(self, payload: Mapping[str, Any]) -> DispatchResult:
        return self._handle(EventKind.SECURITY_ADVISORY, payload, self._on_security_advisory)

    def handle_repository_vulnerability_alert(self, payload: Mapping[str, Any]) -> DispatchResult:
        return self._handle(
            EventKind.REPOSITORY_VULNERABILITY_ALERT, payload, self._on_vulnerability_alert
        )

    def handle_repository_rename(self, payload: Mapping[str, Any]) -> DispatchResult:
        return self._handle(EventKind.REPOSITORY_RENAME, payload, self._on_repository_rename)

    def handle_deployment_status(self, payload: Mapping[str, Any]) -> DispatchResult:
        return self._handle(EventKind.DEPLOYMENT_STATUS, payload, self._on_deployment_status)

    # --- per-kind behaviour -------------------------------------------------

    def _on_push(self, payload: Mapping[str, Any], event: PushEvent) -> DispatchResult:
        branch = event.branch
        repository = event.repository.full_name
        logger.info("Handling push", extra={"branch": branch, "repo": repository})

        self._record(EventKind.PUSH, payload, event.summary())

        notification = None
        if event.has_sensitive_changes():
            notification = self._notify(
                f"🚨 Sensitive changes detected on branch {branch} in {repository} "
                f"by {event.pusher.name}"
            )

        self._trigger.trigger(
            CICDJob(
                repository=repository,
                branch=branch,
                commit=event.after,
                author=event.pusher.name,
            )
        )
        return DispatchResult(
            event=EventKind.PUSH.value, recorded=True, notification=notification, triggered=True
        )

    def _on_pull_request(
        self, payload: Mapping[str, Any], event: PullRequestEvent
    ) -> DispatchResult:
        details = event.summary()
        logger.info(
            "Handling pull request",
            extra={"action": event.action, "pr": details["number"], "repo": details["repository"]},
        )

        self._record(EventKind.PULL_REQUEST, payload, details)

        notification = None
        if event.action in {"opened", "reopened"}:
            notification = self._notify(
                f"📝 New PR #{details['number']}: {details['title']} in {details['repository']}"
            )
        elif event.action == "closed" and event.is_merged:
            notification = self._notify(
                f"✅ PR #{details['number']} merged in {details['repository']}"
            )
        else:
            logger.debug("No notification for pull request action", extra={"action": event.action})

        return DispatchResult(
            event=EventKind.PULL_REQUEST.value, recorded=True, notification=notification
        )

    def _on_issue_comment(
        self, payload: Mapping[str, Any], event: IssueCommentEvent
    ) -> DispatchResult:
        if event.action != "created":
            return self._skipped(EventKind.ISSUE_COMMENT, event.action)

        self._record(EventKind.ISSUE_COMMENT, payload, event.summary())
        notification = self._notify(
            f'💬 New comment on issue #{event.issue.number}: "{event.comment.body}" '
            f"by {event.comment.user.login}"
        )
        return DispatchResult(
            event=EventKind.ISSUE_COMMENT.value, recorded=True, notification=notification
        )

    def _on_security_advisory(
        self, payload: Mapping[str, Any], event: SecurityAdvisoryEvent
    ) -> DispatchResult:
        if event.action != "published":
            return self._skipped(EventKind.SECURITY_ADVISORY, event.action)

        self._record(EventKind.SECURITY_ADVISORY, payload, event.summary())
        notification = self._notify(
            f"🚨 Security advisory published: {event.security_advisory.summary}"
        )
        return DispatchResult(
            event=EventKind.SECURITY_ADVISORY.value, recorded=True, notification=notification
        )

    def _on_vulnerability_alert(
        self, payload: Mapping[str, Any], event: VulnerabilityAlertEvent
    ) -> DispatchResult:
        kind = EventKind.REPOSITORY_VULNERABILITY_ALERT
        if event.action != "created":
            return self._skipped(kind, event.action)

        self._record(kind, payload, event.summary())
        notification = self._notify(f"🔒 New vulnerability alert for {event.alert.package_name}")
        return DispatchResult(event=kind.value, recorded=True, notification=notification)

    def _on_repository_rename(
        self, payload: Mapping[str, Any], event: RepositoryRenameEvent
    ) -> DispatchResult:
        details = event.summary()
        self._record(EventKind.REPOSITORY_RENAME, payload, details)
        notification = self._notify(
            f"🔄 Repository renamed from {details['oldName']} to {details['newName']} "
            f"({details['fullName']})"
        )
        return DispatchResult(
            event=EventKind.REPOSITORY_RENAME.value, recorded=True, notification=notification
        )

    def _on_deployment_status(
        self, payload: Mapping[str, Any], event: DeploymentStatusEvent
    ) -> DispatchResult:
        details = event.summary()
        self._record(EventKind.DEPLOYMENT_STATUS, payload, details)
        notification = self._notify(
            f"🚀 Deployment status for {details['repository']} in {details['environment']}: "
            f"{details['deploymentStatus']}"
        )
        return DispatchResult(
            event=EventKind.DEPLOYMENT_STATUS.value, recorded=True, notification=notification
        )

    # --- shared steps -------------------------------------------------------

    def _handle(
        self,
        kind: EventKind,
        payload: Mapping[str, Any],
        body: Callable[[Mapping[str, Any], _E], DispatchResult],
    ) -> DispatchResult:
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "Received event payload",
                extra={"event": kind.value, "payload": json.dumps(payload, default=str)},
            )
        try:
            event = parse_event(kind, payload)
            return body(payload, event)  # type: ignore[arg-type]
        except InvalidPayload as e:
            logger.warning(
                "Rejected event payload", extra={"event": kind.value, "reason": e.reason}
            )
            raise
        except DispatchError:
            logger.exception("Error handling event", extra={"event": kind.value})
            raise

    def _record(self, kind: EventKind, payload: Mapping[str, Any], data: dict[str, Any]) -> None:
        self._recorder.record(kind.value, payload)
        self._log_store.append(kind.value, data)
        logger.info("Event logged", extra={"event": kind.value})

    def _notify(self, message: str) -> str:
        self._notifier.notify(message)
        return message

    @staticmethod
    def _skipped(kind: EventKind, action: str) -> DispatchResult:
        logger.info("Ignoring event action", extra={"event": kind.value, "action": action})
        return DispatchResult(event=kind.value, recorded=False)
