"""Pydantic models for the webhook payloads the dispatcher understands.

Parsing a raw payload into its kind's model is the validation step: a payload
either narrows into a fully typed variant or fails with `InvalidPayload`
naming the first missing (or mistyped) field. Unknown fields are ignored.

Each variant exposes `summary()`, the normalized record persisted to the
audit log.
"""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError

from github_event_dispatcher.errors import InvalidPayload

BRANCH_REF_PREFIX = "refs/heads/"

SENSITIVE_FILES: frozenset[str] = frozenset(
    {".env", "config.json", "secrets.yaml", "credentials.json"}
)


class EventKind(str, Enum):
    PUSH = "push"
    PULL_REQUEST = "pull_request"
    ISSUE_COMMENT = "issue_comment"
    SECURITY_ADVISORY = "security_advisory"
    REPOSITORY_VULNERABILITY_ALERT = "repository_vulnerability_alert"
    REPOSITORY_RENAME = "repository_rename"
    DEPLOYMENT_STATUS = "deployment_status"


class _Model(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class Repository(_Model):
    full_name: str


class User(_Model):
    login: str


class GitRef(_Model):
    ref: str


# --- push -------------------------------------------------------------------


class Commit(_Model):
    # Commits are logged as received, so keep every field GitHub sends.
    model_config = ConfigDict(extra="allow")

    added: list[str] = Field(default_factory=list)
    modified: list[str] = Field(default_factory=list)


class Pusher(_Model):
    name: str


class PushEvent(_Model):
    ref: str
    commits: list[Commit]
    repository: Repository
    pusher: Pusher
    after: str

    @property
    def branch(self) -> str:
        """The ref with a leading `refs/heads/` removed (tags and other refs pass through)."""

        if self.ref.startswith(BRANCH_REF_PREFIX):
            return self.ref[len(BRANCH_REF_PREFIX) :]
        return self.ref

    def touched_files(self) -> set[str]:
        """Union of added and modified paths across every commit."""

        files: set[str] = set()
        for commit in self.commits:
            files.update(commit.added)
            files.update(commit.modified)
        return files

    def has_sensitive_changes(self) -> bool:
        return not SENSITIVE_FILES.isdisjoint(self.touched_files())

    def summary(self) -> dict[str, Any]:
        return {
            "branch": self.branch,
            "repository": self.repository.full_name,
            "commits": [commit.model_dump(mode="json") for commit in self.commits],
        }


# --- pull_request -----------------------------------------------------------


class PullRequest(_Model):
    number: int
    title: str
    base: GitRef
    head: GitRef
    user: User
    merged: bool | None = None


class PullRequestEvent(_Model):
    action: str
    pull_request: PullRequest
    repository: Repository

    @property
    def is_merged(self) -> bool:
        return bool(self.pull_request.merged)

    def summary(self) -> dict[str, Any]:
        pr = self.pull_request
        return {
            "number": pr.number,
            "title": pr.title,
            "base": pr.base.ref,
            "head": pr.head.ref,
            "author": pr.user.login,
            "repository": self.repository.full_name,
        }


# --- issue_comment ----------------------------------------------------------


class Comment(_Model):
    body: str
    user: User


class Issue(_Model):
    number: int


class IssueCommentEvent(_Model):
    action: str
    comment: Comment
    issue: Issue
    repository: Repository

    def summary(self) -> dict[str, Any]:
        return {
            "issue": self.issue.number,
            "repository": self.repository.full_name,
            "comment": self.comment.body,
        }


# --- security_advisory ------------------------------------------------------


class SecurityAdvisory(_Model):
    summary: str


class SecurityAdvisoryEvent(_Model):
    action: str
    security_advisory: SecurityAdvisory
    repository: Repository

    def summary(self) -> dict[str, Any]:
        return {
            "summary": self.security_advisory.summary,
            "repository": self.repository.full_name,
        }


# --- repository_vulnerability_alert -----------------------------------------


class VulnerabilityAlert(_Model):
    # Older payloads use `package_name`; current GitHub sends `affected_package_name`.
    package_name: str = Field(
        validation_alias=AliasChoices("package_name", "affected_package_name")
    )


class VulnerabilityAlertEvent(_Model):
    action: str
    alert: VulnerabilityAlert
    repository: Repository

    def summary(self) -> dict[str, Any]:
        return {
            "package": self.alert.package_name,
            "repository": self.repository.full_name,
        }


# --- repository_rename ------------------------------------------------------


class _PreviousValue(_Model):
    from_: str = Field(alias="from")


class _RepositoryNameChange(_Model):
    name: _PreviousValue


class _RenameChanges(_Model):
    repository: _RepositoryNameChange


class RenamedRepository(_Model):
    name: str
    full_name: str


class RepositoryRenameEvent(_Model):
    changes: _RenameChanges
    repository: RenamedRepository

    @property
    def old_name(self) -> str:
        return self.changes.repository.name.from_

    def summary(self) -> dict[str, Any]:
        return {
            "oldName": self.old_name,
            "newName": self.repository.name,
            "fullName": self.repository.full_name,
        }


# --- deployment_status ------------------------------------------------------


class DeploymentStatus(_Model):
    state: str


class Deployment(_Model):
    environment: str


class DeploymentStatusEvent(_Model):
    deployment_status: DeploymentStatus
    deployment: Deployment
    repository: Repository

    def summary(self) -> dict[str, Any]:
        return {
            "repository": self.repository.full_name,
            "environment": self.deployment.environment,
            "deploymentStatus": self.deployment_status.state,
        }


EventPayload = (
    PushEvent
    | PullRequestEvent
    | IssueCommentEvent
    | SecurityAdvisoryEvent
    | VulnerabilityAlertEvent
    | RepositoryRenameEvent
    | DeploymentStatusEvent
)

_MODELS: dict[EventKind, type[_Model]] = {
    EventKind.PUSH: PushEvent,
    EventKind.PULL_REQUEST: PullRequestEvent,
    EventKind.ISSUE_COMMENT: IssueCommentEvent,
    EventKind.SECURITY_ADVISORY: SecurityAdvisoryEvent,
    EventKind.REPOSITORY_VULNERABILITY_ALERT: VulnerabilityAlertEvent,
    EventKind.REPOSITORY_RENAME: RepositoryRenameEvent,
    EventKind.DEPLOYMENT_STATUS: DeploymentStatusEvent,
}

# X-GitHub-Event header values that map directly onto a kind.
_HEADER_ALIASES: dict[str, EventKind] = {
    "vulnerability_alert": EventKind.REPOSITORY_VULNERABILITY_ALERT,
    **{kind.value: kind for kind in EventKind},
}


def _describe(error: ValidationError) -> str:
    first = error.errors()[0]
    path = ".".join(str(part) for part in first["loc"]) or "payload"
    if first["type"] == "missing":
        return f"{path} is required"
    return f"{path}: {first['msg']}"


def parse_event(kind: EventKind, payload: object) -> EventPayload:
    """Validate a raw payload into the model for `kind`.

    Raises:
        InvalidPayload: if the payload is not a mapping or lacks a required field.
    """

    if not isinstance(payload, Mapping):
        raise InvalidPayload("payload must be a JSON object", event=kind.value)

    model = _MODELS[kind]
    try:
        return model.model_validate(dict(payload))  # type: ignore[return-value]
    except ValidationError as exc:
        raise InvalidPayload(_describe(exc), event=kind.value) from exc


def resolve_event_kind(name: str, payload: Mapping[str, Any] | None = None) -> EventKind | None:
    """Map a GitHub event name (the `X-GitHub-Event` header) to a supported kind.

    GitHub reports renames as a `repository` event with action `renamed`.
    Returns None for events the dispatcher does not handle.
    """

    normalized = name.strip().lower()
    if normalized == "repository":
        action = payload.get("action") if isinstance(payload, Mapping) else None
        return EventKind.REPOSITORY_RENAME if action == "renamed" else None
    return _HEADER_ALIASES.get(normalized)
