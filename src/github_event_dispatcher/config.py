"""Configuration for the event dispatcher.

Configuration is loaded from:
- environment variables
- and a local `.env` file (if present)

Every collaborator is optional: without a Slack webhook URL notifications are
only logged, and without a GitHub token CI/CD triggers are only logged. This
keeps the dispatcher usable locally without external credentials.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class DispatcherSettings(BaseSettings):
    """Settings for the dispatcher, its collaborators and the HTTP server.

    Notes:
        Pydantic-settings supports overriding the env file in tests via:
        `DispatcherSettings(_env_file=path_to_env)`.
    """

    log_level: str = Field(
        default="INFO",
        validation_alias="LOG_LEVEL",
        description="Root logging level",
    )

    state_path: Path = Field(
        default=Path("dispatcher_state"),
        validation_alias="DISPATCHER_STATE_PATH",
        description="Directory holding the audit log and the raw event archive",
    )

    slack_webhook_url: str = Field(
        default="",
        validation_alias="SLACK_WEBHOOK_URL",
        description="Slack incoming-webhook URL. Empty means notifications are only logged.",
    )

    github_token: str = Field(
        default="",
        validation_alias="DISPATCHER_GITHUB_TOKEN",
        description="GitHub token used to send repository_dispatch CI/CD triggers",
    )
    github_base_url: str = Field(
        default="https://api.github.com",
        validation_alias="GITHUB_BASE_URL",
        description="GitHub API base URL (useful for GitHub Enterprise)",
    )

    cicd_event_type: str = Field(
        default="ci-trigger",
        validation_alias="DISPATCHER_CICD_EVENT_TYPE",
        description="event_type sent with the repository_dispatch CI/CD trigger",
    )
    cicd_target_repo: str = Field(
        default="",
        validation_alias="DISPATCHER_CICD_TARGET_REPO",
        description=(
            "Repository ('owner/repo') that receives CI/CD triggers. "
            "Empty means the repository that was pushed to."
        ),
    )

    http_timeout_seconds: float = Field(
        default=10.0,
        gt=0,
        validation_alias="DISPATCHER_HTTP_TIMEOUT_SECONDS",
        description="Timeout (seconds) for outbound notification requests",
    )

    host: str = Field(default="127.0.0.1", validation_alias="DISPATCHER_HOST")
    port: int = Field(default=8000, ge=1, le=65535, validation_alias="DISPATCHER_PORT")

    model_config = SettingsConfigDict(
        env_prefix="",
        env_file=".env",
        extra="ignore",
    )

    @property
    def audit_log_file(self) -> Path:
        """Path of the append-only normalized audit log."""

        return self.state_path / "logs.jsonl"

    @property
    def event_archive_file(self) -> Path:
        """Path where raw event payloads are archived by the recorder."""

        return self.state_path / "events.jsonl"
