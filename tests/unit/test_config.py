"""Unit tests for settings loading."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from github_event_dispatcher.config import DispatcherSettings
from github_event_dispatcher.factory import build_dispatcher, create_notifier, create_trigger
from github_event_dispatcher.integrations.cicd import GitHubDispatchTrigger, LoggingTrigger
from github_event_dispatcher.integrations.notifier import LoggingNotifier, SlackNotifier

_ENV_VARS = (
    "LOG_LEVEL",
    "DISPATCHER_STATE_PATH",
    "SLACK_WEBHOOK_URL",
    "DISPATCHER_GITHUB_TOKEN",
    "GITHUB_BASE_URL",
    "DISPATCHER_CICD_EVENT_TYPE",
    "DISPATCHER_CICD_TARGET_REPO",
    "DISPATCHER_HTTP_TIMEOUT_SECONDS",
    "DISPATCHER_HOST",
    "DISPATCHER_PORT",
)


@pytest.fixture(autouse=True)
def _clean_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


def test_settings_defaults() -> None:
    settings = DispatcherSettings()

    assert settings.log_level == "INFO"
    assert settings.state_path == Path("dispatcher_state")
    assert settings.audit_log_file == Path("dispatcher_state") / "logs.jsonl"
    assert settings.event_archive_file == Path("dispatcher_state") / "events.jsonl"
    assert settings.slack_webhook_url == ""
    assert settings.github_token == ""
    assert settings.cicd_event_type == "ci-trigger"
    assert settings.port == 8000


def test_settings_loads_from_dotenv(tmp_path: Path) -> None:
    (tmp_path / ".env").write_text(
        "\n".join(
            [
                "LOG_LEVEL=DEBUG",
                "SLACK_WEBHOOK_URL=https://hooks.slack.test/x",
                "DISPATCHER_STATE_PATH=/var/lib/dispatcher",
                "",
            ]
        ),
        encoding="utf-8",
    )

    settings = DispatcherSettings()

    assert settings.log_level == "DEBUG"
    assert settings.slack_webhook_url == "https://hooks.slack.test/x"
    assert settings.audit_log_file == Path("/var/lib/dispatcher/logs.jsonl")


def test_environment_overrides_dotenv(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    (tmp_path / ".env").write_text("DISPATCHER_CICD_EVENT_TYPE=from-file\n", encoding="utf-8")
    monkeypatch.setenv("DISPATCHER_CICD_EVENT_TYPE", "from-env")

    assert DispatcherSettings().cicd_event_type == "from-env"


def test_timeout_must_be_positive(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DISPATCHER_HTTP_TIMEOUT_SECONDS", "0")

    with pytest.raises(ValidationError):
        DispatcherSettings()


def test_factory_falls_back_to_logging_collaborators() -> None:
    settings = DispatcherSettings()

    assert isinstance(create_notifier(settings), LoggingNotifier)
    assert isinstance(create_trigger(settings), LoggingTrigger)


def test_factory_uses_configured_collaborators(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SLACK_WEBHOOK_URL", "https://hooks.slack.test/x")
    monkeypatch.setenv("DISPATCHER_GITHUB_TOKEN", "test-token")
    settings = DispatcherSettings()

    assert isinstance(create_notifier(settings), SlackNotifier)
    assert isinstance(create_trigger(settings), GitHubDispatchTrigger)


def test_build_dispatcher_uses_state_paths(tmp_path: Path) -> None:
    settings = DispatcherSettings(DISPATCHER_STATE_PATH=tmp_path / "state")

    dispatcher = build_dispatcher(settings)

    assert dispatcher.log_store.path == tmp_path / "state" / "logs.jsonl"
