"""External collaborators the dispatcher calls but does not own."""

from github_event_dispatcher.integrations.cicd import (
    CICDJob,
    CICDTrigger,
    GitHubDispatchTrigger,
    LoggingTrigger,
)
from github_event_dispatcher.integrations.notifier import (
    LoggingNotifier,
    Notifier,
    SlackNotifier,
)
from github_event_dispatcher.integrations.recorder import EventRecorder

__all__ = [
    "CICDJob",
    "CICDTrigger",
    "EventRecorder",
    "GitHubDispatchTrigger",
    "LoggingNotifier",
    "LoggingTrigger",
    "Notifier",
    "SlackNotifier",
]
