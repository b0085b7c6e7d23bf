"""GitHub event dispatcher.

Receives GitHub webhook payloads and, per event kind:
- records the raw event and a normalized audit log entry
- optionally notifies a chat channel
- for pushes, triggers a downstream CI/CD pipeline
"""

__version__ = "0.1.0"

from github_event_dispatcher.config import DispatcherSettings

__all__ = ["__version__", "DispatcherSettings"]
