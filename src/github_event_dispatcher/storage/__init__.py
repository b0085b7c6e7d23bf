"""Local persistence for the dispatcher's audit trail."""

from github_event_dispatcher.storage.log_store import AuditLogStore, LogRecord

__all__ = ["AuditLogStore", "LogRecord"]
