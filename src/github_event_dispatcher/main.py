"""CLI entrypoint for the event dispatcher.

Subcommands:
- serve: run the webhook HTTP server
- dispatch: dispatch one payload file (useful for replaying a delivery)
- logs: print recent audit log records
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from pydantic import ValidationError

from github_event_dispatcher import __version__
from github_event_dispatcher.config import DispatcherSettings
from github_event_dispatcher.errors import DispatchError
from github_event_dispatcher.events.models import EventKind
from github_event_dispatcher.factory import build_dispatcher
from github_event_dispatcher.logging import configure_logging
from github_event_dispatcher.storage.log_store import AuditLogStore

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="github-event-dispatcher",
        description="Record, notify and trigger CI/CD for GitHub webhook events",
    )
    parser.add_argument(
        "--version", action="version", version=f"github-event-dispatcher {__version__}"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    serve = subparsers.add_parser("serve", help="Run the webhook HTTP server")
    serve.add_argument(
        "--host", default=None, help="Bind address (defaults to DISPATCHER_HOST)"
    )
    serve.add_argument(
        "--port", type=int, default=None, help="Bind port (defaults to DISPATCHER_PORT)"
    )

    dispatch = subparsers.add_parser("dispatch", help="Dispatch a single JSON payload file")
    dispatch.add_argument(
        "--event",
        required=True,
        choices=[kind.value for kind in EventKind],
        help="Event kind of the payload",
    )
    dispatch.add_argument(
        "--payload",
        required=True,
        type=Path,
        help="Path to a JSON file holding the webhook payload",
    )

    logs = subparsers.add_parser("logs", help="Print the most recent audit log records")
    logs.add_argument(
        "--limit",
        type=int,
        default=20,
        help="Number of records to print",
    )

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = DispatcherSettings()
    except ValidationError as e:
        # Logging isn't configured yet; keep it simple and actionable.
        print("Configuration error (check your .env):", file=sys.stderr)
        print(e, file=sys.stderr)
        return 2

    configure_logging(settings.log_level)

    if args.command == "serve":
        import uvicorn

        from github_event_dispatcher.server.app import create_app

        uvicorn.run(
            create_app(settings),
            host=args.host or settings.host,
            port=args.port or settings.port,
            log_config=None,
        )
        return 0

    if args.command == "dispatch":
        try:
            payload = json.loads(args.payload.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            print(f"Could not read payload {args.payload}: {e}", file=sys.stderr)
            return 2

        dispatcher = build_dispatcher(settings)
        try:
            result = dispatcher.dispatch(args.event, payload)
        except DispatchError as e:
            print(f"Dispatch failed: {e}", file=sys.stderr)
            return 1
        finally:
            dispatcher.close()

        print(json.dumps(result.to_json(), ensure_ascii=False))
        return 0

    if args.command == "logs":
        store = AuditLogStore(settings.audit_log_file)
        for record in store.tail(args.limit):
            print(json.dumps(record.model_dump(mode="json"), ensure_ascii=False))
        return 0

    parser.error(f"Unknown command: {args.command}")
    return 2


if __name__ == "__main__":
    raise SystemExit(main())
