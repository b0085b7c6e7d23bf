#!/usr/bin/env python3
"""Programmatic dispatch example.

This demonstrates using the dispatcher components directly:

* load settings from `.env`
* dispatch one webhook payload read from a JSON file
* print the audit log records written so far

Event kind is passed as an argument (GitHub sends it in `X-GitHub-Event`).
"""

from __future__ import annotations

import argparse
import json
from pathlib import Path
from typing import Sequence

from github_event_dispatcher.config import DispatcherSettings
from github_event_dispatcher.errors import DispatchError
from github_event_dispatcher.events.models import EventKind
from github_event_dispatcher.factory import build_dispatcher
from github_event_dispatcher.logging import configure_logging


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Dispatch a webhook payload (example).")
    parser.add_argument(
        "--event",
        required=True,
        choices=[kind.value for kind in EventKind],
        help="Event kind, e.g. push",
    )
    parser.add_argument("--payload", required=True, type=Path, help="Path to a JSON payload")
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(argv)

    settings = DispatcherSettings()
    configure_logging(settings.log_level)

    dispatcher = build_dispatcher(settings)
    payload = json.loads(args.payload.read_text(encoding="utf-8"))

    try:
        result = dispatcher.dispatch(args.event, payload)
    except DispatchError as e:
        print(f"Dispatch failed: {e}")
        return 1

    print(f"Dispatched {result.event}: recorded={result.recorded} notified={result.notified}")
    for record in dispatcher.log_store.tail(5):
        print(f"  {record.timestamp} {record.event} {record.data}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
