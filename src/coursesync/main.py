#!/usr/bin/env python3

# ruff: noqa: T201

from __future__ import annotations

import argparse
import logging
import sys
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from coursesync.app import (
    catalog_stats,
    delete_content_version,
    push_content_version,
    reconcile_sheet,
    update_content_version,
    watch_changes,
)
from coursesync.config import configure_logging

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from coursesync.domain.push_back import PushOutcome

log = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="coursesync",
        description="Synchronise the course content sheet with the catalog database",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log at DEBUG level")
    subparsers = parser.add_subparsers(dest="command", required=True)

    reconcile = subparsers.add_parser(
        "reconcile",
        help="Reconcile every sheet row into the catalog",
    )
    reconcile.add_argument(
        "--push-back",
        action="store_true",
        help="Push content versions created by the run back to the sheet",
    )

    push = subparsers.add_parser("push-version", help="Push one content version to the sheet")
    push.add_argument("version_code", help="Display code, e.g. ACM-M1-INT-v1.0")

    update = subparsers.add_parser(
        "update-version",
        help="Update a content version and push the change to the sheet",
    )
    update.add_argument("version_code", help="Display code of the version to update")
    update.add_argument("--status", type=str, help="New status")
    update.add_argument("--link", type=str, help="New drive link")
    update.add_argument("--notes", type=str, help="New notes")

    delete = subparsers.add_parser(
        "delete-version",
        help="Delete a content version and remove its row from the sheet",
    )
    delete.add_argument("version_code", help="Display code of the version to delete")

    subparsers.add_parser("stats", help="Print record counts per catalog table")

    watch = subparsers.add_parser(
        "watch",
        help="Push every committed content-version change to the sheet until interrupted",
    )
    watch.add_argument(
        "--skip-backlog",
        action="store_true",
        help="Ignore changes recorded before the watcher started",
    )

    return parser.parse_args(list(argv))


def _validate(args: argparse.Namespace) -> None:
    if args.command == "update-version" and all(
        value is None for value in (args.status, args.link, args.notes)
    ):
        raise ValueError("update-version needs at least one of --status, --link or --notes")
    code = getattr(args, "version_code", None)
    if code is not None and not code.strip():
        raise ValueError("Version code must not be blank")
    status = getattr(args, "status", None)
    if status is not None and not status.strip():
        raise ValueError("--status must not be blank")


def _report_pushes(pushes: Sequence[PushOutcome]) -> bool:
    failed = False
    for outcome in pushes:
        status = "ok" if outcome.pushed else f"FAILED ({outcome.error})"
        print(f"push {outcome.event.kind} {outcome.event.version_code}: {status}")
        failed = failed or not outcome.pushed
    return failed


def _run(args: argparse.Namespace) -> int:
    if args.command == "reconcile":
        result = reconcile_sheet(push_back=args.push_back)
        for line in result.summary.describe():
            print(line)
        summary = result.summary
        print(f"content versions: created={summary.created} skipped={summary.skipped}")
        return 1 if _report_pushes(result.pushes) else 0

    if args.command == "push-version":
        outcome = push_content_version(args.version_code)
        return 1 if _report_pushes([outcome]) else 0

    if args.command == "update-version":
        change = update_content_version(
            args.version_code,
            status=args.status,
            drive_link=args.link,
            notes=args.notes,
        )
        print(f"updated {change.snapshot.version_code} (status={change.snapshot.status})")
        return 1 if _report_pushes(change.pushes) else 0

    if args.command == "delete-version":
        change = delete_content_version(args.version_code)
        print(f"deleted {change.snapshot.version_code}")
        return 1 if _report_pushes(change.pushes) else 0

    if args.command == "watch":
        stats = watch_changes(skip_backlog=args.skip_backlog)
        print(
            f"relayed={stats.relayed} pushed={stats.pushed} "
            f"push_failures={stats.push_failures} skipped={stats.skipped}"
        )
        return 1 if stats.push_failures else 0

    if args.command == "stats":
        for entity_type, count in catalog_stats().items():
            print(f"{entity_type}: {count}")
        return 0

    raise ValueError(f"Unsupported command: {args.command}")


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    try:
        parsed_args = _parse_args(args_list)
        _validate(parsed_args)
    except ValueError:
        log.exception("CLI validation error")
        sys.exit(2)

    configure_logging(level=logging.DEBUG if parsed_args.verbose else logging.INFO)

    try:
        exit_code = _run(parsed_args)
    except Exception:
        log.exception("Fatal error during %s", parsed_args.command)
        sys.exit(1)
    if exit_code:
        sys.exit(exit_code)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    """Console-script entry point: load ``.env``, install the SIGINT handler, run."""
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
