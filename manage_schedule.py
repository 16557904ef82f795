"""
Script to manage the list of scheduled sensables.

Usage:
    python manage_schedule.py add FEED_ID [--name NAME] [--unit UNIT]
    python manage_schedule.py remove ENTRY_ID
    python manage_schedule.py list
    python manage_schedule.py sync

`sync` runs one fetch cycle right away instead of waiting for the
15-minute trigger of `main.py`.
"""

import argparse
import sys

from sensable.app import create_scheduler_app
from sensable.domain.models import ScheduledEntry
from sensable.log.logger import setup_logger
from sensable.storage import create_row_store


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Manage scheduled sensables")
    commands = parser.add_subparsers(dest="command", required=True)

    add = commands.add_parser("add", help="Schedule a feed")
    add.add_argument("feed_id")
    add.add_argument("--name")
    add.add_argument("--unit")

    remove = commands.add_parser("remove", help="Remove a scheduled entry")
    remove.add_argument("entry_id", type=int)

    commands.add_parser("list", help="List scheduled entries")
    commands.add_parser("sync", help="Run one sync cycle now")
    return parser


def main(argv: list[str] | None = None) -> int:
    """Run one management command."""
    args = build_parser().parse_args(argv)

    logger = setup_logger()
    store = create_row_store()
    app = create_scheduler_app(store, logger)

    try:
        if args.command == "add":
            entry = ScheduledEntry(feed_id=args.feed_id, name=args.name, unit=args.unit)
            try:
                app.registry.add(entry)
            except ValueError as e:
                logger.error("Cannot schedule feed: %s", e)
                return 1
            logger.info("Scheduled feed %s as entry %s", entry.feed_id, entry.id)

        elif args.command == "remove":
            if not app.registry.remove(args.entry_id):
                logger.error("No scheduled entry with id %s", args.entry_id)
                return 1
            logger.info("Removed scheduled entry %s", args.entry_id)

        elif args.command == "list":
            for entry in app.registry.list_all():
                sample = (
                    f"{entry.sample.value} {entry.unit or ''} @ {entry.sample.timestamp}"
                    if entry.sample
                    else "no sample"
                )
                pending = " (pending)" if entry.is_pending else ""
                logger.info("[%s] %s %s: %s%s", entry.id, entry.feed_id, entry.name or "", sample, pending)
            logger.info(
                "Total: %d, pending: %d",
                app.registry.count_all(),
                app.registry.count_pending(),
            )

        elif args.command == "sync":
            stats = app.sync_service.run_cycle()
            logger.info(
                "Total: %d, updated: %d, unchanged: %d, failed: %d",
                stats["total"],
                stats["updated"],
                stats["unchanged"],
                stats["failed"],
            )
    finally:
        store.close()

    return 0


if __name__ == "__main__":
    sys.exit(main())
