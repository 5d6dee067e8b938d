from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from datetime import datetime
from typing import Optional, Sequence

from .bootstrap import configure_logging
from .domain import EventDraft, PersistenceError, PlantEvent, ValidationError
from .services import ServiceContext
from .services.http import run_local_server

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Plant care watering reminders.")
    subparsers = parser.add_subparsers(dest="command", required=True)

    list_parser = subparsers.add_parser("list", help="Show stored watering events in schedule order.")
    list_parser.add_argument("--upcoming", action="store_true", help="Only show events still in the future.")

    add_parser = subparsers.add_parser("add", help="Create a watering event with a reminder and calendar entry.")
    add_parser.add_argument("--title", required=True)
    add_parser.add_argument("--plant", required=True)
    add_parser.add_argument("--at", dest="scheduled_at", help="ISO-8601 instant; defaults to five minutes from now.")
    add_parser.add_argument("--description", default=None)

    remove_parser = subparsers.add_parser("remove", help="Delete an event and retract its reminder and calendar entry.")
    remove_parser.add_argument("event_id")

    api_parser = subparsers.add_parser("api", help="Start the local HTTP API.")
    api_parser.add_argument("--host", default="127.0.0.1")
    api_parser.add_argument("--port", type=int, default=8000)

    return parser


def format_event(event: PlantEvent) -> str:
    local = event.scheduled_at.astimezone()
    line = f"{event.id}  {local:%Y-%m-%d %H:%M}  {event.title} ({event.plant})"
    if event.description:
        line += f" — {event.description}"
    flags = []
    if not event.notification.is_scheduled:
        flags.append(f"no reminder: {event.notification.reason.value}")
    if not event.calendar_entry.is_scheduled:
        flags.append(f"no calendar entry: {event.calendar_entry.reason.value}")
    if flags:
        line += f"  [{'; '.join(flags)}]"
    return line


def _parse_instant(raw: Optional[str], context: ServiceContext) -> datetime:
    if not raw:
        return context.coordinator.default_scheduled_at()
    return datetime.fromisoformat(raw.replace("Z", "+00:00"))


async def _list(context: ServiceContext, *, upcoming: bool) -> int:
    coordinator = context.coordinator
    await coordinator.initialize()
    events = coordinator.upcoming() if upcoming else coordinator.list()
    if not events:
        print("No events yet. Create one to remember to water your plants.")
    for event in events:
        print(format_event(event))
    return 0


async def _add(context: ServiceContext, args: argparse.Namespace) -> int:
    try:
        scheduled_at = _parse_instant(args.scheduled_at, context)
    except ValueError:
        print(f"Invalid date: {args.scheduled_at}", file=sys.stderr)
        return 2
    draft = EventDraft(title=args.title, plant=args.plant, description=args.description, scheduled_at=scheduled_at)
    try:
        event = await context.coordinator.create(draft)
    except ValidationError as exc:
        print(exc.message, file=sys.stderr)
        return 2
    except PersistenceError as exc:
        print(exc.message, file=sys.stderr)
        return 1
    print(format_event(event))
    return 0


async def _remove(context: ServiceContext, event_id: str) -> int:
    try:
        await context.coordinator.remove(event_id)
    except PersistenceError as exc:
        print(exc.message, file=sys.stderr)
        return 1
    print(f"Removed {event_id}")
    return 0


def main(argv: Optional[Sequence[str]] = None, *, context: Optional[ServiceContext] = None) -> int:
    configure_logging()
    parser = build_parser()
    args = parser.parse_args(argv)
    logger.debug("Plant care CLI command: %s", args.command)

    if args.command == "api":
        run_local_server(host=args.host, port=args.port, context=context)
        return 0

    context = context or ServiceContext()
    if args.command == "list":
        return asyncio.run(_list(context, upcoming=args.upcoming))
    if args.command == "add":
        return asyncio.run(_add(context, args))
    if args.command == "remove":
        return asyncio.run(_remove(context, args.event_id))
    parser.print_help()  # pragma: no cover - argparse enforces choices
    return 2


if __name__ == "__main__":
    sys.exit(main())
