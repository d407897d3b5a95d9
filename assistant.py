# assistant.py
"""
Manage nickname routines from the command line.

    python assistant.py list
    python assistant.py show NAME
    python assistant.py save NAME FILE|-
    python assistant.py rename OLD NEW FILE|-
    python assistant.py delete NAME
"""

import argparse
import asyncio
import logging
import sys

from config import Config
from core.event_bus import EventBus
from events.events import RoutineRemoved, RoutineSaved
from routines.models import RoutineDraft, draft_from_definition
from routines.offline import OfflineParser, OfflineRegistry
from routines.registry_client import RegistryClient
from routines.synchronizer import RoutineSynchronizer
from voice.command_parser import CommandParser

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Nickname routine manager")
    sub = ap.add_subparsers(dest="command", required=True)
    sub.add_parser("list", help="list registered routines")
    show = sub.add_parser("show", help="print a routine as editable text")
    show.add_argument("name")
    save = sub.add_parser("save", help="create or update a routine")
    save.add_argument("name")
    save.add_argument("intents", help="file with one command per line, or - for stdin")
    rename = sub.add_parser("rename", help="rename a routine and replace its commands")
    rename.add_argument("old")
    rename.add_argument("new")
    rename.add_argument("intents", help="file with one command per line, or - for stdin")
    delete = sub.add_parser("delete", help="delete a routine")
    delete.add_argument("name")
    return ap


def read_intents(source: str) -> str:
    if source == "-":
        return sys.stdin.read()
    with open(source, "r") as f:
        return f.read()


async def run(args, sync: RoutineSynchronizer) -> int:
    await sync.load()

    if args.command == "list":
        for name, routine in sorted(sync.registered_nicknames.items()):
            print(f"{name}: {len(routine.contexts)} actions")
        return 0

    if args.command == "show":
        routine = sync.registered_nicknames.get(args.name)
        if routine is None:
            print(f"No routine named {args.name!r}", file=sys.stderr)
            return 1
        print(draft_from_definition(routine).intents, end="")
        return 0

    if args.command == "save":
        previous = args.name if args.name in sync.registered_nicknames else None
        result = await sync.update_nickname(
            RoutineDraft(nickname=args.name, intents=read_intents(args.intents)), previous)
    elif args.command == "rename":
        result = await sync.update_nickname(
            RoutineDraft(nickname=args.new, intents=read_intents(args.intents)), args.old)
    else:
        result = await sync.update_nickname(None, args.name)

    if result is not True:
        print(result["error"], file=sys.stderr)
        return 1
    return 0


async def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    config = Config.get_config()
    logging.basicConfig(level=config.get("log_level", "INFO"))

    bus = EventBus()
    bus.subscribe(RoutineSaved, lambda ev: logger.info("Saved %s", ev.name))
    bus.subscribe(RoutineRemoved, lambda ev: logger.info("Removed %s", ev.name))

    if config.get("dev_offline", False):
        logger.warning("dev_offline is set; routines live in memory only")
        return await run(args, RoutineSynchronizer(OfflineRegistry(), OfflineParser(), bus=bus))

    async with CommandParser.from_config() as parser:
        sync = RoutineSynchronizer(RegistryClient.from_config(), parser, bus=bus)
        return await run(args, sync)


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
