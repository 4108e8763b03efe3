"""Terminal client driving the same search controller the HTTP app uses."""
from __future__ import annotations

import argparse
import asyncio
from dataclasses import replace
from pathlib import Path
from typing import Iterable

from placesearch.config import Settings, settings
from placesearch.controller import MAX_FETCH_LIMIT, MIN_FETCH_LIMIT, QueryController
from placesearch.errors import ConfigurationError
from placesearch.fetcher import PlaceFetcher
from placesearch.http_client import create_client
from placesearch.logs import configure_logging
from placesearch.models import RequestState, SearchSnapshot

GREEN = "\033[92m"
RED = "\033[91m"
DIM = "\033[2m"
RESET = "\033[0m"

HELP = """Type a city prefix to search. Commands:
  :size N    items per page        :limit N   API fetch limit (1-10)
  :page N    jump to page N        :next / :prev
  :search    search immediately    exit       quit"""


def pretty_print_snapshot(snapshot: SearchSnapshot) -> None:
    view = snapshot.page_view
    if snapshot.error:
        print(f"{RED}{snapshot.error}{RESET}")
    elif snapshot.message:
        print(f"{DIM}{snapshot.message}{RESET}")
    for idx, place in enumerate(view.items, start=1):
        print(f"  {idx:02d}. {place.name} | {place.country} ({place.countryCode})")
    color = GREEN if view.total_items else DIM
    print(
        f"{color}page {view.page_number}/{view.total_pages}{RESET} | "
        f"results: {view.total_items} | page size: {snapshot.page_size} | limit: {snapshot.fetch_limit}"
    )


def _print_progress(snapshot: SearchSnapshot) -> None:
    if snapshot.request_state is RequestState.IN_FLIGHT:
        print(f"{DIM}searching {snapshot.query!r}...{RESET}")


def _parse_number(argument: str) -> int | None:
    try:
        return int(argument)
    except ValueError:
        print(f"{RED}Not a number: {argument!r}{RESET}")
        return None


async def run_command(controller: QueryController, line: str) -> bool:
    """Apply one REPL line; returns False when the user asked to quit."""
    command, _, argument = line.partition(" ")
    if line.lower() in {"exit", "quit"}:
        return False
    if command in {":size", ":limit", ":page"}:
        value = _parse_number(argument.strip())
        if value is None:
            return True
        if command == ":size":
            controller.on_page_size_change(value)
        elif command == ":limit":
            if not controller.on_fetch_limit_change(value):
                print(f"{DIM}fetch limit unchanged{RESET}")
        else:
            controller.on_page_request(value)
    elif command == ":next":
        controller.next_page()
    elif command == ":prev":
        controller.previous_page()
    elif command == ":search":
        await controller.submit()
    elif command in {":help", "?"}:
        print(HELP)
        return True
    else:
        controller.on_query_change(line)
    await controller.join()
    pretty_print_snapshot(controller.snapshot())
    return True


async def interactive_shell(controller: QueryController) -> None:
    print(HELP)
    unsubscribe = controller.subscribe(_print_progress)
    try:
        while True:
            try:
                line = await asyncio.to_thread(input, "> ")
            except (EOFError, KeyboardInterrupt):
                print()
                return
            if not line.strip():
                continue
            if not await run_command(controller, line.strip()):
                return
    finally:
        unsubscribe()


async def one_shot(controller: QueryController, query: str, all_pages: bool) -> None:
    controller.on_query_change(query)
    snapshot = await controller.submit()
    pretty_print_snapshot(snapshot)
    while all_pages and snapshot.page_view.has_next():
        controller.next_page()
        snapshot = controller.snapshot()
        pretty_print_snapshot(snapshot)


async def batch_mode(controller: QueryController, file_path: Path) -> None:
    with file_path.open("r", encoding="utf-8") as fh:
        for line in fh:
            query = line.strip()
            if not query:
                continue
            print(f"Query: {query}")
            await one_shot(controller, query, all_pages=False)


def _fetch_limit(value: str) -> int:
    limit = int(value)
    if not MIN_FETCH_LIMIT <= limit <= MAX_FETCH_LIMIT:
        raise argparse.ArgumentTypeError(f"must be between {MIN_FETCH_LIMIT} and {MAX_FETCH_LIMIT}")
    return limit


def _page_size(value: str) -> int:
    size = int(value)
    if size < 1:
        raise argparse.ArgumentTypeError("must be at least 1")
    return size


async def _run(args: argparse.Namespace, config: Settings) -> None:
    if args.limit is not None:
        config = replace(config, default_fetch_limit=args.limit)
    if args.page_size is not None:
        config = replace(config, default_page_size=args.page_size)
    async with create_client(config) as client:
        controller = QueryController.from_settings(PlaceFetcher(client, config), config)
        try:
            if args.batch:
                await batch_mode(controller, args.batch)
            elif args.query:
                await one_shot(controller, args.query, args.all_pages)
            else:
                await interactive_shell(controller)
        finally:
            await controller.aclose()


def main(argv: Iterable[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="CLI client for the place search")
    parser.add_argument("query", nargs="?", help="City name prefix. If omitted, starts REPL mode.")
    parser.add_argument("--batch", type=Path, help="File with queries to execute line by line")
    parser.add_argument("--limit", type=_fetch_limit, help="API fetch limit (1-10)")
    parser.add_argument("--page-size", type=_page_size, help="Items shown per page")
    parser.add_argument("--all-pages", action="store_true", help="Print every page of a one-shot query")
    args = parser.parse_args(list(argv) if argv is not None else None)

    configure_logging(settings.log_level)
    try:
        settings.require_api()
    except ConfigurationError as exc:
        parser.error(str(exc))
    asyncio.run(_run(args, settings))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
