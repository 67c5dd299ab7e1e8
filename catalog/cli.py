"""
CLI entry point for the journal directory.

This is where .env is loaded for command-line use.
All other modules access environment variables via os.environ.

Usage:
    medjournals stats
    medjournals journals --featured --sort-by views_count --descending
    medjournals journals --category Cardiology --limit 20
    medjournals categories
    medjournals journal <journal-id>
"""

import argparse
import asyncio
import sys

# Load .env BEFORE importing other modules
from dotenv import load_dotenv
load_dotenv()

from .config import DEFAULT_JOURNAL_SORT, DEFAULT_JOURNAL_STATUS
from .fetch_state import FetchState
from .journals import (
    JournalCategoriesReader,
    JournalDetailReader,
    JournalListingOptions,
    journal_listing_reader,
)
from .postgrest import PostgrestQueryService
from .query import QueryConstructionError, QueryService
from .stats import AggregateStatsReader
from . import logger


def _report_failure(state: FetchState) -> int:
    logger.print_error(f"Request failed: {state.error}")
    return 1


async def cmd_stats(service: QueryService, args) -> int:
    """Show the dashboard statistics."""
    reader = AggregateStatsReader(service)

    with logger.status("Loading statistics..."):
        state = await reader.fetch()

    logger.print_stats(state.data.as_dict(), error=state.error)
    if state.is_failed:
        return _report_failure(state)
    return 0


async def cmd_journals(service: QueryService, args) -> int:
    """List journals."""
    options = JournalListingOptions(
        featured_only=args.featured,
        category=args.category,
        status=args.status or None,
        limit=args.limit,
        sort_by=args.sort_by,
        ascending=not args.descending,
    )
    reader = journal_listing_reader(service, options)

    with logger.status("Loading journals..."):
        state = await reader.fetch()

    if state.is_failed:
        return _report_failure(state)

    if not state.data:
        logger.print_warning("No journals match these filters")
        return 0

    title = "Featured Journals" if args.featured else "Journals"
    logger.print_journals(state.data, title=f"{title} ({len(state.data)})")
    return 0


async def cmd_categories(service: QueryService, args) -> int:
    """List subject areas with journal counts."""
    reader = JournalCategoriesReader(service)

    with logger.status("Loading categories..."):
        state = await reader.fetch()

    if state.is_failed:
        return _report_failure(state)

    logger.print_categories(state.data)
    return 0


async def cmd_journal(service: QueryService, args) -> int:
    """Show one journal."""
    reader = JournalDetailReader(service, args.journal_id)

    with logger.status("Loading journal..."):
        state = await reader.fetch()

    if state.is_failed:
        return _report_failure(state)

    journal = state.data
    logger.print_header(journal.get("full_title") or args.journal_id)
    for key in ("acronym", "issn_print", "issn_online", "language", "publication_frequency", "website_url"):
        if journal.get(key):
            logger.console.print(f"  [dim]{key}:[/dim] {journal[key]}")

    team = [m for m in journal.get("editorial_team") or [] if m.get("is_active")]
    if team:
        logger.console.print(f"\n  [bold]Editorial team ({len(team)})[/bold]")
        for member in team:
            person = member.get("person") or {}
            logger.console.print(f"    {person.get('full_name') or 'Unknown'} [dim]{member.get('role') or ''}[/dim]")
    return 0


COMMANDS = {
    "stats": cmd_stats,
    "journals": cmd_journals,
    "categories": cmd_categories,
    "journal": cmd_journal,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Medical journal directory - read-only catalog queries",
    )
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Stats command
    subparsers.add_parser(
        "stats",
        help="Show dashboard statistics",
    )

    # Journals command
    journals_parser = subparsers.add_parser(
        "journals",
        help="List journals",
    )
    journals_parser.add_argument(
        "--featured",
        action="store_true",
        help="Only featured journals",
    )
    journals_parser.add_argument(
        "--category",
        help="Filter by subject area",
    )
    journals_parser.add_argument(
        "--status",
        default=DEFAULT_JOURNAL_STATUS,
        help=f"Filter by journal status (default: {DEFAULT_JOURNAL_STATUS}, empty for any)",
    )
    journals_parser.add_argument(
        "--sort-by",
        default=DEFAULT_JOURNAL_SORT,
        help=f"Column to sort by (default: {DEFAULT_JOURNAL_SORT})",
    )
    journals_parser.add_argument(
        "--descending",
        action="store_true",
        help="Sort descending",
    )
    journals_parser.add_argument(
        "--limit",
        type=int,
        metavar="N",
        help="Return at most N journals",
    )

    # Categories command
    subparsers.add_parser(
        "categories",
        help="List subject areas with journal counts",
    )

    # Journal detail command
    journal_parser = subparsers.add_parser(
        "journal",
        help="Show one journal",
    )
    journal_parser.add_argument("journal_id", help="Journal ID")

    return parser


async def main(argv=None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    command = COMMANDS.get(args.command)
    if command is None:
        parser.print_help()
        return 0

    logger.setup_logging()

    try:
        remote = PostgrestQueryService.from_env()
    except ValueError as e:
        logger.print_error(str(e))
        return 2

    async with remote as service:
        try:
            return await command(service, args)
        except QueryConstructionError as e:
            logger.print_error(f"Invalid query: {e}")
            return 2


def run():
    """Synchronous entry point."""
    sys.exit(asyncio.run(main()))


if __name__ == "__main__":
    run()
