"""
Logging and terminal display for the directory.

Uses rich for styled terminal output. Library modules log through the
standard logging module; setup_logging() routes those records to the same
rich console.
"""

import logging
from contextlib import contextmanager
from typing import Iterable, Mapping, Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from .config import LOG_LEVEL


console = Console()

_configured = False

# Display labels for the dashboard stats
STAT_LABELS = {
    "journals": "Medical Journals",
    "resources": "Published Resources",
    "peer_reviewers": "Peer Reviewers",
    "editors": "Editorial Team",
}


def setup_logging(level: Optional[str] = None) -> None:
    """
    Route standard logging through rich.

    Args:
        level: Level name (defaults to LOG_LEVEL from the environment)
    """
    global _configured
    if _configured:
        return

    logging.basicConfig(
        level=(level or LOG_LEVEL),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True, show_path=False)],
    )
    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)
    _configured = True


def print_header(title: str) -> None:
    """Print a styled header."""
    console.print()
    console.print(Panel(title, style="bold magenta"))
    console.print()


def print_warning(message: str) -> None:
    """Print a warning message."""
    console.print(f"  [yellow]![/yellow] {message}")


def print_error(message: str) -> None:
    """Print an error message."""
    console.print(f"  [red]✗[/red] {message}")


def print_stats(counts: Mapping[str, int], error: Optional[str] = None) -> None:
    """Print the dashboard statistics."""
    table = Table(title="By the Numbers", show_header=False)
    table.add_column("Stat", style="dim")
    table.add_column("Value", justify="right")

    for name, value in counts.items():
        label = STAT_LABELS.get(name, name.replace("_", " ").title())
        style = "dim" if error else "green"
        table.add_row(label, f"[{style}]{value:,}[/{style}]")

    console.print(table)

    if error:
        console.print("[dim]Statistics temporarily unavailable.[/dim]")


def print_journals(journals: Iterable, title: str = "Journals") -> None:
    """Print a journal listing."""
    table = Table(title=title)
    table.add_column("Title", style="cyan", no_wrap=False)
    table.add_column("Category")
    table.add_column("Publisher", style="dim")
    table.add_column("ISSN", style="dim")
    table.add_column("Views", justify="right")
    table.add_column("Flags")

    for journal in journals:
        flags = []
        if journal.is_featured:
            flags.append("[yellow]featured[/yellow]")
        if journal.is_indexed:
            flags.append("[green]indexed[/green]")

        table.add_row(
            journal.title,
            journal.category_title,
            journal.publisher,
            journal.issn or "",
            f"{journal.views_count:,}",
            " ".join(flags),
        )

    console.print(table)


def print_categories(categories: Iterable) -> None:
    """Print subject area counts."""
    table = Table(title="Categories")
    table.add_column("Subject Area", style="cyan")
    table.add_column("Journals", justify="right")

    for category in categories:
        table.add_row(category.name, str(category.count))

    console.print(table)


@contextmanager
def status(message: str):
    """Context manager for showing a spinner during an operation."""
    with console.status(message, spinner="dots"):
        yield
