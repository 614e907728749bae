"""
Rendering functions for releasesweep output.

The selected releases go to stdout, as a table for people or as JSONL for
other tools. Log lines go to stderr and are not handled here.
"""

from typing import Iterable, List, Optional

from rich import box
from rich.console import Console
from rich.table import Table

from .domain import ReleaseSummary

console = Console()


def render_releases_table(
    releases: List[ReleaseSummary],
    title: Optional[str] = None,
    out: Optional[Console] = None,
) -> None:
    """
    Render the selected releases as a table.

    Args:
        releases: Releases selected for deletion
        title: Optional table title
        out: Console to print to (defaults to stdout)
    """
    out = out or console
    if not releases:
        out.print("[yellow]No releases selected for deletion.[/yellow]")
        return

    table = Table(
        title=title,
        box=box.ROUNDED,
        show_header=True,
        header_style="bold magenta"
    )
    table.add_column("ID", style="dim", justify="right")
    table.add_column("Release", style="cyan")
    table.add_column("Tag", style="green")

    for release in releases:
        table.add_row(str(release.id), release.name, release.tag)

    out.print(table)


def format_releases_jsonl(releases: Iterable[ReleaseSummary]) -> Iterable[str]:
    """Format releases as JSON Lines (one JSON object per line)."""
    for release in releases:
        yield release.to_jsonl()
