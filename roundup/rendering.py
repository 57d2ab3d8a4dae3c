"""Console rendering of extracted issues."""

from __future__ import annotations

from collections.abc import Sequence

from rich.console import Console
from rich.table import Table

from roundup.data_types import IssueRecord, ScoredCandidate


def issues_table(records: Sequence[IssueRecord], title: str | None = None) -> Table:
    """Build a table with one row per issue."""
    table = Table(title=title)
    for name, heading in IssueRecord.columns():
        table.add_column(heading, justify="right" if name == "title" else "left")
    for record in records:
        table.add_row(*record.row())
    return table


def candidates_table(matches: Sequence[ScoredCandidate]) -> Table:
    """Build a table of matched titles with their scores."""
    table = Table()
    table.add_column("#", justify="right")
    table.add_column("Title")
    table.add_column("Score", justify="right")
    table.add_column("URL")
    for number, match in enumerate(matches, start=1):
        table.add_row(
            str(number),
            match.candidate.display_name,
            f"{match.score:.0f}",
            match.candidate.detail_url,
        )
    return table


def print_issues(
    records: Sequence[IssueRecord],
    console: Console | None = None,
    title: str | None = None,
) -> None:
    """Print issues as a table, or a notice if there are none."""
    console = console or Console()
    if not records:
        console.print("No issues found.")
        return
    console.print(issues_table(records, title=title))
