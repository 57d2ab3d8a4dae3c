"""Roundup CLI: browse comicbookroundup.com review data.

Usage:
    roundup publishers                        # List publishers
    roundup search marvel-comics "spider-man" # Find series matching a query
    roundup issues "Saga" /comic-books/reviews/image-comics/saga
    roundup issues "Saga" /comic-books/reviews/image-comics/saga --json
    roundup browse                            # Interactive menu
"""

from __future__ import annotations

import json
import logging
import threading
from collections.abc import Sequence

import click
from rich.console import Console

from roundup.common.config import DEFAULT_BASE_URL, RoundupConfig
from roundup.common.exceptions import (
    ExtractionCancelled,
    FetchError,
    ScraperAssumptionException,
)
from roundup.common.request_manager import SyncRequestManager
from roundup.data_types import PublisherEntry
from roundup.navigator import CatalogNavigator
from roundup.rendering import candidates_table, print_issues

logger = logging.getLogger(__name__)

EXIT_LABEL = "Exit!"

# Errors that end one navigation step but not the session.
NAVIGATION_ERRORS = (FetchError, ScraperAssumptionException)


@click.group()
@click.version_option(package_name="roundup")
@click.option(
    "--base-url",
    default=DEFAULT_BASE_URL,
    show_default=True,
    envvar="ROUNDUP_BASE_URL",
    help="Site root to scrape.",
)
@click.option(
    "--timeout",
    type=float,
    default=30.0,
    show_default=True,
    help="HTTP timeout in seconds.",
)
@click.option(
    "--workers",
    type=click.IntRange(min=1),
    default=None,
    help="Number of extraction worker threads.",
)
@click.option("-v", "--verbose", is_flag=True, help="Verbose logging.")
@click.pass_context
def cli(
    ctx: click.Context,
    base_url: str,
    timeout: float,
    workers: int | None,
    verbose: bool,
) -> None:
    """Roundup: comic review scraper CLI."""
    log_level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    ctx.obj = RoundupConfig(
        base_url=base_url, timeout=timeout, max_workers=workers
    )


def _open_navigator(
    ctx: click.Context, threshold: float | None = None
) -> CatalogNavigator:
    """Create a navigator backed by a fresh request manager.

    The request manager is registered on the context so it is closed when
    the command finishes.
    """
    config: RoundupConfig = ctx.obj
    if threshold is not None:
        config.threshold = threshold
    manager = ctx.with_resource(SyncRequestManager(timeout=config.timeout))
    return CatalogNavigator(fetcher=manager, config=config)


def _find_publisher(
    navigator: CatalogNavigator, identifier: str
) -> PublisherEntry:
    """Look up a publisher by identifier, suggesting near misses."""
    publishers = [
        p for p in navigator.list_publishers() if not p.is_placeholder
    ]
    for publisher in publishers:
        if publisher.identifier == identifier:
            return publisher
    suggestions = navigator.resolver.rank(
        identifier, publishers, key=lambda p: p.identifier
    )
    hint = ""
    if suggestions:
        names = ", ".join(p.identifier for p, _score in suggestions[:5])
        hint = f" Did you mean: {names}?"
    raise click.ClickException(f"Unknown publisher '{identifier}'.{hint}")


@cli.command()
@click.pass_context
def publishers(ctx: click.Context) -> None:
    """List the publishers on the review index."""
    navigator = _open_navigator(ctx)
    try:
        entries = navigator.list_publishers()
    except NAVIGATION_ERRORS as e:
        raise click.ClickException(str(e)) from e

    skipped = 0
    for entry in entries:
        if entry.is_placeholder:
            skipped += 1
            continue
        click.echo(f"{entry.identifier}\t{entry.listing_url}")
    if skipped:
        click.echo(f"Skipped {skipped} malformed publisher link(s).", err=True)


@cli.command()
@click.argument("publisher")
@click.argument("query")
@click.option(
    "--threshold",
    type=click.FloatRange(0, 100),
    default=None,
    help="Minimum similarity score (exclusive), 0-100.",
)
@click.pass_context
def search(
    ctx: click.Context, publisher: str, query: str, threshold: float | None
) -> None:
    """Find series of PUBLISHER whose name matches QUERY.

    PUBLISHER is an identifier as printed by ``roundup publishers``.
    """
    navigator = _open_navigator(ctx, threshold)
    try:
        entry = _find_publisher(navigator, publisher)
        listing = navigator.list_series(entry)
    except NAVIGATION_ERRORS as e:
        raise click.ClickException(str(e)) from e

    matches = navigator.find_titles(query, navigator.series_candidates(listing))
    if not matches:
        click.echo(f"No titles matched '{query}'.")
        return
    Console().print(candidates_table(matches))


@cli.command()
@click.argument("title")
@click.argument("series_href")
@click.option(
    "--json", "as_json", is_flag=True, help="Print records as JSON."
)
@click.pass_context
def issues(
    ctx: click.Context, title: str, series_href: str, as_json: bool
) -> None:
    """Extract the issues of one series.

    TITLE is the series name to show in each record. SERIES_HREF is the
    series link as printed by ``roundup search``.
    """
    navigator = _open_navigator(ctx)
    try:
        records = navigator.extract_issues(title, series_href)
    except NAVIGATION_ERRORS as e:
        raise click.ClickException(str(e)) from e

    if as_json:
        click.echo(
            json.dumps([record.model_dump() for record in records], indent=2)
        )
    else:
        print_issues(records, Console(), title=title)


def _choose(items: Sequence[str], message: str) -> int | None:
    """Show a numbered menu and return the chosen index.

    The last entry is always "Exit!"; choosing it returns None.
    """
    click.echo(message)
    for number, item in enumerate(items, start=1):
        click.echo(f"  {number}. {item}")
    exit_number = len(items) + 1
    click.echo(f"  {exit_number}. {EXIT_LABEL}")
    choice = click.prompt(
        "Choice", type=click.IntRange(1, exit_number), default=exit_number
    )
    if choice == exit_number:
        return None
    return choice - 1


@cli.command()
@click.pass_context
def browse(ctx: click.Context) -> None:
    """Interactively pick a publisher, a title and show its issues."""
    navigator = _open_navigator(ctx)
    console = Console()

    while _choose(["Scrape publisher"], "MENU") is not None:
        try:
            entries = [
                p for p in navigator.list_publishers() if not p.is_placeholder
            ]
        except NAVIGATION_ERRORS as e:
            click.echo(f"Error: {e}", err=True)
            continue

        while True:
            index = _choose(
                [p.identifier for p in entries],
                "Which publisher would you like to scrape?",
            )
            if index is None:
                break
            publisher = entries[index]
            click.echo(f"Scraping publisher: {publisher.listing_url}")
            try:
                listing = navigator.list_series(publisher)
            except NAVIGATION_ERRORS as e:
                click.echo(f"Error: {e}", err=True)
                continue

            query = click.prompt("Which title are you looking for?")
            matches = navigator.find_titles(
                query, navigator.series_candidates(listing)
            )
            if not matches:
                click.echo(f"No titles matched '{query}'. Try another query.")
                continue

            index = _choose(
                [m.candidate.display_name for m in matches],
                f"Which {query} comic would you like to scrape?",
            )
            if index is None:
                continue
            chosen = matches[index].candidate

            stop_event = threading.Event()
            try:
                records = navigator.extract_issues(
                    chosen.display_name, chosen.detail_url, stop_event
                )
            except KeyboardInterrupt:
                stop_event.set()
                click.echo("Cancelled.", err=True)
                continue
            except (*NAVIGATION_ERRORS, ExtractionCancelled) as e:
                click.echo(f"Error: {e}", err=True)
                continue
            print_issues(records, console, title=chosen.display_name)


def main() -> None:
    """Entry point for the ``roundup`` console script."""
    cli()
