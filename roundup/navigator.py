"""Catalog navigation for comicbookroundup.com.

The site is organised in three levels, each on its own listing page:

- Publisher index: one link per publisher
- Publisher listing: one link per series ("all-series" page)
- Series page: one table row per issue

CatalogNavigator walks these levels on request. Which branch to take at each
level is decided by the caller (normally the CLI), so the navigator keeps no
state between calls and can be reused after any failure.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from urllib.parse import urlparse

from roundup.common import selectors
from roundup.common.config import RoundupConfig
from roundup.common.document import HtmlNode, parse_document
from roundup.common.fields import FieldExtractor
from roundup.common.matching import FuzzyResolver
from roundup.common.request_manager import Fetcher, SyncRequestManager
from roundup.data_types import (
    CandidateTitle,
    IssueRecord,
    PublisherEntry,
    ScoredCandidate,
)
from roundup.driver.pipeline import ConcurrentExtractionPipeline

logger = logging.getLogger(__name__)

PUBLISHER_INDEX_PATH = "/comic-books/reviews"
ALL_SERIES_SUFFIX = "all-series"


def publisher_from_href(href: str | None, base_url: str) -> PublisherEntry:
    """Build a PublisherEntry from a publisher link's href.

    Args:
        href: The link's href, e.g. "/publisher/marvel-comics".
        base_url: Site root.

    Returns:
        The entry, or a placeholder with empty fields when ``href`` is
        missing or has no path segments.
    """
    if not href:
        return PublisherEntry(identifier="", listing_url="")
    path = urlparse(href).path.rstrip("/")
    identifier = path.rsplit("/", 1)[-1]
    if not identifier:
        return PublisherEntry(identifier="", listing_url="")
    return PublisherEntry(
        identifier=identifier,
        listing_url=f"{base_url}{path}/{ALL_SERIES_SUFFIX}",
    )


def is_header_row(row: HtmlNode, extractor: FieldExtractor) -> bool:
    """Whether a table row is a column header rather than an issue.

    A row is a header if it contains ``th`` cells or none of the issue
    fields can be found in it.
    """
    if row.select_first(selectors.HEADER_CELL) is not None:
        return True
    return not extractor.matched_fields(row)


def exclude_header_row(
    rows: list[HtmlNode], extractor: FieldExtractor
) -> list[HtmlNode]:
    """Drop the first row of an issue table if it is a header row.

    Series pages render their column titles as the first body row. Only
    that position is checked; empty rows further down are real issues with
    missing data and are kept.
    """
    if rows and is_header_row(rows[0], extractor):
        logger.debug("Skipping header row at top of issue table")
        return rows[1:]
    return rows


@dataclass
class SeriesListing:
    """Series links from one publisher's listing page.

    The raw link nodes are held until a query arrives, then turned into
    candidates.

    Attributes:
        publisher: The publisher whose listing this is.
        links: Series link nodes in document order.
    """

    publisher: PublisherEntry
    links: list[HtmlNode]


class CatalogNavigator:
    """Walks publisher, series and issue listings.

    Example::

        with SyncRequestManager() as manager:
            navigator = CatalogNavigator(fetcher=manager)
            publishers = navigator.list_publishers()
            listing = navigator.list_series(publishers[0])
            matches = navigator.find_titles(
                "saga", navigator.series_candidates(listing)
            )
            title = matches[0].candidate
            issues = navigator.extract_issues(title.display_name, title.detail_url)
    """

    def __init__(
        self,
        fetcher: Fetcher | None = None,
        config: RoundupConfig | None = None,
        resolver: FuzzyResolver | None = None,
        pipeline: ConcurrentExtractionPipeline | None = None,
    ) -> None:
        """Initialize the navigator.

        Args:
            fetcher: Source of listing pages. Defaults to a SyncRequestManager
                built from ``config``.
            config: Session settings. Defaults to RoundupConfig().
            resolver: Fuzzy matcher for title queries.
            pipeline: Extraction pipeline for issue rows.
        """
        self.config = config or RoundupConfig()
        self.fetcher = fetcher or SyncRequestManager(timeout=self.config.timeout)
        self.resolver = resolver or FuzzyResolver(self.config.threshold)
        self.pipeline = pipeline or ConcurrentExtractionPipeline(
            max_workers=self.config.max_workers
        )

    @property
    def publisher_index_url(self) -> str:
        return f"{self.config.base_url}{PUBLISHER_INDEX_PATH}"

    def series_url(self, series_href: str) -> str:
        """Absolute URL of a series page from its site-relative href."""
        if series_href.startswith(("http://", "https://")):
            return series_href
        return f"{self.config.base_url}{series_href}"

    def _load(self, url: str) -> HtmlNode:
        """Fetch and parse a listing page."""
        return parse_document(self.fetcher.fetch(url), url)

    def list_publishers(self) -> list[PublisherEntry]:
        """Fetch the publisher index and return one entry per publisher link.

        Links without an href become placeholder entries (empty identifier
        and URL) so one broken link does not hide the rest of the listing.

        Raises:
            FetchError: If the index page cannot be fetched.
            HTMLParseException: If the index page cannot be parsed.
        """
        document = self._load(self.publisher_index_url)
        publishers: list[PublisherEntry] = []
        for link in document.select_all(selectors.PUBLISHER_LINK):
            entry = publisher_from_href(
                link.get_attribute("href"), self.config.base_url
            )
            if entry.is_placeholder:
                logger.warning(
                    f"Publisher link without usable href: {link.inner_html()!r}",
                    extra={"request_url": self.publisher_index_url},
                )
            publishers.append(entry)
        logger.info(f"Found {len(publishers)} publishers")
        return publishers

    def list_series(self, publisher: PublisherEntry) -> SeriesListing:
        """Fetch a publisher's all-series page.

        Raises:
            ValueError: If ``publisher`` is a placeholder entry.
            FetchError: If the page cannot be fetched.
            HTMLParseException: If the page cannot be parsed.
        """
        if publisher.is_placeholder:
            raise ValueError("Cannot list series for a placeholder publisher")
        document = self._load(publisher.listing_url)
        links = list(document.select_all(selectors.SERIES_LINK))
        logger.info(
            f"Found {len(links)} series for publisher '{publisher.identifier}'"
        )
        return SeriesListing(publisher=publisher, links=links)

    def series_candidates(self, listing: SeriesListing) -> list[CandidateTitle]:
        """Turn series link nodes into CandidateTitles.

        Links without an href cannot be followed and are skipped.
        """
        candidates: list[CandidateTitle] = []
        for link in listing.links:
            href = link.get_attribute("href")
            if not href:
                logger.warning(
                    f"Series link without href: {link.text_content()!r}",
                    extra={"request_url": listing.publisher.listing_url},
                )
                continue
            candidates.append(
                CandidateTitle(display_name=link.text_content(), detail_url=href)
            )
        return candidates

    def find_titles(
        self,
        query: str,
        candidates: list[CandidateTitle],
        threshold: float | None = None,
    ) -> list[ScoredCandidate]:
        """Rank candidate titles against a free-text query.

        Returns:
            Matching candidates, best first. Empty when nothing passes the
            threshold.
        """
        matches = self.resolver.resolve(query, candidates, threshold=threshold)
        logger.debug(
            f"Query {query!r} matched {len(matches)} of {len(candidates)} titles"
        )
        return matches

    def issue_rows(self, series_href: str) -> list[HtmlNode]:
        """Fetch a series page and return its issue rows, header excluded."""
        url = self.series_url(series_href)
        document = self._load(url)
        rows = list(document.select_all(selectors.ISSUE_ROW))
        return exclude_header_row(rows, self.pipeline.extractor)

    def extract_issues(
        self,
        title_name: str,
        series_href: str,
        stop_event: threading.Event | None = None,
    ) -> list[IssueRecord]:
        """Fetch a series page and extract every issue on it.

        Args:
            title_name: Series name stored in each record.
            series_href: Site-relative href (or absolute URL) of the series.
            stop_event: Optional cancellation event for the extraction.

        Raises:
            FetchError: If the page cannot be fetched.
            HTMLParseException: If the page cannot be parsed.
            ExtractionCancelled: If stop_event is set during extraction.
        """
        rows = self.issue_rows(series_href)
        records = self.pipeline.extract_all(rows, title_name, stop_event)
        logger.info(f"Extracted {len(records)} issues for '{title_name}'")
        return records
