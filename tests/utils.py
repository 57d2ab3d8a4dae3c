"""Test utilities shared by the catalog tests."""

import logging
import socket
from contextlib import closing

from roundup.common import selectors
from roundup.common.document import HtmlNode, parse_document
from roundup.common.exceptions import HTMLResponseAssumptionException

logger = logging.getLogger(__name__)


class StaticFetcher:
    """In-memory Fetcher serving fixed pages.

    Unknown URLs answer like a 404 from the real site. Every requested URL
    is recorded in ``requested``.

    Example:
        fetcher = StaticFetcher({"https://example.com/": "<html>...</html>"})
        navigator = CatalogNavigator(fetcher=fetcher)
    """

    def __init__(self, pages: dict[str, str | bytes]) -> None:
        self.pages = pages
        self.requested: list[str] = []

    def fetch(self, url: str) -> str | bytes:
        self.requested.append(url)
        try:
            return self.pages[url]
        except KeyError:
            raise HTMLResponseAssumptionException(
                status_code=404, expected_codes=[200], url=url
            ) from None


def issue_rows(html: str, url: str = "https://comicbookroundup.com/x") -> list[HtmlNode]:
    """Parse a series page and return every issue row, header included."""
    return list(parse_document(html, url).select_all(selectors.ISSUE_ROW))


def table_page(rows_html: str) -> str:
    """Wrap ``<tr>`` markup in the section/table/tbody structure of a listing."""
    return (
        "<html><body><div class='section'><table><tbody>"
        f"{rows_html}"
        "</tbody></table></div></body></html>"
    )


def find_free_port() -> int:
    """Find a free port on localhost.

    Returns:
        An available port number.
    """
    with closing(socket.socket(socket.AF_INET, socket.SOCK_STREAM)) as s:
        s.bind(("", 0))
        s.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        return s.getsockname()[1]


XHTML_INDEX_PAGE = """<?xml version="1.0" encoding="UTF-8"?>
<!DOCTYPE html PUBLIC "-//W3C//DTD XHTML 1.0 Strict//EN"
    "http://www.w3.org/TR/xhtml1/DTD/xhtml1-strict.dtd">
<html xmlns="http://www.w3.org/1999/xhtml">
<body>
    <div class="section">
        <table>
            <tbody>
                <tr><td class="top-publisher"><a href="/publisher/marvel-comics">Marvel</a></td></tr>
            </tbody>
        </table>
    </div>
</body>
</html>"""
