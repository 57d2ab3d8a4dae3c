"""Parsed HTML documents and compiled selector patterns.

This module provides the document model used by every other part of the
package:

- ``SelectorPattern`` compiles a CSS selector once. Invalid syntax fails at
  construction time, so patterns can be module-level constants that are
  shared read-only across worker threads.
- ``HtmlNode`` wraps an lxml element and exposes ``select_all`` (a lazy,
  single-pass iterator in document order) and ``select_first``.
- ``parse_document`` turns response text into an ``HtmlNode`` using lxml's
  forgiving HTML parser.
"""

from __future__ import annotations

from collections.abc import Iterator
from urllib.parse import urljoin

from lxml import etree, html
from lxml.cssselect import CSSSelector, SelectorError
from lxml.html import HtmlElement

from roundup.common.exceptions import (
    HTMLParseException,
    SelectorPatternException,
)


class SelectorPattern:
    """A CSS selector compiled once and reused for every query.

    Attributes:
        css: The CSS selector text as given.
        description: Human-readable description of what is being selected.
    """

    __slots__ = ("css", "description", "_compiled")

    def __init__(self, css: str, description: str) -> None:
        """Compile the selector.

        Args:
            css: CSS selector expression (tags, classes, combinators).
            description: Human-readable description used in error messages.

        Raises:
            SelectorPatternException: If the selector cannot be compiled.
        """
        self.css = css
        self.description = description
        try:
            self._compiled = CSSSelector(css, translator="html")
        except SelectorError as e:
            raise SelectorPatternException(css, description, str(e)) from e

    def __call__(self, element: HtmlElement) -> list[HtmlElement]:
        return self._compiled(element)

    def __repr__(self) -> str:
        return f"SelectorPattern({self.css!r}, {self.description!r})"


class HtmlNode:
    """A node in a parsed HTML document.

    Attributes:
        url: Base URL of the document, used to resolve relative links.
    """

    __slots__ = ("_element", "url")

    def __init__(self, element: HtmlElement, url: str = "") -> None:
        """Wrap an lxml element.

        Args:
            element: The lxml HtmlElement to wrap.
            url: Base URL for resolving relative URLs.
        """
        self._element = element
        self.url = url

    def select_all(self, pattern: SelectorPattern) -> Iterator[HtmlNode]:
        """Select every descendant matching ``pattern``, in document order.

        The returned iterator is lazy and can only be consumed once. An
        empty iterator is a normal result.
        """
        for element in pattern(self._element):
            yield HtmlNode(element, self.url)

    def select_first(self, pattern: SelectorPattern) -> HtmlNode | None:
        """Select the first descendant matching ``pattern``.

        Returns:
            The first match, or None if nothing matches.
        """
        return next(self.select_all(pattern), None)

    def text_content(self) -> str:
        """Visible text of the node and its descendants, stripped."""
        return self._element.text_content().strip()

    def get_attribute(self, name: str) -> str | None:
        """Attribute value, or None if the attribute is absent."""
        return self._element.get(name)

    def resolve_url(self, href: str) -> str:
        """Resolve ``href`` against the document's base URL."""
        return urljoin(self.url, href)

    def inner_html(self) -> str:
        """Inner HTML of the node, including leading text."""
        elem = self._element
        inner = elem.text or ""
        inner += "".join(
            html.tostring(child, encoding="unicode") for child in elem
        )
        return inner

    def tag_name(self) -> str:
        """Tag name as a lowercase string (e.g., "tr", "a")."""
        return str(self._element.tag).lower()

    def __repr__(self) -> str:
        return f"<HtmlNode {self.tag_name()} at {self.url or '?'}>"


def parse_document(content: str | bytes, url: str = "") -> HtmlNode:
    """Parse a response body into a document root node.

    Parsing is best-effort: unclosed elements, stray end tags and
    similar real-world damage are recovered by lxml. Only input that cannot
    form any document raises.

    Bytes are handed to lxml as-is so the page's own ``<meta>`` charset or
    XML declaration decides the encoding. Text is re-encoded as UTF-8 first,
    since lxml refuses str input that carries an encoding declaration.

    Args:
        content: Raw response body, or already-decoded HTML text.
        url: URL the body was fetched from.

    Returns:
        HtmlNode wrapping the ``<html>`` root.

    Raises:
        HTMLParseException: If lxml cannot build a document from ``content``.
    """
    parser = None
    if isinstance(content, str):
        content = content.encode("utf-8")
        parser = html.HTMLParser(encoding="utf-8")
    try:
        root = html.document_fromstring(content, parser=parser)
    except (etree.LxmlError, ValueError) as e:
        raise HTMLParseException(str(e), url, len(content)) from e
    return HtmlNode(root, url)
