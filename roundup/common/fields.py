"""Declarative field extraction for issue rows.

An issue row is turned into an IssueRecord by walking a fixed table of
FieldSpec entries. Each spec names a field, the selector that finds its
element inside the row, and how to read a value from that element. A spec
whose selector matches nothing contributes its fallback instead, so
extraction of a row never fails because markup is missing.
"""

from __future__ import annotations

from dataclasses import dataclass

from roundup.common import selectors
from roundup.common.document import HtmlNode, SelectorPattern
from roundup.data_types import MISSING, IssueRecord


@dataclass(frozen=True)
class InnerText:
    """Read the element's visible text."""

    def read(self, node: HtmlNode) -> str:
        return node.text_content()


@dataclass(frozen=True)
class Attribute:
    """Read an attribute of the element.

    ``href`` and ``src`` values are resolved against the document URL.

    Attributes:
        name: The attribute to read.
    """

    name: str

    def read(self, node: HtmlNode) -> str | None:
        value = node.get_attribute(self.name)
        if value is None:
            return None
        if self.name in ("href", "src"):
            return node.resolve_url(value)
        return value


ExtractionMode = InnerText | Attribute


@dataclass(frozen=True)
class FieldSpec:
    """One entry in an extraction table.

    Attributes:
        name: IssueRecord field the value is stored in.
        pattern: Selector evaluated relative to the row.
        mode: How to read the value from the matched element.
        fallback: Value used when the selector matches nothing.
    """

    name: str
    pattern: SelectorPattern
    mode: ExtractionMode = InnerText()
    fallback: str | None = MISSING


ISSUE_FIELDS: tuple[FieldSpec, ...] = (
    FieldSpec("issue_number", selectors.ISSUE_NUMBER),
    FieldSpec("writer", selectors.WRITER),
    FieldSpec("artist", selectors.ARTIST),
    FieldSpec("user_rating_score", selectors.USER_RATING),
    FieldSpec("critic_rating_score", selectors.CRITIC_RATING),
    FieldSpec("user_rating_count", selectors.USER_REVIEW_COUNT),
    FieldSpec("critic_rating_count", selectors.CRITIC_REVIEW_COUNT),
    FieldSpec(
        "detail_url", selectors.ISSUE_LINK, Attribute("href"), fallback=None
    ),
)


class FieldExtractor:
    """Applies an extraction table to issue rows.

    The extractor holds no per-row state and can be shared between threads.

    Example::

        extractor = FieldExtractor()
        record = extractor.extract(row, "Saga")
        record.writer  # "Brian K. Vaughan" or "N/A"
    """

    def __init__(self, fields: tuple[FieldSpec, ...] = ISSUE_FIELDS) -> None:
        self.fields = fields

    def extract(self, row: HtmlNode, title: str) -> IssueRecord:
        """Build an IssueRecord from one row.

        Args:
            row: The issue row node.
            title: Series name to store in the record's ``title`` field.

        Returns:
            A fully populated record. Fields whose selector does not match
            hold their fallback value.
        """
        values: dict[str, str | None] = {}
        for spec in self.fields:
            node = row.select_first(spec.pattern)
            value = spec.mode.read(node) if node is not None else None
            values[spec.name] = value if value is not None else spec.fallback
        return IssueRecord(title=title, **values)

    def matched_fields(self, row: HtmlNode) -> set[str]:
        """Names of the fields whose selector matches something in ``row``."""
        return {
            spec.name
            for spec in self.fields
            if row.select_first(spec.pattern) is not None
        }
