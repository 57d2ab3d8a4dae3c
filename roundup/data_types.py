"""Data types for catalog navigation and issue extraction.

Publisher and title entries are plain frozen dataclasses: they are value
objects built from one listing page and thrown away once the user has picked
one. Issue records are Pydantic models, since they are the scraped output
handed to consumers.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field

MISSING = "N/A"


@dataclass(frozen=True)
class PublisherEntry:
    """A publisher found on the publisher index page.

    Attributes:
        identifier: Last path segment of the publisher link (e.g. "marvel-comics").
        listing_url: Absolute URL of the publisher's all-series listing.
    """

    identifier: str
    listing_url: str

    @property
    def is_placeholder(self) -> bool:
        """True for entries built from a link that had no href."""
        return not self.identifier and not self.listing_url


@dataclass(frozen=True)
class CandidateTitle:
    """A series link on a publisher listing page.

    Attributes:
        display_name: Visible link text.
        detail_url: Site-relative href of the series page.
    """

    display_name: str
    detail_url: str


@dataclass(frozen=True)
class ScoredCandidate:
    """A candidate title together with its similarity to the query."""

    candidate: CandidateTitle
    score: float


class IssueRecord(BaseModel):
    """Review metadata for one issue of a series.

    ``title`` comes from the caller (the resolved series name). Every other
    field is scraped from the issue row and is ``"N/A"`` when the row has no
    matching element.
    """

    model_config = ConfigDict(frozen=True)

    title: str = Field(..., description="Series name chosen by the user")
    issue_number: str = Field(MISSING, description="Issue number, e.g. #1")
    writer: str = Field(MISSING, description="Writer name(s)")
    artist: str = Field(MISSING, description="Artist name(s)")
    user_rating_score: str = Field(MISSING, description="Average user rating")
    critic_rating_score: str = Field(
        MISSING, description="Average critic rating"
    )
    user_rating_count: str = Field(MISSING, description="Number of user reviews")
    critic_rating_count: str = Field(
        MISSING, description="Number of critic reviews"
    )
    detail_url: str | None = Field(
        None, description="Absolute URL of the issue's review page"
    )

    COLUMNS: ClassVar[tuple[tuple[str, str], ...]] = (
        ("title", "Title"),
        ("issue_number", "Issue Number"),
        ("writer", "Writer/s"),
        ("artist", "Artist/s"),
        ("user_rating_score", "User Review Score"),
        ("critic_rating_score", "Critic Review Score"),
        ("user_rating_count", "User Review Count"),
        ("critic_rating_count", "Critic Review Count"),
    )

    @classmethod
    def columns(cls) -> tuple[tuple[str, str], ...]:
        """Ordered (field name, column title) pairs for tabular output."""
        return cls.COLUMNS

    def row(self) -> tuple[str, ...]:
        """Field values in ``columns()`` order."""
        return (
            self.title,
            self.issue_number,
            self.writer,
            self.artist,
            self.user_rating_score,
            self.critic_rating_score,
            self.user_rating_count,
            self.critic_rating_count,
        )
