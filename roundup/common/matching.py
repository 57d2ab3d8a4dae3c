"""Fuzzy matching of a free-text query against catalog entries."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import TypeVar

from rapidfuzz import fuzz

from roundup.data_types import CandidateTitle, ScoredCandidate

T = TypeVar("T")

DEFAULT_THRESHOLD = 50
MAX_SCORE = 100.0


def similarity(query: str, text: str) -> float:
    """Normalized edit-distance similarity on a 0-100 scale.

    Identical strings score 100.
    """
    return fuzz.ratio(query, text)


class FuzzyResolver:
    """Filters and ranks candidates by similarity to a query.

    Attributes:
        threshold: Candidates must score strictly above this to be kept.
    """

    def __init__(self, threshold: float = DEFAULT_THRESHOLD) -> None:
        if not 0 <= threshold <= MAX_SCORE:
            raise ValueError(
                f"threshold must be between 0 and {MAX_SCORE:g}, got {threshold}"
            )
        self.threshold = threshold

    def rank(
        self,
        query: str,
        candidates: Iterable[T],
        key: Callable[[T], str] = str,
        threshold: float | None = None,
    ) -> list[tuple[T, float]]:
        """Score every candidate and keep the ones above the threshold.

        Args:
            query: The user's free-text query.
            candidates: Items to score.
            key: Returns the display text of a candidate.
            threshold: Per-call override of ``self.threshold``.

        Returns:
            (candidate, score) pairs sorted by score, highest first. Ties keep
            their input order. An exact match scores the maximum and is always
            kept, even when the threshold is the maximum.
        """
        limit = self.threshold if threshold is None else threshold
        scored = [
            (candidate, similarity(query, key(candidate)))
            for candidate in candidates
        ]
        kept = [
            (c, score)
            for c, score in scored
            if score > limit or score >= MAX_SCORE
        ]
        kept.sort(key=lambda pair: pair[1], reverse=True)
        return kept

    def resolve(
        self,
        query: str,
        candidates: Iterable[CandidateTitle],
        threshold: float | None = None,
    ) -> list[ScoredCandidate]:
        """Match a query against candidate titles by display name.

        An empty result means nothing resolved; the caller should ask for a
        new query.
        """
        return [
            ScoredCandidate(candidate=candidate, score=score)
            for candidate, score in self.rank(
                query,
                candidates,
                key=lambda c: c.display_name,
                threshold=threshold,
            )
        ]
