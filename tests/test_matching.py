"""Tests for fuzzy title resolution."""

import pytest

from roundup.common.matching import (
    DEFAULT_THRESHOLD,
    MAX_SCORE,
    FuzzyResolver,
    similarity,
)
from roundup.data_types import CandidateTitle


@pytest.fixture
def candidates() -> list[CandidateTitle]:
    return [
        CandidateTitle("Amazing Spider-Man (2022)", "/r/marvel/asm-2022"),
        CandidateTitle("Spider-Woman (2020)", "/r/marvel/spider-woman"),
        CandidateTitle("Daredevil (2022)", "/r/marvel/daredevil"),
        CandidateTitle("X-Men (2021)", "/r/marvel/x-men"),
    ]


class TestSimilarity:
    def test_identical_strings_score_maximum(self) -> None:
        assert similarity("Saga", "Saga") == MAX_SCORE

    def test_unrelated_strings_score_low(self) -> None:
        assert similarity("Saga", "Daredevil (2022)") < DEFAULT_THRESHOLD

    def test_score_range(self) -> None:
        score = similarity("spider", "Spider-Woman")

        assert 0 <= score <= MAX_SCORE


class TestFuzzyResolver:
    def test_exact_match_always_included(
        self, candidates: list[CandidateTitle]
    ) -> None:
        """An exact match shall pass any threshold up to the maximum."""
        resolver = FuzzyResolver()

        for threshold in (0, 50, 99, 100):
            matches = resolver.resolve(
                "Daredevil (2022)", candidates, threshold=threshold
            )
            assert candidates[2] in [m.candidate for m in matches]
            assert matches[0].candidate == candidates[2]
            assert matches[0].score == MAX_SCORE

    def test_max_threshold_without_exact_match_is_empty(
        self, candidates: list[CandidateTitle]
    ) -> None:
        resolver = FuzzyResolver(threshold=100)

        assert resolver.resolve("Daredevil 2022", candidates) == []

    def test_empty_candidates(self) -> None:
        assert FuzzyResolver().resolve("anything", []) == []

    def test_filters_by_threshold_and_sorts_descending(
        self, candidates: list[CandidateTitle]
    ) -> None:
        matches = FuzzyResolver().resolve("Amazing Spider-Man", candidates)

        names = [m.candidate.display_name for m in matches]
        scores = [m.score for m in matches]
        assert names[0] == "Amazing Spider-Man (2022)"
        assert "X-Men (2021)" not in names
        assert scores == sorted(scores, reverse=True)
        assert all(score > DEFAULT_THRESHOLD for score in scores)

    def test_threshold_is_exclusive(self) -> None:
        items = ["abcd", "abxy"]
        # "abcd" vs "abxy": two of four characters in common -> 50
        score = similarity("abcd", "abxy")
        resolver = FuzzyResolver(threshold=score)

        ranked = resolver.rank("abcd", items)

        assert [item for item, _ in ranked] == ["abcd"]

    def test_ties_keep_input_order(self) -> None:
        ranked = FuzzyResolver().rank(
            "Saga", [("a", "Saga"), ("b", "Saga")], key=lambda pair: pair[1]
        )

        assert [pair[0] for pair, _ in ranked] == ["a", "b"]

    def test_rank_with_key(self) -> None:
        ranked = FuzzyResolver().rank(
            "marvel-comics",
            [{"id": "dc-comics"}, {"id": "marvel-comics"}],
            key=lambda item: item["id"],
        )

        assert ranked[0] == ({"id": "marvel-comics"}, MAX_SCORE)

    @pytest.mark.parametrize("threshold", [-1, 101])
    def test_rejects_out_of_range_threshold(self, threshold: float) -> None:
        with pytest.raises(ValueError):
            FuzzyResolver(threshold=threshold)
