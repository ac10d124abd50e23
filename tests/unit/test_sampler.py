"""Unit tests for govipsum.sampler."""

from __future__ import annotations

import random

from govipsum.filters import word_count
from govipsum.sampler import eligible, sample

FRAGMENTS = frozenset(
    {
        "one",
        "one two",
        "one two three",
        "one two three four",
        "one two three four five",
        "a b c d e f",
    }
)


class TestEligible:
    def test_filters_by_min_words(self) -> None:
        assert eligible(FRAGMENTS, 5) == ["a b c d e f", "one two three four five"]

    def test_stable_order(self) -> None:
        assert eligible(FRAGMENTS, 1) == sorted(FRAGMENTS)


class TestSample:
    def test_never_exceeds_requested(self) -> None:
        result = sample(FRAGMENTS, 2, 1)
        assert len(result) == 2

    def test_never_exceeds_eligible(self) -> None:
        result = sample(FRAGMENTS, 50, 4)
        assert sorted(result) == ["a b c d e f", "one two three four", "one two three four five"]

    def test_respects_min_words(self) -> None:
        for _ in range(20):
            for fragment in sample(FRAGMENTS, 3, 3):
                assert word_count(fragment) >= 3

    def test_no_duplicates(self) -> None:
        result = sample(FRAGMENTS, 6, 1)
        assert len(set(result)) == len(result) == 6

    def test_empty_when_nothing_qualifies(self) -> None:
        assert sample(FRAGMENTS, 5, 100) == []

    def test_empty_fragment_set(self) -> None:
        assert sample(frozenset(), 5, 1) == []

    def test_non_positive_count(self) -> None:
        assert sample(FRAGMENTS, 0, 1) == []
        assert sample(FRAGMENTS, -3, 1) == []

    def test_seeded_rng_is_reproducible(self) -> None:
        first = sample(FRAGMENTS, 3, 1, rng=random.Random(42))
        second = sample(FRAGMENTS, 3, 1, rng=random.Random(42))
        assert first == second

    def test_every_eligible_fragment_can_be_drawn(self) -> None:
        rng = random.Random(7)
        seen: set[str] = set()
        for _ in range(200):
            seen.update(sample(FRAGMENTS, 1, 1, rng=rng))
        assert seen == set(FRAGMENTS)
