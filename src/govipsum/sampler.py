from __future__ import annotations

import random
from typing import TYPE_CHECKING

from govipsum.filters import word_count

if TYPE_CHECKING:
    from collections.abc import Iterable


def eligible(fragments: Iterable[str], min_words: int) -> list[str]:
    """Fragments with at least ``min_words`` tokens, in a stable order."""
    return sorted(f for f in fragments if word_count(f) >= min_words)


def sample(
    fragments: Iterable[str],
    num_paragraphs: int,
    min_words: int,
    rng: random.Random | None = None,
) -> list[str]:
    """Draw up to ``num_paragraphs`` distinct fragments uniformly at random.

    Only fragments with at least ``min_words`` tokens are candidates. An
    empty list is a valid result when nothing qualifies.
    """
    pool = eligible(fragments, min_words)
    k = min(max(num_paragraphs, 0), len(pool))
    if k == 0:
        return []
    return (rng or random).sample(pool, k)
