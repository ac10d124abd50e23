from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict

if TYPE_CHECKING:
    from govipsum.config import QuerySettings


def _int_or_none(raw: str | None) -> int | None:
    """Parse an integer from untrusted input. Anything unparseable is ``None``."""
    if raw is None:
        return None
    try:
        return int(raw.strip())
    except ValueError:
        return None


class QueryParams(BaseModel):
    """Effective per-request parameters, already clamped into range."""

    model_config = ConfigDict(frozen=True)

    num_paragraphs: int
    min_words: int

    @classmethod
    def from_raw(
        cls,
        paragraphs: str | None,
        min_words: str | None,
        settings: QuerySettings,
    ) -> QueryParams:
        """Build params from raw request strings.

        Missing or non-integer values take the configured defaults. The
        paragraph count is clamped to ``[1, max_paragraphs]`` and the word
        minimum is floored at 1. Never raises for bad input.
        """
        num = _int_or_none(paragraphs)
        if num is None:
            num = settings.default_paragraphs
        num = max(1, min(num, settings.max_paragraphs))

        words = _int_or_none(min_words)
        if words is None:
            words = settings.default_min_words
        words = max(words, 1)

        return cls(num_paragraphs=num, min_words=words)
