from __future__ import annotations

from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field

FeedSource = Literal["network", "fallback"]


class InlineEntry(BaseModel):
    """Feed entry that carries its HTML body inline."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["inline"] = "inline"
    html: str
    link: str | None = None  # Kept for logging only, never fetched


class LinkedEntry(BaseModel):
    """Feed entry without content; the body lives at ``link``."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["linked"] = "linked"
    link: str


FeedEntry = Annotated[InlineEntry | LinkedEntry, Field(discriminator="kind")]


class ParsedFeed(BaseModel):
    """Entries of one feed document, in feed order."""

    model_config = ConfigDict(frozen=True)

    entries: list[FeedEntry] = []
    source: FeedSource
