"""Exclusion heuristics for extracted paragraphs.

The rules approximate "narrative prose paragraph" versus boilerplate. They
are best-effort: some good paragraphs are dropped and some boilerplate gets
through.

Word-count filtering is deliberately not part of ``accept``. It depends on
the request, so it is applied by the sampler against the cached set.
"""

from __future__ import annotations

import re

# Three or more digit groups separated by whitespace, e.g. "020 7215 5000"
TELEPHONE_NUMBER_RE = re.compile(r"[0-9]+(?:\s+[0-9]+){2,}")
# Attachment notices, e.g. "PDF, 1.2MB" or "245 kb"
FILE_SIZE_RE = re.compile(r"[0-9]+\.?[0-9]*\s?(KB|MB)", re.IGNORECASE)


def accept(text: str) -> bool:
    """Return True if ``text`` should be kept as a candidate fragment."""
    if "@" in text:  # contact emails
        return False
    if TELEPHONE_NUMBER_RE.search(text):
        return False
    if FILE_SIZE_RE.search(text):
        return False
    if "Thank you" in text:  # personal acknowledgements
        return False
    if ":" in text:  # lists and news-snippet style text
        return False
    return True


def word_count(text: str) -> int:
    """Number of whitespace-separated tokens in ``text``."""
    return len(text.split())
