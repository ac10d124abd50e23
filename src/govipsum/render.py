"""HTML rendering for the paragraphs page."""

from __future__ import annotations

from html import escape
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence

    from govipsum.models.query import QueryParams

_PAGE = """<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<title>GOV.UK Ipsum</title>
</head>
<body>
<h1>GOV.UK Ipsum</h1>
<form method="get" action="/">
<label for="paragraphs">Paragraphs</label>
<input type="number" id="paragraphs" name="paragraphs" min="1" max="{max_paragraphs}" value="{num_paragraphs}">
<label for="minimum-word-count">Minimum words per paragraph</label>
<input type="number" id="minimum-word-count" name="minimum-word-count" min="1" value="{min_words}">
<button type="submit">Generate</button>
</form>
<p class="summary">{summary}</p>
<div class="paragraphs">
{body}
</div>
</body>
</html>
"""


def render_page(fragments: Sequence[str], params: QueryParams, max_paragraphs: int) -> str:
    """Render the sampled fragments and the effective parameters as a page."""
    if fragments:
        body = "\n".join(f"<p>{escape(f)}</p>" for f in fragments)
    else:
        body = '<p class="empty">No paragraphs are long enough. Try a lower minimum word count.</p>'

    summary = (
        f"Showing {len(fragments)} of {params.num_paragraphs} requested paragraphs "
        f"with at least {params.min_words} words."
    )
    return _PAGE.format(
        max_paragraphs=max_paragraphs,
        num_paragraphs=params.num_paragraphs,
        min_words=params.min_words,
        summary=escape(summary),
        body=body,
    )
