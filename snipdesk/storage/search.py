"""Scored snippet search: fuzzy on titles, substring on tags and body."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional

from rapidfuzz import fuzz

from snipdesk.core.models import Snippet

TAG_SCORE = 10
BODY_SCORE = 5
# minimal partial_ratio (0-100) for a title to count as a match
TITLE_CUTOFF = 60


@dataclass
class SearchResult:
    snippet: Snippet
    score: int


def fuzzy_score(pattern: str, text: str) -> Optional[int]:
    """Score ``pattern`` against ``text`` with rapidfuzz ``partial_ratio``.

    Case-insensitive. Returns ``None`` below :data:`TITLE_CUTOFF`, otherwise
    the ratio rounded to an int, so a title hit always outranks a tag or
    body hit.
    """

    if not pattern or not text:
        return None
    ratio = fuzz.partial_ratio(pattern.lower(), text.lower(), score_cutoff=TITLE_CUTOFF)
    if not ratio:
        return None
    return int(round(ratio))


def search_snippets(snippets: Iterable[Snippet], query: str) -> List[SearchResult]:
    """Return matching snippets ordered by score, highest first.

    An empty query matches everything with a zero score.
    """

    items = list(snippets)
    if not query:
        return [SearchResult(s, 0) for s in items]

    needle = query.lower()
    results: List[SearchResult] = []
    for snippet in items:
        title_score = fuzzy_score(query, snippet.title)
        if title_score is not None:
            results.append(SearchResult(snippet, title_score))
            continue

        score = 0
        if any(needle in tag.lower() for tag in snippet.tags):
            score += TAG_SCORE
        if needle in snippet.body.lower():
            score += BODY_SCORE
        if score > 0:
            results.append(SearchResult(snippet, score))

    # sorted() is stable, so equal scores keep their input order
    return sorted(results, key=lambda r: r.score, reverse=True)


__all__ = ["SearchResult", "fuzzy_score", "search_snippets", "TITLE_CUTOFF"]
