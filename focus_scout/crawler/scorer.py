# focus_scout/crawler/scorer.py
"""
Link relevance scoring.

A link is scored against the page it was found on by an ordered cascade; the
first tier that produces a non-zero value wins:

1. anchor text  — every query term contained in the anchor text adds
   ``ANCHOR_SCORE`` (terms are counted as listed, repeats included);
2. link URL     — the first term contained in the raw href gives ``URL_SCORE``;
3. context/page — each distinct term found within ``CONTEXT_SIZE`` words
   around the link adds ``CONTEXT_SCORE - 1`` and each distinct term found
   anywhere in the page text adds ``PAGE_SCORE``.
"""
from __future__ import annotations

from itertools import islice
from typing import Iterable, Iterator, Sequence

from focus_scout.config import DEFAULT_DELIMITERS
from focus_scout.parser.html_parser import Link, ParsedPage, tokenize

__all__ = (
    "ANCHOR_SCORE",
    "URL_SCORE",
    "CONTEXT_SCORE",
    "PAGE_SCORE",
    "CONTEXT_SIZE",
    "RelevanceScorer",
)

ANCHOR_SCORE = 50
URL_SCORE = 40
CONTEXT_SCORE = 4
PAGE_SCORE = 1
CONTEXT_SIZE = 5


def _distinct(terms: Sequence[str]) -> Iterator[str]:
    seen: set[str] = set()
    for term in terms:
        if term in seen:
            continue
        seen.add(term)
        yield term


class RelevanceScorer:
    """Scores outbound links of a page for a list of lower-cased query terms."""

    def __init__(self, delimiters: str = DEFAULT_DELIMITERS, context_size: int = CONTEXT_SIZE) -> None:
        self.delimiters = delimiters
        self.context_size = context_size

    def score(self, link: Link, page: ParsedPage, query_terms: Sequence[str]) -> int:
        if not query_terms:
            return 0

        anchor = link.anchor_text.lower()
        count = sum(1 for term in query_terms if term in anchor)
        if count > 0:
            return count * ANCHOR_SCORE

        href = link.href.lower()
        for term in query_terms:
            if term in href:
                return URL_SCORE

        context_count = self._context_count(link, page, query_terms)
        page_tokens = page.page_tokens(self.delimiters)
        page_count = sum(1 for term in _distinct(query_terms) if term in page_tokens)

        return context_count * (CONTEXT_SCORE - 1) + page_count * PAGE_SCORE

    # Context tier ---------------------------------------------------------
    def _context_count(self, link: Link, page: ParsedPage, query_terms: Sequence[str]) -> int:
        try:
            index = page.index_of(link.element)
        except ValueError:
            return 0
        # forward window starts after the anchor's own text
        start = page.subtree_end(index)

        found = 0
        for term in _distinct(query_terms):
            if term in self._window(page.strings_after(start), backward=False):
                found += 1
            elif term in self._window(page.strings_before(index), backward=True):
                found += 1
        return found

    def _window(self, strings: Iterable[str], *, backward: bool) -> list[str]:
        """First ``context_size`` words read away from the link."""
        return list(islice(self._words(strings, backward), self.context_size))

    def _words(self, strings: Iterable[str], backward: bool) -> Iterator[str]:
        for text in strings:
            words = tokenize(text, self.delimiters)
            if backward:
                words.reverse()
            yield from words
