# focus_scout/crawler/frontier.py
"""
Score-ordered crawl frontier.

Entries are kept in a binary heap without key-based update. Raising the score
of a URL that is already queued pushes a *new* entry carrying the accumulated
score; the lower-scored copies stay in the heap. The scheduler checks the
visited set on every pop, so only the first pop of a URL is crawled and later
stale copies are dropped there.

The order of entries with equal scores is unspecified.
"""
from __future__ import annotations

import heapq
import itertools
from typing import Dict, Iterator, List, Optional, Tuple

from focus_scout.crawler.models import ScoredURL

__all__ = ("Frontier",)

_Entry = Tuple[int, int, str]


class Frontier:
    """Max-priority collection of pending URLs with score accumulation."""

    def __init__(self) -> None:
        self._heap: List[_Entry] = []
        # url -> scores of the copies still in the heap
        self._live: Dict[str, List[int]] = {}
        # keeps tuple comparison away from the url strings
        self._seq = itertools.count()

    def __len__(self) -> int:
        return len(self._heap)

    def __bool__(self) -> bool:
        return bool(self._heap)

    def __iter__(self) -> Iterator[ScoredURL]:
        for neg_score, _, url in sorted(self._heap):
            yield ScoredURL(url, -neg_score)

    def offer(self, url: str, score: int) -> None:
        """Insert an entry unconditionally."""
        heapq.heappush(self._heap, (-score, next(self._seq), url))
        self._live.setdefault(url, []).append(score)

    def peek_best(self) -> ScoredURL:
        if not self._heap:
            raise IndexError("peek from an empty frontier")
        neg_score, _, url = self._heap[0]
        return ScoredURL(url, -neg_score)

    def pop_best(self) -> ScoredURL:
        if not self._heap:
            raise IndexError("pop from an empty frontier")
        neg_score, _, url = heapq.heappop(self._heap)
        score = -neg_score
        copies = self._live[url]
        copies.remove(score)
        if not copies:
            del self._live[url]
        return ScoredURL(url, score)

    def contains_url(self, url: str) -> bool:
        return url in self._live

    def best_score(self, url: str) -> Optional[int]:
        """Highest score among the queued copies of *url*, or None."""
        copies = self._live.get(url)
        return max(copies) if copies else None

    def merge_or_insert(self, url: str, score: int) -> int:
        """Queue *url*, adding *score* to the best score it already has.

        Returns the score of the entry that was pushed.
        """
        best = self.best_score(url)
        total = score if best is None else best + score
        self.offer(url, total)
        return total
