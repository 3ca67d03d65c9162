# === FILE: focus_scout/crawler/crawler.py ===
from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Protocol, Set, Tuple

from aiohttp import ClientSession

from focus_scout.config import CrawlerConfig
from focus_scout.crawler.errors import FetchError, WriteError
from focus_scout.crawler.fetcher import Fetcher
from focus_scout.crawler.frontier import Frontier
from focus_scout.crawler.models import CrawlResult, CrawlState, PageData, ScoredURL
from focus_scout.crawler.robots import RobotsChecker
from focus_scout.crawler.scorer import RelevanceScorer
from focus_scout.parser.html_parser import ParsedPage
from focus_scout.storage import PageStore
from focus_scout.utils import canonicalize_scheme

__all__ = ("CrawlSession", "FocusedCrawler")


class PageFetcher(Protocol):
    async def fetch(self, url: str) -> ParsedPage: ...


class RobotsPolicy(Protocol):
    async def is_allowed(self, url: str) -> bool: ...


@dataclass
class CrawlSession:
    """Mutable state of one crawl run."""
    query_terms: Tuple[str, ...]
    max_pages: int
    frontier: Frontier = field(default_factory=Frontier)
    visited: Set[str] = field(default_factory=set)
    # every URL popped for a visit, including robots-denied and failed ones
    attempted: Set[str] = field(default_factory=set)
    in_flight: Set[str] = field(default_factory=set)
    state: CrawlState = CrawlState.SEEDED
    result: CrawlResult = field(default_factory=lambda: CrawlResult(CrawlState.SEEDED))

    @property
    def budget_reached(self) -> bool:
        return len(self.visited) >= self.max_pages

    def finish(self, state: CrawlState) -> None:
        if not self.state.terminal:
            self.state = state
            self.result.state = state


class FocusedCrawler:
    """Краулер с приоритетом ссылок по релевантности запросу."""

    def __init__(
        self,
        config: CrawlerConfig,
        *,
        fetcher: Optional[PageFetcher] = None,
        robots: Optional[RobotsPolicy] = None,
        store: Optional[PageStore] = None,
        scorer: Optional[RelevanceScorer] = None,
    ) -> None:
        self.config = config
        self.fetcher = fetcher
        self.robots = robots
        self.store = store or PageStore(config.download_path)
        self.scorer = scorer or RelevanceScorer(delimiters=config.delimiters)
        self.session: Optional[ClientSession] = None
        self.logger = logging.getLogger("FocusScout")
        self.crawl_session = CrawlSession(config.query_terms, config.max_pages)
        self._cond: Optional[asyncio.Condition] = None

    async def __aenter__(self) -> FocusedCrawler:
        if self.fetcher is None or self.robots is None:
            self.session = ClientSession(
                headers={"User-Agent": self.config.user_agent},
                raise_for_status=False,
            )
            if self.fetcher is None:
                self.fetcher = Fetcher(self.session, self.config)
            if self.robots is None:
                self.robots = RobotsChecker(self.session, timeout=self.config.timeout)
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self.session and not self.session.closed:
            await self.session.close()

    async def crawl(self) -> CrawlResult:
        if self.fetcher is None or self.robots is None:
            raise RuntimeError("Crawler used outside of 'async with'")
        state = self.crawl_session
        start_url = str(self.config.start_url)
        self.logger.info("Старт обхода: %s (query: %s)", start_url, " ".join(state.query_terms) or "-")
        started = time.monotonic()

        self._cond = asyncio.Condition()
        state.frontier.offer(start_url, 0)
        state.state = state.result.state = CrawlState.RUNNING

        workers = [asyncio.create_task(self._worker()) for _ in range(self.config.concurrency)]
        try:
            await asyncio.gather(*workers)
        finally:
            for w in workers:
                w.cancel()

        result = state.result
        duration = time.monotonic() - started
        self.logger.info(
            "Завершено (%s): %d страниц за %.2f с, в очереди осталось %d",
            result.state.value, len(result.pages), duration, len(state.frontier),
        )
        if result.skipped_robots:
            self.logger.info("Заблокировано robots.txt: %d", result.skipped_robots)
        return result

    # ------------------------------------------------------------------ #
    # Worker loop                                                        #
    # ------------------------------------------------------------------ #
    async def _worker(self) -> None:
        assert self._cond is not None
        while True:
            async with self._cond:
                candidate = await self._next_candidate()
            if candidate is None:
                return
            try:
                await self._visit(candidate)
            finally:
                async with self._cond:
                    self.crawl_session.in_flight.discard(candidate.url)
                    self._cond.notify_all()

    async def _next_candidate(self) -> Optional[ScoredURL]:
        """Pop the best URL not attempted yet. Must be called with the condition held."""
        assert self._cond is not None
        state = self.crawl_session
        while True:
            if state.state.terminal:
                return None
            if state.budget_reached:
                state.finish(CrawlState.BUDGET_REACHED)
                self._cond.notify_all()
                return None
            if not state.frontier:
                if not state.in_flight:
                    state.finish(CrawlState.EXHAUSTED)
                    self._cond.notify_all()
                    return None
                await self._cond.wait()
                continue

            popped = state.frontier.pop_best()
            url = canonicalize_scheme(popped.url) if self.config.force_https else popped.url
            if url in state.attempted:
                self.logger.debug("Skipping already seen %s (score %d)", url, popped.score)
                continue
            state.attempted.add(url)
            state.in_flight.add(url)
            return ScoredURL(url, popped.score)

    async def _visit(self, candidate: ScoredURL) -> None:
        assert self._cond is not None and self.robots is not None and self.fetcher is not None
        state = self.crawl_session
        url = candidate.url

        if not await self.robots.is_allowed(url):
            state.result.skipped_robots += 1
            return

        if self.config.trace:
            self.logger.info("Downloading: %s. Score = %d", url, candidate.score)
        try:
            page = await self.fetcher.fetch(url)
        except FetchError as exc:
            state.result.failed_fetches += 1
            if self.config.trace:
                self.logger.info("Network error when retrieving the page: %s. Skipped this page.", exc)
            return
        if self.config.trace:
            self.logger.info("Received: %s", url)

        async with self._cond:
            if state.state.terminal or state.budget_reached:
                # another worker used up the budget while this fetch was running
                return
            state.visited.add(url)
            last_page = state.budget_reached

        saved_path = await self._persist(url, page)

        async with self._cond:
            state.result.pages.append(PageData(url=url, score=candidate.score, path=saved_path))
            if last_page:
                state.finish(CrawlState.BUDGET_REACHED)
                self._cond.notify_all()
                return
            self._absorb_links(page)
            self._cond.notify_all()

    async def _persist(self, url: str, page: ParsedPage) -> Optional[Path]:
        try:
            return await asyncio.to_thread(self.store.save, url, page.raw)
        except WriteError as exc:
            self.crawl_session.result.failed_writes += 1
            self.logger.warning("%s", exc)
            return None

    def _absorb_links(self, page: ParsedPage) -> None:
        state = self.crawl_session
        for link in page.links:
            target = link.target
            if target is None:
                continue
            key = canonicalize_scheme(target) if self.config.force_https else target
            if key in state.visited:
                continue
            score = self.scorer.score(link, page, state.query_terms)
            existed = state.frontier.contains_url(target)
            total = state.frontier.merge_or_insert(target, score)
            if self.config.trace:
                if existed:
                    self.logger.info("Adding %d to score of %s (now %d)", score, target, total)
                else:
                    self.logger.info("Adding to queue: %s with score %d", target, score)
