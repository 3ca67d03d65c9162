import asyncio
from collections.abc import AsyncIterator
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional

import pytest
from aiohttp import web

from focus_scout.config import CrawlerConfig
from focus_scout.crawler.errors import StatusFetchError
from focus_scout.parser.html_parser import ParsedPage, parse_html


def pytest_configure(config):
    """Register custom markers so that `--strict-markers` does not fail."""
    config.addinivalue_line(
        "markers",
        "slow: marks tests as slow (deselect with '-m \"not slow\"')",
    )


async def _serve_app(app: web.Application) -> AsyncIterator[str]:
    """Start *app* on a free port, yield base URL, ensure cleanup."""
    runner = web.AppRunner(app)
    await runner.setup()
    site = web.TCPSite(runner, "127.0.0.1", 0)
    await site.start()
    port = runner.addresses[0][1]
    try:
        yield f"http://127.0.0.1:{port}"
    finally:
        await runner.cleanup()


class FakeFetcher:
    """In-memory site: url -> html. Unknown URLs answer 404."""

    def __init__(self, pages: Dict[str, str], delay: float = 0.0) -> None:
        self.pages = pages
        self.delay = delay
        self.calls: List[str] = []

    async def fetch(self, url: str) -> ParsedPage:
        self.calls.append(url)
        if self.delay:
            await asyncio.sleep(self.delay)
        if url not in self.pages:
            raise StatusFetchError(url, 404)
        return parse_html(self.pages[url], url)


class FakeRobots:
    def __init__(self, disallowed: Iterable[str] = ()) -> None:
        self.disallowed = set(disallowed)
        self.checked: List[str] = []

    async def is_allowed(self, url: str) -> bool:
        self.checked.append(url)
        return url not in self.disallowed


@pytest.fixture()
def serve_app():
    return _serve_app


@pytest.fixture()
def make_config(tmp_path: Path) -> Callable[..., CrawlerConfig]:
    """
    Factory for a valid CrawlerConfig saving pages under tmp_path.
    """

    def factory(start_url: str = "https://a.example/", query: Optional[List[str]] = None, **kwargs) -> CrawlerConfig:
        kwargs.setdefault("download_path", tmp_path / "pages")
        kwargs.setdefault("timeout", 2.0)
        return CrawlerConfig(start_url=start_url, query=query or [], **kwargs)

    return factory


@pytest.fixture()
def fake_fetcher_cls():
    return FakeFetcher


@pytest.fixture()
def fake_robots_cls():
    return FakeRobots
