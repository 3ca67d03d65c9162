# focus_scout/crawler/fetcher.py
"""
Fetcher module: downloads a page and parses it into a :class:`ParsedPage`.

Every failure is raised as a :class:`FetchError` subclass so the scheduler can
skip the candidate; there are no retries.
"""
from __future__ import annotations

import asyncio

from aiohttp import ClientError, ClientSession, ClientTimeout, InvalidURL
from bs4.exceptions import ParserRejectedMarkup

from focus_scout.config import CrawlerConfig
from focus_scout.crawler.errors import ContentFetchError, NetworkFetchError, StatusFetchError
from focus_scout.parser.html_parser import ParsedPage, parse_html

_HTML_TYPES = ("text/html", "application/xhtml+xml", "application/xml", "text/xml")


class Fetcher:
    """Handles HTTP fetching with a per-request timeout."""

    def __init__(self, session: ClientSession, config: CrawlerConfig) -> None:
        self.session = session
        self.config = config
        self._timeout = ClientTimeout(total=config.timeout)

    async def fetch(self, url: str) -> ParsedPage:
        """
        GET *url* and parse the body.

        Raises NetworkFetchError, StatusFetchError or ContentFetchError.
        """
        try:
            async with self.session.get(url, timeout=self._timeout, raise_for_status=False) as resp:
                if not 200 <= resp.status < 300:
                    raise StatusFetchError(url, resp.status)
                mime = resp.headers.get("Content-Type", "").split(";", 1)[0].strip().lower()
                if mime and mime not in _HTML_TYPES:
                    raise ContentFetchError(url, f"unsupported content type {mime!r}")
                raw = await resp.read()
                encoding = resp.get_encoding()
        except InvalidURL as exc:
            raise NetworkFetchError(url, f"invalid URL: {exc}") from exc
        except asyncio.TimeoutError as exc:
            raise NetworkFetchError(url, "timed out") from exc
        except ClientError as exc:
            raise NetworkFetchError(url, str(exc) or type(exc).__name__) from exc

        try:
            # stray invalid bytes become U+FFFD instead of losing the page
            html = raw.decode(encoding, errors="replace")
        except LookupError as exc:
            raise ContentFetchError(url, f"unknown encoding {encoding!r}") from exc
        try:
            return parse_html(html, url, raw)
        except ParserRejectedMarkup as exc:
            raise ContentFetchError(url, f"unparsable markup: {exc}") from exc
