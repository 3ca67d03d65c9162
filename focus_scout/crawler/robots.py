# focus_scout/crawler/robots.py
"""
Minimal robots.txt policy.

Only ``Disallow:`` directives are honoured, and all of them apply to every
user agent: there is no ``Allow:`` override, no wildcard matching and no
user-agent grouping. A robots file that cannot be fetched allows everything.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Dict, List, Optional
from urllib.parse import urlparse, urlunparse

from aiohttp import ClientError, ClientSession, ClientTimeout

from focus_scout.logger import ROBOTS_LOGGER_NAME
from focus_scout.utils import is_valid_url

__all__ = ("RobotsTxtRules", "RobotsChecker", "robots_url_for")

_DISALLOW = "Disallow:"


class RobotsTxtRules:
    """Disallowed path prefixes collected from a robots.txt body."""

    def __init__(self, text: str) -> None:
        self.disallowed: List[str] = self._parse(text)

    def can_fetch(self, path: str) -> bool:
        """Return False if *path* starts with any disallowed prefix."""
        return not any(path.startswith(prefix) for prefix in self.disallowed)

    @staticmethod
    def _parse(text: str) -> List[str]:
        prefixes: List[str] = []
        index = text.find(_DISALLOW)
        while index != -1:
            index += len(_DISALLOW)
            tokens = text[index:].split(maxsplit=1)
            if not tokens:
                # dangling directive at the end of the file
                break
            prefixes.append(tokens[0])
            index = text.find(_DISALLOW, index)
        return prefixes


def robots_url_for(url: str) -> str:
    parsed = urlparse(url)
    return urlunparse((parsed.scheme, parsed.netloc, "/robots.txt", "", "", ""))


class RobotsChecker:
    """Answers allow/deny for candidate URLs, fetching robots.txt per host.

    Parsed rules are cached per robots URL for the lifetime of the checker;
    ``None`` in the cache means the file was unreachable (allow all).
    """

    def __init__(self, session: ClientSession, timeout: float = 10.0) -> None:
        self.session = session
        self.timeout = ClientTimeout(total=timeout)
        self.logger = logging.getLogger(ROBOTS_LOGGER_NAME)
        self._cache: Dict[str, Optional[RobotsTxtRules]] = {}

    async def is_allowed(self, url: str) -> bool:
        if not is_valid_url(url):
            self.logger.debug("Malformed URL, not trusted: %s", url)
            return False

        rules = await self._rules_for(robots_url_for(url))
        if rules is None:
            return True
        path = urlparse(url).path or "/"
        allowed = rules.can_fetch(path)
        if not allowed:
            self.logger.debug("Disallowed by robots.txt: %s", url)
        return allowed

    async def _rules_for(self, robots_url: str) -> Optional[RobotsTxtRules]:
        if robots_url in self._cache:
            return self._cache[robots_url]

        self.logger.debug("Checking robot protocol %s", robots_url)
        rules: Optional[RobotsTxtRules] = None
        try:
            async with self.session.get(robots_url, timeout=self.timeout) as resp:
                if 200 <= resp.status < 300:
                    text = await resp.text(errors="replace")
                    self.logger.debug("%s:\n%s", robots_url, text)
                    rules = RobotsTxtRules(text)
                else:
                    self.logger.debug("robots.txt %s -> HTTP %s", robots_url, resp.status)
        except (ClientError, asyncio.TimeoutError, ValueError) as exc:
            # no robots.txt → everything is allowed
            self.logger.debug("robots.txt %s unreachable: %s", robots_url, exc)

        self._cache[robots_url] = rules
        return rules
