# focus_scout/crawler/errors.py
"""
Exception taxonomy for the FocusScout crawler.

Fetch failures are recovered by the scheduler (the candidate is skipped),
write failures are logged; neither aborts a crawl.
"""
from __future__ import annotations

from pathlib import Path
from typing import Optional

__all__ = (
    "FocusScoutError",
    "FetchError",
    "NetworkFetchError",
    "StatusFetchError",
    "ContentFetchError",
    "WriteError",
)


class FocusScoutError(Exception):
    """Base class for all project errors."""


class FetchError(FocusScoutError):
    """A page could not be turned into a document."""

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(f"{url}: {reason}")
        self.url = url
        self.reason = reason


class NetworkFetchError(FetchError):
    """Connection refused, DNS failure, timeout, bad URL."""


class StatusFetchError(FetchError):
    """The server answered with a non-2xx status."""

    def __init__(self, url: str, status: int) -> None:
        super().__init__(url, f"HTTP {status}")
        self.status = status


class ContentFetchError(FetchError):
    """The body is not HTML or the markup cannot be decoded or parsed."""


class WriteError(FocusScoutError):
    """A fetched page could not be persisted."""

    def __init__(self, path: Path, cause: Optional[BaseException] = None) -> None:
        super().__init__(f"Write to disk failed: {path}" + (f" ({cause})" if cause else ""))
        self.path = path
