# focus_scout/crawler/models.py
"""
Data models for the FocusScout crawler.
"""
from __future__ import annotations

import enum
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional


@dataclass(slots=True, frozen=True)
class ScoredURL:
    """A frontier entry. Two entries are equal when their URLs are equal,
    whatever their scores."""

    url: str
    score: int = field(default=0, compare=False)


class CrawlState(str, enum.Enum):
    SEEDED = "seeded"
    RUNNING = "running"
    EXHAUSTED = "exhausted"
    BUDGET_REACHED = "budget_reached"

    @property
    def terminal(self) -> bool:
        return self in (CrawlState.EXHAUSTED, CrawlState.BUDGET_REACHED)


@dataclass(slots=True)
class PageData:
    """A visited page: canonical URL, frontier score and where it was saved."""

    url: str
    score: int
    path: Optional[Path] = None


@dataclass(slots=True)
class CrawlResult:
    """Outcome of one crawl run."""

    state: CrawlState
    pages: List[PageData] = field(default_factory=list)
    skipped_robots: int = 0
    failed_fetches: int = 0
    failed_writes: int = 0

    @property
    def visited(self) -> List[str]:
        return [p.url for p in self.pages]

    def as_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["state"] = self.state.value
        for page in data["pages"]:
            page["path"] = str(page["path"]) if page["path"] is not None else None
        return data
