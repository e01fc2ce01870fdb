# site_audit/crawler/models.py
"""
Data models for the SiteAudit crawler.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Set, Tuple


@dataclass(frozen=True, slots=True)
class CrawlBudget:
    max_pages: int
    max_depth: int


class SkipReason(str, Enum):
    VISITED = "visited"
    PAGE_BUDGET = "page_budget"
    TOO_DEEP = "too_deep"


@dataclass(slots=True)
class CrawlState:
    """Visited-set and budget of one crawl. Only the crawler mutates it."""

    budget: CrawlBudget
    visited: Set[str] = field(default_factory=set)
    order: List[Tuple[str, int]] = field(default_factory=list)

    @property
    def exhausted(self) -> bool:
        return len(self.visited) >= self.budget.max_pages

    def check(self, url: str, depth: int) -> Optional[SkipReason]:
        """Return why *url* must be skipped, or None if it may be visited."""
        if url in self.visited:
            return SkipReason.VISITED
        if self.exhausted:
            return SkipReason.PAGE_BUDGET
        if depth > self.budget.max_depth:
            return SkipReason.TOO_DEEP
        return None

    def mark_visited(self, url: str, depth: int) -> None:
        if url in self.visited or self.exhausted:
            raise RuntimeError(f"cannot visit {url}: already visited or budget spent")
        self.visited.add(url)
        self.order.append((url, depth))
