# === FILE: site_audit/crawler/crawler.py ===
from __future__ import annotations

import asyncio
import logging
import time
from typing import Any, List, Optional, Protocol, Tuple

from playwright.async_api import Error as PlaywrightError

from site_audit.config import AuditConfig
from site_audit.crawler.link_extractor import extract_links
from site_audit.crawler.models import CrawlBudget, CrawlState
from site_audit.logger import LOGGER_NAME
from site_audit.utils import normalize_url, origin_of

__all__ = ("Auditor", "Crawler")


class Auditor(Protocol):
    async def audit(self, page: Any, url: str) -> Any: ...


class Crawler:
    """Последовательный обход в глубину с бюджетом страниц и глубины.

    Одна вкладка браузера, одна страница за раз: страница полностью
    проаудирована до того, как её ссылки попадают во frontier.
    """

    def __init__(self, config: AuditConfig, auditor: Auditor) -> None:
        self.config = config
        self.auditor = auditor
        self.budget = CrawlBudget(max_pages=config.max_pages, max_depth=config.max_depth)
        self.state: Optional[CrawlState] = None
        self.logger = logging.getLogger(LOGGER_NAME)

    async def crawl(self, page: Any, entry_url: str) -> List[Any]:
        """Обходит сайт от *entry_url* и возвращает записи аудита в порядке обхода."""
        entry = normalize_url(entry_url)
        base_origin = origin_of(entry)
        if base_origin is None:
            raise ValueError(f"entry URL has no origin: {entry_url!r}")

        state = CrawlState(budget=self.budget)
        self.state = state
        records: List[Any] = []
        frontier: List[Tuple[str, int]] = [(entry, 0)]

        self.logger.info("Старт обхода: %s (pages<=%d, depth<=%d)",
                         entry, self.budget.max_pages, self.budget.max_depth)
        start = time.monotonic()

        while frontier and not state.exhausted:
            url, depth = frontier.pop()
            reason = state.check(url, depth)
            if reason is not None:
                self.logger.debug("Skip %s (depth=%d): %s", url, depth, reason.value)
                continue

            state.mark_visited(url, depth)
            self.logger.info("[%d] depth=%d %s", len(state.visited), depth, url)

            await self._navigate(page, url)
            record = await self._audit(page, url)
            if record is not None:
                records.append(record)
            await asyncio.sleep(self.config.request_pause)

            if depth >= self.budget.max_depth:
                continue
            links = await self._links(page, base_origin)
            # reversed so the first discovered link is popped first
            frontier.extend((link, depth + 1) for link in reversed(links))

        duration = time.monotonic() - start
        self.logger.info("Завершено: %d страниц за %.2f с", len(state.visited), duration)
        return records

    async def _navigate(self, page: Any, url: str) -> None:
        try:
            await page.goto(
                url,
                wait_until=self.config.wait_until,
                timeout=self.config.navigation_timeout * 1000,
            )
        except (PlaywrightError, asyncio.TimeoutError) as exc:
            self.logger.warning("Navigation to %s failed: %s", url, exc)

    async def _audit(self, page: Any, url: str) -> Any:
        try:
            return await self.auditor.audit(page, url)
        except Exception:
            self.logger.exception("Audit of %s failed", url)
            return None

    async def _links(self, page: Any, base_origin: str) -> List[str]:
        try:
            return await extract_links(page, base_origin)
        except Exception as exc:
            self.logger.warning("Link extraction on %s failed: %s", getattr(page, "url", "?"), exc)
            return []
