# File: site_audit/auditor.py
"""site_audit.auditor: аудит одной страницы.

Порядок: взаимодействие со страницей → снимок DOM → пять проб → оценки → отчёт
Lighthouse → запись детальной записи и сводки. Исключение любой пробы
превращается в маркер ошибки этой пробы; аудит всегда завершается и
всегда пишет результат.
"""

from __future__ import annotations

import asyncio
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Awaitable, Callable, List, Optional, Protocol

from site_audit.aggregator import PageRecord, PageSummary, summarize_record
from site_audit.config import AuditConfig
from site_audit.interaction import simulate_interaction
from site_audit.logger import logger
from site_audit.probes import ProbeSet
from site_audit.probes.base import ProbeResult
from site_audit.report.json_report import lighthouse_path, write_page_record, write_page_summary
from site_audit.scoring import compute_scores

__all__ = ["PageAuditor", "PerformanceReporter"]


class PerformanceReporter(Protocol):
    async def generate(self, url: str, output_path: Path) -> ProbeResult: ...


async def _guarded(name: str, factory: Callable[[], Awaitable[ProbeResult]]) -> ProbeResult:
    try:
        result = await factory()
    except Exception as exc:
        logger.warning("Probe %s raised: %s", name, exc)
        return ProbeResult.from_exception(exc, prefix=f"{name} failed: ")
    if not isinstance(result, ProbeResult):
        return ProbeResult.failed(f"{name} returned {type(result).__name__}")
    return result


class PageAuditor:
    """Оркестратор проб для одной страницы."""

    def __init__(
        self,
        config: AuditConfig,
        probes: ProbeSet,
        reporter: Optional[PerformanceReporter] = None,
        *,
        interact: Callable[[Any], Awaitable[None]] = simulate_interaction,
    ) -> None:
        self.config = config
        self.probes = probes
        self.reporter = reporter
        self.interact = interact
        self.summaries: List[PageSummary] = []

    async def _snapshot(self, page: Any) -> ProbeResult:
        return ProbeResult.ok({"html": await page.content()})

    async def _markup(self, snapshot: ProbeResult) -> ProbeResult:
        if not snapshot.succeeded:
            return snapshot
        return await self.probes.markup(snapshot.payload["html"])

    async def _performance_report(self, url: str) -> ProbeResult:
        if self.reporter is None:
            return ProbeResult.skip("No performance reporter configured")
        return await self.reporter.generate(url, lighthouse_path(self.config.report_dir, url))

    async def audit(self, page: Any, url: str) -> PageRecord:
        logger.info("Auditing page: %s", url)
        timestamp = datetime.now(timezone.utc).isoformat()

        try:
            await self.interact(page)
        except Exception as exc:
            logger.debug("Interaction on %s failed: %s", url, exc)

        # DOM is serialized before axe is injected into it
        snapshot = await _guarded("htmlValidation", lambda: self._snapshot(page))

        axe = await _guarded("axe", lambda: self.probes.accessibility(page))
        await asyncio.sleep(self.config.probe_pause)
        html_validation = await _guarded("htmlValidation", lambda: self._markup(snapshot))
        await asyncio.sleep(self.config.probe_pause)
        css_stats = await _guarded("cssStats", lambda: self.probes.styles(page))
        web_vitals = await _guarded("webVitals", lambda: self.probes.vitals(page))
        carbon = await _guarded("carbon", lambda: self.probes.carbon(url))

        scores = compute_scores(
            axe=axe, css=css_stats, html=html_validation, vitals=web_vitals, carbon=carbon
        )
        performance = await _guarded("performanceReport", lambda: self._performance_report(url))

        record = PageRecord(
            url=url,
            timestamp=timestamp,
            axe=axe,
            html_validation=html_validation,
            css_stats=css_stats,
            web_vitals=web_vitals,
            carbon=carbon,
            scores=scores,
            performance_report=performance,
        )
        summary = summarize_record(record)
        self.summaries.append(summary)
        self._persist(record, summary)
        logger.info("Scores for %s: %s", url, scores.to_dict())
        return record

    def _persist(self, record: PageRecord, summary: PageSummary) -> None:
        try:
            detail = write_page_record(record, self.config.report_dir)
            short = write_page_summary(summary, self.config.summary_dir)
        except OSError:
            logger.exception("Could not save reports for %s", record.url)
            return
        logger.info("Saved reports for %s: %s, %s", record.url, detail, short)
