# File: site_audit/engine.py
"""site_audit.engine: запуск браузера, обход сайта и сборка итогового отчёта."""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path

from aiohttp import ClientSession, ClientTimeout
from playwright.async_api import async_playwright

from site_audit.aggregator import RunReport, aggregate_results
from site_audit.auditor import PageAuditor
from site_audit.config import AuditConfig
from site_audit.crawler.crawler import Crawler
from site_audit.logger import logger
from site_audit.performance import LighthouseReporter
from site_audit.probes import ProbeSet
from site_audit.report.json_report import RUN_SUMMARY_NAME, render_json

__all__ = ["start_audit", "browser_args"]


def browser_args(config: AuditConfig) -> list[str]:
    return [
        f"--remote-debugging-port={config.debug_port}",
        "--no-sandbox",
        "--disable-gpu",
    ]


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


async def start_audit(config: AuditConfig) -> RunReport:
    """
    Запускает браузер, обходит сайт и возвращает RunReport.

    Ошибки запуска браузера не перехватываются: это фатальный сбой прогона.
    """
    started_at = _now()
    logger.info("Starting audit of %s", config.entry_url)

    async with async_playwright() as pw:
        browser = await pw.chromium.launch(headless=config.headless, args=browser_args(config))
        try:
            context = await browser.new_context(user_agent=config.user_agent)
            page = await context.new_page()
            async with ClientSession(
                timeout=ClientTimeout(total=config.http_timeout),
                headers={"User-Agent": config.user_agent},
            ) as session:
                auditor = PageAuditor(config, ProbeSet(config, session), LighthouseReporter(config))
                crawler = Crawler(config, auditor)
                await crawler.crawl(page, config.entry_url)
            await page.close()
            await context.close()
        finally:
            await browser.close()

    report = aggregate_results(
        auditor.summaries, entry_url=config.entry_url, started_at=started_at, finished_at=_now()
    )
    saved = render_json(report, Path(config.summary_dir) / RUN_SUMMARY_NAME)
    logger.info("All done: %d page(s), run summary in %s", report.pages_audited, saved)
    return report
