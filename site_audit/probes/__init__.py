# site_audit/probes/__init__.py
"""
The five page probes behind one facade.

Each method returns a :class:`ProbeResult`; none of them is expected to
raise, but :class:`~site_audit.auditor.PageAuditor` still guards every call.
"""
from __future__ import annotations

from aiohttp import ClientSession

from site_audit.config import AuditConfig
from site_audit.probes.accessibility import run_accessibility
from site_audit.probes.base import FailureKind, ProbeError, ProbeResult, classify_exception
from site_audit.probes.carbon import estimate_carbon
from site_audit.probes.markup import validate_markup
from site_audit.probes.styles import analyze_css, run_styles
from site_audit.probes.vitals import collect_vitals


class ProbeSet:
    """Binds the probes to one run's configuration and HTTP session."""

    def __init__(self, config: AuditConfig, session: ClientSession) -> None:
        self.config = config
        self.session = session

    async def accessibility(self, page) -> ProbeResult:
        return await run_accessibility(
            page,
            script_path=self.config.axe_script_path,
            cdn_url=self.config.axe_cdn_url,
            tags=self.config.axe_tags,
            max_violations=self.config.axe_max_violations,
        )

    async def markup(self, html: str) -> ProbeResult:
        return await validate_markup(
            self.session,
            html,
            validator_url=self.config.validator_url,
            fallback_url=self.config.validator_fallback_url,
            max_messages=self.config.validation_max_messages,
        )

    async def styles(self, page) -> ProbeResult:
        return await run_styles(page, max_length=self.config.css_max_length)

    async def vitals(self, page) -> ProbeResult:
        return await collect_vitals(
            page,
            window=self.config.vitals_window,
            fallback_delay=self.config.load_fallback_delay,
            load_timeout=self.config.navigation_timeout,
        )

    async def carbon(self, url: str) -> ProbeResult:
        return await estimate_carbon(
            self.session,
            url,
            api_url=self.config.carbon_api_url,
            pause=self.config.carbon_pause,
            backoff=self.config.carbon_backoff,
        )


__all__ = [
    "FailureKind",
    "ProbeError",
    "ProbeResult",
    "ProbeSet",
    "analyze_css",
    "classify_exception",
]
