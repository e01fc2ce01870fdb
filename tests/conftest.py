# File: tests/conftest.py
from __future__ import annotations

from collections.abc import AsyncIterator
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Optional

import pytest
import pytest_asyncio
from aiohttp import web
from playwright.async_api import Error as PlaywrightError

from site_audit.config import AuditConfig
from site_audit.interaction import AUTO_SCROLL_SCRIPT
from site_audit.probes.accessibility import AXE_RUN_SCRIPT
from site_audit.probes.styles import GATHER_CSS_SCRIPT
from site_audit.probes.vitals import VITALS_SCRIPT

AXE_REPORT: Dict[str, Any] = {
    "violationsCount": 2,
    "passesCount": 30,
    "incompleteCount": 1,
    "inapplicableCount": 40,
    "violations": [
        {"id": "image-alt", "impact": "critical", "description": "d", "help": "h",
         "helpUrl": "https://dequeuniversity.com/rules/axe/4.9/image-alt", "nodesCount": 3},
        {"id": "label", "impact": "serious", "description": "d", "help": "h",
         "helpUrl": "https://dequeuniversity.com/rules/axe/4.9/label", "nodesCount": 1},
    ],
}


class FakeKeyboard:
    def __init__(self) -> None:
        self.typed: List[str] = []

    async def type(self, text: str, delay: Optional[float] = None) -> None:
        self.typed.append(text)


class FakeBrowserPage:
    """Stand-in for a Playwright page serving a mapping URL -> HTML."""

    def __init__(
        self,
        site: Dict[str, str],
        *,
        failing: Iterable[str] = (),
        css: str = "body { color: red; }",
        vitals: Optional[Dict[str, float]] = None,
    ) -> None:
        self.site = site
        self.failing = set(failing)
        self.url = "about:blank"
        self.visits: List[str] = []
        self.keyboard = FakeKeyboard()
        self.injected: List[Dict[str, str]] = []
        self.inject_fails = False
        self.axe_defined = True
        self.axe_report = dict(AXE_REPORT)
        self.css = css
        self.vitals = vitals if vitals is not None else {"TTFB": 120.0, "LCP": 900.0, "CLS": 0.0}

    async def goto(self, url: str, wait_until: Optional[str] = None, timeout: Optional[float] = None):
        self.visits.append(url)
        if url in self.failing:
            raise PlaywrightError(f"net::ERR_CONNECTION_RESET at {url}")
        self.url = url

    async def content(self) -> str:
        return self.site.get(self.url, "<html><body></body></html>")

    async def add_script_tag(self, **kwargs: str) -> None:
        if self.inject_fails:
            raise PlaywrightError("Refused to load the script (Content-Security-Policy)")
        self.injected.append(kwargs)

    async def evaluate(self, script: str, arg: Any = None) -> Any:
        if script == AUTO_SCROLL_SCRIPT:
            return None
        if script == AXE_RUN_SCRIPT:
            if not self.injected or not self.axe_defined:
                return {"error": "axe not injected (CSP or blocked)"}
            return self.axe_report
        if script == GATHER_CSS_SCRIPT:
            return {"css": self.css, "crossOriginSkipped": 0}
        if script == VITALS_SCRIPT:
            return dict(self.vitals)
        raise AssertionError(f"unexpected script: {script[:40]!r}")

    async def wait_for_load_state(self, state: str = "load", timeout: Optional[float] = None) -> None:
        return None

    async def query_selector_all(self, selector: str) -> list:
        return []

    async def query_selector(self, selector: str):
        return None


class ServiceState:
    """Mutable answers of the fake validator / carbon API server."""

    def __init__(self) -> None:
        self.validator_status = 200
        self.validator_messages: List[Dict[str, Any]] = [
            {"type": "error", "message": "Stray end tag div.", "lastLine": 10},
            {"type": "info", "subType": "warning", "message": "Consider adding lang.", "lastLine": 1},
        ]
        self.carbon_status = 200
        self.carbon_body: Any = {
            "green": True,
            "cleanerThan": 0.82,
            "statistics": {"co2": {"grid": {"grams": 0.31}}},
        }
        self.validator_calls = 0
        self.carbon_calls: List[str] = []


async def _serve_app(app: web.Application, port: int) -> AsyncIterator[str]:
    """Start *app* on *port*, yield base URL, ensure cleanup."""
    runner = web.AppRunner(app)
    await runner.setup()
    site = web.TCPSite(runner, "127.0.0.1", port)
    await site.start()
    try:
        yield f"http://127.0.0.1:{port}"
    finally:
        await runner.cleanup()


@pytest.fixture()
def service_state() -> ServiceState:
    return ServiceState()


@pytest_asyncio.fixture
async def services_url(unused_tcp_port: int, service_state: ServiceState) -> AsyncIterator[str]:
    app = web.Application()

    async def validate(request: web.Request) -> web.Response:
        service_state.validator_calls += 1
        assert request.query.get("out") == "json"
        await request.text()
        if service_state.validator_status != 200:
            return web.Response(status=service_state.validator_status)
        return web.json_response({"messages": service_state.validator_messages})

    async def carbon(request: web.Request) -> web.Response:
        service_state.carbon_calls.append(request.query.get("url", ""))
        if service_state.carbon_status != 200:
            return web.Response(status=service_state.carbon_status)
        body = service_state.carbon_body
        if isinstance(body, str):
            return web.Response(text=body, content_type="application/json")
        return web.json_response(body)

    app.router.add_post("/nu/", validate)
    app.router.add_get("/carbon/site", carbon)

    async for url in _serve_app(app, unused_tcp_port):
        yield url


@pytest.fixture()
def make_config(tmp_path: Path) -> Callable[..., AuditConfig]:
    """Factory for a fast AuditConfig writing into tmp_path."""

    def _make(**overrides: Any) -> AuditConfig:
        values: Dict[str, Any] = dict(
            base_url="http://site.test/",
            max_pages=8,
            max_depth=2,
            request_pause=0,
            probe_pause=0,
            navigation_timeout=5,
            report_dir=tmp_path / "reports",
            summary_dir=tmp_path / "reports" / "summary",
            vitals_window=0,
            load_fallback_delay=0,
            carbon_pause=0,
            carbon_backoff=0,
            http_timeout=5,
            lighthouse_enabled=False,
        )
        values.update(overrides)
        return AuditConfig(**values)

    return _make


@pytest.fixture()
def fake_page() -> Callable[..., FakeBrowserPage]:
    """Factory building a FakeBrowserPage over a URL -> HTML mapping."""
    return FakeBrowserPage


@pytest.fixture()
def refused_url(unused_tcp_port_factory) -> str:
    """URL on a local port nothing listens on."""
    return f"http://127.0.0.1:{unused_tcp_port_factory()}/"
