# site_audit/probes/markup.py
"""
Markup validation probe backed by the Nu HTML Checker HTTP API.

The local checker is tried first; only a refused connection sends the
document to the public instance.
"""
from __future__ import annotations

import asyncio
from typing import Any, Dict, List

from aiohttp import ClientError, ClientSession

from site_audit.logger import logger
from site_audit.probes.base import FailureKind, ProbeError, ProbeResult, classify_exception

_HEADERS = {"Content-Type": "text/html; charset=utf-8"}


async def submit_document(session: ClientSession, validator_url: str, html: str) -> Dict[str, Any]:
    """POST *html* to a Nu checker and return its JSON answer."""
    try:
        async with session.post(
            validator_url,
            params={"out": "json"},
            data=html.encode("utf-8"),
            headers=_HEADERS,
        ) as resp:
            if resp.status == 429:
                raise ProbeError(FailureKind.RATE_LIMITED, f"validator rate-limited ({validator_url})")
            if resp.status >= 400:
                raise ProbeError(FailureKind.HTTP_ERROR, f"validator HTTP {resp.status}")
            data = await resp.json(content_type=None)
    except ProbeError:
        raise
    except (ClientError, asyncio.TimeoutError, ValueError) as exc:
        raise ProbeError(classify_exception(exc), str(exc) or type(exc).__name__) from exc
    if not isinstance(data, dict) or not isinstance(data.get("messages"), list):
        raise ProbeError(FailureKind.PARSE_ERROR, "validator answer has no messages")
    return data


def condense_messages(data: Dict[str, Any], max_messages: int) -> Dict[str, Any]:
    messages: List[Dict[str, Any]] = data.get("messages", [])
    errors = [m for m in messages if m.get("type") == "error"]
    warnings = [m for m in messages if m.get("type") == "info" and m.get("subType") == "warning"]
    return {
        "errorCount": len(errors),
        "warningCount": len(warnings),
        "messages": [
            {
                "type": m.get("type"),
                "subType": m.get("subType"),
                "message": m.get("message"),
                "line": m.get("lastLine"),
            }
            for m in messages[:max_messages]
        ],
    }


async def validate_markup(
    session: ClientSession,
    html: str,
    *,
    validator_url: str,
    fallback_url: str,
    max_messages: int,
) -> ProbeResult:
    used = validator_url
    try:
        try:
            data = await submit_document(session, validator_url, html)
        except ProbeError as exc:
            if exc.kind is not FailureKind.CONNECTION_REFUSED:
                raise
            logger.warning("Local validator not reachable, falling back to %s", fallback_url)
            used = fallback_url
            data = await submit_document(session, fallback_url, html)
    except ProbeError as exc:
        return ProbeResult.failed(f"html validation failed: {exc.message}", kind=exc.kind, validator=used)

    summary = condense_messages(data, max_messages)
    summary["validator"] = used
    return ProbeResult.ok(summary)
