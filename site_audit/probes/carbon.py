# site_audit/probes/carbon.py
"""
Carbon-estimate probe backed by the Website Carbon API.
"""
from __future__ import annotations

import asyncio

from aiohttp import ClientError, ClientSession

from site_audit.logger import logger
from site_audit.probes.base import FailureKind, ProbeResult, classify_exception


async def estimate_carbon(
    session: ClientSession,
    url: str,
    *,
    api_url: str,
    pause: float,
    backoff: float,
) -> ProbeResult:
    """Query the API for *url*.

    Never raises: a failed request yields a result without payload, and a
    429 answer yields a ``rate_limited`` skip marker after *backoff* seconds.
    """
    await asyncio.sleep(pause)

    try:
        async with session.get(api_url, params={"url": url}) as resp:
            if resp.status == 429:
                logger.warning("Carbon API rate-limited, backing off %.1f s", backoff)
                await asyncio.sleep(backoff)
                return ProbeResult.skip(
                    f"Carbon API rate-limited (429), backed off {backoff:g}s",
                    kind=FailureKind.RATE_LIMITED,
                )
            if not 200 <= resp.status < 300:
                return ProbeResult.failed(f"API error {resp.status}", kind=FailureKind.HTTP_ERROR)
            data = await resp.json(content_type=None)
        payload = {
            "co2PerVisit": float(data["statistics"]["co2"]["grid"]["grams"]),
            "green": data.get("green"),
            "cleanerThan": data.get("cleanerThan"),
        }
    except (ClientError, asyncio.TimeoutError, ValueError, KeyError, TypeError) as exc:
        logger.debug("Carbon estimate for %s failed: %s", url, exc)
        return ProbeResult.failed(str(exc) or type(exc).__name__, kind=classify_exception(exc))
    return ProbeResult.ok(payload)
