# site_audit/probes/vitals.py
"""
Page-vitals probe: observes TTFB, LCP, CLS and responsiveness in the page
for a bounded window and returns whatever was captured.
"""
from __future__ import annotations

import asyncio
from typing import Any, Dict

from site_audit.logger import logger
from site_audit.probes.base import FailureKind, ProbeResult

VITALS_SCRIPT = """
async (windowMs) => {
  const results = {};
  const observers = [];
  const observe = (type, onEntries, extra) => {
    try {
      const po = new PerformanceObserver(list => onEntries(list.getEntries()));
      po.observe(Object.assign({ type, buffered: true }, extra || {}));
      observers.push(po);
      return true;
    } catch (e) {
      return false;
    }
  };

  const nav = performance.getEntriesByType('navigation')[0];
  if (nav && nav.responseStart > 0) results.TTFB = nav.responseStart;

  observe('largest-contentful-paint', entries => {
    const last = entries[entries.length - 1];
    if (last) results.LCP = last.renderTime || last.loadTime || last.startTime;
  });

  let cls = 0;
  if (observe('layout-shift', entries => {
    for (const e of entries) if (!e.hadRecentInput) cls += e.value;
    results.CLS = cls;
  })) {
    results.CLS = cls;
  }

  observe('first-input', entries => {
    const first = entries[0];
    if (first) results.FID = first.processingStart - first.startTime;
  });

  observe('event', entries => {
    for (const e of entries) {
      if (e.interactionId && (results.INP === undefined || e.duration > results.INP)) {
        results.INP = e.duration;
      }
    }
  }, { durationThreshold: 40 });

  await new Promise(resolve => setTimeout(resolve, windowMs));
  observers.forEach(po => po.disconnect());
  return results;
}
"""

METRICS = ("TTFB", "LCP", "CLS", "FID", "INP")


async def wait_for_load(page, fallback_delay: float, timeout: float) -> None:
    waiter = getattr(page, "wait_for_load_state", None)
    if waiter is None:
        await asyncio.sleep(fallback_delay)
        return
    try:
        await waiter("load", timeout=timeout * 1000)
    except Exception as exc:
        logger.debug("Load event not observed: %s", exc)


def clean_metrics(raw: Any) -> Dict[str, float]:
    if not isinstance(raw, dict):
        return {}
    metrics: Dict[str, float] = {}
    for name in METRICS:
        value = raw.get(name)
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            metrics[name] = round(float(value), 4)
    return metrics


async def collect_vitals(
    page, *, window: float, fallback_delay: float, load_timeout: float
) -> ProbeResult:
    await wait_for_load(page, fallback_delay, load_timeout)
    try:
        raw = await page.evaluate(VITALS_SCRIPT, int(window * 1000))
    except Exception as exc:
        return ProbeResult.from_exception(exc, prefix="web vitals collection failed: ")
    if raw is None:
        return ProbeResult.failed("web vitals script returned nothing", kind=FailureKind.UNAVAILABLE)
    return ProbeResult.ok(clean_metrics(raw))
