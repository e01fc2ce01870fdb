# site_audit/probes/accessibility.py
"""
Accessibility probe: injects axe-core into the page and condenses its report.
"""
from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from site_audit.logger import logger
from site_audit.probes.base import FailureKind, ProbeResult

AXE_RUN_SCRIPT = """
async (tags) => {
  if (typeof window.axe === 'undefined') {
    return { error: 'axe not injected (CSP or blocked)' };
  }
  const r = await window.axe.run(document, { runOnly: { type: 'tag', values: tags } });
  return {
    violationsCount: (r.violations || []).length,
    passesCount: (r.passes || []).length,
    incompleteCount: (r.incomplete || []).length,
    inapplicableCount: (r.inapplicable || []).length,
    violations: (r.violations || []).map(v => ({
      id: v.id,
      impact: v.impact,
      description: v.description,
      help: v.help,
      helpUrl: v.helpUrl,
      nodesCount: (v.nodes || []).length,
    })),
  };
}
"""


async def inject_axe(page, script_path: Optional[Path], cdn_url: str) -> Optional[str]:
    """Try the local copy first, then the CDN. Returns the source used or None."""
    sources: List[Dict[str, str]] = []
    if script_path is not None:
        sources.append({"path": str(script_path)})
    sources.append({"url": cdn_url})

    for source in sources:
        try:
            await page.add_script_tag(**source)
        except Exception as exc:
            logger.debug("axe injection from %s failed: %s", source, exc)
            continue
        return next(iter(source.values()))
    return None


def condense_axe_report(raw: Dict[str, Any], max_violations: int) -> Dict[str, Any]:
    violations = list(raw.get("violations") or [])
    return {
        "violationsCount": int(raw.get("violationsCount", len(violations))),
        "passesCount": int(raw.get("passesCount", 0)),
        "incompleteCount": int(raw.get("incompleteCount", 0)),
        "inapplicableCount": int(raw.get("inapplicableCount", 0)),
        "violations": violations[:max_violations],
    }


async def run_accessibility(
    page,
    *,
    script_path: Optional[Path],
    cdn_url: str,
    tags: Sequence[str],
    max_violations: int,
) -> ProbeResult:
    source = await inject_axe(page, script_path, cdn_url)
    if source is None:
        return ProbeResult.failed("axe could not be injected", kind=FailureKind.UNAVAILABLE)

    try:
        raw = await page.evaluate(AXE_RUN_SCRIPT, list(tags))
    except Exception as exc:
        return ProbeResult.from_exception(exc, prefix="axe.run failed: ")

    if not isinstance(raw, dict):
        return ProbeResult.failed("axe.run returned no report", kind=FailureKind.PARSE_ERROR)
    if raw.get("error"):
        return ProbeResult.failed(str(raw["error"]), kind=FailureKind.UNAVAILABLE)

    summary = condense_axe_report(raw, max_violations)
    logger.debug("axe (%s): %d violations", source, summary["violationsCount"])
    return ProbeResult.ok(summary)
