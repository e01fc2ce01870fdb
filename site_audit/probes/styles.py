# site_audit/probes/styles.py
"""
Style statistics probe.

Collects the page's CSS (inline ``<style>`` blocks plus readable linked
stylesheets), sanitizes it and measures its complexity with tinycss2.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Set

import tinycss2
from tinycss2.ast import AtRule, Declaration, LiteralToken, QualifiedRule

from site_audit.logger import logger
from site_audit.probes.base import ProbeResult

GATHER_CSS_SCRIPT = """
() => {
  const chunks = [];
  let crossOriginSkipped = 0;
  document.querySelectorAll('style').forEach(el => {
    if (el.textContent) chunks.push(el.textContent);
  });
  for (const sheet of Array.from(document.styleSheets)) {
    if (!sheet.href) continue;
    try {
      if (sheet.cssRules) {
        chunks.push(Array.from(sheet.cssRules).map(rule => rule.cssText).join('\\n'));
      }
    } catch (e) {
      crossOriginSkipped += 1;
    }
  }
  return { css: chunks.join('\\n'), crossOriginSkipped };
}
"""

THRESHOLDS: Dict[str, int] = {
    "rules": 1500,
    "declarations": 10000,
    "selectors": 2000,
    "size": 250000,
}

STATUS_OK = "Within best-practice limits"
STATUS_ISSUES = "Issues found"

# at-rules whose block holds further rules rather than declarations
_GROUPING_AT_RULES = frozenset(
    {"media", "supports", "layer", "container", "document", "scope", "keyframes", "-webkit-keyframes"}
)

_CHARSET_RE = re.compile(r"@charset[^;]+;", re.IGNORECASE)
_DATA_URL_RE = re.compile(r"""url\(\s*['"]?data:[^)]+['"]?\s*\)""", re.IGNORECASE)
_COMMENT_RE = re.compile(r"/\*.*?\*/", re.DOTALL)
_NON_PRINTABLE_RE = re.compile(r"[^\x09\x0A\x0D\x20-\x7E]")


def sanitize_css(css: str) -> str:
    css = _CHARSET_RE.sub("", css)
    css = _DATA_URL_RE.sub("url()", css)
    css = _COMMENT_RE.sub("", css)
    return _NON_PRINTABLE_RE.sub("", css)


@dataclass
class CssStats:
    rules: int = 0
    declarations: int = 0
    selectors: int = 0
    properties: Set[str] = field(default_factory=set)

    def add_declarations(self, content: Iterable[Any]) -> None:
        for item in tinycss2.parse_declaration_list(
            list(content), skip_comments=True, skip_whitespace=True
        ):
            if isinstance(item, Declaration):
                self.declarations += 1
                self.properties.add(item.lower_name)


def _count_selectors(prelude: List[Any]) -> int:
    if not tinycss2.serialize(prelude).strip():
        return 0
    commas = sum(1 for tok in prelude if isinstance(tok, LiteralToken) and tok.value == ",")
    return commas + 1


def _walk(nodes: Iterable[Any], stats: CssStats) -> None:
    for node in nodes:
        if isinstance(node, QualifiedRule):
            stats.rules += 1
            stats.selectors += _count_selectors(node.prelude)
            stats.add_declarations(node.content)
        elif isinstance(node, AtRule) and node.content is not None:
            if node.lower_at_keyword in _GROUPING_AT_RULES:
                _walk(
                    tinycss2.parse_rule_list(node.content, skip_comments=True, skip_whitespace=True),
                    stats,
                )
            else:
                stats.add_declarations(node.content)


def compute_css_stats(css: str) -> CssStats:
    stats = CssStats()
    _walk(tinycss2.parse_stylesheet(css, skip_comments=True, skip_whitespace=True), stats)
    return stats


def evaluate_thresholds(summary: Dict[str, Any]) -> List[str]:
    warnings: List[str] = []
    if summary["rules"] > THRESHOLDS["rules"]:
        warnings.append(f"Too many CSS rules ({summary['rules']} > {THRESHOLDS['rules']})")
    if summary["declarations"] > THRESHOLDS["declarations"]:
        warnings.append(
            f"Too many declarations ({summary['declarations']} > {THRESHOLDS['declarations']})"
        )
    if summary["selectors"] > THRESHOLDS["selectors"]:
        warnings.append(f"Too many selectors ({summary['selectors']} > {THRESHOLDS['selectors']})")
    if summary["length"] > THRESHOLDS["size"]:
        warnings.append(f"CSS too large ({summary['length']} bytes > {THRESHOLDS['size']})")
    return warnings


def analyze_css(css_text: str, max_length: int) -> ProbeResult:
    """Measure *css_text*; empty or oversized input yields a skip marker."""
    if not css_text or not css_text.strip():
        return ProbeResult.skip("No CSS found", length=len(css_text or ""))
    if len(css_text) > max_length:
        return ProbeResult.skip("CSS too large", length=len(css_text))

    cleaned = sanitize_css(css_text)
    logger.debug("Analyzing CSS (%d chars)", len(cleaned))
    try:
        stats = compute_css_stats(cleaned)
    except Exception as exc:
        return ProbeResult.from_exception(exc, prefix="css analysis failed: ")

    summary: Dict[str, Any] = {
        "length": len(cleaned),
        "rules": stats.rules,
        "declarations": stats.declarations,
        "selectors": stats.selectors,
        "propertiesCount": len(stats.properties),
    }
    warnings = evaluate_thresholds(summary)
    summary["status"] = STATUS_OK if not warnings else STATUS_ISSUES
    summary["warnings"] = warnings
    return ProbeResult.ok(summary)


async def gather_css(page) -> Dict[str, Any]:
    data = await page.evaluate(GATHER_CSS_SCRIPT)
    if not isinstance(data, dict):
        return {"css": "", "crossOriginSkipped": 0}
    return data


async def run_styles(page, *, max_length: int) -> ProbeResult:
    gathered = await gather_css(page)
    skipped_sheets = int(gathered.get("crossOriginSkipped") or 0)
    if skipped_sheets:
        logger.debug("Skipped %d cross-origin stylesheet(s)", skipped_sheets)
    result = analyze_css(gathered.get("css") or "", max_length)
    if result.payload is not None:
        result.payload["crossOriginSkipped"] = skipped_sheets
    return result
