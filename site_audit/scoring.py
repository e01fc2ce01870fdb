# File: site_audit/scoring.py
"""site_audit.scoring: перевод результатов проб в оценки 0–100.

Все функции тотальны: отсутствие данных даёт ``None``, и такая оценка
исключается из среднего, а не учитывается как ноль.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple

from site_audit.probes.base import ProbeResult

Payload = Optional[Mapping[str, Any]]

# (metric, [(limit, penalty), ...]); the first exceeded limit wins
VITALS_DEDUCTIONS: Tuple[Tuple[str, Tuple[Tuple[float, int], ...]], ...] = (
    ("LCP", ((4000, 40), (2500, 20))),
    ("CLS", ((0.25, 30), (0.1, 10))),
    ("TTFB", ((1800, 20), (800, 10))),
    ("INP", ((300, 20), (200, 10))),
)

CARBON_BANDS: Tuple[Tuple[float, int], ...] = ((0.5, 100), (1.0, 80), (2.0, 60))
CARBON_FLOOR_SCORE = 40
CSS_PENALTY_SCORE = 60


def _payload(result: ProbeResult | Payload) -> Payload:
    if isinstance(result, ProbeResult):
        return result.payload
    if isinstance(result, Mapping) and ("error" in result or result.get("skipped")):
        return None
    return result


def _number(value: Any) -> Optional[float]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if math.isnan(value):
        return None
    return float(value)


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def score_accessibility(result: ProbeResult | Payload) -> Optional[int]:
    payload = _payload(result)
    count = _number(payload.get("violationsCount")) if payload else None
    if count is None:
        return None
    return max(0, 100 - 10 * int(count))


def score_styles(result: ProbeResult | Payload) -> Optional[int]:
    payload = _payload(result)
    if not payload or "status" not in payload:
        return None
    return 100 if not payload.get("warnings") else CSS_PENALTY_SCORE


def score_markup(result: ProbeResult | Payload) -> Optional[int]:
    payload = _payload(result)
    count = _number(payload.get("errorCount")) if payload else None
    if count is None:
        return None
    return max(0, 100 - 10 * int(count))


def score_vitals(result: ProbeResult | Payload) -> Optional[int]:
    payload = _payload(result)
    if not payload:
        return None
    metrics = {name: _number(payload.get(name)) for name in ("LCP", "CLS", "TTFB", "INP", "FID")}
    if metrics["INP"] is None:
        metrics["INP"] = metrics["FID"]
    if all(metrics[name] is None for name, _ in VITALS_DEDUCTIONS):
        return None

    score = 100
    for name, tiers in VITALS_DEDUCTIONS:
        value = metrics[name]
        if value is None:
            continue
        for limit, penalty in tiers:
            if value > limit:
                score -= penalty
                break
    return max(0, score)


def score_carbon(result: ProbeResult | Payload) -> Optional[int]:
    payload = _payload(result)
    grams = _number(payload.get("co2PerVisit")) if payload else None
    if grams is None:
        return None
    for limit, score in CARBON_BANDS:
        if grams <= limit:
            return score
    return CARBON_FLOOR_SCORE


def combine(scores: Iterable[Optional[int]]) -> int:
    present = [s for s in scores if s is not None]
    if not present:
        return 0
    return round_half_up(sum(present) / len(present))


@dataclass(frozen=True, slots=True)
class ScoreSet:
    axe: Optional[int] = None
    css: Optional[int] = None
    html: Optional[int] = None
    web_vitals: Optional[int] = None
    carbon: Optional[int] = None

    @property
    def combined_overall(self) -> int:
        return combine((self.axe, self.css, self.html, self.web_vitals, self.carbon))

    def to_dict(self) -> Dict[str, Optional[int]]:
        return {
            "axeScore": self.axe,
            "cssScore": self.css,
            "htmlScore": self.html,
            "webVitalsScore": self.web_vitals,
            "carbonScore": self.carbon,
            "combinedOverall": self.combined_overall,
        }


def compute_scores(
    *,
    axe: ProbeResult | Payload,
    css: ProbeResult | Payload,
    html: ProbeResult | Payload,
    vitals: ProbeResult | Payload,
    carbon: ProbeResult | Payload,
) -> ScoreSet:
    return ScoreSet(
        axe=score_accessibility(axe),
        css=score_styles(css),
        html=score_markup(html),
        web_vitals=score_vitals(vitals),
        carbon=score_carbon(carbon),
    )


__all__ = [
    "ScoreSet",
    "combine",
    "compute_scores",
    "round_half_up",
    "score_accessibility",
    "score_carbon",
    "score_markup",
    "score_styles",
    "score_vitals",
]
