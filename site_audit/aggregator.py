# File: site_audit/aggregator.py
"""site_audit.aggregator: записи аудита страниц, их сводки и итог прогона."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, TypedDict

from site_audit.probes.base import ProbeResult
from site_audit.scoring import ScoreSet

PROBE_FIELDS = ("axe", "htmlValidation", "cssStats", "webVitals", "carbon")
SCORE_KEYS = ("axeScore", "cssScore", "htmlScore", "webVitalsScore", "carbonScore", "combinedOverall")


@dataclass(slots=True)
class PageRecord:
    """Полный результат аудита одной страницы."""

    url: str
    timestamp: str
    axe: ProbeResult
    html_validation: ProbeResult
    css_stats: ProbeResult
    web_vitals: ProbeResult
    carbon: ProbeResult
    scores: ScoreSet
    performance_report: ProbeResult

    def probes(self) -> Dict[str, ProbeResult]:
        return {
            "axe": self.axe,
            "htmlValidation": self.html_validation,
            "cssStats": self.css_stats,
            "webVitals": self.web_vitals,
            "carbon": self.carbon,
        }

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"url": self.url, "timestamp": self.timestamp}
        data.update({name: result.to_dict() for name, result in self.probes().items()})
        data["scores"] = self.scores.to_dict()
        data["performanceReport"] = self.performance_report.to_dict()
        return data


class PageSummary(TypedDict, total=False):
    """Сокращённая проекция PageRecord для сравнения страниц."""

    url: str
    timestamp: str
    scores: Dict[str, Optional[int]]
    axeViolations: Optional[int]
    htmlErrors: Optional[int]
    htmlWarnings: Optional[int]
    cssRules: Optional[int]
    cssSelectors: Optional[int]
    cssStatus: Optional[str]
    LCP: Optional[float]
    CLS: Optional[float]
    TTFB: Optional[float]
    INP: Optional[float]
    co2PerVisit: Optional[float]
    failedProbes: List[str]
    skippedProbes: List[str]


def _get(result: ProbeResult, key: str) -> Any:
    return result.payload.get(key) if result.payload is not None else None


def summarize_record(record: PageRecord) -> PageSummary:
    """Детерминированно сворачивает PageRecord в PageSummary."""
    probes = record.probes()
    return {
        "url": record.url,
        "timestamp": record.timestamp,
        "scores": record.scores.to_dict(),
        "axeViolations": _get(record.axe, "violationsCount"),
        "htmlErrors": _get(record.html_validation, "errorCount"),
        "htmlWarnings": _get(record.html_validation, "warningCount"),
        "cssRules": _get(record.css_stats, "rules"),
        "cssSelectors": _get(record.css_stats, "selectors"),
        "cssStatus": _get(record.css_stats, "status"),
        "LCP": _get(record.web_vitals, "LCP"),
        "CLS": _get(record.web_vitals, "CLS"),
        "TTFB": _get(record.web_vitals, "TTFB"),
        "INP": _get(record.web_vitals, "INP"),
        "co2PerVisit": _get(record.carbon, "co2PerVisit"),
        "failedProbes": [name for name, r in probes.items() if r.error is not None],
        "skippedProbes": [name for name, r in probes.items() if r.skipped],
    }


@dataclass(slots=True)
class RunReport:
    """Итог прогона: сводки страниц и средние оценки по осям."""

    entry_url: str
    started_at: str
    finished_at: str = ""
    pages: List[PageSummary] = field(default_factory=list)
    average_scores: Dict[str, Optional[float]] = field(default_factory=dict)
    failed_probe_counts: Dict[str, int] = field(default_factory=dict)

    @property
    def pages_audited(self) -> int:
        return len(self.pages)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "entryUrl": self.entry_url,
            "startedAt": self.started_at,
            "finishedAt": self.finished_at,
            "pagesAudited": self.pages_audited,
            "averageScores": self.average_scores,
            "failedProbeCounts": self.failed_probe_counts,
            "pages": self.pages,
        }

    def json(self, *, pretty: bool = False) -> str:
        """Возвращает JSON-представление RunReport."""
        return json.dumps(self.to_dict(), ensure_ascii=False, indent=2 if pretty else None)


def _average_scores(pages: List[PageSummary]) -> Dict[str, Optional[float]]:
    averages: Dict[str, Optional[float]] = {}
    for key in SCORE_KEYS:
        values = [p["scores"][key] for p in pages if p["scores"].get(key) is not None]
        averages[key] = round(sum(values) / len(values), 1) if values else None
    return averages


def aggregate_results(
    summaries: List[PageSummary], *, entry_url: str, started_at: str, finished_at: str = ""
) -> RunReport:
    """Собирает сводки страниц в RunReport."""
    report = RunReport(entry_url=entry_url, started_at=started_at, finished_at=finished_at)
    report.pages = list(summaries)
    report.average_scores = _average_scores(report.pages)
    report.failed_probe_counts = {
        name: sum(1 for p in report.pages if name in p.get("failedProbes", []))
        for name in PROBE_FIELDS
    }
    return report
