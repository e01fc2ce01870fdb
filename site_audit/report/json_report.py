# site_audit/report/json_report.py

"""
Сохранение JSON-записей SiteAudit: детальная запись страницы, её сводка
и итог прогона.
"""
import json
from pathlib import Path
from typing import Any

from site_audit.aggregator import PageRecord, PageSummary, RunReport
from site_audit.utils import safe_name_from_url

RUN_SUMMARY_NAME = "run-summary.json"


def _dump(data: Any, output: Path) -> Path:
    output.parent.mkdir(parents=True, exist_ok=True)
    with output.open('w', encoding='utf-8') as f:
        json.dump(data, f, ensure_ascii=False, indent=2)
    return output


def detail_path(report_dir: Path | str, url: str) -> Path:
    return Path(report_dir) / f"{safe_name_from_url(url)}-extras.json"


def lighthouse_path(report_dir: Path | str, url: str) -> Path:
    return Path(report_dir) / f"{safe_name_from_url(url)}-lighthouse.html"


def summary_path(summary_dir: Path | str, url: str) -> Path:
    return Path(summary_dir) / f"{safe_name_from_url(url)}-summary.json"


def write_page_record(record: PageRecord, report_dir: Path | str) -> Path:
    """Сохраняет полную запись аудита страницы."""
    return _dump(record.to_dict(), detail_path(report_dir, record.url))


def write_page_summary(summary: PageSummary, summary_dir: Path | str) -> Path:
    """Сохраняет сводку страницы в отдельный каталог."""
    return _dump(dict(summary), summary_path(summary_dir, summary["url"]))


def render_json(report: RunReport, output_path: Path | str) -> Path:
    """
    Сохраняет итог прогона report в формате JSON по указанному пути.

    Пример:
    ```python
    from site_audit.report.json_report import render_json
    report_path = render_json(report, 'reports/summary/run-summary.json')
    ```
    """
    return _dump(report.to_dict(), Path(output_path))
