"""site_audit.report: запись JSON-записей страниц и отчётов прогона (JSON и HTML)."""

from site_audit.report.html_report import render_html
from site_audit.report.json_report import (
    RUN_SUMMARY_NAME,
    detail_path,
    lighthouse_path,
    render_json,
    summary_path,
    write_page_record,
    write_page_summary,
)

__all__ = [
    "RUN_SUMMARY_NAME",
    "detail_path",
    "lighthouse_path",
    "render_html",
    "render_json",
    "summary_path",
    "write_page_record",
    "write_page_summary",
]
