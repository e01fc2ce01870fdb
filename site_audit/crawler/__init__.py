# site_audit/crawler/__init__.py
"""Bounded depth-first crawler and same-origin link extraction."""
from site_audit.crawler.crawler import Crawler
from site_audit.crawler.link_extractor import extract_links, extract_links_from_html
from site_audit.crawler.models import CrawlBudget, CrawlState, SkipReason

__all__ = [
    "Crawler",
    "CrawlBudget",
    "CrawlState",
    "SkipReason",
    "extract_links",
    "extract_links_from_html",
]
