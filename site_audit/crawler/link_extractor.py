# site_audit/crawler/link_extractor.py
"""
Link extraction for SiteAudit.

Links are resolved against the page's current URL but filtered against the
crawl's entry origin, so redirects never move the crawl to another site.
"""
from __future__ import annotations

from typing import List
from urllib.parse import urljoin, urlsplit

from bs4 import BeautifulSoup
from bs4.element import Tag

from site_audit.utils import is_same_origin, normalize_url, remove_duplicates

_ALLOWED_SCHEMES = ("http", "https")


def extract_links_from_html(html: str, page_url: str, base_origin: str) -> List[str]:
    """
    Extract same-origin HTTP(S) links from *html*.

    Fragments are stripped, duplicates removed (first occurrence wins),
    malformed hrefs dropped silently.
    """
    soup = BeautifulSoup(html, "html.parser")
    links: List[str] = []
    for tag in soup.find_all("a", href=True):
        if not isinstance(tag, Tag):
            continue
        href_val = tag.get("href")
        if not isinstance(href_val, str):
            continue
        raw = href_val.strip()
        if not raw:
            continue
        try:
            absolute = normalize_url(urljoin(page_url, raw))
            scheme = urlsplit(absolute).scheme
        except ValueError:
            continue
        if scheme in _ALLOWED_SCHEMES and is_same_origin(absolute, base_origin):
            links.append(absolute)
    return remove_duplicates(links)


async def extract_links(page, base_origin: str) -> List[str]:
    """Extract links from the DOM currently loaded in *page*."""
    html = await page.content()
    return extract_links_from_html(html, page.url, base_origin)
