# File: tests/test_link_extractor.py
import pytest
from site_audit.crawler.link_extractor import extract_links, extract_links_from_html
from site_audit.utils import normalize_url, origin_of, safe_name_from_url

ORIGIN = "http://example.com:80"


def test_fragment_variants_collapse():
    html = '<a href="/page#a">A</a><a href="/page#b">B</a><a href="/page">C</a>'
    links = extract_links_from_html(html, "http://example.com/", ORIGIN)
    assert links == ["http://example.com/page"]


def test_relative_links_resolved_against_current_page():
    html = '<a href="child">c</a><a href="../up">u</a>'
    links = extract_links_from_html(html, "http://example.com/docs/intro", ORIGIN)
    assert links == ["http://example.com/docs/child", "http://example.com/up"]


def test_other_origins_and_schemes_dropped():
    html = (
        '<a href="https://example.com/tls">scheme differs</a>'
        '<a href="http://example.com:8080/port">port differs</a>'
        '<a href="http://other.com/x">host differs</a>'
        '<a href="mailto:me@example.com">mail</a>'
        '<a href="javascript:void(0)">js</a>'
        '<a href="tel:+100">tel</a>'
        '<a href="/kept">kept</a>'
    )
    links = extract_links_from_html(html, "http://example.com/", ORIGIN)
    assert links == ["http://example.com/kept"]


def test_origin_is_the_entry_origin_not_the_current_page():
    # the browser was redirected to another host; links are still judged
    # against the entry origin
    html = '<a href="/local">l</a><a href="http://example.com/home">h</a>'
    links = extract_links_from_html(html, "http://mirror.net/", ORIGIN)
    assert links == ["http://example.com/home"]


def test_malformed_hrefs_dropped_silently():
    html = '<a href="http://[broken">x</a><a href="">empty</a><a>no href</a><a href="/ok">ok</a>'
    links = extract_links_from_html(html, "http://example.com/", ORIGIN)
    assert links == ["http://example.com/ok"]


def test_discovery_order_preserved():
    html = '<a href="/b">b</a><a href="/a">a</a><a href="/b#x">b again</a><a href="/c">c</a>'
    links = extract_links_from_html(html, "http://example.com/", ORIGIN)
    assert links == ["http://example.com/b", "http://example.com/a", "http://example.com/c"]


@pytest.mark.asyncio()
async def test_extract_links_reads_loaded_page(fake_page):
    page = fake_page({"http://example.com/": '<a href="/x">x</a>'})
    await page.goto("http://example.com/")
    assert await extract_links(page, ORIGIN) == ["http://example.com/x"]


def test_normalize_url_strips_fragment_only():
    assert normalize_url("http://example.com/p?q=1#frag") == "http://example.com/p?q=1"


@pytest.mark.parametrize(
    "url,origin",
    [
        ("http://Example.com/x", "http://example.com:80"),
        ("https://example.com", "https://example.com:443"),
        ("http://example.com:8080/", "http://example.com:8080"),
        ("not a url", None),
        ("http://[broken", None),
    ],
)
def test_origin_of(url, origin):
    assert origin_of(url) == origin


@pytest.mark.parametrize(
    "url,name",
    [
        ("https://www.sust.edu/", "www.sust.edu_"),
        ("https://www.sust.edu/about/staff", "www.sust.edu_about_staff"),
        ("http://localhost:8000/a?b=1#c", "localhost_8000_a_b=1_c"),
        ("https://example.com//double//slash", "example.com_double_slash"),
    ],
)
def test_safe_name_from_url(url, name):
    assert safe_name_from_url(url) == name
