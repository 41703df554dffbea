# File: tests/test_link_extractor.py
from collections import Counter
from urllib.parse import urlparse

import pytest

from conftest import FakeFetcher, RecordingObserver
from url_scan.crawler.link_extractor import (
    LinkExtractor,
    extract_links,
    find_urls_in_text,
    is_code_asset,
    parse_document,
)
from url_scan.utils import resolve_url

BASE = "http://a.com/dir/page.html"


def links_of(html: str, base: str = BASE):
    return extract_links(base, parse_document(html))


@pytest.mark.parametrize(
    "html,expected",
    [
        ('<a href="/b">b</a>', ["http://a.com/b"]),
        ('<img src="img.png">', ["http://a.com/dir/img.png"]),
        ('<object data="movie.swf"></object>', ["http://a.com/dir/movie.swf"]),
        ('<form action="/submit"></form>', ["http://a.com/submit"]),
        ('<iframe src="//cdn.b.com/f"></iframe>', ["http://cdn.b.com/f"]),
        ('<script src="app.js"></script>', ["http://a.com/dir/app.js"]),
        ('<link rel="stylesheet" href="../s.css">', ["http://a.com/s.css"]),
        ('<button formaction="/go">x</button>', ["http://a.com/go"]),
        ('<blockquote cite="/q1"></blockquote>', ["http://a.com/q1"]),
        ('<del cite="/d"></del><ins cite="/i"></ins><q cite="/q">x</q>', ["http://a.com/d", "http://a.com/i", "http://a.com/q"]),
        ('<command icon="/icon.png"></command>', ["http://a.com/icon.png"]),
        ('<data value="/v">v</data>', ["http://a.com/v"]),
        ('<video src="/v.mp4"><source src="/v.webm"><track src="/t.vtt"></video>', ["http://a.com/v.mp4", "http://a.com/v.webm", "http://a.com/t.vtt"]),
    ],
)
def test_tag_attribute_mapping(html, expected):
    assert links_of(html) == expected


SOURCE_TAGS = (
    "a", "link", "img", "iframe", "frame", "embed", "script", "source", "track",
    "video", "audio", "applet", "object", "area", "base", "input", "form",
)


@pytest.mark.parametrize("tag", SOURCE_TAGS)
@pytest.mark.parametrize("attr", ["href", "src", "data", "action"])
def test_source_tags_yield_each_url_attribute(tag, attr):
    html = f'<{tag} {attr}="/{tag}-{attr}"></{tag}>'
    assert links_of(html) == [f"http://a.com/{tag}-{attr}"]


@pytest.mark.parametrize(
    "html,expected",
    [
        ('<embed src="/clip.swf">', ["http://a.com/clip.swf"]),
        ('<applet data="applet.class"></applet>', ["http://a.com/dir/applet.class"]),
        ('<map><area href="/zone"></map>', ["http://a.com/zone"]),
        ('<base href="/root/">', ["http://a.com/root/"]),
        ('<input type="image" src="btn.png">', ["http://a.com/dir/btn.png"]),
        ('<frameset><frame src="left.html"></frameset>', ["http://a.com/dir/left.html"]),
        ('<audio src="/a.mp3"></audio>', ["http://a.com/a.mp3"]),
    ],
)
def test_less_common_source_tags(html, expected):
    assert links_of(html) == expected


def test_unlisted_tags_and_attributes_are_ignored():
    html = '<div href="/x" src="/y"></div><a title="/t" class="c">t</a><button href="/z">z</button><span cite="/c"></span>'
    assert links_of(html) == []


def test_every_source_attribute_of_a_tag_is_collected():
    assert links_of('<a href="/h" src="/s" data="/d" action="/a">x</a>') == [
        "http://a.com/h",
        "http://a.com/s",
        "http://a.com/d",
        "http://a.com/a",
    ]


def test_meta_refresh_url_is_extracted():
    html = (
        '<meta http-equiv="refresh" content="0; url=/next?a=1">'
        '<meta http-equiv="refresh" content="5;URL=http://b.com/">'
        '<meta name="description" content="no link here">'
    )
    assert links_of(html) == ["http://a.com/next?a=1", "http://b.com/"]


def test_nested_document_order_is_preserved():
    html = "<div>" * 50 + '<a href="/deep">d</a>' + "</div>" * 50 + '<a href="/after">a</a>'
    assert links_of(html) == ["http://a.com/deep", "http://a.com/after"]


def test_absolute_and_non_http_candidates_pass_through():
    html = '<a href="https://b.com/x">b</a><a href="mailto:me@a.com">m</a><a href="javascript:void(0)">j</a>'
    assert links_of(html) == ["https://b.com/x", "mailto:me@a.com", "javascript:void(0)"]


def test_extraction_is_idempotent():
    soup = parse_document('<a href="/1"></a><img src="/2"><a href="/1"></a>')
    first = extract_links(BASE, soup)
    second = extract_links(BASE, soup)
    assert Counter(first) == Counter(second)
    assert len(first) == 3


def test_relative_resolution_keeps_base_host():
    resolved = resolve_url("http://a.com/x/", "y/../z?q=1")
    assert urlparse(resolved).hostname == "a.com"
    assert resolved == "http://a.com/x/z?q=1"


def test_malformed_base_passes_candidate_through():
    assert resolve_url("http://[::1", "/b") == "/b"


@pytest.mark.parametrize(
    "url,expected",
    [
        ("http://a.com/app.js", True),
        ("http://a.com/app.js?v=3", True),
        ("http://a.com/Report.PDF", True),
        ("http://a.com/data.json", True),
        ("http://a.com/script.sh", True),
        ("http://a.com/", False),
        ("http://a.com/image.png", False),
        ("http://a.com/path", False),
        ("http://a.com/x?file=a.js", False),
    ],
)
def test_is_code_asset(url, expected):
    assert is_code_asset(url) is expected


def test_find_urls_in_text_stops_at_quotes_and_whitespace():
    text = """var a = "http://cdn.a.com/lib.js"; var b='https://b.com/x?y=1'
    // see http://c.com/doc and ftp://ignored.com"""
    assert find_urls_in_text(text) == ["http://cdn.a.com/lib.js", "https://b.com/x?y=1", "http://c.com/doc"]


@pytest.mark.asyncio()
async def test_extract_includes_urls_embedded_in_assets():
    fetcher = FakeFetcher({"http://a.com/app.js": 'load("http://cdn.a.com/lib.js")'})
    observer = RecordingObserver()
    extractor = LinkExtractor(fetcher, observer)

    urls = await extractor.extract("http://a.com/", '<script src="/app.js"></script><a href="/b">b</a>')

    assert urls == ["http://a.com/app.js", "http://a.com/b", "http://cdn.a.com/lib.js"]
    assert observer.embedded == {"http://a.com/app.js": ["http://cdn.a.com/lib.js"]}


@pytest.mark.asyncio()
async def test_assets_are_fetched_once_per_occurrence():
    fetcher = FakeFetcher({"http://a.com/app.js": "http://x.com/1"})
    extractor = LinkExtractor(fetcher)

    urls = await extractor.extract("http://a.com/", '<script src="/app.js"></script><link href="/app.js">')

    assert fetcher.calls["http://a.com/app.js"] == 2
    assert urls.count("http://x.com/1") == 2


@pytest.mark.asyncio()
async def test_urls_found_in_assets_are_not_scanned_again():
    fetcher = FakeFetcher({
        "http://a.com/app.js": "http://a.com/second.js",
        "http://a.com/second.js": "http://never.com/",
    })
    extractor = LinkExtractor(fetcher)

    urls = await extractor.extract("http://a.com/", '<script src="/app.js"></script>')

    assert urls == ["http://a.com/app.js", "http://a.com/second.js"]
    assert "http://a.com/second.js" not in fetcher.calls


@pytest.mark.asyncio()
async def test_failing_asset_is_skipped_and_reported():
    fetcher = FakeFetcher({})
    observer = RecordingObserver()
    extractor = LinkExtractor(fetcher, observer)

    urls = await extractor.extract("http://a.com/", '<script src="/gone.js"></script><a href="/b">b</a>')

    assert urls == ["http://a.com/gone.js", "http://a.com/b"]
    assert observer.asset_errors == ["http://a.com/gone.js"]


@pytest.mark.asyncio()
async def test_invalid_candidates_are_not_fetched_as_assets():
    fetcher = FakeFetcher({})
    extractor = LinkExtractor(fetcher)

    await extractor.extract("http://a.com/", '<a href="mailto:x@a.com.js">m</a><a href="ftp://a.com/f.txt">f</a>')

    assert not fetcher.calls
