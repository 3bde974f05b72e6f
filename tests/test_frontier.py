# File: tests/test_frontier.py
"""Same-domain traversal against an in-memory web."""
from __future__ import annotations

import pytest

from contact_scout.crawler.frontier import DomainCrawler
from contact_scout.crawler.routes import AllowListClassifier, DenyListClassifier
from contact_scout.crawler.urls import CrawlOrigin
from contact_scout.extract.base import BaseExtractor
from contact_scout.extract.phones import PhoneExtractor
from contact_scout.extract.social import SocialLinkExtractor

from fakes import FakeSurface, FakeWeb

ROOT = "http://x.com/"


def make_crawler(web: FakeWeb, classifier=None, phone_extractor=None, **kwargs) -> DomainCrawler:
    return DomainCrawler(
        FakeSurface(web),
        classifier or DenyListClassifier(),
        phone_extractor or PhoneExtractor(),
        SocialLinkExtractor(),
        **kwargs,
    )


async def crawl(crawler: DomainCrawler, root: str = ROOT, visited=None):
    return await crawler.crawl(CrawlOrigin.from_url(root), root, visited=visited)


# --------------------------------------------------------------------------- #
#                                  Traversal                                  #
# --------------------------------------------------------------------------- #


@pytest.mark.asyncio()
async def test_timent_root_and_contact_only(timent_web):
    crawler = make_crawler(timent_web)
    data = await crawl(crawler, "http://timent.com/")

    assert crawler.fetched == ["http://timent.com/", "http://timent.com/contact"]
    assert data.phone_numbers == {"(415) 626-4474", "+1 415 626 4474"}
    assert data.social_media_links == {"https://facebook.com/timent"}
    # blog permalink rejected by the deny-list, external partner never touched
    assert timent_web.navigation_count("http://timent.com/blog/post-one-two-three-four-five") == 0
    assert not any("other.example" in url for url in timent_web.probes)


@pytest.mark.asyncio()
async def test_each_url_fetched_once_despite_cycles():
    web = FakeWeb(
        {
            ROOT: '<a href="/a">A</a><a href="/b">B</a>',
            "http://x.com/a": '<a href="/">home</a><a href="/b">B</a><a href="/c">C</a>',
            "http://x.com/b": '<a href="/a/">A</a><a href="/#top">top</a>',
            "http://x.com/c": '<a href="http://X.com/a#x">A</a>',
        }
    )
    crawler = make_crawler(web)
    await crawl(crawler)

    # depth-first in anchor order
    assert crawler.fetched == [ROOT, "http://x.com/a", "http://x.com/b", "http://x.com/c"]
    for url in crawler.fetched:
        assert web.navigation_count(url) == 1


@pytest.mark.asyncio()
async def test_non_html_resource_is_probed_but_not_visited():
    web = FakeWeb(
        {ROOT: '<a href="/brochure">Brochure</a>', "http://x.com/brochure": "%PDF-1.4"},
        content_types={"http://x.com/brochure": "application/pdf"},
    )
    visited: set = set()
    crawler = make_crawler(web)
    await crawl(crawler, visited=visited)

    assert crawler.fetched == [ROOT]
    assert "http://x.com/brochure" in web.probes
    assert web.navigation_count("http://x.com/brochure") == 0
    assert visited == {ROOT}


@pytest.mark.asyncio()
async def test_xhtml_counts_as_html():
    web = FakeWeb(
        {ROOT: '<a href="/x">X</a>', "http://x.com/x": "<p>ok</p>"},
        content_types={"http://x.com/x": "application/xhtml+xml; charset=utf-8"},
    )
    crawler = make_crawler(web)
    await crawl(crawler)
    assert crawler.fetched == [ROOT, "http://x.com/x"]


@pytest.mark.asyncio()
async def test_visited_set_is_fresh_for_every_run():
    web = FakeWeb({ROOT: '<a href="/a">A</a>', "http://x.com/a": "<p>a</p>"})

    first = make_crawler(web)
    await crawl(first)
    second = make_crawler(web)
    await crawl(second)

    assert first.fetched == second.fetched == [ROOT, "http://x.com/a"]


@pytest.mark.asyncio()
async def test_shared_visited_set_prevents_refetch():
    web = FakeWeb({ROOT: '<a href="/a">A</a>', "http://x.com/a": "<p>a</p>"})
    visited: set = set()

    await crawl(make_crawler(web), visited=visited)
    again = make_crawler(web)
    await crawl(again, visited=visited)

    assert again.fetched == []
    assert web.navigation_count(ROOT) == 1


@pytest.mark.asyncio()
async def test_start_page_is_the_first_fetched_page():
    web = FakeWeb({ROOT: '<a href="/a">A</a>', "http://x.com/a": "<p>a</p>"})
    crawler = make_crawler(web)
    assert crawler.start_page is None
    await crawl(crawler)
    assert crawler.start_page is not None
    assert crawler.start_page.url == ROOT

    web.failing.add(ROOT)
    await crawl(crawler)
    assert crawler.start_page is None


@pytest.mark.asyncio()
async def test_navigation_failure_does_not_stop_siblings():
    web = FakeWeb(
        {
            ROOT: '<a href="/a">A</a><a href="/b">B</a>',
            "http://x.com/a": "<p>never rendered</p>",
            "http://x.com/b": "<p>Call 212-555-0100</p>",
        },
        failing={"http://x.com/a"},
    )
    crawler = make_crawler(web)
    data = await crawl(crawler)

    assert crawler.fetched == [ROOT, "http://x.com/b"]
    assert data.phone_numbers == {"212-555-0100"}


@pytest.mark.asyncio()
async def test_unreachable_root_yields_empty_result():
    crawler = make_crawler(FakeWeb({}))
    data = await crawl(crawler)
    assert crawler.fetched == []
    assert data.is_empty()


@pytest.mark.asyncio()
async def test_page_limit_stops_traversal():
    links = "".join(f'<a href="/s{i}">S{i}</a>' for i in range(1, 6))
    pages = {ROOT: links}
    pages.update({f"http://x.com/s{i}": f"<p>s{i}</p>" for i in range(1, 6)})
    crawler = make_crawler(FakeWeb(pages), max_pages=3)
    await crawl(crawler)
    assert crawler.fetched == [ROOT, "http://x.com/s1", "http://x.com/s2"]


@pytest.mark.asyncio()
async def test_allow_list_restricts_to_contact_like_paths():
    web = FakeWeb(
        {
            ROOT: '<a href="/contact">C</a><a href="/services">S</a>',
            "http://x.com/contact": "<p>c</p>",
            "http://x.com/services": "<p>s</p>",
        }
    )
    crawler = make_crawler(web, classifier=AllowListClassifier())
    await crawl(crawler)
    assert crawler.fetched == [ROOT, "http://x.com/contact"]


# --------------------------------------------------------------------------- #
#                                 Extraction                                  #
# --------------------------------------------------------------------------- #


@pytest.mark.asyncio()
async def test_stop_at_first_phone_keeps_a_single_number():
    web = FakeWeb(
        {
            ROOT: '<p>Call (415) 626-4474 or (212) 555-0100</p><a href="/a">A</a>',
            "http://x.com/a": "<p>Fax (646) 555-0199</p>",
        }
    )
    crawler = make_crawler(web, stop_at_first_phone=True)
    data = await crawl(crawler)

    assert data.phone_numbers == {"(415) 626-4474"}
    # traversal itself still continues
    assert crawler.fetched == [ROOT, "http://x.com/a"]


@pytest.mark.asyncio()
async def test_phones_accumulate_literally_by_default():
    web = FakeWeb({ROOT: '<p>415-626-4474</p><a href="/a">A</a>', "http://x.com/a": "<p>415.626.4474</p>"})
    data = await crawl(make_crawler(web))
    assert data.phone_numbers == {"415-626-4474", "415.626.4474"}


@pytest.mark.asyncio()
async def test_phones_deduplicated_by_digits_when_enabled():
    web = FakeWeb({ROOT: '<p>415-626-4474</p><a href="/a">A</a>', "http://x.com/a": "<p>415.626.4474</p>"})
    data = await crawl(make_crawler(web, dedupe_phones_by_digits=True))
    assert data.phone_numbers == {"415-626-4474"}


class _Broken(BaseExtractor):
    name = "broken"

    async def extract(self, page):
        raise RuntimeError("regex exploded")


@pytest.mark.asyncio()
async def test_extractor_failure_does_not_abort_traversal():
    web = FakeWeb(
        {ROOT: '<a href="/a">A</a><a href="https://instagram.com/x">IG</a>', "http://x.com/a": "<p>a</p>"}
    )
    crawler = make_crawler(web, phone_extractor=_Broken())
    data = await crawl(crawler)

    assert crawler.fetched == [ROOT, "http://x.com/a"]
    assert data.phone_numbers == set()
    assert data.social_media_links == {"https://instagram.com/x"}
