# === FILE: contact_scout/crawler/frontier.py ===
"""
Same-domain traversal (crawl frontier).

The walk is depth-first in anchor order, driven by an explicit stack instead
of recursion, so deep or cyclic sites cannot exhaust the interpreter stack.
The visited set belongs to one domain run: it only grows, and it is checked
before every fetch so each canonical URL is fetched at most once per run.
"""
from __future__ import annotations

import asyncio
import logging
import time
from typing import List, Optional, Set
from urllib.parse import urlsplit

from contact_scout.crawler.fetcher import is_html_page
from contact_scout.crawler.models import ExtractedData, Surface
from contact_scout.crawler.routes import RouteClassifier
from contact_scout.crawler.urls import CrawlOrigin, normalize_url
from contact_scout.extract.base import BaseExtractor, safe_extract
from contact_scout.extract.phones import dedupe_by_digits
from contact_scout.parser.html_parser import ParsedPage, parse_html

__all__ = ("DomainCrawler",)


class DomainCrawler:
    """Walks one domain with a single surface, sequentially."""

    def __init__(
        self,
        surface: Surface,
        classifier: RouteClassifier,
        phone_extractor: BaseExtractor,
        social_extractor: BaseExtractor,
        *,
        max_pages: Optional[int] = None,
        stop_at_first_phone: bool = False,
        dedupe_phones_by_digits: bool = False,
    ) -> None:
        self.surface = surface
        self.classifier = classifier
        self.phone_extractor = phone_extractor
        self.social_extractor = social_extractor
        self.max_pages = max_pages
        self.stop_at_first_phone = stop_at_first_phone
        self.dedupe_phones_by_digits = dedupe_phones_by_digits
        #: canonical URLs actually fetched, in visit order
        self.fetched: List[str] = []
        #: first page fetched by the last crawl, reused for contact-page discovery
        self.start_page: Optional[ParsedPage] = None
        self.logger = logging.getLogger("ContactScout.frontier")

    @classmethod
    def from_config(
        cls,
        config,
        surface: Surface,
        classifier: RouteClassifier,
        phone_extractor: BaseExtractor,
        social_extractor: BaseExtractor,
    ) -> DomainCrawler:
        return cls(
            surface,
            classifier,
            phone_extractor,
            social_extractor,
            max_pages=config.max_pages,
            stop_at_first_phone=config.stop_at_first_phone,
            dedupe_phones_by_digits=config.dedupe_phones_by_digits,
        )

    async def crawl(
        self, origin: CrawlOrigin, start_url: str, visited: Optional[Set[str]] = None
    ) -> ExtractedData:
        """
        Traverse *origin* starting at *start_url* and return the phones and
        social links found in the reachable subtree.

        *visited* defaults to a fresh set; pass one explicitly only to share
        it between calls of the same domain run.
        """
        if visited is None:
            visited = set()
        self.start_page = None
        result = ExtractedData()
        start = time.monotonic()
        self.logger.info("Старт обхода: %s", start_url)

        stack: List[str] = [start_url]
        while stack:
            if self.max_pages is not None and len(self.fetched) >= self.max_pages:
                self.logger.warning(
                    "Page limit %d reached for %s, %d link(s) left", self.max_pages, origin.host, len(stack)
                )
                break
            url = stack.pop()
            children = await self._visit(url, origin, visited, result)
            # reversed so the first anchor on the page is expanded first
            stack.extend(reversed(children))

        duration = time.monotonic() - start
        self.logger.info(
            "Завершено: %s, %d страниц за %.2f с, телефонов %d, соцсетей %d",
            origin.host, len(self.fetched), duration,
            len(result.phone_numbers), len(result.social_media_links),
        )
        return result

    async def _visit(
        self, url: str, origin: CrawlOrigin, visited: Set[str], result: ExtractedData
    ) -> List[str]:
        canonical = normalize_url(url)
        if canonical in visited:
            return []
        if not await is_html_page(self.surface, canonical):
            return []

        visited.add(canonical)
        self.logger.debug("URL: %s", canonical)
        try:
            await self.surface.navigate(canonical)
            html = await self.surface.content()
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            self.logger.warning("Navigation failed for %s: %s", canonical, exc)
            return []
        self.fetched.append(canonical)

        page = parse_html(canonical, html)
        if self.start_page is None:
            self.start_page = page
        children = self._same_domain_links(page, origin)
        await self._extract(page, result)
        return [link for link in children if normalize_url(link) not in visited]

    def _same_domain_links(self, page: ParsedPage, origin: CrawlOrigin) -> List[str]:
        links: List[str] = []
        for href in page.links:
            if not origin.owns(href):
                continue
            if not self.classifier.accepts(urlsplit(href).path or "/"):
                continue
            links.append(href)
        return links

    async def _extract(self, page: ParsedPage, result: ExtractedData) -> None:
        if not (self.stop_at_first_phone and result.phone_numbers):
            phones = list(await safe_extract(self.phone_extractor, page))
            if self.dedupe_phones_by_digits:
                phones = dedupe_by_digits(phones, result.phone_numbers)
            if self.stop_at_first_phone:
                # first number in page order
                phones = phones[:1]
            result.add_phones(phones)
        result.add_social_links(await safe_extract(self.social_extractor, page))
