# contact_scout/extract/addresses.py
"""
Physical address extraction.

Addresses are only looked for on *contact pages*: same-host pages linked
from the page being processed by an anchor whose text or href suggests
contact/about/find-us/team content. On every such page three sources are used:

1. ``<address>`` (and ``itemprop="address"``) elements, taken verbatim;
2. elements whose ``class``/``id`` mentions "contact" or "address", first
   structured-address match in their text;
3. the footer region, first structured-address match.
"""
from __future__ import annotations

import asyncio
import logging
import re
from typing import Iterable, List, Optional, Set, Tuple

from bs4 import BeautifulSoup
from bs4.element import Tag

from contact_scout.crawler.fetcher import is_html_page
from contact_scout.crawler.models import Surface
from contact_scout.crawler.urls import CrawlOrigin, normalize_url
from contact_scout.extract.base import BaseExtractor, safe_extract
from contact_scout.parser.html_parser import ParsedPage, parse_html

logger = logging.getLogger("ContactScout.extract.address")

DEFAULT_CONTACT_KEYWORDS: Tuple[str, ...] = (
    "contact",
    "about",
    "find-us",
    "find us",
    "team",
    "location",
    "visit-us",
)

# <street>, <city>, <ST> <12345[-6789]>
STRUCTURED_ADDRESS_RE = re.compile(
    r"(?<!\w)\d+[\w .'#/-]*?,\s*[a-z][a-z .'-]*?,\s*[a-z]{2}\s+\d{5}(?:-\d{4})?\b",
    re.IGNORECASE,
)
# a house number followed by a street word: "500 Market", "12B Elm"
_HOUSE_NUMBER_RE = re.compile(r"(?<![\w.])\d+[a-z]?\s+[a-z]", re.IGNORECASE)
_MARKERS = ("contact", "address")


def _squash(text: str) -> str:
    return " ".join(text.split())


def first_structured_address(text: str) -> Optional[str]:
    """
    First ``street, city, ST zip`` match in *text*.

    The street starts at the last house number before its first comma, so
    phone numbers, years and company names in front of it are dropped:
    "© 2024 Acme Inc. 500 Market St, San Francisco, CA 94105" gives
    "500 Market St, San Francisco, CA 94105".
    """
    text = _squash(text)
    match = STRUCTURED_ADDRESS_RE.search(text)
    if match is None:
        return None
    street_end = text.index(",", match.start())
    starts = [m.start() for m in _HOUSE_NUMBER_RE.finditer(text, match.start(), street_end)]
    if starts and starts[-1] > match.start():
        match = STRUCTURED_ADDRESS_RE.match(text, starts[-1]) or match
    return match.group(0).strip()


def _first_address_in(tags: Iterable[Tag]) -> Optional[str]:
    """Match text node by text node first, then the joined text of *tags*."""
    tags = list(tags)
    for tag in tags:
        for chunk in tag.stripped_strings:
            found = first_structured_address(chunk)
            if found:
                return found
    return first_structured_address(" ".join(tag.get_text(" ") for tag in tags))


def _has_marker(tag: Tag) -> bool:
    classes = tag.get("class") or []
    if isinstance(classes, str):
        classes = [classes]
    names = " ".join([*classes, str(tag.get("id") or "")]).lower()
    return any(marker in names for marker in _MARKERS)


def extract_addresses(soup: BeautifulSoup) -> List[str]:
    """Apply the three address heuristics to a parsed page, preserving order."""
    found: List[str] = []

    def keep(value: Optional[str]) -> None:
        if value and value not in found:
            found.append(value)

    for tag in soup.find_all("address"):
        keep(_squash(tag.get_text(" ")))
    for tag in soup.find_all(attrs={"itemprop": "address"}):
        keep(_squash(tag.get_text(" ")))

    for tag in soup.find_all(True):
        if isinstance(tag, Tag) and _has_marker(tag):
            keep(_first_address_in([tag]))

    footers = soup.find_all("footer") or soup.find_all(
        lambda t: "footer" in " ".join([*(t.get("class") or []), str(t.get("id") or "")]).lower()
    )
    keep(_first_address_in(footers))
    return found


def find_contact_links(
    page: ParsedPage, origin: CrawlOrigin, keywords: Iterable[str] = DEFAULT_CONTACT_KEYWORDS
) -> List[str]:
    """Same-host links on *page* whose text or href looks like a contact page."""
    words = tuple(k.lower() for k in keywords)
    links: List[str] = []
    for anchor in page.anchors:
        if not origin.owns(anchor.href):
            continue
        haystack = f"{anchor.text} {anchor.href}".lower()
        if any(word in haystack for word in words) and anchor.href not in links:
            links.append(anchor.href)
    return links


class AddressExtractor(BaseExtractor):
    """Extracts addresses from a contact page and discovers contact pages."""

    name = "address"

    def __init__(self, contact_keywords: Iterable[str] = DEFAULT_CONTACT_KEYWORDS) -> None:
        self.contact_keywords: Tuple[str, ...] = tuple(k.lower() for k in contact_keywords)

    async def extract(self, page: ParsedPage) -> Set[str]:
        if page.soup is None:
            return set()
        return set(extract_addresses(page.soup))

    async def collect(
        self,
        surface: Surface,
        start_url: str,
        origin: CrawlOrigin,
        start_page: Optional[ParsedPage] = None,
    ) -> Set[str]:
        """
        Follow the contact links of the start page and gather their addresses.

        *start_page* is the already parsed start URL (the crawler keeps it);
        without it the start URL is loaded first. Contact links are only
        navigated when a HEAD request reports HTML. Navigation failures on any
        page are logged and skipped.
        """
        addresses: Set[str] = set()
        if start_page is None:
            try:
                await surface.navigate(start_url)
                start_page = parse_html(start_url, await surface.content())
            except asyncio.CancelledError:
                raise
            except Exception as exc:
                logger.warning("Contact discovery could not load %s: %s", start_url, exc)
                return addresses

        scanned: Set[str] = set()
        for link in find_contact_links(start_page, origin, self.contact_keywords):
            canonical = normalize_url(link)
            if canonical in scanned:
                continue
            scanned.add(canonical)
            if not await is_html_page(surface, canonical):
                continue
            try:
                await surface.navigate(canonical)
                contact_page = parse_html(canonical, await surface.content())
            except asyncio.CancelledError:
                raise
            except Exception as exc:
                logger.warning("Contact page %s could not be loaded: %s", canonical, exc)
                continue
            found = await safe_extract(self, contact_page)
            logger.debug("Contact page %s: %d address(es)", canonical, len(found))
            addresses.update(found)
        return addresses


__all__ = [
    "AddressExtractor",
    "DEFAULT_CONTACT_KEYWORDS",
    "STRUCTURED_ADDRESS_RE",
    "extract_addresses",
    "find_contact_links",
    "first_structured_address",
]
