# === FILE: contact_scout/parser/html_parser.py ===
"""HTML parsing utilities for ContactScout.

A rendered page is parsed once with BeautifulSoup and exposed as
:class:`ParsedPage`, which is what the traversal and every extractor consume:

* anchors — ``<a href>`` targets resolved to absolute URLs, deduplicated,
  in document order, together with their visible text.
* frames  — absolute ``src`` of ``<iframe>``/``<frame>`` elements.
* text    — visible body text (``<script>``, ``<style>`` … removed).
* soup    — the parsed tree (without invisible tags) for structural lookups.
"""
from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from urllib.parse import urljoin

from bs4 import BeautifulSoup
from bs4.element import Tag

__all__: Sequence[str] = ("Anchor", "ParsedPage", "parse_html")

_SKIP_SCHEMES = ("mailto:", "javascript:", "tel:", "data:", "about:")
_INVISIBLE_TAGS = ("script", "style", "noscript", "template")


@dataclass(slots=True, frozen=True)
class Anchor:
    """Link found on a page: absolute target and its text."""

    href: str
    text: str
    raw: str


@dataclass(slots=True)
class ParsedPage:
    """Lightweight representation of a rendered HTML page."""

    url: str
    anchors: list[Anchor] = field(default_factory=list)
    frames: list[str] = field(default_factory=list)
    text: str = ""
    soup: BeautifulSoup | None = None

    @property
    def links(self) -> list[str]:
        return [a.href for a in self.anchors]


def _resolve(base_url: str, raw: str) -> str | None:
    raw = raw.strip()
    if not raw or raw.lower().startswith(_SKIP_SCHEMES):
        return None
    try:
        return urljoin(base_url, raw)
    except ValueError:
        return None


def parse_html(url: str, html: str) -> ParsedPage:
    """Parse *html* rendered at *url* into a :class:`ParsedPage`."""
    soup = BeautifulSoup(html, "html.parser")

    seen: set[str] = set()
    anchors: list[Anchor] = []
    for tag in soup.find_all("a", href=True):
        if not isinstance(tag, Tag):
            continue
        raw = tag.get("href")
        if not isinstance(raw, str):
            continue
        absolute = _resolve(url, raw)
        if absolute is None or absolute in seen:
            continue
        seen.add(absolute)
        anchors.append(Anchor(href=absolute, text=tag.get_text(" ", strip=True), raw=raw.strip()))

    frames: list[str] = []
    for tag in soup.find_all(["iframe", "frame"], src=True):
        src = tag.get("src")
        absolute = _resolve(url, src) if isinstance(src, str) else None
        if absolute and absolute not in frames:
            frames.append(absolute)

    for element in soup(_INVISIBLE_TAGS):
        element.decompose()
    root = soup.body or soup
    text = " ".join(root.get_text(" ").split())

    return ParsedPage(url=url, anchors=anchors, frames=frames, text=text, soup=soup)
