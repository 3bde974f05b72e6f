# contact_scout/crawler/models.py
"""
Data models shared by the traversal, the extractors and the browser layer.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Mapping, Protocol, Sequence, Set, runtime_checkable

HTML_CONTENT_TYPES: Sequence[str] = ("text/html", "application/xhtml+xml")


@dataclass(slots=True)
class ProbeResult:
    """Outcome of a header-only request."""

    status: int
    headers: Mapping[str, str] = field(default_factory=dict)

    @property
    def content_type(self) -> str:
        for key, value in self.headers.items():
            if key.lower() == "content-type":
                return value.split(";", 1)[0].strip().lower()
        return ""

    @property
    def is_html(self) -> bool:
        return self.content_type in HTML_CONTENT_TYPES


@dataclass(slots=True)
class ExtractedData:
    """Phones, social links and addresses accumulated over one domain run."""

    phone_numbers: Set[str] = field(default_factory=set)
    social_media_links: Set[str] = field(default_factory=set)
    physical_addresses: Set[str] = field(default_factory=set)

    def update(self, other: ExtractedData) -> None:
        self.phone_numbers |= other.phone_numbers
        self.social_media_links |= other.social_media_links
        self.physical_addresses |= other.physical_addresses

    def add_phones(self, phones: Iterable[str]) -> None:
        self.phone_numbers.update(phones)

    def add_social_links(self, links: Iterable[str]) -> None:
        self.social_media_links.update(links)

    def add_addresses(self, addresses: Iterable[str]) -> None:
        self.physical_addresses.update(addresses)

    def is_empty(self) -> bool:
        return not (self.phone_numbers or self.social_media_links or self.physical_addresses)


@runtime_checkable
class Surface(Protocol):
    """Isolated browsing surface (one tab in its own context)."""

    async def navigate(self, url: str, wait_until: str = "domcontentloaded") -> None: ...

    async def content(self) -> str: ...

    async def head(self, url: str) -> ProbeResult: ...

    async def block_resource_types(self, types: Iterable[str]) -> None: ...

    async def close(self) -> None: ...


__all__ = ["ExtractedData", "HTML_CONTENT_TYPES", "ProbeResult", "Surface"]
