# contact_scout/extract/social.py
"""Social-media profile links from the main document and embedded frames."""
from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Iterable, Optional, Set, Tuple

from contact_scout.extract.base import BaseExtractor
from contact_scout.parser.html_parser import ParsedPage, parse_html

logger = logging.getLogger("ContactScout.extract.social")

DEFAULT_SOCIAL_DOMAINS: Tuple[str, ...] = (
    "facebook.com",
    "fb.com",
    "instagram.com",
    "twitter.com",
    "linkedin.com",
    "youtube.com",
    "tiktok.com",
    "pinterest.com",
    "yelp.com",
    "threads.net",
)

#: loads a frame URL in an isolated context and returns its rendered HTML
FrameLoader = Callable[[str], Awaitable[str]]


def is_social_link(href: str, domains: Iterable[str] = DEFAULT_SOCIAL_DOMAINS) -> bool:
    lowered = href.lower()
    return any(fragment in lowered for fragment in domains)


class SocialLinkExtractor(BaseExtractor):
    """
    Collects anchor targets that point to a known social platform.

    Frames are fetched through *frame_loader* (a separate browsing context per
    frame); a frame that cannot be loaded is logged and skipped.
    """

    name = "social"

    def __init__(
        self,
        domains: Iterable[str] = DEFAULT_SOCIAL_DOMAINS,
        frame_loader: Optional[FrameLoader] = None,
    ) -> None:
        self.domains: Tuple[str, ...] = tuple(d.lower() for d in domains)
        self.frame_loader = frame_loader

    def _from_page(self, page: ParsedPage) -> Set[str]:
        return {a.href for a in page.anchors if is_social_link(a.href, self.domains)}

    async def extract(self, page: ParsedPage) -> Set[str]:
        links = self._from_page(page)
        if self.frame_loader is None:
            return links
        for src in page.frames:
            try:
                html = await self.frame_loader(src)
            except asyncio.CancelledError:
                raise
            except Exception as exc:
                logger.warning("Frame %s on %s could not be loaded: %s", src, page.url, exc)
                continue
            links |= self._from_page(parse_html(src, html))
        return links


__all__ = ["DEFAULT_SOCIAL_DOMAINS", "FrameLoader", "SocialLinkExtractor", "is_social_link"]
