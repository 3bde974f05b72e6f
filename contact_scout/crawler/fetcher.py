# contact_scout/crawler/fetcher.py
"""
Fetcher module: reachability checks for roster domains over aiohttp, and
the header-only HTML check run through a surface before it navigates.
"""
from __future__ import annotations

import asyncio
import logging

from aiohttp import ClientError, ClientSession, ClientTimeout

from contact_scout.crawler.models import Surface

logger = logging.getLogger("ContactScout.fetcher")

_METHOD_NOT_ALLOWED = 405


def new_session(config) -> ClientSession:
    """Session used for reachability checks, honouring timeout and User-Agent."""
    return ClientSession(
        timeout=ClientTimeout(total=config.request_timeout),
        headers={"User-Agent": config.user_agent},
        raise_for_status=False,
    )


async def is_reachable(session: ClientSession, url: str) -> bool:
    """
    HEAD the URL, falling back to GET when the server answers 405.

    Returns True only for a 2xx final status; any network error means False.
    """
    try:
        async with session.head(url, allow_redirects=True) as resp:
            status = resp.status
        if status == _METHOD_NOT_ALLOWED:
            logger.debug("HEAD not allowed for %s, retrying with GET", url)
            async with session.get(url, allow_redirects=True) as resp:
                status = resp.status
    except (ClientError, asyncio.TimeoutError, ValueError) as exc:
        logger.debug("Reachability check failed for %s: %s", url, exc)
        return False
    return 200 <= status < 300


async def is_html_page(surface: Surface, url: str) -> bool:
    """HEAD *url* through *surface*; True only when it answers with an HTML content type."""
    try:
        probe = await surface.head(url)
    except asyncio.CancelledError:
        raise
    except Exception as exc:
        logger.debug("HEAD failed for %s: %s", url, exc)
        return False
    if not probe.is_html:
        logger.debug("Skipping non-HTML %s (%s)", url, probe.content_type or "no content-type")
        return False
    return True


__all__ = ["is_html_page", "is_reachable", "new_session"]
