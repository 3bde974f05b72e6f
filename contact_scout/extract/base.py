# contact_scout/extract/base.py
"""
Pluggable extractor interface.

Each extractor turns one :class:`~contact_scout.parser.ParsedPage` into a
collection of strings: a set, or a list when page order matters. A regex
strategy can be swapped for a structured-data or geocoding one without
touching the traversal or the orchestrator.
"""
from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Collection

from contact_scout.parser.html_parser import ParsedPage

logger = logging.getLogger("ContactScout.extract")


class BaseExtractor(ABC):
    """Base class for page-level extractors."""

    #: short name used in logs
    name: str = "extractor"

    @abstractmethod
    async def extract(self, page: ParsedPage) -> Collection[str]:
        """Return the values found on *page*."""


async def safe_extract(extractor: BaseExtractor, page: ParsedPage) -> Collection[str]:
    """Run *extractor*; any failure degrades to an empty result for this page."""
    try:
        return await extractor.extract(page)
    except asyncio.CancelledError:
        raise
    except Exception as exc:
        logger.warning("%s extraction failed on %s: %s", extractor.name, page.url, exc)
        return set()


__all__ = ["BaseExtractor", "safe_extract"]
