# contact_scout/crawler/routes.py
"""
Route classification: decides which same-host paths are worth traversing.

Two strategies exist and exactly one is active per run:

* :class:`DenyListClassifier` rejects administrative, legal, e-commerce and
  archival paths plus blog-style permalinks (date paths, long hyphen slugs).
* :class:`AllowListClassifier` accepts only the root and contact/about-like paths.
"""
from __future__ import annotations

import re
from abc import ABC, abstractmethod
from typing import Iterable, Tuple

# please note that this list is expected to grow as new sites are crawled
DEFAULT_DENY_KEYWORDS: Tuple[str, ...] = (
    "blog", "terms", "terms-and-conditions", "privacy", "review", "disclaimer",
    "legal", "cookie", "policy", "faq", "other", "pdf", "images", "product",
    "downloads", "log", "sitemap", "wp-content", "podcast", "tag", "news",
    "comment", "page", "feed", "author", "search", "category", "archive",
    "admin", "dashboard", "login", "register", "signup", "cart", "checkout",
    "account", "profile", "settings", "password", "edit", "update", "delete",
    "static", "assets", "media", "uploads", "rss", "xml", "json", "api",
    "help", "support", "press", "calendar", "store", "shop", "basket", "order",
    "invoice", "bestsellers", "collections", "error", "404", "maintenance",
    "tmp", "temp", "item", "photo",
)

DEFAULT_ALLOW_KEYWORDS: Tuple[str, ...] = (
    "contact", "about", "company", "team", "find-us", "location", "our-story",
    "who-we-are", "staff", "people", "impressum",
)

# /2023/04, /2023/04/17, /2023/04/17/some-post
DATE_PATH_RE = re.compile(r"^/\d{4}(?:/\d{2}){1,2}(?:/.*)?$")
# five or more hyphen-joined tokens in one segment
LONG_SLUG_RE = re.compile(r"/(?:[a-zA-Z0-9]+-){4,}[a-zA-Z0-9]+")


class RouteClassifier(ABC):
    """Pure predicate over a URL path."""

    name: str = "abstract"

    def __init__(self, keywords: Iterable[str]) -> None:
        self.keywords: Tuple[str, ...] = tuple(k.lower() for k in keywords if k)

    @abstractmethod
    def accepts(self, path: str) -> bool:
        """Return True if *path* should be traversed."""

    def __call__(self, path: str) -> bool:
        return self.accepts(path)

    def _has_keyword(self, path: str) -> bool:
        lowered = path.lower()
        return any(word in lowered for word in self.keywords)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} keywords={len(self.keywords)}>"


class DenyListClassifier(RouteClassifier):
    name = "deny"

    def __init__(self, keywords: Iterable[str] = DEFAULT_DENY_KEYWORDS) -> None:
        super().__init__(keywords)

    def accepts(self, path: str) -> bool:
        return not self.is_blocked(path)

    def is_blocked(self, path: str) -> bool:
        return (
            self._has_keyword(path)
            or DATE_PATH_RE.match(path) is not None
            or LONG_SLUG_RE.search(path) is not None
        )


class AllowListClassifier(RouteClassifier):
    name = "allow"

    def __init__(self, keywords: Iterable[str] = DEFAULT_ALLOW_KEYWORDS) -> None:
        super().__init__(keywords)

    def accepts(self, path: str) -> bool:
        if path in ("", "/"):
            return True
        return self._has_keyword(path)


def build_classifier(config) -> RouteClassifier:
    """Build the crawl-wide classifier selected by ``config.route_policy``."""
    if config.route_policy == "allow":
        return AllowListClassifier(config.allow_keywords)
    if config.route_policy == "deny":
        return DenyListClassifier(config.deny_keywords)
    raise ValueError(f"Unknown route policy: {config.route_policy!r}")


__all__ = [
    "AllowListClassifier",
    "DATE_PATH_RE",
    "DEFAULT_ALLOW_KEYWORDS",
    "DEFAULT_DENY_KEYWORDS",
    "DenyListClassifier",
    "LONG_SLUG_RE",
    "RouteClassifier",
    "build_classifier",
]
