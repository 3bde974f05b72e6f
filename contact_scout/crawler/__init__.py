"""contact_scout.crawler: обход сайтов одного домена (канонизация URL, маршруты, браузер)."""

from .frontier import DomainCrawler
from .routes import AllowListClassifier, DenyListClassifier, RouteClassifier, build_classifier
from .urls import CrawlOrigin, ensure_scheme, is_same_host, normalize_url

__all__ = [
    "AllowListClassifier",
    "CrawlOrigin",
    "DenyListClassifier",
    "DomainCrawler",
    "RouteClassifier",
    "build_classifier",
    "ensure_scheme",
    "is_same_host",
    "normalize_url",
]
