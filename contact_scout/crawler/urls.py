# contact_scout/crawler/urls.py
"""
URL canonicalization and same-host helpers for ContactScout.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional
from urllib.parse import urlsplit, urlunsplit

_DEFAULT_PORTS: Dict[str, int] = {"http": 80, "https": 443}
_WEB_SCHEMES = ("http", "https")


def normalize_url(url: str) -> str:
    """
    Return the canonical string form of *url*.

    Scheme and host are lower-cased and the fragment and any default port are
    dropped. Every trailing slash is stripped from non-root paths, not
    just the last one, so the result is idempotent: ``/a//`` and ``/a/``
    both become ``/a``, while ``/`` stays ``/``.
    Unparseable input (no scheme/host, bad port, broken IPv6 literal) is
    returned unchanged, so the function never raises.
    """
    try:
        parts = urlsplit(url)
        port = parts.port
    except ValueError:
        return url
    host = parts.hostname
    if not parts.scheme or not host:
        return url

    scheme = parts.scheme.lower()
    netloc = f"[{host}]" if ":" in host else host
    if port is not None and _DEFAULT_PORTS.get(scheme) != port:
        netloc = f"{netloc}:{port}"
    if parts.username is not None:
        userinfo = parts.username
        if parts.password is not None:
            userinfo = f"{userinfo}:{parts.password}"
        netloc = f"{userinfo}@{netloc}"

    path = parts.path or "/"
    if len(path) > 1:
        path = path.rstrip("/") or "/"
    return urlunsplit((scheme, netloc, path, parts.query, ""))


def ensure_scheme(domain: str, default_scheme: str = "https") -> str:
    """Turn a bare roster domain (``acme.com``) into an absolute URL."""
    domain = domain.strip()
    if "://" in domain:
        return domain
    return f"{default_scheme}://{domain.lstrip('/')}"


def host_of(url: str) -> Optional[str]:
    try:
        return urlsplit(url).hostname
    except ValueError:
        return None


def is_same_host(url: str, host: str) -> bool:
    """True if *url* is an http(s) URL whose host equals *host* exactly."""
    try:
        parts = urlsplit(url)
    except ValueError:
        return False
    return parts.scheme.lower() in _WEB_SCHEMES and parts.hostname == host.lower()


@dataclass(frozen=True, slots=True)
class CrawlOrigin:
    """Parsed root URL of a roster entry; defines the same-host boundary."""

    url: str
    scheme: str
    host: str

    @classmethod
    def from_url(cls, url: str) -> CrawlOrigin:
        canonical = normalize_url(url)
        parts = urlsplit(canonical)
        if not parts.scheme or not parts.hostname:
            raise ValueError(f"Not an absolute URL: {url!r}")
        return cls(url=canonical, scheme=parts.scheme, host=parts.hostname)

    def owns(self, url: str) -> bool:
        return is_same_host(url, self.host)


__all__ = ["CrawlOrigin", "ensure_scheme", "host_of", "is_same_host", "normalize_url"]
