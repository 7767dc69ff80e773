"""Exceptions raised while resolving sitemaps."""

from typing import Any, Optional


class SitemapResolverError(Exception):
    """Base class for every resolution failure."""


class HttpFailure(SitemapResolverError):
    """A remote sitemap could not be fetched (non-2xx status or transport error)."""

    def __init__(self, locator: str, status_code: Optional[int] = None):
        self.locator = locator
        self.status_code = status_code
        if status_code is None:
            message = f"HTTP request to {locator} failed"
        else:
            message = f"HTTP request to {locator} failed with status {status_code}"
        super().__init__(message)


class MalformedDocument(SitemapResolverError):
    """No urlset or sitemapindex could be found for a locator."""

    def __init__(self, locator: str, reason: str = "no urlset or sitemapindex"):
        self.locator = locator
        self.reason = reason
        super().__init__(f"Malformed sitemap {locator}, {reason}")


class MissingLocation(SitemapResolverError):
    """An entry has no <loc> child. Never suppressed by graceful mode."""

    def __init__(self, entry: Any):
        self.entry = entry
        super().__init__("Malformed sitemap, url without loc")
