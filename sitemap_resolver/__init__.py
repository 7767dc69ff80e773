"""
Sitemap Resolver - Source Package

Modules:
- config: Resolution options, config file loading and validation
- sitemap_fetcher: Remote/local sourcing of sitemap bytes
- content_decoder: gzip inflation of compressed bodies
- sitemap_parser: XML parsing and urlset/sitemapindex classification
- entry_filter: Location whitespace stripping and regex filtering
- resolver: Recursive resolution with strict/graceful failure policies
- main: Command line entry point and CSV export
"""

from sitemap_resolver.config import ResolutionOptions
from sitemap_resolver.exceptions import (
    HttpFailure,
    MalformedDocument,
    MissingLocation,
    SitemapResolverError,
)
from sitemap_resolver.resolver import SitemapResolver, to_location_strings

__version__ = "1.0.0"

__all__ = [
    "HttpFailure",
    "MalformedDocument",
    "MissingLocation",
    "ResolutionOptions",
    "SitemapResolver",
    "SitemapResolverError",
    "to_location_strings",
]
