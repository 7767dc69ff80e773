"""
1.0 Sitemap Resolver
Turns a sitemap or sitemap index locator into a flat list of entries.

Flow per resolver: fetch -> decode -> parse -> classify, then
- url set: strip and filter its entries
- sitemap index: [] unless recurse is on, else filter the index entries and
  resolve each child with a fresh resolver, flattening in document order
- malformed: MalformedDocument (empty list in graceful mode)

Each resolver computes its content, document and entries at most once.
Child resolvers share the fetcher (transport) but nothing else.
"""

import logging
from functools import cached_property
from typing import List, Optional

from sitemap_resolver.config import ResolutionOptions
from sitemap_resolver.entry_filter import filter_entries
from sitemap_resolver.exceptions import HttpFailure, MalformedDocument, MissingLocation
from sitemap_resolver.sitemap_fetcher import RawContent, SitemapFetcher
from sitemap_resolver.sitemap_parser import DocumentKind, ParsedDocument, SitemapEntry, SitemapParser

logger = logging.getLogger(__name__)


def to_location_strings(entries: List[SitemapEntry]) -> List[str]:
    """
    Map resolved entries to their location strings.

    Raises:
        MissingLocation: Any entry lacks a location, whatever the graceful setting.
    """
    locations = []
    for entry in entries:
        if entry.loc is None:
            raise MissingLocation(entry)
        locations.append(entry.loc)
    return locations


class SitemapResolver:
    """
    2.0 SitemapResolver Class
    One instance per locator. Children of a sitemap index get their own
    instance with ``options.for_child()``.
    """

    def __init__(
        self,
        locator: str,
        options: Optional[ResolutionOptions] = None,
        fetcher: Optional[SitemapFetcher] = None,
        parser: Optional[SitemapParser] = None,
    ):
        self.locator = locator
        self.options = options or ResolutionOptions()
        self.fetcher = fetcher or SitemapFetcher()
        self.parser = parser or SitemapParser()

    def __repr__(self) -> str:
        return f"SitemapResolver({self.locator!r}, {self.options!r})"

    @cached_property
    def raw_content(self) -> Optional[bytes]:
        """
        2.1 Fetched (and, for remote gzip/octet-stream bodies, inflated) bytes.

        None when the locator resolves to nothing, or when the fetch or the
        inflation failed in graceful mode.
        """
        raw = self._fetched
        if raw is None:
            return None

        try:
            return self.fetcher.decode(raw, self.locator)
        except MalformedDocument as e:
            if not self.options.graceful:
                raise
            logger.warning(f"Ignoring undecodable sitemap in graceful mode: {e}")
            return None

    @cached_property
    def _fetched(self) -> Optional[RawContent]:
        try:
            return self.fetcher.fetch(self.locator, follow_redirects=self.options.follow_redirects)
        except HttpFailure as e:
            if not self.options.graceful:
                raise
            logger.warning(f"Ignoring failed fetch in graceful mode: {e}")
            return None

    @cached_property
    def document(self) -> ParsedDocument:
        """2.2 The parsed and classified document."""
        return self.parser.parse_sitemap(self.raw_content, sitemap_url=self.locator)

    @cached_property
    def entries(self) -> List[SitemapEntry]:
        """
        2.3 Resolved entries in document order.

        Raises:
            HttpFailure: Strict mode, a fetch failed here or in a child.
            MalformedDocument: Strict mode, no urlset/sitemapindex here or in a child.
            MissingLocation: Always, when an entry has no <loc>.
        """
        try:
            return self._resolve()
        except MalformedDocument as e:
            if not self.options.graceful:
                raise
            logger.warning(f"Ignoring malformed sitemap in graceful mode: {e}")
            return []

    @cached_property
    def location_strings(self) -> List[str]:
        """2.4 Location strings of ``entries``."""
        return to_location_strings(self.entries)

    def _resolve(self) -> List[SitemapEntry]:
        document = self.document

        if document.kind is DocumentKind.URLSET:
            return filter_entries(document.entries, self.options.url_pattern)

        if document.kind is DocumentKind.SITEMAPINDEX:
            if not self.options.recurse:
                logger.info(f"Sitemap index {self.locator} not expanded (recurse is off)")
                return []
            return self._expand_index(document)

        raise MalformedDocument(self.locator)

    def _expand_index(self, document: ParsedDocument) -> List[SitemapEntry]:
        """
        3.0 Resolve every (filtered) child of a sitemap index in order.

        Child failures have already been through the child's own graceful
        handling; what still escapes is skipped only if this resolver is
        graceful. MissingLocation is never skipped.
        """
        children = filter_entries(document.entries, self.options.url_pattern)
        logger.info(f"Sitemap index {self.locator} expands to {len(children)} child sitemaps")

        child_options = self.options.for_child()
        found: List[SitemapEntry] = []
        for child in children:
            child_resolver = SitemapResolver(child.loc, child_options, fetcher=self.fetcher, parser=self.parser)
            try:
                found.extend(child_resolver.entries)
            except (HttpFailure, MalformedDocument) as e:
                if not self.options.graceful:
                    raise
                logger.warning(f"Skipping child sitemap {child.loc}: {e}")
        return found
