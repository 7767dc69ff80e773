import logging
from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from lxml import etree  # Using lxml for robust parsing and namespace handling

logger = logging.getLogger(__name__)


class DocumentKind(Enum):
    URLSET = "urlset"
    SITEMAPINDEX = "sitemapindex"
    MALFORMED = "malformed"


@dataclass
class SitemapEntry:
    """One <url> of a url set or one <sitemap> of an index."""

    loc: Optional[str]
    lastmod: Optional[str] = None
    changefreq: Optional[str] = None
    priority: Optional[str] = None
    sitemap_source_url: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class ParsedDocument:
    """
    A parsed sitemap classified as exactly one kind.

    ``root`` is the lxml root element (None when nothing could be parsed),
    ``container`` the urlset/sitemapindex element that decided the kind.
    """

    kind: DocumentKind
    entries: List[SitemapEntry] = field(default_factory=list)
    root: Optional[Any] = None
    container: Optional[Any] = None

    @property
    def is_malformed(self) -> bool:
        return self.kind is DocumentKind.MALFORMED


class SitemapParser:
    def __init__(self):
        # recover mode parses mildly malformed XML, like most sitemap consumers do
        self._xml_parser = etree.XMLParser(recover=True, resolve_entities=False, no_network=True)

    def parse_sitemap(self, content: Optional[bytes], sitemap_url: str = "") -> ParsedDocument:
        """
        Parses sitemap bytes and classifies the document.

        A ``urlset`` anywhere in the tree wins; a ``sitemapindex`` is only
        looked for when there is no urlset. Empty content, unparsable bytes
        and documents with neither container are all MALFORMED.

        Args:
            content: Decompressed sitemap bytes, or None when nothing was fetched.
            sitemap_url: Locator the content came from (for logging and tagging).
        """
        root = self._parse_tree(content, sitemap_url)
        if root is None:
            return ParsedDocument(kind=DocumentKind.MALFORMED)

        urlset = self._first_descendant(root, "urlset")
        if urlset is not None:
            entries = self._extract_entries(urlset, "url", sitemap_url)
            logger.info(f"Parsing as URL set: {sitemap_url} ({len(entries)} entries)")
            return ParsedDocument(DocumentKind.URLSET, entries, root, urlset)

        sitemapindex = self._first_descendant(root, "sitemapindex")
        if sitemapindex is not None:
            entries = self._extract_entries(sitemapindex, "sitemap", sitemap_url)
            logger.info(f"Parsing as sitemap index: {sitemap_url} ({len(entries)} sitemaps)")
            return ParsedDocument(DocumentKind.SITEMAPINDEX, entries, root, sitemapindex)

        logger.debug(f"Root element '{root.tag}' in {sitemap_url} is neither urlset nor sitemapindex")
        return ParsedDocument(kind=DocumentKind.MALFORMED, root=root)

    def _parse_tree(self, content: Optional[bytes], sitemap_url: str) -> Optional[Any]:
        if not content:
            return None
        try:
            return etree.fromstring(content, parser=self._xml_parser)
        except etree.XMLSyntaxError as e:
            logger.debug(f"XML syntax error while parsing sitemap from {sitemap_url}: {e}")
            return None

    @staticmethod
    def _first_descendant(root: Any, tag: str) -> Optional[Any]:
        # {*} matches the tag in any namespace or in none
        return next(root.iter(f"{{*}}{tag}"), None)

    def _extract_entries(self, container: Any, entry_tag: str, sitemap_url: str) -> List[SitemapEntry]:
        entries = []
        for element in container.iter(f"{{*}}{entry_tag}"):
            entries.append(SitemapEntry(
                loc=self._child_text(element, "loc"),
                lastmod=self._metadata(element, "lastmod"),
                changefreq=self._metadata(element, "changefreq"),
                priority=self._metadata(element, "priority"),
                sitemap_source_url=sitemap_url or None,
            ))
        logger.debug(f"Extracted {len(entries)} <{entry_tag}> entries from {sitemap_url}")
        return entries

    @staticmethod
    def _child_text(element: Any, tag: str) -> Optional[str]:
        """Full text of the first ``tag`` child, unstripped; None when absent."""
        child = element.find(f"{{*}}{tag}")
        if child is None:
            return None
        return "".join(child.itertext())

    @classmethod
    def _metadata(cls, element: Any, tag: str) -> Optional[str]:
        text = cls._child_text(element, tag)
        return text.strip() if text else None
