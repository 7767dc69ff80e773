"""Whitespace normalisation and regex filtering of sitemap entries."""

import logging
import re
from dataclasses import replace
from typing import List, Optional

from sitemap_resolver.exceptions import MissingLocation
from sitemap_resolver.sitemap_parser import SitemapEntry

logger = logging.getLogger(__name__)


def strip_locations(entries: List[SitemapEntry]) -> List[SitemapEntry]:
    """
    Return copies of ``entries`` with leading/trailing whitespace removed
    from every location.

    Raises:
        MissingLocation: An entry has no <loc> at all.
    """
    stripped = []
    for entry in entries:
        if entry.loc is None:
            raise MissingLocation(entry)
        stripped.append(replace(entry, loc=entry.loc.strip()))
    return stripped


def filter_entries(entries: List[SitemapEntry], url_pattern: Optional[re.Pattern] = None) -> List[SitemapEntry]:
    """Strip every location, then keep entries whose location contains a match for ``url_pattern``."""
    entries = strip_locations(entries)
    if url_pattern is None:
        return entries

    kept = [entry for entry in entries if url_pattern.search(entry.loc)]
    logger.debug(f"Pattern {url_pattern.pattern!r} kept {len(kept)} of {len(entries)} entries")
    return kept
