"""
Content decoding for fetched sitemaps.

Bodies declared as gzip or generic octet-stream are inflated; everything
else (and anything without a declared type) passes through unchanged.
"""

import gzip
import logging
import re
import zlib
from typing import Optional

from sitemap_resolver.exceptions import MalformedDocument

logger = logging.getLogger(__name__)

DEFLATE_TYPE_REGEX = re.compile(r"application/((x-)?gzip|octet-stream)")


def inflate_body_if_needed(body: bytes, content_type: Optional[str], locator: str = "") -> bytes:
    """
    Inflate ``body`` when ``content_type`` names a compressed payload.

    Raises:
        MalformedDocument: The body claims to be compressed but is not gzip.
    """
    if not content_type:
        return body
    if not DEFLATE_TYPE_REGEX.search(content_type):
        return body

    try:
        inflated = gzip.decompress(body)
    except (OSError, EOFError, zlib.error) as e:
        raise MalformedDocument(locator, f"could not inflate {content_type} body: {e}") from e

    logger.debug(f"Inflated {len(body):,} bytes to {len(inflated):,} bytes for {locator}")
    return inflated
