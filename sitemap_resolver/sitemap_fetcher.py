"""
1.0 Sitemap Fetcher Module
Sources raw sitemap bytes from a remote URL or a local file.

Key features:
- Remote/local classification of a locator
- Session reuse for connection pooling
- Optional urllib3 retries (off by default: every failure is a single attempt)
- Transparent inflation of gzip/octet-stream bodies
"""

import logging
import os
import re
from dataclasses import dataclass
from typing import Any, Dict, Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from sitemap_resolver.content_decoder import inflate_body_if_needed
from sitemap_resolver.exceptions import HttpFailure

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = "SitemapResolver/1.0"
DEFAULT_TIMEOUT = 30

REMOTE_LOCATOR_REGEX = re.compile(r"^https?://", re.IGNORECASE)
LOCAL_SITEMAP_NAME_REGEX = re.compile(r"^sitemap(_index)?\.xml$", re.IGNORECASE)


@dataclass
class RawContent:
    """Fetched bytes plus the declared content type (None for local files)."""

    body: bytes
    content_type: Optional[str] = None


def is_remote_locator(locator: str) -> bool:
    return bool(REMOTE_LOCATOR_REGEX.match(locator))


def is_local_locator(locator: str) -> bool:
    """An existing file whose name is sitemap.xml or sitemap_index.xml."""
    return os.path.isfile(locator) and bool(LOCAL_SITEMAP_NAME_REGEX.match(os.path.basename(locator)))


class SitemapFetcher:
    """
    2.0 SitemapFetcher Class
    Fetches sitemap content for a locator. Shared by every resolver in a
    resolution tree; it keeps no per-sitemap state.
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        """
        2.1 Initialize the SitemapFetcher.

        Args:
            config: Configuration dictionary with optional keys:
                - user_agent: Custom user agent string
                - timeout: Request timeout in seconds (default: 30)
                - max_retries: Number of retry attempts (default: 0)
        """
        config = config or {}

        self.user_agent = config.get("user_agent", DEFAULT_USER_AGENT)
        if not isinstance(self.user_agent, str) or not self.user_agent.strip():
            self.user_agent = DEFAULT_USER_AGENT
            logger.warning(f"Invalid user_agent in config. Using default: {self.user_agent}")

        self.timeout = config.get("timeout", DEFAULT_TIMEOUT)
        self.max_retries = config.get("max_retries", 0)

        self.session = self._create_session()

        logger.debug(
            f"SitemapFetcher initialized: "
            f"User-Agent={self.user_agent[:50]}, "
            f"timeout={self.timeout}s, "
            f"max_retries={self.max_retries}"
        )

    def _create_session(self) -> requests.Session:
        """
        2.2 Create a requests Session.

        With max_retries > 0, retries 429/5xx responses and connection
        errors with exponential backoff.
        """
        session = requests.Session()

        retry_strategy = Retry(
            total=self.max_retries,
            backoff_factor=1,
            status_forcelist=[429, 500, 502, 503, 504],
            allowed_methods=["GET"],
            raise_on_status=False,  # status is checked by fetch_remote
        )

        adapter = HTTPAdapter(max_retries=retry_strategy)
        session.mount("http://", adapter)
        session.mount("https://", adapter)

        session.headers.update({"User-Agent": self.user_agent})

        return session

    def fetch(self, locator: str, follow_redirects: bool = True) -> Optional[RawContent]:
        """
        2.3 Fetch raw content for a locator.

        Returns:
            RawContent, or None when the locator is neither a URL nor an
            existing local sitemap file.

        Raises:
            HttpFailure: Remote fetch did not return a 2xx response.
        """
        if is_remote_locator(locator):
            return self.fetch_remote(locator, follow_redirects=follow_redirects)
        if is_local_locator(locator):
            return self.read_local(locator)

        logger.warning(f"Locator is neither a URL nor a local sitemap file: {locator}")
        return None

    def fetch_remote(self, url: str, follow_redirects: bool = True) -> RawContent:
        """2.4 GET a remote sitemap; only follow_redirects reaches the transport."""
        logger.info(f"Fetching sitemap: {url}")

        try:
            response = self.session.get(url, allow_redirects=follow_redirects, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            logger.debug(f"Transport error fetching {url}: {e}")
            raise HttpFailure(url) from e

        if not 200 <= response.status_code < 300:
            raise HttpFailure(url, response.status_code)

        logger.info(
            f"Successfully fetched {url} "
            f"(status={response.status_code}, size={len(response.content):,} bytes)"
        )
        return RawContent(body=response.content, content_type=response.headers.get("Content-Type"))

    def read_local(self, path: str) -> RawContent:
        """2.5 Read a local sitemap file; no content type, so never inflated."""
        logger.info(f"Reading local sitemap: {path}")
        with open(path, 'rb') as f:
            return RawContent(body=f.read())

    def decode(self, raw: RawContent, locator: str = "") -> bytes:
        """2.6 Inflate the body when the declared content type asks for it."""
        return inflate_body_if_needed(raw.body, raw.content_type, locator)
