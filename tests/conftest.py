"""
Shared fixtures - no network.

HTTP is faked by swapping the fetcher session's ``get`` for FakeSite.get,
which returns real ``requests.Response`` objects.
"""

import gzip

import pytest
import requests

from sitemap_resolver.sitemap_fetcher import SitemapFetcher

SITEMAP_NS = "http://www.sitemaps.org/schemas/sitemap/0.9"


def urlset_xml(*locs: str) -> bytes:
    body = "".join(f"<url><loc>{loc}</loc></url>" for loc in locs)
    return f'<?xml version="1.0" encoding="UTF-8"?><urlset xmlns="{SITEMAP_NS}">{body}</urlset>'.encode("utf-8")


def index_xml(*locs: str) -> bytes:
    body = "".join(f"<sitemap><loc>{loc}</loc></sitemap>" for loc in locs)
    return f'<?xml version="1.0" encoding="UTF-8"?><sitemapindex xmlns="{SITEMAP_NS}">{body}</sitemapindex>'.encode("utf-8")


def make_response(url: str, status_code: int = 200, body: bytes = b"", content_type=None) -> requests.Response:
    response = requests.Response()
    response.url = url
    response.status_code = status_code
    response._content = body
    if content_type:
        response.headers["Content-Type"] = content_type
    return response


class FakeSite:
    """In-memory web site. Unknown URLs answer 404."""

    def __init__(self):
        self.pages = {}
        self.requests = []

    def add(self, url, body=b"", status_code=200, content_type="application/xml"):
        self.pages[url] = (status_code, body, content_type)

    def add_gzip(self, url, body, content_type="application/x-gzip"):
        self.add(url, gzip.compress(body), content_type=content_type)

    def add_error(self, url, exc):
        self.pages[url] = exc

    def get(self, url, allow_redirects=True, timeout=None, **kwargs):
        self.requests.append({"url": url, "allow_redirects": allow_redirects, "timeout": timeout})
        page = self.pages.get(url)
        if page is None:
            return make_response(url, 404, b"Not Found", "text/html")
        if isinstance(page, Exception):
            raise page
        status_code, body, content_type = page
        return make_response(url, status_code, body, content_type)

    def requested_urls(self):
        return [r["url"] for r in self.requests]


@pytest.fixture()
def site():
    return FakeSite()


@pytest.fixture()
def fetcher(site, monkeypatch):
    fetcher = SitemapFetcher({"user_agent": "TestAgent/1.0", "timeout": 5})
    monkeypatch.setattr(fetcher.session, "get", site.get)
    return fetcher
