import re

import pytest

from sitemap_resolver.entry_filter import filter_entries, strip_locations
from sitemap_resolver.exceptions import MissingLocation
from sitemap_resolver.sitemap_parser import SitemapEntry


def entries(*locs):
    return [SitemapEntry(loc=loc) for loc in locs]


def test_locations_are_stripped_without_touching_the_input():
    original = entries("  https://a.com/x\n", "\thttps://a.com/y")

    stripped = strip_locations(original)

    assert [e.loc for e in stripped] == ["https://a.com/x", "https://a.com/y"]
    assert original[0].loc == "  https://a.com/x\n"


def test_no_pattern_keeps_everything_in_order():
    result = filter_entries(entries(" https://b.com/z ", "https://a.com/x"))

    assert [e.loc for e in result] == ["https://b.com/z", "https://a.com/x"]


def test_pattern_keeps_matching_entries_in_order():
    result = filter_entries(
        entries("https://a.com/x", "https://a.com/y", "https://b.com/z"),
        re.compile(r"a\.com"),
    )

    assert [e.loc for e in result] == ["https://a.com/x", "https://a.com/y"]


def test_pattern_is_searched_not_full_matched():
    result = filter_entries(entries("https://a.com/blog/post"), re.compile(r"/blog/"))

    assert len(result) == 1


def test_strip_happens_before_anchored_patterns():
    result = filter_entries(entries("   https://a.com/x   "), re.compile(r"^https://a\.com/x$"))

    assert [e.loc for e in result] == ["https://a.com/x"]


def test_entry_without_location_raises():
    with pytest.raises(MissingLocation) as exc_info:
        filter_entries([SitemapEntry(loc="https://a.com/"), SitemapEntry(loc=None)])

    assert exc_info.value.entry.loc is None


def test_empty_location_is_kept_as_empty_string():
    assert [e.loc for e in filter_entries(entries("   "))] == [""]
