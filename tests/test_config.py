import json
import re

import pytest

from sitemap_resolver.config import ResolutionOptions, build_options, load_config, validate_config


def write_config(tmp_path, data):
    path = tmp_path / "config.json"
    path.write_text(json.dumps(data) if not isinstance(data, str) else data, encoding="utf-8")
    return str(path)


# =============================================================================
# 1. RESOLUTION OPTIONS
# =============================================================================


def test_defaults():
    options = ResolutionOptions()

    assert options.follow_redirects is True
    assert options.recurse is False
    assert options.url_pattern is None
    assert options.graceful is False
    assert options.propagate_options is False


def test_string_pattern_is_compiled():
    options = ResolutionOptions(url_pattern=r"a\.com")

    assert isinstance(options.url_pattern, re.Pattern)
    assert options.url_pattern.search("https://a.com/")


def test_children_only_inherit_recurse_by_default():
    parent = ResolutionOptions(follow_redirects=False, recurse=True, url_pattern="x", graceful=True)

    assert parent.for_child() == ResolutionOptions(recurse=True)


def test_children_inherit_everything_when_propagating():
    parent = ResolutionOptions(recurse=True, url_pattern="x", graceful=True, propagate_options=True)

    assert parent.for_child() is parent


# =============================================================================
# 2. LOADING / VALIDATION
# =============================================================================


def test_load_valid_config(tmp_path):
    path = write_config(tmp_path, {
        "user_agent": "Test/1.0",
        "timeout": 10,
        "recurse": True,
        "url_pattern": "/blog/",
        "targets": [{"sitemap_url": "https://a.com/sitemap.xml", "graceful": True}],
    })

    config = load_config(path)

    assert config["targets"][0]["sitemap_url"] == "https://a.com/sitemap.xml"


def test_missing_file_returns_none(tmp_path):
    assert load_config(str(tmp_path / "nope.json")) is None


def test_bad_json_returns_none(tmp_path):
    assert load_config(write_config(tmp_path, "{not json")) is None


@pytest.mark.parametrize("config", [
    [],
    {"recurse": "yes"},
    {"url_pattern": 5},
    {"url_pattern": "(unclosed"},
    {"timeout": 0},
    {"timeout": True},
    {"max_retries": -1},
    {"targets": {}},
    {"targets": ["https://a.com/sitemap.xml"]},
    {"targets": [{"domain": "a.com"}]},
    {"targets": [{"sitemap_url": "  "}]},
    {"targets": [{"sitemap_url": "https://a.com/sitemap.xml", "graceful": 1}]},
])
def test_invalid_configs(config):
    assert validate_config(config) is False


def test_empty_config_is_valid():
    assert validate_config({}) is True


# =============================================================================
# 3. MERGING
# =============================================================================


def test_build_options_merges_config_and_overrides():
    config = {"recurse": True, "graceful": True, "url_pattern": "a", "timeout": 10}

    options = build_options(config, graceful=False, url_pattern=None)

    assert options.recurse is True
    assert options.graceful is False
    assert options.url_pattern.pattern == "a"


def test_build_options_without_config():
    assert build_options() == ResolutionOptions()
