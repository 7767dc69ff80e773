"""
1.0 Configuration Module
Resolution options plus loading/validation of the JSON config file.

The config file holds transport settings (user agent, timeout, retries),
default resolution options and an optional list of targets:

    {
        "user_agent": "SitemapResolver/1.0",
        "timeout": 30,
        "recurse": true,
        "url_pattern": "/blog/",
        "targets": [
            {"sitemap_url": "https://example.com/sitemap_index.xml", "graceful": true}
        ]
    }
"""

import json
import logging
import os
import re
from dataclasses import dataclass, fields, replace
from typing import Any, Dict, Optional, Union

logger = logging.getLogger(__name__)

CONFIG_FILE_PATH = "config.json"

BOOL_OPTION_KEYS = ("follow_redirects", "recurse", "graceful", "propagate_options")


@dataclass(frozen=True)
class ResolutionOptions:
    """
    2.0 Options for a single SitemapResolver.

    Attributes:
        follow_redirects: Forwarded to the HTTP transport.
        recurse: Expand sitemap indexes into their child sitemaps.
        url_pattern: Regex searched (not full-matched) in each stripped location.
        graceful: Swallow fetch/parse failures and resolve to an empty list.
        propagate_options: Hand every option to child resolvers instead of
            only ``recurse``.
    """

    follow_redirects: bool = True
    recurse: bool = False
    url_pattern: Optional[Union[str, re.Pattern]] = None
    graceful: bool = False
    propagate_options: bool = False

    def __post_init__(self):
        if isinstance(self.url_pattern, str):
            object.__setattr__(self, "url_pattern", re.compile(self.url_pattern))

    def for_child(self) -> "ResolutionOptions":
        """Options handed to the resolver of a child sitemap."""
        if self.propagate_options:
            return self
        return ResolutionOptions(recurse=self.recurse)


def load_config(path: str = CONFIG_FILE_PATH) -> Optional[Dict[str, Any]]:
    """Loads the configuration from a JSON file."""
    if not os.path.exists(path):
        logger.error(f"Configuration file not found: {path}")
        return None
    try:
        with open(path, 'r') as f:
            config_data = json.load(f)
        logger.info(f"Successfully loaded configuration from {path}")
        if not validate_config(config_data):
            return None
        return config_data
    except json.JSONDecodeError as e:
        logger.error(f"Error decoding JSON from {path}: {e}")
        return None
    except OSError as e:
        logger.error(f"Could not read configuration file {path}: {e}")
        return None


def _validate_options(section: Dict[str, Any], where: str) -> bool:
    for key in BOOL_OPTION_KEYS:
        if key in section and not isinstance(section[key], bool):
            logger.error(f"'{key}' in {where} must be true or false.")
            return False

    pattern = section.get("url_pattern")
    if pattern is not None:
        if not isinstance(pattern, str):
            logger.error(f"'url_pattern' in {where} must be a string or null.")
            return False
        try:
            re.compile(pattern)
        except re.error as e:
            logger.error(f"'url_pattern' in {where} is not a valid regex: {e}")
            return False
    return True


def validate_config(config: Dict[str, Any]) -> bool:
    """Validates the structure and content of the configuration."""
    if not isinstance(config, dict):
        logger.error("Configuration must be a dictionary.")
        return False

    if not _validate_options(config, "config"):
        return False

    timeout = config.get("timeout")
    if timeout is not None and (isinstance(timeout, bool) or not isinstance(timeout, (int, float)) or timeout <= 0):
        logger.error("'timeout' must be a positive number of seconds.")
        return False

    max_retries = config.get("max_retries")
    if max_retries is not None and (isinstance(max_retries, bool) or not isinstance(max_retries, int) or max_retries < 0):
        logger.error("'max_retries' must be a non-negative integer.")
        return False

    if "user_agent" in config and (not isinstance(config["user_agent"], str) or not config["user_agent"].strip()):
        logger.warning("'user_agent' is not a non-empty string. The default one will be used.")

    targets = config.get("targets", [])
    if not isinstance(targets, list):
        logger.error("'targets' must be a list.")
        return False

    for i, target_entry in enumerate(targets):
        if not isinstance(target_entry, dict):
            logger.error(f"Target entry at index {i} is not a dictionary.")
            return False
        sitemap_url = target_entry.get("sitemap_url")
        if not isinstance(sitemap_url, str) or not sitemap_url.strip():
            logger.error(f"Target entry at index {i} needs a non-empty 'sitemap_url'.")
            return False
        if not _validate_options(target_entry, f"target entry at index {i}"):
            return False

    logger.info("Configuration validation successful.")
    return True


def build_options(config: Optional[Dict[str, Any]] = None, **overrides: Any) -> ResolutionOptions:
    """
    3.0 Merge defaults, config values and explicit overrides.

    Overrides set to None are ignored so unset CLI flags fall through
    to the config file.
    """
    option_names = {f.name for f in fields(ResolutionOptions)}
    values = {k: v for k, v in (config or {}).items() if k in option_names}
    values.update({k: v for k, v in overrides.items() if k in option_names and v is not None})
    return replace(ResolutionOptions(), **values)
