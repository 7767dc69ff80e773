"""
1.0 Command Line Entry Point
Resolves one or more sitemaps and prints (or exports) the target URLs.

Usage:
    python -m sitemap_resolver.main https://example.com/sitemap_index.xml --recurse
    python -m sitemap_resolver.main ./public/sitemap.xml --pattern '/blog/'
    python -m sitemap_resolver.main --config config.json --output urls.csv
"""

import argparse
import logging
import os
import sys
from typing import Any, Dict, List, Optional, Tuple

import pandas as pd

from sitemap_resolver.config import CONFIG_FILE_PATH, ResolutionOptions, build_options, load_config
from sitemap_resolver.exceptions import SitemapResolverError
from sitemap_resolver.resolver import SitemapResolver, to_location_strings
from sitemap_resolver.sitemap_fetcher import SitemapFetcher
from sitemap_resolver.sitemap_parser import SitemapEntry

logger = logging.getLogger(__name__)

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

CSV_COLUMNS = ["loc", "lastmod", "changefreq", "priority", "sitemap_source_url"]


def setup_logging(level: str = "WARNING", log_file: Optional[str] = None) -> None:
    """1.1 Console logging on stderr, plus an optional log file."""
    handlers: List[logging.Handler] = [logging.StreamHandler()]
    if log_file:
        handlers.append(logging.FileHandler(log_file))
    logging.basicConfig(level=level, format=LOG_FORMAT, handlers=handlers, force=True)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Resolve a sitemap or sitemap index into a flat list of URLs"
    )
    parser.add_argument(
        "locators",
        nargs="*",
        help="Sitemap URLs or local sitemap.xml/sitemap_index.xml paths (default: config targets)"
    )
    parser.add_argument(
        "--config", "-c",
        default=None,
        help=f"JSON config file (default: {CONFIG_FILE_PATH} if present)"
    )
    parser.add_argument(
        "--recurse", "-r",
        action="store_true",
        default=None,
        help="Expand sitemap indexes into their child sitemaps"
    )
    parser.add_argument(
        "--pattern", "-p",
        dest="url_pattern",
        default=None,
        help="Only keep locations containing a match for this regex"
    )
    parser.add_argument(
        "--graceful", "-g",
        action="store_true",
        default=None,
        help="Skip unreachable or malformed sitemaps instead of failing"
    )
    parser.add_argument(
        "--no-follow-redirects",
        dest="follow_redirects",
        action="store_false",
        default=None,
        help="Treat HTTP redirects as failures"
    )
    parser.add_argument(
        "--propagate-options",
        action="store_true",
        default=None,
        help="Apply pattern and graceful mode to child sitemaps too"
    )
    parser.add_argument(
        "--output", "-o",
        default=None,
        help="Write resolved entries to this CSV file instead of stdout"
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: WARNING)"
    )
    parser.add_argument(
        "--log-file",
        default=None,
        help="Also write log output to this file"
    )
    return parser


def resolve_target(
    locator: str,
    options: ResolutionOptions,
    fetcher: Optional[SitemapFetcher] = None,
) -> List[SitemapEntry]:
    """2.0 Resolve a single locator. An entry without <loc> fails it even in graceful mode."""
    resolver = SitemapResolver(locator, options, fetcher=fetcher)
    return resolver.entries


def collect_targets(args: argparse.Namespace, config: Dict[str, Any]) -> List[Tuple[str, ResolutionOptions]]:
    """2.1 Pair each locator with its options. CLI flags beat config values."""
    overrides = {
        "follow_redirects": args.follow_redirects,
        "recurse": args.recurse,
        "url_pattern": args.url_pattern,
        "graceful": args.graceful,
        "propagate_options": args.propagate_options,
    }

    if args.locators:
        options = build_options(config, **overrides)
        return [(locator, options) for locator in args.locators]

    targets = []
    for target in config.get("targets", []):
        merged = {**config, **target}
        targets.append((target["sitemap_url"], build_options(merged, **overrides)))
    return targets


def save_entries_csv(entries: List[SitemapEntry], csv_path: str) -> None:
    """3.0 Save resolved entries to CSV, one row per entry."""
    df = pd.DataFrame([entry.to_dict() for entry in entries], columns=CSV_COLUMNS)
    df.to_csv(csv_path, index=False)
    logger.info(f"Saved {len(df)} entries to {csv_path}")


def main(argv: Optional[List[str]] = None) -> int:
    """
    4.0 CLI entry point.

    Returns:
        0 when every target resolved, 1 otherwise.
    """
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level, args.log_file)

    if args.config or os.path.exists(CONFIG_FILE_PATH):
        config = load_config(args.config or CONFIG_FILE_PATH)
        if config is None:
            return 1
    else:
        config = {}

    targets = collect_targets(args, config)
    if not targets:
        logger.error("No sitemap locators given and no targets configured")
        return 1

    fetcher = SitemapFetcher(config=config)
    all_entries: List[SitemapEntry] = []
    failed = 0

    for locator, options in targets:
        try:
            entries = resolve_target(locator, options, fetcher=fetcher)
        except (SitemapResolverError, OSError) as e:
            logger.error(f"Could not resolve {locator}: {e}")
            failed += 1
            continue
        logger.info(f"Resolved {len(entries)} URLs from {locator}")
        all_entries.extend(entries)

    if args.output:
        save_entries_csv(all_entries, args.output)
    else:
        for loc in to_location_strings(all_entries):
            print(loc)

    if failed:
        logger.error(f"{failed} of {len(targets)} sitemaps failed")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
