"""Helper functions for ingest_articles CLI."""

from __future__ import annotations

import argparse
import logging

from common.cli_helpers import parse_name_list
from ingest_articles.models import FeedDescriptor

logger = logging.getLogger(__name__)


def select_feeds(feeds: list[FeedDescriptor], value: str | None) -> list[FeedDescriptor]:
    '''Filter configured feeds by the --feeds argument, keeping configured order.'''

    # If no value is provided or if "all" is specified, return all feeds
    if not value or value.strip().lower() == "all":
        return list(feeds)

    valid_names = {feed.name for feed in feeds}
    requested = [name for name in parse_name_list(value) if name.lower() != "all"]

    # Log any invalid feed names
    for name in requested:
        if name not in valid_names:
            logger.warning("Invalid feed: %s", name)

    selected = [feed for feed in feeds if feed.name in requested]

    # Raise an error if no valid feeds were provided
    if not selected:
        raise ValueError(f"No valid feeds provided. Valid feeds: {', '.join(sorted(valid_names))}")

    return selected


def parse_ingest_articles_args(argv: list[str] | None = None) -> argparse.Namespace:
    '''Parse CLI arguments for ingest_articles.'''

    parser = argparse.ArgumentParser(description="Fetch, normalize and deduplicate feed items.")
    parser.add_argument("--config", default=None, help="Config name (test/prod) or path to config file")
    parser.add_argument(
        "--feeds",
        default=None,
        help="Comma-separated list of feed names (default: all).",
    )
    parser.add_argument("--mock", action="store_true", help="Read feeds from the mock directory")
    parser.add_argument("--load-local", action="store_true", help="Save items to a local JSONL file")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    return parser.parse_args(argv)
