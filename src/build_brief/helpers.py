"""Helper functions for build_brief CLI."""

from __future__ import annotations

import argparse

from common.cli_helpers import parse_as_of
from rank_stories.settings import PRESETS


def parse_build_brief_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse CLI arguments for build_brief."""

    parser = argparse.ArgumentParser(description="Build the ranked daily brief from RSS feeds.")

    # Input options
    parser.add_argument(
        "--config",
        default=None,
        help="Config name (test/prod) or path to config file (default: $CONFIG_ENV or prod)",
    )
    parser.add_argument(
        "--feeds",
        default=None,
        help="Comma-separated list of feed names (default: all)",
    )
    parser.add_argument("--mock", action="store_true", help="Read feeds from the mock directory")

    # Policy options
    parser.add_argument("--settings", default=None, help="JSON or YAML file with settings overrides")
    parser.add_argument(
        "--preset",
        choices=sorted(PRESETS),
        default=None,
        help="Apply a named settings preset after other settings",
    )
    parser.add_argument(
        "--as-of",
        type=parse_as_of,
        default=None,
        help="Reference time for scoring, ISO-8601 (default: now, UTC)",
    )

    # Output options
    parser.add_argument("--output", default=None, help="Payload path (default: from config)")
    parser.add_argument("--dry-run", action="store_true", help="Build and validate without writing")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")

    return parser.parse_args(argv)
