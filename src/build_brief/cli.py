"""CLI entry point for building the daily brief."""

from __future__ import annotations

import logging
import sys
from datetime import datetime, timezone

from dotenv import load_dotenv

from build_brief.build_brief import build_brief
from build_brief.config import get_config, load_config, set_config
from build_brief.helpers import parse_build_brief_args
from build_brief.publish import publish_payload
from common.cli_helpers import setup_logging
from ingest_articles.fetch_articles.fetch_articles import fetch_articles
from ingest_articles.fetch_articles.sources import load_source_table
from ingest_articles.helpers import select_feeds
from rank_stories.settings import apply_preset, load_settings_file

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    args = parse_build_brief_args(argv)
    setup_logging(args.verbose)
    load_dotenv()

    try:
        if args.config:
            set_config(load_config(args.config))
        config = get_config()
        settings = config.settings
        if args.settings:
            settings = load_settings_file(args.settings, settings)
        if args.preset:
            settings = apply_preset(settings, args.preset)

        feeds = select_feeds(config.feeds, args.feeds)
        as_of = args.as_of or datetime.now(timezone.utc)
        logger.info("Building brief for %d feeds as of %s", len(feeds), as_of.isoformat())

        feed_records, failures = fetch_articles(
            feeds,
            use_mock=args.mock or config.fetch.use_mock,
            mock_dir=config.fetch.mock_dir,
            timeout=config.fetch.timeout_seconds,
            user_agent=config.fetch.user_agent,
        )
        source_table = load_source_table(config.sources_path)

        payload = build_brief(
            feed_records,
            source_table,
            settings,
            as_of,
            similarity_threshold=config.cluster.similarity_threshold,
            window_hours=config.cluster.window_hours,
            failures=failures,
        )

        if failures:
            logger.warning("Build continued with partial feed failures: %s", " | ".join(failures))

        if args.dry_run:
            logger.info("Dry run: built %d clusters, not writing", len(payload["clusters"]))
            return 0

        publish_payload(payload, args.output or config.output.path)
        return 0

    except FileNotFoundError as e:
        logger.error("File not found: %s", e)
        return 1
    except Exception as e:
        logger.exception("Build failed: %s", e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
