"""CLI for fetching and normalizing feed items."""

from __future__ import annotations

import logging
import sys
from datetime import datetime, timezone

from dotenv import load_dotenv

from build_brief.config import get_config, load_config, set_config
from common.cli_helpers import save_jsonl_local, setup_logging
from common.serialization import serialize_dataclass
from ingest_articles.fetch_articles.fetch_articles import fetch_articles
from ingest_articles.fetch_articles.sources import load_source_table
from ingest_articles.helpers import parse_ingest_articles_args, select_feeds
from ingest_articles.ingest_articles import ingest_articles

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    args = parse_ingest_articles_args(argv)
    setup_logging(args.verbose)
    load_dotenv()

    if args.config:
        set_config(load_config(args.config))
    config = get_config()
    feeds = select_feeds(config.feeds, args.feeds)

    feed_records, failures = fetch_articles(
        feeds,
        use_mock=args.mock or config.fetch.use_mock,
        mock_dir=config.fetch.mock_dir,
        timeout=config.fetch.timeout_seconds,
        user_agent=config.fetch.user_agent,
    )
    source_table = load_source_table(config.sources_path)

    now = datetime.now(timezone.utc)
    items = ingest_articles(feed_records, source_table, ingested_at=now)
    if failures:
        logger.warning("Continued with partial feed failures: %s", " | ".join(failures))

    if not items:
        logger.warning("No items ingested")
        return 1

    if args.load_local:
        records = [serialize_dataclass(item) for item in items]
        filepath = save_jsonl_local(records, "ingested_items", now)
        logger.info("Saved %d items to %s", len(items), filepath)

    return 0


if __name__ == "__main__":
    sys.exit(main())
