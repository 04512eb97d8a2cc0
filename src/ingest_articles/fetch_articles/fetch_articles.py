"""Core fetch logic."""

import logging
from pathlib import Path
from typing import Any

from ingest_articles.fetch_articles.fetch_rss_articles import (
    DEFAULT_TIMEOUT_SECONDS,
    DEFAULT_USER_AGENT,
    fetch_rss_records,
)
from ingest_articles.models import FeedDescriptor

logger = logging.getLogger(__name__)


FeedRecords = tuple[FeedDescriptor, list[dict[str, Any]]]


def fetch_articles(
    feeds: list[FeedDescriptor],
    use_mock: bool = False,
    mock_dir: str | Path = "tests/data/mock-feeds",
    timeout: float = DEFAULT_TIMEOUT_SECONDS,
    user_agent: str = DEFAULT_USER_AGENT,
) -> tuple[list[FeedRecords], list[str]]:
    """Fetch raw records for each feed, in configured order.

    A feed that fails to download or parse is logged and reported in the
    returned failure list; the remaining feeds are still fetched.

    Returns:
        Tuple of (per-feed records, failure descriptions)
    """
    results: list[FeedRecords] = []
    failures: list[str] = []

    for feed in feeds:
        logger.info("Fetching records from %s", feed.name)
        try:
            records = fetch_rss_records(
                feed,
                use_mock=use_mock,
                mock_dir=mock_dir,
                timeout=timeout,
                user_agent=user_agent,
            )
        except Exception as e:
            logger.error("Feed failed: %s (%s) -> %s", feed.name, feed.url, e)
            failures.append(f"{feed.name} ({feed.url}): {e}")
            continue

        logger.info("Fetched %d records from %s", len(records), feed.name)
        results.append((feed, records))

    logger.info(
        "Total records collected: %d from %d feeds (%d failed)",
        sum(len(records) for _, records in results),
        len(results),
        len(failures),
    )
    return results, failures
