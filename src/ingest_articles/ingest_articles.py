"""Normalize and deduplicate fetched feed records."""

import logging
from datetime import datetime
from typing import Any, Mapping

from ingest_articles.dedupe import dedupe_items
from ingest_articles.models import FeedDescriptor, Item, SourceMeta
from ingest_articles.normalize import normalize_records

logger = logging.getLogger(__name__)


def ingest_articles(
    feed_records: list[tuple[FeedDescriptor, list[Any]]],
    source_table: Mapping[str, SourceMeta],
    ingested_at: datetime,
) -> list[Item]:
    """Normalize every feed's records and drop exact URL duplicates.

    Feeds are processed in the given order, so on a URL collision the item from
    the earlier feed is kept.
    """
    logger.info("Ingesting records from %d feeds", len(feed_records))

    items: list[Item] = []
    for feed, records in feed_records:
        normalized = normalize_records(records, feed, source_table, ingested_at)
        logger.info("Normalized %d/%d records from %s", len(normalized), len(records), feed.name)
        items.extend(normalized)

    if not items:
        logger.warning("0 Items normalized")
        return []

    deduped = dedupe_items(items)
    logger.info("%d Items ingested", len(deduped))
    return deduped
