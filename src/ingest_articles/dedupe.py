"""Collapse items that share a canonical URL."""

import logging

from ingest_articles.models import Item

logger = logging.getLogger(__name__)


def dedupe_items(items: list[Item]) -> list[Item]:
    """Keep the first item seen for each canonical URL, preserving input order."""
    seen_urls: set[str] = set()
    results = []
    for item in items:
        if item.url in seen_urls:
            logger.debug("Skipping duplicate item: %s (%s)", item.url, item.feed_name)
            continue
        seen_urls.add(item.url)
        results.append(item)

    dropped = len(items) - len(results)
    logger.info("Deduplicated %d items to %d (%d duplicates)", len(items), len(results), dropped)
    return results
