"""Turn fetched feed records into the ranked daily brief."""

import logging
from datetime import datetime
from typing import Any, Mapping

from cluster_articles.cluster_articles import (
    DEFAULT_SIMILARITY_THRESHOLD,
    DEFAULT_WINDOW_HOURS,
    cluster_items,
)
from common.datetime import ensure_utc
from ingest_articles.ingest_articles import ingest_articles
from ingest_articles.models import FeedDescriptor, Item, SourceMeta
from rank_stories.choose_best_article import choose_best_article
from rank_stories.models import RankedCluster
from rank_stories.payload import build_payload, validate_payload
from rank_stories.rank_clusters import rank_clusters
from rank_stories.settings import FeedSettings

logger = logging.getLogger(__name__)


def rank_items(
    items: list[Item],
    settings: FeedSettings,
    as_of: datetime,
    similarity_threshold: float = DEFAULT_SIMILARITY_THRESHOLD,
    window_hours: float = DEFAULT_WINDOW_HOURS,
) -> list[RankedCluster]:
    """Cluster deduplicated items, choose each cluster's best article and rank."""
    clusters = cluster_items(
        items,
        similarity_threshold=similarity_threshold,
        window_hours=window_hours,
    )
    choices = [(cluster, choose_best_article(cluster, settings, as_of)) for cluster in clusters]

    fallbacks = sum(1 for _, choice in choices if choice.fallback)
    if fallbacks:
        logger.warning("%d/%d clusters used a fallback best article", fallbacks, len(choices))

    return rank_clusters(choices, settings, as_of)


def build_brief(
    feed_records: list[tuple[FeedDescriptor, list[Any]]],
    source_table: Mapping[str, SourceMeta],
    settings: FeedSettings,
    as_of: datetime,
    similarity_threshold: float = DEFAULT_SIMILARITY_THRESHOLD,
    window_hours: float = DEFAULT_WINDOW_HOURS,
    failures: list[str] | None = None,
) -> dict[str, Any]:
    """
    Build the daily payload from one snapshot of feed records.

    The result depends only on the arguments; `as_of` stands in for the
    current time in freshness and recency scoring.

    Args:
        feed_records: (feed, raw records) pairs in configured feed order.
        source_table: Source metadata keyed by domain (may be empty).
        settings: Selection and ranking policy.
        as_of: Reference time for the run.
        similarity_threshold: Clustering keyword overlap threshold.
        window_hours: Clustering time window.
        failures: Feed failures reported by the fetch step, for error messages.

    Returns:
        Validated payload dict with date, generated_at and clusters.

    Raises:
        RuntimeError: If no item survived ingestion.
    """
    as_of = ensure_utc(as_of)
    items = ingest_articles(feed_records, source_table, ingested_at=as_of)
    if not items:
        detail = " | ".join(failures or []) or "no records could be normalized"
        raise RuntimeError(f"All feeds failed. {detail}")

    ranked = rank_items(
        items,
        settings,
        as_of,
        similarity_threshold=similarity_threshold,
        window_hours=window_hours,
    )
    payload = build_payload(ranked, as_of)
    validate_payload(payload)

    logger.info("Built brief with %d clusters from %d items", len(payload["clusters"]), len(items))
    return payload
