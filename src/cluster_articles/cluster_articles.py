"""Group items into event clusters by title keywords and recency."""

from __future__ import annotations

import logging
from datetime import timedelta
from typing import Iterable

from cluster_articles.models import Cluster
from ingest_articles.models import Item

logger = logging.getLogger(__name__)

DEFAULT_SIMILARITY_THRESHOLD = 0.45
DEFAULT_WINDOW_HOURS = 24.0


def jaccard(a: Iterable[str], b: Iterable[str]) -> float:
    """Intersection over union of two keyword sets; two empty sets score 0."""
    left, right = set(a), set(b)
    union = left | right
    if not union:
        return 0.0
    return len(left & right) / len(union)


def _matches(
    cluster: Cluster,
    item: Item,
    similarity_threshold: float,
    window: timedelta,
) -> bool:
    if abs(cluster.updated_at - item.timestamp) > window:
        return False
    if cluster.normalized_title == item.normalized_title:
        return True
    return jaccard(cluster.keywords, item.keywords) >= similarity_threshold


def find_matching_cluster(
    clusters: list[Cluster],
    item: Item,
    similarity_threshold: float = DEFAULT_SIMILARITY_THRESHOLD,
    window_hours: float = DEFAULT_WINDOW_HOURS,
) -> Cluster | None:
    """Return the first cluster, in creation order, that should absorb `item`."""
    window = timedelta(hours=window_hours)
    for cluster in clusters:
        if _matches(cluster, item, similarity_threshold, window):
            return cluster
    return None


def cluster_items(
    items: list[Item],
    similarity_threshold: float = DEFAULT_SIMILARITY_THRESHOLD,
    window_hours: float = DEFAULT_WINDOW_HOURS,
) -> list[Cluster]:
    """
    Greedy single-pass clustering in input order.

    Each item joins the first existing cluster that is within the time window
    and has an identical normalized title or enough keyword overlap; otherwise
    it seeds a new cluster. A cluster's keyword set only grows as members are
    added, so large clusters admit new items more easily.

    Args:
        items: Deduplicated items.
        similarity_threshold: Minimum Jaccard overlap of keyword sets.
        window_hours: Maximum distance between cluster updated_at and item timestamp.

    Returns:
        Clusters in creation order, partitioning the input.
    """
    if not items:
        logger.warning("No items available for clustering")
        return []

    logger.info(
        "Clustering %d items (similarity_threshold=%.2f, window_hours=%.1f)",
        len(items),
        similarity_threshold,
        window_hours,
    )

    clusters: list[Cluster] = []
    for item in items:
        match = find_matching_cluster(clusters, item, similarity_threshold, window_hours)
        if match is None:
            clusters.append(Cluster.seed(item))
        else:
            match.add(item)

    singletons = sum(1 for cluster in clusters if len(cluster.articles) == 1)
    logger.info("Built %d clusters (%d singletons)", len(clusters), singletons)
    return clusters
