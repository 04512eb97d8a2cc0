"""Score clusters, order them for reading and assign priority tiers."""

import logging
from datetime import datetime

from cluster_articles.models import Cluster
from common.datetime import hours_between
from common.hashing import generate_cluster_id
from rank_stories.models import BestArticleChoice, RankedCluster
from rank_stories.settings import DEFAULT_REGION, RANKING_REGION_WEIGHT, FeedSettings

logger = logging.getLogger(__name__)

RECENCY_HORIZON_HOURS = 72
TOPIC_BOOST = 0.4
MUTE_PENALTY = -0.8
MAX_TOPIC_TAGS = 3
FALLBACK_TOPIC_TAG = "general"

# Relative weights of the rank score terms
RECENCY_WEIGHT = 0.3
OUTLET_WEIGHT = 0.25
REGION_WEIGHT = 0.2
TOPIC_WEIGHT = 0.15
MUTE_WEIGHT = 0.1


def coverage_breadth(outlet_count: int) -> str:
    if outlet_count >= 6:
        return "Broad"
    if outlet_count >= 3:
        return "Medium"
    return "Narrow"


def topic_tags(cluster: Cluster) -> list[str]:
    return cluster.keywords[:MAX_TOPIC_TAGS] or [FALLBACK_TOPIC_TAG]


def priority_for_position(index: int, settings: FeedSettings) -> str:
    if index < settings.top_count:
        return "top"
    if index < settings.top_count + settings.scan_count:
        return "scan"
    return "low"


def is_muted(title: str, keyword_mutes: list[str]) -> bool:
    lowered = title.lower()
    return any(word.strip() and word.strip().lower() in lowered for word in keyword_mutes)


def rank_score(cluster: Cluster, tags: list[str], settings: FeedSettings, as_of: datetime) -> float:
    """Weighted sum of recency, outlet count, region weight, topic boost and mute penalty."""
    recency = max(0.0, RECENCY_HORIZON_HOURS - hours_between(cluster.updated_at, as_of))
    outlet_count = len(cluster.outlets)

    regions = {article.labels.region or DEFAULT_REGION for article in cluster.articles}
    region_boost = sum(
        settings.region_weight(region, RANKING_REGION_WEIGHT) for region in regions
    ) / len(regions)

    boosts = {topic.lower() for topic in settings.topic_boosts}
    topic_boost = TOPIC_BOOST if any(tag.lower() in boosts for tag in tags) else 0.0
    mute = MUTE_PENALTY if is_muted(cluster.title, settings.keyword_mutes) else 0.0

    score = (
        (recency / RECENCY_HORIZON_HOURS) * RECENCY_WEIGHT
        + (outlet_count * 0.2) * OUTLET_WEIGHT
        + region_boost * REGION_WEIGHT
        + topic_boost * TOPIC_WEIGHT
        + mute * MUTE_WEIGHT
    )
    return round(score, 3)


def sort_key(ranked: RankedCluster) -> tuple[float, float, str]:
    """Higher score first, then newer updated_at, then title."""
    return (-ranked.rank_score, -ranked.cluster.updated_at.timestamp(), ranked.title)


def rank_clusters(
    choices: list[tuple[Cluster, BestArticleChoice]],
    settings: FeedSettings,
    as_of: datetime,
) -> list[RankedCluster]:
    """
    Rank clusters that already carry a best-article choice.

    The ordered list is truncated to `settings.stories_per_day`; the first
    `top_count` entries are "top", the next `scan_count` are "scan", the rest
    "low".
    """
    if not choices:
        logger.warning("No clusters to rank")
        return []

    ranked = []
    for cluster, choice in choices:
        tags = topic_tags(cluster)
        ranked.append(
            RankedCluster(
                cluster_id=generate_cluster_id(cluster.articles[0].url),
                cluster=cluster,
                rank_score=rank_score(cluster, tags, settings, as_of),
                priority="low",
                coverage_breadth=coverage_breadth(len(cluster.outlets)),
                best_article=choice,
                topic_tags=tags,
            )
        )

    ranked.sort(key=sort_key)
    ranked = ranked[: settings.stories_per_day]
    for index, entry in enumerate(ranked):
        entry.priority = priority_for_position(index, settings)

    logger.info(
        "Ranked %d clusters, kept %d (%d top, %d scan)",
        len(choices),
        len(ranked),
        sum(1 for entry in ranked if entry.priority == "top"),
        sum(1 for entry in ranked if entry.priority == "scan"),
    )
    return ranked
