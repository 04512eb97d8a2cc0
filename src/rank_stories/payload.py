"""Build and validate the daily payload consumed by the reading app."""

from __future__ import annotations

import re
from datetime import datetime
from typing import Any

from common.datetime import ensure_utc
from ingest_articles.models import Item, Labels
from rank_stories.models import RankedCluster

_DATE_RE = re.compile(r"\d{4}-\d{2}-\d{2}")


def labels_to_dict(labels: Labels) -> dict[str, Any]:
    return {
        "reliability": labels.reliability,
        "reliability_score": labels.reliability_score,
        "region": labels.region,
        "paywall": labels.paywall,
        "bias_label": labels.bias_label,
    }


def article_to_dict(item: Item) -> dict[str, Any]:
    return {
        "url": item.url,
        "title": item.title,
        "source_domain": item.source_domain,
        "timestamp": item.timestamp.isoformat(),
        "snippet": item.snippet,
        "labels": labels_to_dict(item.labels),
    }


def cluster_to_dict(ranked: RankedCluster) -> dict[str, Any]:
    best = ranked.best_article
    return {
        "cluster_id": ranked.cluster_id,
        "rank_score": ranked.rank_score,
        "priority": ranked.priority,
        "title": ranked.title,
        "topic_tags": list(ranked.topic_tags),
        "updated_at": ranked.cluster.updated_at.isoformat(),
        "coverage_breadth": ranked.coverage_breadth,
        "best_article": {
            "url": best.article.url,
            "source_domain": best.article.source_domain,
            "labels": labels_to_dict(best.article.labels),
            "trace_summary": best.trace_summary,
        },
        "articles": [article_to_dict(item) for item in ranked.cluster.articles],
    }


def build_payload(ranked: list[RankedCluster], as_of: datetime) -> dict[str, Any]:
    """Assemble `{date, generated_at, clusters}` for one run."""
    as_of = ensure_utc(as_of)
    return {
        "date": as_of.date().isoformat(),
        "generated_at": as_of.isoformat(),
        "clusters": [cluster_to_dict(entry) for entry in ranked],
    }


def validate_payload(payload: Any) -> None:
    """Raise ValueError naming the first field that breaks the payload contract."""
    if not isinstance(payload, dict):
        raise ValueError("payload must be an object.")

    date = payload.get("date")
    if not isinstance(date, str) or not _DATE_RE.fullmatch(date):
        raise ValueError("payload date is missing or not in YYYY-MM-DD format.")

    generated_at = payload.get("generated_at")
    try:
        datetime.fromisoformat(str(generated_at).replace("Z", "+00:00"))
    except ValueError as exc:
        raise ValueError("payload generated_at is missing or not a valid ISO date string.") from exc

    clusters = payload.get("clusters")
    if not isinstance(clusters, list):
        raise ValueError("payload clusters must be an array.")

    for index, cluster in enumerate(clusters):
        if not isinstance(cluster, dict) or not cluster.get("cluster_id"):
            raise ValueError(f"clusters[{index}].cluster_id is required.")
        if not isinstance(cluster.get("articles"), list):
            raise ValueError(f"clusters[{index}].articles must be an array.")
        if not (cluster.get("best_article") or {}).get("url"):
            raise ValueError(f"clusters[{index}].best_article.url is required.")
        for article_index, article in enumerate(cluster["articles"]):
            if not isinstance(article, dict) or not article.get("url"):
                raise ValueError(f"clusters[{index}].articles[{article_index}].url is required.")
            if not article.get("title"):
                raise ValueError(f"clusters[{index}].articles[{article_index}].title is required.")
