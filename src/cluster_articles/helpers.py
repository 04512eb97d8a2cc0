"""Helper functions for cluster_articles CLI."""

from __future__ import annotations

import argparse
from typing import Any

from cluster_articles.cluster_articles import DEFAULT_SIMILARITY_THRESHOLD, DEFAULT_WINDOW_HOURS
from common.datetime import ensure_utc, parse_datetime
from ingest_articles.models import Item, Labels


def item_from_record(record: dict[str, Any]) -> Item:
    """Rebuild an Item from its serialized (JSONL) form."""
    labels = record.get("labels") or {}
    return Item(
        url=record["url"],
        title=record["title"],
        normalized_title=record["normalized_title"],
        keywords=list(record.get("keywords") or []),
        source_domain=record["source_domain"],
        timestamp=ensure_utc(parse_datetime(record["timestamp"])),
        snippet=record.get("snippet") or "",
        labels=Labels(
            reliability=labels.get("reliability", "Med"),
            reliability_score=labels.get("reliability_score", 65),
            region=labels.get("region") or "Global",
            paywall=labels.get("paywall", "No"),
            bias_label=labels.get("bias_label"),
        ),
        feed_name=record.get("feed_name") or "",
    )


def parse_cluster_articles_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse CLI arguments for cluster_articles."""

    parser = argparse.ArgumentParser(description="Cluster ingested items into events.")

    # Input options
    parser.add_argument(
        "path",
        help="Local JSONL file of ingested items (from ingest_articles --load-local)",
    )

    # Clustering options
    parser.add_argument(
        "--similarity-threshold",
        type=float,
        default=DEFAULT_SIMILARITY_THRESHOLD,
        help=f"Minimum keyword Jaccard overlap (default: {DEFAULT_SIMILARITY_THRESHOLD})",
    )
    parser.add_argument(
        "--window-hours",
        type=float,
        default=DEFAULT_WINDOW_HOURS,
        help=f"Maximum hours between a cluster and a new item (default: {DEFAULT_WINDOW_HOURS})",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")

    return parser.parse_args(argv)
