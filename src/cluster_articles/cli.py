"""CLI for clustering ingested items."""

from __future__ import annotations

import logging
import sys

from cluster_articles.cluster_articles import cluster_items
from cluster_articles.helpers import item_from_record, parse_cluster_articles_args
from cluster_articles.models import Cluster
from common.cli_helpers import read_jsonl_local, setup_logging

logger = logging.getLogger(__name__)


def _print_clusters(clusters: list[Cluster]) -> None:
    if not clusters:
        print("No clusters found.")
        return

    for index, cluster in enumerate(clusters, start=1):
        print(f"Cluster {index} ({len(cluster.articles)} items, updated {cluster.updated_at.isoformat()})")
        print(f"  keywords: {', '.join(cluster.keywords) or '-'}")
        for item in cluster.articles:
            print(f"- {item.source_domain} : {item.title}")
        print()


def main(argv: list[str] | None = None) -> int:
    args = parse_cluster_articles_args(argv)
    setup_logging(args.verbose)

    records = read_jsonl_local(args.path)
    items = [item_from_record(record) for record in records]
    logger.info("Loaded %d items from %s", len(items), args.path)

    clusters = cluster_items(
        items,
        similarity_threshold=args.similarity_threshold,
        window_hours=args.window_hours,
    )
    _print_clusters(clusters)
    return 0


if __name__ == "__main__":
    sys.exit(main())
