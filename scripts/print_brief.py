"""Print the clusters of a published daily brief."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

from common.local_io import read_json_local


def main() -> None:
    parser = argparse.ArgumentParser(description="Print the clusters of a daily brief payload.")
    parser.add_argument(
        "path",
        nargs="?",
        default="output/today.json",
        help="Path of the payload to print",
    )
    parser.add_argument("--articles", action="store_true", help="Also list every article")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s")
    logger = logging.getLogger(__name__)

    payload = read_json_local(Path(args.path))
    if payload is None:
        logger.error("No payload found at %s", args.path)
        return

    clusters = payload.get("clusters") or []
    if not clusters:
        logger.info("Brief for %s has no clusters", payload.get("date"))
        return

    print(f"Brief for {payload.get('date')} (generated {payload.get('generated_at')})")
    print()
    for index, cluster in enumerate(clusters, start=1):
        best = cluster.get("best_article") or {}
        print(
            f"{index:>2}. [{cluster.get('priority')}] {cluster.get('title')} "
            f"(score {cluster.get('rank_score')}, {cluster.get('coverage_breadth')})"
        )
        print(f"    tags: {', '.join(cluster.get('topic_tags') or []) or '-'}")
        print(f"    best: {best.get('source_domain')} {best.get('url')}")
        print(f"    {best.get('trace_summary')}")
        if args.articles:
            for article in cluster.get("articles") or []:
                print(f"    - {article.get('source_domain')} : {article.get('title')}")
        print()


if __name__ == "__main__":
    main()
