"""Feed list and source metadata loading."""

import logging
from pathlib import Path
from typing import Any

from common.config import load_yaml
from ingest_articles.models import FeedDescriptor, SourceMeta

logger = logging.getLogger(__name__)


def parse_feeds(data: list[dict[str, Any]] | None) -> list[FeedDescriptor]:
    """Build feed descriptors from config data, keeping configured order."""
    feeds = []
    for entry in data or []:
        if not entry.get("name") or not entry.get("url"):
            raise ValueError(f"Feed entries require name and url: {entry}")
        feeds.append(
            FeedDescriptor(
                name=entry["name"],
                url=entry["url"],
                reliability=entry.get("reliability"),
                reliability_score=entry.get("reliability_score"),
                region=entry.get("region"),
                bias_label=entry.get("bias_label"),
                paywall=bool(entry.get("paywall", False)),
            )
        )
    return feeds


def parse_source_table(data: list[dict[str, Any]] | None) -> dict[str, SourceMeta]:
    """Index source metadata records by lowercase domain.

    Records without a domain or score are skipped; later duplicates win.
    """
    table: dict[str, SourceMeta] = {}
    for entry in data or []:
        domain = (entry.get("domain") or "").strip().lower()
        score = entry.get("reliability_score")
        if not domain or score is None:
            logger.warning("Skipping source metadata without domain or score: %s", entry)
            continue
        if domain.startswith("www."):
            domain = domain[4:]
        table[domain] = SourceMeta(
            domain=domain,
            reliability_score=float(score),
            region=entry.get("region") or "Global",
            tags=set(entry.get("tags") or []),
            bias_label=entry.get("bias_label"),
        )
    return table


def load_source_table(path: str | Path | None) -> dict[str, SourceMeta]:
    """Load the source metadata table; a missing file yields an empty table."""
    if not path or not Path(path).exists():
        logger.warning("Source metadata not found at %s, using feed defaults", path)
        return {}
    data = load_yaml(Path(path))
    if isinstance(data, dict):
        data = data.get("sources", [])
    table = parse_source_table(data)
    logger.info("Loaded %d source metadata records", len(table))
    return table
