"""Write the daily payload to its published location."""

import logging
from pathlib import Path
from typing import Any

from common.local_io import read_json_local, write_json_local
from rank_stories.payload import validate_payload

logger = logging.getLogger(__name__)


def publish_payload(payload: dict[str, Any], path: str | Path) -> Path:
    """Validate and write `payload`.

    Refuses to replace a published payload that has clusters with one that has
    none, so a total ingestion failure never blanks the brief.

    Raises:
        ValueError: If the payload breaks the contract.
        RuntimeError: If publishing would replace content with an empty brief.
    """
    validate_payload(payload)

    if not payload["clusters"]:
        previous = read_json_local(path)
        previous_clusters = (previous or {}).get("clusters") if isinstance(previous, dict) else None
        if previous_clusters:
            raise RuntimeError(
                f"Refusing to replace {len(previous_clusters)} published clusters in {path} "
                "with an empty brief"
            )

    filepath = write_json_local(payload, path)
    logger.info("Wrote %d clusters to %s", len(payload["clusters"]), filepath)
    return filepath
