"""Local file I/O utilities."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


def write_json_local(payload: Any, path: str | Path) -> Path:
    """Write a JSON document to a local file, creating parent directories.

    The file is written to a sibling temp file first and then renamed so a
    reader never sees a half-written document.
    """
    filepath = Path(path)
    filepath.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = filepath.with_suffix(filepath.suffix + ".tmp")
    with tmp_path.open("w", encoding="utf-8") as f:
        f.write(json.dumps(payload, indent=2, ensure_ascii=False) + "\n")
    tmp_path.replace(filepath)
    logger.info("Saved JSON document to %s", filepath)
    return filepath


def read_json_local(path: str | Path) -> Any | None:
    """Read a local JSON document, returning None when the file is missing."""
    filepath = Path(path)
    if not filepath.exists():
        return None
    with filepath.open(encoding="utf-8") as f:
        return json.load(f)
