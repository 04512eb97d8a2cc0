"""User-tunable policy for best-article selection and cluster ranking."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any

from common.config import load_yaml
from ingest_articles.models import RELIABILITY_BUCKETS

logger = logging.getLogger(__name__)

PAYWALL_MODES = ("allow", "downrank", "hide")
SOURCE_WEIGHTS = ("hide", "normal", "boost")

RELIABILITY_VALUES = {"High": 3, "Med": 2, "Low": 1}
SOURCE_WEIGHT_VALUES = {"boost": 1, "normal": 0, "hide": -3}

# Fallbacks for domains/regions absent from the weight maps
DEFAULT_SOURCE_WEIGHT = "normal"
SELECTION_REGION_WEIGHT = 1.0
RANKING_REGION_WEIGHT = 0.7
DEFAULT_REGION = "Global"

# Settings files exported from the reading app use camelCase keys
CAMEL_CASE_KEYS = {
    "storiesPerDay": "stories_per_day",
    "topCount": "top_count",
    "scanCount": "scan_count",
    "minReliability": "min_reliability",
    "paywallMode": "paywall_mode",
    "keywordMutes": "keyword_mutes",
    "topicBoosts": "topic_boosts",
    "sourceWeights": "source_weights",
    "regionWeights": "region_weights",
}


def _default_region_weights() -> dict[str, float]:
    return {"US": 1.0, "Europe": 1.0, "Asia": 1.0, "Global": 1.0}


@dataclass
class FeedSettings:
    stories_per_day: int = 20
    top_count: int = 5
    scan_count: int = 10
    min_reliability: str = "Med"
    paywall_mode: str = "downrank"
    keyword_mutes: list[str] = field(default_factory=list)
    topic_boosts: list[str] = field(default_factory=list)
    source_weights: dict[str, str] = field(default_factory=dict)
    region_weights: dict[str, float] = field(default_factory=_default_region_weights)

    def __post_init__(self) -> None:
        if self.min_reliability not in RELIABILITY_BUCKETS:
            raise ValueError(
                f"Invalid min_reliability: {self.min_reliability}. "
                f"Must be one of {list(RELIABILITY_BUCKETS)}"
            )

        if self.paywall_mode not in PAYWALL_MODES:
            raise ValueError(
                f"Invalid paywall_mode: {self.paywall_mode}. Must be one of {list(PAYWALL_MODES)}"
            )

        for domain, weight in self.source_weights.items():
            if weight not in SOURCE_WEIGHTS:
                raise ValueError(
                    f"Invalid source weight for {domain}: {weight}. "
                    f"Must be one of {list(SOURCE_WEIGHTS)}"
                )

        for name in ("stories_per_day", "top_count", "scan_count"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must not be negative, got {getattr(self, name)}")

    def source_weight(self, domain: str) -> str:
        return self.source_weights.get(domain, DEFAULT_SOURCE_WEIGHT)

    def region_weight(self, region: str | None, default: float) -> float:
        return float(self.region_weights.get(region or DEFAULT_REGION, default))


PRESETS: dict[str, dict[str, Any]] = {
    "neutral-first": {"min_reliability": "High", "paywall_mode": "downrank"},
    "best-reporting": {"min_reliability": "High", "paywall_mode": "hide"},
    "international-first": {
        "region_weights": {"US": 0.8, "Europe": 1.2, "Asia": 1.2, "Global": 1.3},
    },
    "challenge-me": {"min_reliability": "Med", "paywall_mode": "allow"},
}


def reliability_value(bucket: str) -> int:
    return RELIABILITY_VALUES.get(bucket, 1)


def source_weight_value(weight: str) -> int:
    return SOURCE_WEIGHT_VALUES[weight]


def _normalize_keys(data: dict[str, Any]) -> dict[str, Any]:
    known = {f.name for f in fields(FeedSettings)}
    normalized = {}
    for key, value in data.items():
        key = CAMEL_CASE_KEYS.get(key, key)
        if key not in known:
            logger.debug("Ignoring unknown settings key: %s", key)
            continue
        normalized[key] = value
    return normalized


def settings_from_dict(data: dict[str, Any] | None, base: FeedSettings | None = None) -> FeedSettings:
    """Overlay settings data (snake_case or camelCase keys) onto `base`."""
    base = base or FeedSettings()
    if not data:
        return base
    return replace(base, **_normalize_keys(data))


def apply_preset(settings: FeedSettings, name: str) -> FeedSettings:
    """Return a copy of `settings` with the named preset applied."""
    if name not in PRESETS:
        raise ValueError(f"Unknown preset: {name}. Must be one of {sorted(PRESETS)}")
    logger.info("Applying settings preset: %s", name)
    return replace(settings, **PRESETS[name])


def load_settings_file(path: str | Path, base: FeedSettings | None = None) -> FeedSettings:
    """Load a JSON or YAML settings file on top of `base`."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Settings file not found: {path}")
    data = load_yaml(path)
    if not isinstance(data, dict):
        raise ValueError(f"Settings file must contain a mapping: {path}")
    return settings_from_dict(data, base)
