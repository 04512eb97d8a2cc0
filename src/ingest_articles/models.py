"""Data models for ingest_articles pipeline stage."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional


RELIABILITY_BUCKETS = ("High", "Med", "Low")


@dataclass
class FeedDescriptor:
    """One configured feed and the label defaults for its items."""
    name: str
    url: str
    reliability: Optional[str] = None  # "High" / "Med" / "Low"
    reliability_score: Optional[float] = None
    region: Optional[str] = None
    bias_label: Optional[str] = None
    paywall: bool = False

    def __post_init__(self) -> None:
        if self.reliability is not None and self.reliability not in RELIABILITY_BUCKETS:
            raise ValueError(
                f"Invalid reliability for feed {self.name}: {self.reliability}. "
                f"Must be one of {list(RELIABILITY_BUCKETS)}"
            )


@dataclass
class SourceMeta:
    """Metadata for one outlet, keyed by domain."""
    domain: str
    reliability_score: float
    region: str
    tags: set[str] = field(default_factory=set)
    bias_label: Optional[str] = None

    @property
    def paywalled(self) -> bool:
        return "paywall" in self.tags


@dataclass
class Labels:
    """Reliability/region/paywall labels attached to an item."""
    reliability: str
    reliability_score: float
    region: str
    paywall: str  # "Yes" / "No"
    bias_label: Optional[str] = None

    @property
    def paywalled(self) -> bool:
        return self.paywall == "Yes"


@dataclass
class Item:
    """Feed entry normalized to the canonical schema."""
    url: str
    title: str
    normalized_title: str
    keywords: list[str]
    source_domain: str
    timestamp: datetime
    snippet: str
    labels: Labels
    feed_name: str
