"""Data models for rank_stories pipeline stage."""

from dataclasses import dataclass, field

from cluster_articles.models import Cluster
from ingest_articles.models import Item


@dataclass
class ScoredCandidate:
    """A cluster member with its policy score."""
    article: Item
    score: float
    blocked: bool


@dataclass
class Alternative:
    """A runner-up to the best article and why it lost."""
    article: Item
    reason: str


@dataclass
class BestArticleChoice:
    """The representative article for a cluster and the trace explaining it."""
    article: Item
    trace_summary: str
    alternatives: list[Alternative] = field(default_factory=list)
    fallback: bool = False


@dataclass
class RankedCluster:
    """A cluster placed in the reading order."""
    cluster_id: str
    cluster: Cluster
    rank_score: float
    priority: str  # "top" / "scan" / "low"
    coverage_breadth: str  # "Narrow" / "Medium" / "Broad"
    best_article: BestArticleChoice
    topic_tags: list[str]

    @property
    def title(self) -> str:
        return self.cluster.title
