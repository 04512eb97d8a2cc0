"""Data models for cluster_articles pipeline stage."""

from dataclasses import dataclass, field
from datetime import datetime

from ingest_articles.models import Item


@dataclass
class Cluster:
    """Items judged to cover the same event, in assignment order."""

    title: str
    normalized_title: str
    keywords: list[str]
    updated_at: datetime
    articles: list[Item] = field(default_factory=list)

    @classmethod
    def seed(cls, item: Item) -> "Cluster":
        """Start a singleton cluster from `item`."""
        return cls(
            title=item.title,
            normalized_title=item.normalized_title,
            keywords=list(item.keywords),
            updated_at=item.timestamp,
            articles=[item],
        )

    def add(self, item: Item) -> None:
        """Absorb `item`: append it, grow the keyword set, advance updated_at."""
        self.articles.append(item)
        for keyword in item.keywords:
            if keyword not in self.keywords:
                self.keywords.append(keyword)
        if item.timestamp > self.updated_at:
            self.updated_at = item.timestamp

    @property
    def outlets(self) -> set[str]:
        return {article.source_domain for article in self.articles}
