"""Tests for ingest_articles.ingest_articles module."""

from datetime import datetime, timezone

from ingest_articles.ingest_articles import ingest_articles
from ingest_articles.models import FeedDescriptor, SourceMeta

INGESTED_AT = datetime(2025, 10, 15, tzinfo=timezone.utc)


class TestIngestArticles:
    def test_normalizes_and_dedupes_across_feeds(self) -> None:
        first = FeedDescriptor(name="First", url="https://a.com/rss", reliability="High")
        second = FeedDescriptor(name="Second", url="https://b.com/rss", reliability="Low")
        feed_records = [
            (first, [{"title": "Shared story", "link": "https://x.com/s?utm_source=a"}]),
            (second, [
                {"title": "Shared story", "link": "https://x.com/s#comments"},
                {"title": "Only here", "link": "https://x.com/o"},
            ]),
        ]

        items = ingest_articles(feed_records, {}, INGESTED_AT)

        assert [item.url for item in items] == ["https://x.com/s", "https://x.com/o"]
        assert items[0].feed_name == "First"
        assert items[0].labels.reliability == "High"

    def test_source_table_applied(self) -> None:
        feed = FeedDescriptor(name="Feed", url="https://a.com/rss")
        table = {"x.com": SourceMeta(domain="x.com", reliability_score=30, region="Asia")}
        items = ingest_articles(
            [(feed, [{"title": "Story", "link": "https://www.x.com/1"}])], table, INGESTED_AT
        )
        assert items[0].labels.reliability == "Low"
        assert items[0].labels.region == "Asia"

    def test_no_records_returns_empty(self) -> None:
        feed = FeedDescriptor(name="Feed", url="https://a.com/rss")
        assert ingest_articles([(feed, [])], {}, INGESTED_AT) == []
