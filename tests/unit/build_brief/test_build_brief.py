"""Tests for build_brief.build_brief module."""

from datetime import datetime, timezone
from pathlib import Path

import pytest

from build_brief.build_brief import build_brief
from ingest_articles.fetch_articles.fetch_articles import fetch_articles
from ingest_articles.fetch_articles.sources import load_source_table
from ingest_articles.models import FeedDescriptor
from rank_stories.settings import FeedSettings

REPO_ROOT = Path(__file__).resolve().parents[3]
MOCK_DIR = REPO_ROOT / "tests" / "data" / "mock-feeds"
AS_OF = datetime(2025, 10, 15, 0, 0, tzinfo=timezone.utc)

FEEDS = [
    FeedDescriptor(name="Wire Desk", url="https://wire.example.com/rss.xml", reliability="High"),
    FeedDescriptor(name="Metro Daily", url="https://metro.example.com/feed.atom", reliability="Low"),
]


def _mock_records():
    feed_records, failures = fetch_articles(FEEDS, use_mock=True, mock_dir=MOCK_DIR)
    assert failures == []
    return feed_records


def _settings() -> FeedSettings:
    return FeedSettings(stories_per_day=10, top_count=2, scan_count=3)


class TestBuildBrief:
    def test_mock_feeds_end_to_end(self) -> None:
        source_table = load_source_table(REPO_ROOT / "configs" / "sources.yaml")
        payload = build_brief(_mock_records(), source_table, _settings(), AS_OF)

        assert payload["date"] == "2025-10-15"
        titles = [cluster["title"] for cluster in payload["clusters"]]
        assert titles == [
            "Senate Passes Budget Bill - Reuters",
            "Central bank holds interest rates steady",
            "City council approves new bike lanes",
        ]
        assert [c["priority"] for c in payload["clusters"]] == ["top", "top", "scan"]
        assert [c["rank_score"] for c in payload["clusters"]] == [0.596, 0.527, 0.5]

        senate = payload["clusters"][0]
        assert len(senate["articles"]) == 2
        assert senate["updated_at"] == "2025-10-14T23:00:00+00:00"
        assert senate["best_article"]["url"] == "https://wire.example.com/politics/senate-budget?id=7"
        assert senate["best_article"]["labels"]["reliability"] == "High"
        assert "fallback" not in senate["best_article"]["trace_summary"].lower()

        bike = payload["clusters"][2]
        assert bike["articles"][0]["snippet"] == "Metro Daily coverage"
        assert "fallback" in bike["best_article"]["trace_summary"].lower()

    def test_deterministic(self) -> None:
        records = _mock_records()
        first = build_brief(records, {}, _settings(), AS_OF)
        second = build_brief(records, {}, _settings(), AS_OF)
        assert first == second

    def test_without_source_table_uses_feed_labels(self) -> None:
        payload = build_brief(_mock_records(), {}, _settings(), AS_OF)
        senate = payload["clusters"][0]
        assert senate["best_article"]["labels"]["reliability_score"] == 85

    def test_stories_per_day_truncates(self) -> None:
        settings = FeedSettings(stories_per_day=1, top_count=1, scan_count=0)
        payload = build_brief(_mock_records(), {}, settings, AS_OF)
        assert len(payload["clusters"]) == 1

    def test_no_items_raises_with_failures(self) -> None:
        with pytest.raises(RuntimeError, match="All feeds failed.*Wire Desk"):
            build_brief([], {}, _settings(), AS_OF, failures=["Wire Desk (url): timeout"])

    def test_only_malformed_records_raises(self) -> None:
        with pytest.raises(RuntimeError):
            build_brief([(FEEDS[0], [{"title": ""}])], {}, _settings(), AS_OF)

    def test_partial_feed_date_resolved_against_as_of(self) -> None:
        tab = FeedDescriptor(name="Tab", url="https://tab.example.com/rss", reliability="Low")
        feed_records = [
            (FEEDS[0], [{
                "title": "Senate passes budget bill",
                "link": "https://wire.example.com/a",
                "published": "Tue, 14 Oct 2025 22:00:00 GMT",
            }]),
            (tab, [{
                "title": "Senate passes budget bill",
                "link": "https://tab.example.com/b",
                "published": "Oct 14",
            }]),
        ]
        payload = build_brief(feed_records, {}, _settings(), AS_OF)

        assert len(payload["clusters"]) == 1
        cluster = payload["clusters"][0]
        assert cluster["updated_at"] == "2025-10-14T22:00:00+00:00"
        assert cluster["articles"][1]["timestamp"] == "2025-10-14T00:00:00+00:00"
        assert cluster["rank_score"] < 1
