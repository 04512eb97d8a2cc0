"""Tests for ingest_articles.normalize module."""

from datetime import datetime, timezone

from ingest_articles.models import FeedDescriptor, SourceMeta
from ingest_articles.normalize import (
    canonical_url,
    decode_html,
    extract_keywords,
    normalize_record,
    normalize_records,
    normalize_title,
    parse_timestamp,
    resolve_labels,
    source_domain,
)

INGESTED_AT = datetime(2025, 10, 15, 0, 0, tzinfo=timezone.utc)


def _feed(**kwargs) -> FeedDescriptor:
    defaults = {"name": "Wire Desk", "url": "https://wire.example.com/rss.xml"}
    defaults.update(kwargs)
    return FeedDescriptor(**defaults)


class TestDecodeHtml:
    def test_strips_cdata_and_tags(self) -> None:
        assert decode_html("<![CDATA[<p>Hello <b>world</b></p>]]>") == "Hello world"

    def test_decodes_basic_entities(self) -> None:
        assert decode_html("Rates &amp; &quot;bonds&quot; &#39;up&#39; &lt;3&gt;") == (
            "Rates & \"bonds\" 'up' <3>"
        )

    def test_collapses_whitespace(self) -> None:
        assert decode_html("  a \n\t b  ") == "a b"

    def test_none_is_empty(self) -> None:
        assert decode_html(None) == ""


class TestCanonicalUrl:
    def test_removes_tracking_params_and_fragment(self) -> None:
        url = "https://www.x.com/a?utm_source=rss&id=7#frag"
        assert canonical_url(url) == "https://www.x.com/a?id=7"

    def test_removes_gclid(self) -> None:
        assert canonical_url("https://x.com/a?gclid=abc") == "https://x.com/a"

    def test_keeps_other_params_in_order(self) -> None:
        url = "https://x.com/a?b=2&utm_medium=email&a=1"
        assert canonical_url(url) == "https://x.com/a?b=2&a=1"

    def test_lowercases_host_but_not_userinfo(self) -> None:
        url = "HTTPS://User:Pw@Example.COM/Path?q=A"
        assert canonical_url(url) == "https://User:Pw@example.com/Path?q=A"

    def test_unparseable_returned_trimmed(self) -> None:
        assert canonical_url("  not a url  ") == "not a url"


class TestSourceDomain:
    def test_strips_www_and_lowercases(self) -> None:
        assert source_domain("https://WWW.Reuters.com/world") == "reuters.com"

    def test_unknown_when_no_host(self) -> None:
        assert source_domain("not a url") == "unknown"


class TestNormalizeTitle:
    def test_strips_wire_suffix_and_lowercases(self) -> None:
        assert normalize_title("Senate Passes Budget Bill - Reuters") == "senate passes budget bill"

    def test_strips_pipe_ap_suffix(self) -> None:
        assert normalize_title("Storm hits coast | AP") == "storm hits coast"

    def test_removes_punctuation(self) -> None:
        assert normalize_title("SHOCKING: Vote passes!!") == "shocking vote passes"

    def test_wire_name_mid_title_is_kept(self) -> None:
        assert normalize_title("Reuters reporter detained") == "reuters reporter detained"


class TestExtractKeywords:
    def test_keeps_tokens_longer_than_three(self) -> None:
        assert extract_keywords("senate passes the budget bill") == [
            "senate", "passes", "budget", "bill",
        ]

    def test_unique_tokens(self) -> None:
        assert extract_keywords("vote vote vote again") == ["vote", "again"]

    def test_caps_at_eight(self) -> None:
        title = "alpha bravo charlie delta echoes foxtrot golfer hotel india juliet"
        assert len(extract_keywords(title)) == 8


class TestParseTimestamp:
    def test_rfc822_with_gmt(self) -> None:
        result = parse_timestamp("Tue, 14 Oct 2025 22:00:00 GMT", INGESTED_AT)
        assert result == datetime(2025, 10, 14, 22, 0, tzinfo=timezone.utc)

    def test_tz_abbreviation(self) -> None:
        result = parse_timestamp("Tue, 14 Oct 2025 17:00:00 EST", INGESTED_AT)
        assert result == datetime(2025, 10, 14, 22, 0, tzinfo=timezone.utc)

    def test_partial_date_completed_from_default(self) -> None:
        result = parse_timestamp("Oct 14", INGESTED_AT)
        assert result == datetime(2025, 10, 14, 0, 0, tzinfo=timezone.utc)

    def test_time_only_uses_default_date(self) -> None:
        result = parse_timestamp("10:30", INGESTED_AT)
        assert result == datetime(2025, 10, 15, 10, 30, tzinfo=timezone.utc)

    def test_partial_date_same_for_any_run_day(self) -> None:
        later = datetime(2026, 3, 1, tzinfo=timezone.utc)
        assert parse_timestamp("Oct 14", INGESTED_AT).year == 2025
        assert parse_timestamp("Oct 14", later).year == 2026

    def test_unparseable_uses_default(self) -> None:
        assert parse_timestamp("yesterday-ish", INGESTED_AT) == INGESTED_AT

    def test_missing_uses_default(self) -> None:
        assert parse_timestamp(None, INGESTED_AT) == INGESTED_AT


class TestResolveLabels:
    def test_source_table_wins(self) -> None:
        table = {
            "reuters.com": SourceMeta(
                domain="reuters.com", reliability_score=92, region="Global", tags={"paywall"}
            )
        }
        labels = resolve_labels("reuters.com", _feed(reliability="Low", region="US"), table)
        assert labels.reliability == "High"
        assert labels.reliability_score == 92
        assert labels.region == "Global"
        assert labels.paywall == "Yes"

    def test_feed_score_bucketed(self) -> None:
        labels = resolve_labels("x.com", _feed(reliability_score=58), {})
        assert labels.reliability == "Low"
        assert labels.reliability_score == 58

    def test_feed_bucket_only(self) -> None:
        labels = resolve_labels("x.com", _feed(reliability="High", region="Europe"), {})
        assert labels.reliability == "High"
        assert labels.reliability_score == 85
        assert labels.region == "Europe"

    def test_global_defaults(self) -> None:
        labels = resolve_labels("x.com", _feed(), {})
        assert labels.reliability == "Med"
        assert labels.reliability_score == 65
        assert labels.region == "Global"
        assert labels.paywall == "No"

    def test_bucket_thresholds(self) -> None:
        assert resolve_labels("x.com", _feed(reliability_score=80), {}).reliability == "High"
        assert resolve_labels("x.com", _feed(reliability_score=79), {}).reliability == "Med"
        assert resolve_labels("x.com", _feed(reliability_score=60), {}).reliability == "Med"
        assert resolve_labels("x.com", _feed(reliability_score=59), {}).reliability == "Low"


class TestNormalizeRecord:
    def test_wire_example(self) -> None:
        record = {
            "title": "<![CDATA[Senate Passes Budget Bill - Reuters]]>",
            "link": "https://www.reuters.com/world/x?utm_source=rss#frag",
            "pubDate": "Tue, 14 Oct 2025 22:00:00 GMT",
            "description": "<p>The Senate approved the plan.</p>",
        }
        item = normalize_record(record, _feed(), {}, INGESTED_AT)
        assert item is not None
        assert item.url == "https://www.reuters.com/world/x"
        assert item.title == "Senate Passes Budget Bill - Reuters"
        assert item.normalized_title == "senate passes budget bill"
        assert item.keywords == ["senate", "passes", "budget", "bill"]
        assert item.source_domain == "reuters.com"
        assert item.timestamp == datetime(2025, 10, 14, 22, 0, tzinfo=timezone.utc)
        assert item.snippet == "The Senate approved the plan."
        assert item.feed_name == "Wire Desk"

    def test_missing_title_dropped(self) -> None:
        record = {"link": "https://x.com/a", "title": "  "}
        assert normalize_record(record, _feed(), {}, INGESTED_AT) is None

    def test_missing_url_dropped(self) -> None:
        assert normalize_record({"title": "Hello"}, _feed(), {}, INGESTED_AT) is None

    def test_atom_links_and_updated(self) -> None:
        record = {
            "title": "Atom entry",
            "links": [{"href": "https://x.com/atom"}],
            "updated": "2025-10-14T23:00:00Z",
        }
        item = normalize_record(record, _feed(), {}, INGESTED_AT)
        assert item is not None
        assert item.url == "https://x.com/atom"
        assert item.timestamp == datetime(2025, 10, 14, 23, 0, tzinfo=timezone.utc)

    def test_fallback_snippet_and_timestamp(self) -> None:
        record = {"title": "No body", "link": "https://x.com/a"}
        item = normalize_record(record, _feed(name="Metro Daily"), {}, INGESTED_AT)
        assert item is not None
        assert item.snippet == "Metro Daily coverage"
        assert item.timestamp == INGESTED_AT

    def test_content_list_used_for_snippet(self) -> None:
        record = {
            "title": "Entry",
            "link": "https://x.com/a",
            "content": [{"value": "<div>Body text</div>"}],
        }
        item = normalize_record(record, _feed(), {}, INGESTED_AT)
        assert item is not None
        assert item.snippet == "Body text"


class TestNormalizeRecords:
    def test_drops_malformed_and_keeps_order(self) -> None:
        records = [
            {"title": "First", "link": "https://x.com/1"},
            {"title": "", "link": "https://x.com/2"},
            {"title": "Third", "link": "https://x.com/3"},
        ]
        items = normalize_records(records, _feed(), {}, INGESTED_AT)
        assert [item.title for item in items] == ["First", "Third"]
