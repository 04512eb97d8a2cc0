"""RSS/Atom feed retrieval and parsing."""

import logging
import re
from pathlib import Path
from typing import Any

import feedparser
import requests

from ingest_articles.models import FeedDescriptor

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = "news-brief/1.0 (RSS reader)"
DEFAULT_TIMEOUT_SECONDS = 12.0

ACCEPT_HEADER = "application/rss+xml, application/xml, text/xml;q=0.9, */*;q=0.8"

# Entry fields copied into raw records, in feed-specific naming
RECORD_FIELDS = (
    "title",
    "link",
    "id",
    "description",
    "summary",
    "content",
    "published",
    "updated",
)


def mock_feed_path(feed: FeedDescriptor, mock_dir: str | Path) -> Path:
    """Path of the mock document for a feed: lowercase name, non-alphanumerics as dashes."""
    slug = re.sub(r"[^a-z0-9]+", "-", feed.name.lower())
    return Path(mock_dir) / f"{slug}.xml"


def fetch_feed_document(
    feed: FeedDescriptor,
    timeout: float = DEFAULT_TIMEOUT_SECONDS,
    user_agent: str = DEFAULT_USER_AGENT,
) -> bytes:
    """Download a feed document over HTTP."""
    response = requests.get(
        feed.url,
        timeout=timeout,
        headers={"User-Agent": user_agent, "Accept": ACCEPT_HEADER},
    )
    response.raise_for_status()
    return response.content


def read_mock_document(feed: FeedDescriptor, mock_dir: str | Path) -> bytes:
    """Read a feed document from the mock directory instead of the network."""
    return mock_feed_path(feed, mock_dir).read_bytes()


def _entry_to_record(entry: Any) -> dict[str, Any]:
    record = {key: entry.get(key) for key in RECORD_FIELDS if entry.get(key)}
    links = entry.get("links")
    if links:
        record["links"] = [{"href": link.get("href")} for link in links if link.get("href")]
    return record


def parse_feed_document(document: bytes | str) -> list[dict[str, Any]]:
    """Parse an RSS or Atom document into raw records, in document order."""
    feed = feedparser.parse(document)
    if feed.bozo and not feed.entries:
        raise ValueError(f"Unparseable feed document: {feed.get('bozo_exception')}")

    records = []
    for entry in feed.entries:
        try:
            records.append(_entry_to_record(entry))
        except Exception as e:
            logger.warning(f"Failed to parse entry: {e}")
            continue
    return records


def fetch_rss_records(
    feed: FeedDescriptor,
    use_mock: bool = False,
    mock_dir: str | Path = "tests/data/mock-feeds",
    timeout: float = DEFAULT_TIMEOUT_SECONDS,
    user_agent: str = DEFAULT_USER_AGENT,
) -> list[dict[str, Any]]:
    """Fetch one feed (from the network or the mock directory) and parse it."""
    if use_mock:
        document = read_mock_document(feed, mock_dir)
    else:
        document = fetch_feed_document(feed, timeout=timeout, user_agent=user_agent)
    return parse_feed_document(document)
