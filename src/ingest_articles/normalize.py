"""Normalize raw feed records into canonical Items."""

import logging
import re
from datetime import datetime, timedelta, timezone
from typing import Any, Mapping, Optional
from urllib.parse import urlsplit, urlunsplit

from dateutil.parser import parse as parse_date

from common.datetime import ensure_utc
from common.utils import first_value, get_value
from ingest_articles.models import FeedDescriptor, Item, Labels, SourceMeta

logger = logging.getLogger(__name__)

TRACKING_PARAMS = frozenset(
    {"utm_source", "utm_medium", "utm_campaign", "utm_term", "utm_content", "gclid"}
)

DEFAULT_RELIABILITY_SCORE = 65
DEFAULT_REGION = "Global"

# Representative scores for feeds configured with a bucket label only
BUCKET_SCORES = {"High": 85, "Med": 65, "Low": 40}

MAX_KEYWORDS = 8
MIN_KEYWORD_LENGTH = 4

TITLE_FIELDS = ("title",)
SNIPPET_FIELDS = ("description", "summary", "content")
TIMESTAMP_FIELDS = ("pubDate", "published", "updated")

# Timezone abbreviations for date parsing
TZINFOS = {
    "EST": timezone(timedelta(hours=-5)),
    "EDT": timezone(timedelta(hours=-4)),
    "CST": timezone(timedelta(hours=-6)),
    "CDT": timezone(timedelta(hours=-5)),
    "MST": timezone(timedelta(hours=-7)),
    "MDT": timezone(timedelta(hours=-6)),
    "PST": timezone(timedelta(hours=-8)),
    "PDT": timezone(timedelta(hours=-7)),
    "GMT": timezone.utc,
    "UTC": timezone.utc,
    "BST": timezone(timedelta(hours=1)),
}

_CDATA_RE = re.compile(r"<!\[CDATA\[(.*?)\]\]>", re.DOTALL)
_TAG_RE = re.compile(r"<[^>]+>")
_WHITESPACE_RE = re.compile(r"\s+")
_PUNCTUATION_RE = re.compile(r"[^\w\s]")
_WIRE_SUFFIX_RE = re.compile(
    r"\s+[-|–—]\s+(?:reuters|ap|associated press|afp|bloomberg|upi)\s*$"
)

_ENTITIES = (
    ("&amp;", "&"),
    ("&quot;", '"'),
    ("&#39;", "'"),
    ("&lt;", "<"),
    ("&gt;", ">"),
)


def decode_html(value: Optional[str]) -> str:
    """Strip CDATA and markup, decode the basic entities, collapse whitespace."""
    if not value:
        return ""
    text = _CDATA_RE.sub(r"\1", value)
    text = _TAG_RE.sub(" ", text)
    for entity, char in _ENTITIES:
        text = text.replace(entity, char)
    return _WHITESPACE_RE.sub(" ", text).strip()


def canonical_url(url: str) -> str:
    """Drop the fragment and tracking parameters from a URL.

    Values that do not parse as an absolute URL are returned trimmed but
    otherwise unchanged.
    """
    trimmed = url.strip()
    try:
        parts = urlsplit(trimmed)
    except ValueError:
        return trimmed
    if not parts.scheme or not parts.netloc:
        return trimmed

    # Filter raw pairs so the remaining parameters keep their original encoding
    query = "&".join(
        pair
        for pair in parts.query.split("&")
        if pair and pair.split("=", 1)[0] not in TRACKING_PARAMS
    )
    # Only the host is case-insensitive; userinfo is kept as given
    userinfo, sep, host = parts.netloc.rpartition("@")
    netloc = f"{userinfo}{sep}{host.lower()}"
    return urlunsplit((parts.scheme.lower(), netloc, parts.path, query, ""))


def source_domain(url: str) -> str:
    """Lowercase host of `url` with any leading "www." removed."""
    try:
        host = urlsplit(url).hostname
    except ValueError:
        host = None
    if not host:
        return "unknown"
    host = host.lower()
    return host[4:] if host.startswith("www.") else host


def normalize_title(title: str) -> str:
    """Lowercase, strip a trailing wire-service credit and punctuation."""
    text = _WHITESPACE_RE.sub(" ", title.lower()).strip()
    text = _WIRE_SUFFIX_RE.sub("", text)
    text = _PUNCTUATION_RE.sub("", text)
    return _WHITESPACE_RE.sub(" ", text).strip()


def extract_keywords(normalized_title: str) -> list[str]:
    """Unique tokens longer than three characters, in title order."""
    keywords: list[str] = []
    for token in normalized_title.split():
        if len(token) < MIN_KEYWORD_LENGTH or token in keywords:
            continue
        keywords.append(token)
        if len(keywords) == MAX_KEYWORDS:
            break
    return keywords


def parse_timestamp(value: Any, default: datetime) -> datetime:
    """Parse a feed date into an aware UTC datetime, or return `default`.

    Fields missing from a partial date ("Oct 14", "10:30") are taken from
    `default` rather than the current date.
    """
    if isinstance(value, datetime):
        return ensure_utc(value)
    if not value or not isinstance(value, str):
        return default
    reference = ensure_utc(default).replace(tzinfo=None)
    try:
        return ensure_utc(parse_date(value.strip(), default=reference, tzinfos=TZINFOS))
    except (ValueError, OverflowError):
        logger.debug("Unparseable timestamp %r, using ingestion time", value)
        return default


def reliability_bucket(score: float) -> str:
    if score >= 80:
        return "High"
    if score >= 60:
        return "Med"
    return "Low"


def resolve_labels(
    domain: str,
    feed: FeedDescriptor,
    source_table: Mapping[str, SourceMeta],
) -> Labels:
    """Resolve labels from the source table, then feed defaults, then globals."""
    meta = source_table.get(domain)
    if meta is not None:
        return Labels(
            reliability=reliability_bucket(meta.reliability_score),
            reliability_score=meta.reliability_score,
            region=meta.region or feed.region or DEFAULT_REGION,
            paywall="Yes" if meta.paywalled or feed.paywall else "No",
            bias_label=meta.bias_label or feed.bias_label,
        )

    if feed.reliability_score is not None:
        score = feed.reliability_score
        bucket = reliability_bucket(score)
    elif feed.reliability is not None:
        score = BUCKET_SCORES[feed.reliability]
        bucket = feed.reliability
    else:
        score = DEFAULT_RELIABILITY_SCORE
        bucket = reliability_bucket(score)

    return Labels(
        reliability=bucket,
        reliability_score=score,
        region=feed.region or DEFAULT_REGION,
        paywall="Yes" if feed.paywall else "No",
        bias_label=feed.bias_label,
    )


def _record_url(record: Any) -> str:
    link = get_value(record, "link")
    if isinstance(link, str) and link.strip():
        return link
    for entry in get_value(record, "links") or []:
        href = get_value(entry, "href")
        if href:
            return href
    entry_id = get_value(record, "id")
    return entry_id if isinstance(entry_id, str) else ""


def _record_text(record: Any, keys: tuple[str, ...]) -> str:
    for key in keys:
        value = get_value(record, key)
        if isinstance(value, list):
            # feedparser exposes content as a list of {"value": ...} dicts
            value = " ".join(str(get_value(part, "value") or "") for part in value)
        text = decode_html(value if isinstance(value, str) else None)
        if text:
            return text
    return ""


def normalize_record(
    record: Any,
    feed: FeedDescriptor,
    source_table: Mapping[str, SourceMeta],
    ingested_at: datetime,
) -> Optional[Item]:
    """Normalize one raw feed record, or return None when url/title are missing."""
    url = decode_html(_record_url(record))
    title = _record_text(record, TITLE_FIELDS)
    if not url or not title:
        logger.debug("Dropping record from %s with missing url or title", feed.name)
        return None

    url = canonical_url(url)
    domain = source_domain(url)
    normalized = normalize_title(title)

    return Item(
        url=url,
        title=title,
        normalized_title=normalized,
        keywords=extract_keywords(normalized),
        source_domain=domain,
        timestamp=parse_timestamp(first_value(record, TIMESTAMP_FIELDS), ingested_at),
        snippet=_record_text(record, SNIPPET_FIELDS) or f"{feed.name} coverage",
        labels=resolve_labels(domain, feed, source_table),
        feed_name=feed.name,
    )


def normalize_records(
    records: list[Any],
    feed: FeedDescriptor,
    source_table: Mapping[str, SourceMeta],
    ingested_at: datetime,
) -> list[Item]:
    """Normalize all records of one feed, dropping the malformed ones."""
    items = []
    for record in records:
        item = normalize_record(record, feed, source_table, ingested_at)
        if item is not None:
            items.append(item)

    dropped = len(records) - len(items)
    if dropped:
        logger.info("Dropped %d malformed records from %s", dropped, feed.name)
    return items
