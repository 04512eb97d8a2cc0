"""Pick the representative article of a cluster under the user's policy."""

import logging
import re
from datetime import datetime

from cluster_articles.models import Cluster
from common.datetime import hours_between
from ingest_articles.models import Item
from rank_stories.models import Alternative, BestArticleChoice, ScoredCandidate
from rank_stories.settings import (
    SELECTION_REGION_WEIGHT,
    FeedSettings,
    reliability_value,
    source_weight_value,
)

logger = logging.getLogger(__name__)

FRESHNESS_HORIZON_HOURS = 48
MAX_ALTERNATIVES = 3

HIDDEN_PAYWALL_PENALTY = -100
DOWNRANKED_PAYWALL_PENALTY = -1

BLOCKED_REASON = "blocked by settings"
OUTSCORED_REASON = "lower score"

FALLBACK_TRACE = (
    "Fallback pick: nothing passed your settings, so the highest-reliability "
    "source was selected as a fallback."
)

_SPAM_WORDS_RE = re.compile(r"\b(SHOCKING|EXPLOSIVE|STUNNING|BOMBSHELL|EXCLUSIVE)\b", re.IGNORECASE)
_SHOUTING_RE = re.compile(r"[A-Z\s]{18,}")


def sensationalism_penalty(title: str) -> float:
    penalty = 0.0
    if _SPAM_WORDS_RE.search(title):
        penalty += 0.3
    if title.count("!") > 1:
        penalty += 0.2
    if _SHOUTING_RE.fullmatch(title):
        penalty += 0.3
    return penalty


def freshness(published_at: datetime, as_of: datetime) -> float:
    """Linear decay from 2.0 for a brand-new article to 0 at 48 hours old."""
    age_hours = hours_between(published_at, as_of)
    return max(0.0, FRESHNESS_HORIZON_HOURS - age_hours) / 24


def paywall_penalty(article: Item, settings: FeedSettings) -> float:
    if not article.labels.paywalled:
        return 0
    if settings.paywall_mode == "hide":
        return HIDDEN_PAYWALL_PENALTY
    if settings.paywall_mode == "downrank":
        return DOWNRANKED_PAYWALL_PENALTY
    return 0


def is_blocked(article: Item, settings: FeedSettings) -> bool:
    """Whether the policy forbids `article` from being the best pick."""
    return (
        reliability_value(article.labels.reliability) < reliability_value(settings.min_reliability)
        or settings.source_weight(article.source_domain) == "hide"
        or (settings.paywall_mode == "hide" and article.labels.paywalled)
    )


def score_article(article: Item, settings: FeedSettings, as_of: datetime) -> float:
    return (
        reliability_value(article.labels.reliability) * 3
        + source_weight_value(settings.source_weight(article.source_domain))
        + freshness(article.timestamp, as_of)
        + settings.region_weight(article.labels.region, SELECTION_REGION_WEIGHT)
        - sensationalism_penalty(article.title)
        + paywall_penalty(article, settings)
    )


def score_candidates(cluster: Cluster, settings: FeedSettings, as_of: datetime) -> list[ScoredCandidate]:
    """Score every member of `cluster`, highest score first (ties keep cluster order)."""
    scored = [
        ScoredCandidate(
            article=article,
            score=score_article(article, settings, as_of),
            blocked=is_blocked(article, settings),
        )
        for article in cluster.articles
    ]
    return sorted(scored, key=lambda candidate: candidate.score, reverse=True)


def _alternatives(scored: list[ScoredCandidate], best: ScoredCandidate) -> list[Alternative]:
    seen_urls = {best.article.url}
    alternatives = []
    for candidate in scored:
        if candidate.article.url in seen_urls:
            continue
        seen_urls.add(candidate.article.url)
        alternatives.append(
            Alternative(
                article=candidate.article,
                reason=BLOCKED_REASON if candidate.blocked else OUTSCORED_REASON,
            )
        )
        if len(alternatives) == MAX_ALTERNATIVES:
            break
    return alternatives


def choose_best_article(cluster: Cluster, settings: FeedSettings, as_of: datetime) -> BestArticleChoice:
    """
    Choose the best article of a cluster.

    The highest-scoring candidate that the policy does not block wins. When
    every candidate is blocked, the most reliable one is picked instead and
    the trace says so; a non-empty cluster always yields a choice.

    Args:
        cluster: Cluster with at least one article.
        settings: Reliability floor, source/region weights and paywall mode.
        as_of: Reference time for freshness.

    Returns:
        BestArticleChoice with the winner, a trace and up to 3 alternatives.
    """
    if not cluster.articles:
        raise ValueError("Cannot choose a best article from an empty cluster")

    scored = score_candidates(cluster, settings, as_of)
    best = next((candidate for candidate in scored if not candidate.blocked), None)

    if best is None:
        # max() keeps the first maximal element, i.e. the higher score on ties
        best = max(scored, key=lambda candidate: reliability_value(candidate.article.labels.reliability))
        logger.debug("No candidate passed settings for cluster %r, using fallback", cluster.title)
        return BestArticleChoice(
            article=best.article,
            trace_summary=FALLBACK_TRACE,
            alternatives=_alternatives(scored, best),
            fallback=True,
        )

    labels = best.article.labels
    trace = (
        f"Best Source: {best.article.source_domain} (reliability {labels.reliability}, "
        f"paywall {labels.paywall}, paywall mode {settings.paywall_mode})."
    )
    return BestArticleChoice(
        article=best.article,
        trace_summary=trace,
        alternatives=_alternatives(scored, best),
    )
