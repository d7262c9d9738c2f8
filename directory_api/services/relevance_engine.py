"""
Deterministic relevance ranking for directory search.

Scores every candidate listing against a query with an additive point system
and returns the listings with a positive score, best first.

Scoring (default weights):
    exact name match            +100   (substring name match +80)
    category == intent category  +60
    description relevance        0..1 x 40
    tag relevance                0..1 x 30
    pricing == intent tier       +25
    rating >= 4.5 / 4.0 / 3.5    +20 / +15 / +10
    reviews > 5000 / 1000 / 100  +15 / +10 / +5
    feature match                0..1 x 20
    age < 30 / 90 days           +10 / +5
    featured                     +15
    active sponsorship           platinum +12, gold +8, premium +5

The final score is the sum rounded half up. Ties keep candidate order.
"""
import logging
import math
import time
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional

from directory_api.database.models import SponsorshipLevel, sponsorship_active
from directory_api.services.intent_classifier import (
    CATEGORY_SEMANTICS,
    FEATURE_SEMANTICS,
    SearchIntent,
    intent_classifier,
)
from directory_api.utils.numeric import safe_float, safe_int

logger = logging.getLogger(__name__)

SEMANTIC_MATCH_THRESHOLD = 50
EXACT_MATCH_THRESHOLD = 80
MAX_SUGGESTIONS = 8

SPONSORSHIP_RANK = {
    SponsorshipLevel.PLATINUM.value: 3,
    SponsorshipLevel.GOLD.value: 2,
    SponsorshipLevel.PREMIUM.value: 1,
}


@dataclass(frozen=True)
class RelevanceWeights:
    """Point values for each scoring factor. Defaults reproduce the legacy ranking."""

    exact_name: float = 100
    partial_name: float = 80
    category: float = 60
    text: float = 40
    tags: float = 30
    pricing: float = 25
    rating_excellent: float = 20  # >= 4.5
    rating_great: float = 15  # >= 4.0
    rating_good: float = 10  # >= 3.5
    reviews_viral: float = 15  # > 5000
    reviews_popular: float = 10  # > 1000
    reviews_known: float = 5  # > 100
    features: float = 20
    recency_new: float = 10  # < 30 days
    recency_recent: float = 5  # < 90 days
    featured: float = 15
    platinum: float = 12
    gold: float = 8
    premium: float = 5


@dataclass
class SearchFilters:
    """Hard filters applied before scoring"""

    category: Optional[str] = None
    price_range: Optional[str] = None
    min_rating: Optional[float] = None


@dataclass
class RankedListing:
    """A listing with its relevance score and per-factor breakdown"""

    listing: Any
    relevance_score: Optional[int]
    breakdown: Dict[str, float]


@dataclass
class SearchMetrics:
    """Timing and match counts for one ranked search"""

    processing_time_ms: float
    total_scanned: int
    algorithms_used: List[str]
    confidence_score: float
    semantic_matches: int
    exact_matches: int

    def to_dict(self) -> dict:
        return {
            "processing_time_ms": self.processing_time_ms,
            "total_scanned": self.total_scanned,
            "algorithms_used": list(self.algorithms_used),
            "confidence_score": self.confidence_score,
            "semantic_matches": self.semantic_matches,
            "exact_matches": self.exact_matches,
        }


@dataclass
class SearchResult:
    """Ranked listings plus the metrics describing how they were produced"""

    results: List[RankedListing] = field(default_factory=list)
    metrics: Optional[SearchMetrics] = None


def _text(value: Any) -> str:
    return value if isinstance(value, str) else ""


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _is_sponsorship_active(listing: Any, now: datetime) -> bool:
    return sponsorship_active(
        getattr(listing, "sponsored_level", None),
        getattr(listing, "sponsorship_end_date", None),
        now,
    )


def matches_filters(listing: Any, filters: Optional[SearchFilters]) -> bool:
    """Check a listing against category / pricing / minimum rating filters"""
    if not filters:
        return True
    if filters.category and getattr(listing, "category", None) != filters.category:
        return False
    if filters.price_range and getattr(listing, "pricing", None) != filters.price_range:
        return False
    if filters.min_rating and safe_float(getattr(listing, "rating", None)) < filters.min_rating:
        return False
    return True


def order_without_query(listings: Iterable[Any], now: Optional[datetime] = None) -> List[Any]:
    """
    Deterministic browse ordering used when there is no query.

    Featured first, then active sponsorship tier (platinum > gold > premium > none),
    then rating descending, then newest first.
    """
    now = now or datetime.utcnow()

    def sort_key(listing):
        tier = SPONSORSHIP_RANK.get(listing.sponsored_level, 0) if _is_sponsorship_active(listing, now) else 0
        created_at = getattr(listing, "created_at", None)
        return (
            bool(getattr(listing, "featured", False)),
            tier,
            safe_float(getattr(listing, "rating", None)),
            created_at.timestamp() if created_at else float("-inf"),
        )

    return sorted(listings, key=sort_key, reverse=True)


class RelevanceEngine:
    """Additive relevance scoring over an in-memory candidate set. Stateless."""

    def __init__(self, weights: Optional[RelevanceWeights] = None):
        self.weights = weights or RelevanceWeights()

    def score_breakdown(
        self, listing: Any, query: str, intent: SearchIntent, now: Optional[datetime] = None
    ) -> Dict[str, float]:
        """
        Compute the contribution of every scoring factor for one listing.

        Args:
            listing: Submission model instance (or any object with the same attributes)
            query: Search query
            intent: Intent computed for the query
            now: Reference time for recency and sponsorship checks

        Returns:
            Dict mapping factor name to points contributed
        """
        w = self.weights
        now = now or datetime.utcnow()
        normalized_query = query.lower().strip()
        name = _text(getattr(listing, "name", None)).lower()
        description = f"{_text(getattr(listing, 'short_description', None))} {_text(getattr(listing, 'detailed_description', None))}"

        breakdown = {}

        # 1. Name match
        if name == normalized_query:
            breakdown["name_match"] = w.exact_name
        elif normalized_query in name:
            breakdown["name_match"] = w.partial_name
        else:
            breakdown["name_match"] = 0.0

        # 2. Semantic category
        category_hit = intent.category and getattr(listing, "category", None) == intent.category
        breakdown["category_match"] = w.category if category_hit else 0.0

        # 3. Description relevance
        breakdown["text_relevance"] = self._text_relevance(description, normalized_query) * w.text

        # 4. Tags, expanded with the detected category's keywords
        tags = getattr(listing, "tags", None) or []
        breakdown["tag_relevance"] = self._tag_relevance(tags, normalized_query, intent) * w.tags

        # 5. Pricing alignment
        pricing_hit = intent.price_range and getattr(listing, "pricing", None) == intent.price_range
        breakdown["pricing_match"] = w.pricing if pricing_hit else 0.0

        # 6. Quality
        rating = safe_float(getattr(listing, "rating", None))
        if rating >= 4.5:
            breakdown["rating"] = w.rating_excellent
        elif rating >= 4.0:
            breakdown["rating"] = w.rating_great
        elif rating >= 3.5:
            breakdown["rating"] = w.rating_good
        else:
            breakdown["rating"] = 0.0

        # 7. Popularity
        review_count = safe_int(getattr(listing, "review_count", None))
        if review_count > 5000:
            breakdown["popularity"] = w.reviews_viral
        elif review_count > 1000:
            breakdown["popularity"] = w.reviews_popular
        elif review_count > 100:
            breakdown["popularity"] = w.reviews_known
        else:
            breakdown["popularity"] = 0.0

        # 8. Features
        if intent.features:
            feature_text = f"{name} {description}".lower()
            breakdown["feature_match"] = self._feature_relevance(feature_text, intent.features) * w.features
        else:
            breakdown["feature_match"] = 0.0

        # 9. Recency
        created_at = getattr(listing, "created_at", None)
        breakdown["recency"] = 0.0
        if created_at is not None:
            age_days = (now - created_at).days
            if age_days < 30:
                breakdown["recency"] = w.recency_new
            elif age_days < 90:
                breakdown["recency"] = w.recency_recent

        # 10. Promotion
        breakdown["featured"] = w.featured if getattr(listing, "featured", False) else 0.0
        breakdown["sponsorship"] = 0.0
        if _is_sponsorship_active(listing, now):
            level = listing.sponsored_level
            if level == SponsorshipLevel.PLATINUM.value:
                breakdown["sponsorship"] = w.platinum
            elif level == SponsorshipLevel.GOLD.value:
                breakdown["sponsorship"] = w.gold
            elif level == SponsorshipLevel.PREMIUM.value:
                breakdown["sponsorship"] = w.premium

        return breakdown

    def score(self, listing: Any, query: str, intent: SearchIntent, now: Optional[datetime] = None) -> int:
        """Total relevance score, rounded half up"""
        return _round_half_up(sum(self.score_breakdown(listing, query, intent, now).values()))

    def _text_relevance(self, text: str, query: str) -> float:
        normalized_text = text.lower()
        text_words = normalized_text.split()
        query_words = query.split()
        if not query_words:
            return 0.0

        relevance = 0.0
        for word in query_words:
            if len(word) < 3:
                continue
            if word in normalized_text:
                relevance += 1
            partial_matches = [tw for tw in text_words if tw in word or word in tw]
            relevance += len(partial_matches) * 0.5

        return min(relevance / len(query_words), 1.0)

    def _tag_relevance(self, tags: List[str], query: str, intent: SearchIntent) -> float:
        query_words = query.lower().split()
        semantic_keywords = CATEGORY_SEMANTICS.get(intent.category, ()) if intent.category else ()
        relevance = 0.0

        for tag in tags:
            normalized_tag = _text(tag).lower()
            for word in query_words:
                if word in normalized_tag:
                    relevance += 1
            for keyword in semantic_keywords:
                if keyword in normalized_tag:
                    relevance += 0.5

        return min(relevance, 1.0)

    def _feature_relevance(self, text: str, features: List[str]) -> float:
        relevance = 0
        for feature in features:
            for keyword in FEATURE_SEMANTICS.get(feature, ()):
                if keyword in text:
                    relevance += 1
        return min(relevance / len(features), 1.0)

    def search(
        self,
        candidates: List[Any],
        query: str,
        intent: Optional[SearchIntent] = None,
        filters: Optional[SearchFilters] = None,
        now: Optional[datetime] = None,
    ) -> SearchResult:
        """
        Rank a candidate set for a query.

        Args:
            candidates: Approved listings, already narrowed by the store
            query: Search query; a blank query returns the browse ordering unscored
            intent: Precomputed intent; classified from the query when omitted
            filters: Hard filters, re-applied in memory
            now: Reference time for recency and sponsorship checks

        Returns:
            SearchResult with positively scored listings (best first) and metrics,
            or the unscored browse ordering without metrics for a blank query
        """
        start_time = time.perf_counter()
        now = now or datetime.utcnow()
        query = (query or "").strip()
        if not query:
            browse = order_without_query((c for c in candidates if matches_filters(c, filters)), now)
            return SearchResult(
                results=[RankedListing(listing=listing, relevance_score=None, breakdown={}) for listing in browse]
            )

        intent = intent or intent_classifier.classify(query)

        scored = []
        contributing = set()
        for listing in candidates:
            if not matches_filters(listing, filters):
                continue
            breakdown = self.score_breakdown(listing, query, intent, now)
            relevance_score = _round_half_up(sum(breakdown.values()))
            if relevance_score <= 0:
                continue
            contributing.update(factor for factor, points in breakdown.items() if points)
            scored.append(RankedListing(listing=listing, relevance_score=relevance_score, breakdown=breakdown))

        # list.sort is stable: equal scores keep candidate order
        scored.sort(key=lambda ranked: ranked.relevance_score, reverse=True)

        factor_order = list(scored[0].breakdown) if scored else []
        metrics = SearchMetrics(
            processing_time_ms=round((time.perf_counter() - start_time) * 1000, 3),
            total_scanned=len(candidates),
            algorithms_used=[factor for factor in factor_order if factor in contributing],
            confidence_score=intent.confidence,
            semantic_matches=sum(1 for r in scored if r.relevance_score > SEMANTIC_MATCH_THRESHOLD),
            exact_matches=sum(1 for r in scored if r.relevance_score > EXACT_MATCH_THRESHOLD),
        )

        logger.info(
            f"Ranked {len(scored)}/{len(candidates)} candidates for '{query}' "
            f"in {metrics.processing_time_ms}ms (intent={intent.type.value})"
        )
        return SearchResult(results=scored, metrics=metrics)

    def generate_suggestions(self, query: str, listings: List[Any], limit: int = MAX_SUGGESTIONS) -> List[str]:
        """
        Suggest completions for a partial query.

        Listing names containing the query come first, then category labels whose
        keywords overlap the query, then keywords of the detected category.
        """
        normalized_query = (query or "").lower().strip()
        if not normalized_query:
            return []

        suggestions = {}

        for listing in listings:
            name = _text(getattr(listing, "name", None))
            if normalized_query in name.lower():
                suggestions.setdefault(name, None)

        for category, keywords in CATEGORY_SEMANTICS.items():
            if any(keyword in normalized_query or normalized_query in keyword for keyword in keywords):
                suggestions.setdefault(category.replace("-", " "), None)

        intent = intent_classifier.classify(normalized_query)
        if intent.category:
            for keyword in CATEGORY_SEMANTICS[intent.category]:
                if normalized_query in keyword:
                    suggestions.setdefault(keyword, None)

        return list(suggestions)[:limit]


# Global engine instance with default weights
relevance_engine = RelevanceEngine()
