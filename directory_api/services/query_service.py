"""
Search orchestration: candidate retrieval, ranking, pagination and query logging.
"""
from dataclasses import dataclass, field
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from directory_api.core.config import settings
from directory_api.database.models import SearchQuery, Submission, SubmissionStatus
from directory_api.middleware.logging_middleware import get_logger
from directory_api.services.intent_classifier import IntentClassifier, SearchIntent, intent_classifier
from directory_api.services.relevance_engine import (
    RankedListing,
    RelevanceEngine,
    SearchFilters,
    SearchMetrics,
    relevance_engine,
)

logger = get_logger(__name__)


@dataclass
class SearchPage:
    """One page of search results plus the context needed to render it"""

    results: List[RankedListing] = field(default_factory=list)
    total: int = 0
    page: int = 1
    limit: int = 10
    has_more: bool = False
    intent: Optional[SearchIntent] = None
    metrics: Optional[SearchMetrics] = None


class QueryService:
    """Runs directory searches against the store"""

    def __init__(
        self,
        classifier: Optional[IntentClassifier] = None,
        engine: Optional[RelevanceEngine] = None,
    ):
        self.classifier = classifier or intent_classifier
        self.engine = engine or relevance_engine

    async def _get_candidate_listings(self, db: AsyncSession, filters: SearchFilters) -> List[Submission]:
        """Approved listings matching the hard filters, newest first"""
        query = select(Submission).where(Submission.status == SubmissionStatus.APPROVED.value)

        if filters.category:
            query = query.where(Submission.category == filters.category)

        if filters.price_range:
            query = query.where(Submission.pricing == filters.price_range)

        if filters.min_rating:
            query = query.where(Submission.rating >= filters.min_rating)

        query = query.order_by(Submission.created_at.desc(), Submission.id.desc())

        result = await db.execute(query)
        return list(result.scalars().all())

    async def search(
        self,
        db: AsyncSession,
        query: Optional[str] = None,
        category: Optional[str] = None,
        pricing: Optional[str] = None,
        min_rating: Optional[float] = None,
        page: int = 1,
        limit: Optional[int] = None,
        user_ip: Optional[str] = None,
    ) -> SearchPage:
        """
        Search approved listings.

        Args:
            db: Database session
            query: Free-text query; blank means browse
            category: Category tag filter
            pricing: Pricing model filter
            min_rating: Minimum rating filter
            page: 1-based page number
            limit: Page size
            user_ip: Client address recorded with the query log

        Returns:
            SearchPage with the requested slice of ranked listings
        """
        query = (query or "").strip()
        limit = limit or settings.default_page_size
        filters = SearchFilters(category=category, price_range=pricing, min_rating=min_rating)

        candidates = await self._get_candidate_listings(db, filters)

        intent = self.classifier.classify(query) if query else None
        result = self.engine.search(candidates, query, intent=intent, filters=filters)
        ranked = result.results

        total = len(ranked)
        offset = (page - 1) * limit
        has_more = offset + limit < total

        logger.info(
            f"Search q='{query}' category={category} pricing={pricing} min_rating={min_rating}: "
            f"{total} results, page {page} (limit {limit})"
        )

        if query:
            await self._log_search_query(db, query, category, total, user_ip)

        return SearchPage(
            results=ranked[offset:offset + limit],
            total=total,
            page=page,
            limit=limit,
            has_more=has_more,
            intent=intent,
            metrics=result.metrics,
        )

    async def suggest(self, db: AsyncSession, query: Optional[str], limit: Optional[int] = None) -> List[str]:
        """Autocomplete suggestions drawn from approved listing names and category keywords"""
        query = (query or "").strip()
        if not query:
            return []

        candidates = await self._get_candidate_listings(db, SearchFilters())
        return self.engine.generate_suggestions(query, candidates, limit=limit or settings.suggestion_limit)

    async def _log_search_query(
        self,
        db: AsyncSession,
        query: str,
        category: Optional[str],
        results_count: int,
        user_ip: Optional[str],
    ) -> None:
        """Record the search for analytics; failures are logged, never raised"""
        try:
            db.add(
                SearchQuery(
                    query=query,
                    category_filter=category,
                    results_count=results_count,
                    user_ip=user_ip,
                )
            )
            await db.commit()
        except SQLAlchemyError as e:
            await db.rollback()
            logger.warning(f"Failed to log search query '{query}': {e}", exc_info=True)


# Global query service instance
query_service = QueryService()
