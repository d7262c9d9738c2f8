"""
Search API routes
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from directory_api.core.config import settings
from directory_api.core.database import get_db
from directory_api.schemas.submissions import (
    SearchIntentSchema,
    SearchMetricsSchema,
    SearchResponse,
    SuggestionResponse,
    search_result_from_ranked,
)
from directory_api.services.query_service import query_service

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/search", tags=["search"])


def _client_ip(request: Request) -> Optional[str]:
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else None


@router.get("", response_model=SearchResponse)
async def search_submissions(
    request: Request,
    q: Optional[str] = Query(None, max_length=200),
    category: Optional[str] = Query(None),
    pricing: Optional[str] = Query(None),
    min_rating: Optional[float] = Query(None, ge=0, le=5),
    page: int = Query(1, ge=1),
    limit: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    db: AsyncSession = Depends(get_db),
):
    """Search approved listings; without a query, browse in featured/sponsored order"""
    try:
        result = await query_service.search(
            db,
            query=q,
            category=category,
            pricing=pricing,
            min_rating=min_rating,
            page=page,
            limit=limit,
            user_ip=_client_ip(request),
        )

        return SearchResponse(
            submissions=[search_result_from_ranked(ranked) for ranked in result.results],
            total=result.total,
            page=result.page,
            limit=result.limit,
            has_more=result.has_more,
            intent=SearchIntentSchema(**result.intent.to_dict()) if result.intent else None,
            metrics=SearchMetricsSchema(**result.metrics.to_dict()) if result.metrics else None,
        )

    except Exception as e:
        logger.error(f"Search error for q='{q}': {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Search failed")


@router.get("/suggestions", response_model=SuggestionResponse)
async def search_suggestions(
    q: str = Query("", max_length=200),
    db: AsyncSession = Depends(get_db),
):
    """Autocomplete suggestions for a partial query"""
    try:
        suggestions = await query_service.suggest(db, q)
        return SuggestionResponse(query=q, suggestions=suggestions)

    except Exception as e:
        logger.error(f"Suggestion error for q='{q}': {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to get suggestions")
