"""
Admin API routes for moderation, listing management and search analytics
"""
import logging
from datetime import datetime, timedelta
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import case, desc, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from directory_api.core.auth import require_admin
from directory_api.core.database import get_db
from directory_api.database.models import AdminUser, SearchQuery, SponsorshipLevel, Submission, SubmissionStatus
from directory_api.routers.submissions import get_submission_or_404
from directory_api.schemas.admin import (
    AdminLogin,
    AdminUserResponse,
    ModerationResponse,
    SearchAnalyticsResponse,
    SearchQueryEntry,
    SubmissionStatsResponse,
    SubmissionUpdate,
    TokenResponse,
    TopSearchQuery,
)
from directory_api.schemas.submissions import AdminSubmissionSchema, SubmissionListResponse
from directory_api.services.auth_service import auth_service

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/admin", tags=["admin"])

URL_FIELDS = ("url", "affiliate_url")
REQUIRED_FIELDS = ("name", "category", "url", "short_description", "detailed_description", "featured", "review_count")


@router.post("/login", response_model=TokenResponse)
async def login(
    credentials: AdminLogin,
    db: AsyncSession = Depends(get_db),
):
    """
    Login with username and password.
    Returns access token on success.
    """
    admin = await auth_service.authenticate(db, credentials.username, credentials.password)
    if not admin:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid username or password",
        )

    access_token = auth_service.create_access_token(data={"sub": str(admin.id)})
    logger.info(f"Admin '{admin.username}' logged in")

    return TokenResponse(
        access_token=access_token,
        user=AdminUserResponse.model_validate(admin),
    )


@router.get("/pending", response_model=List[AdminSubmissionSchema])
async def get_pending_submissions(
    current_admin: AdminUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Submissions waiting for moderation, oldest first"""
    try:
        query = (
            select(Submission)
            .where(Submission.status == SubmissionStatus.PENDING.value)
            .order_by(Submission.created_at.asc())
        )
        result = await db.execute(query)
        return result.scalars().all()

    except Exception as e:
        logger.error(f"Error fetching pending submissions: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Error fetching pending submissions")


@router.get("/submissions", response_model=SubmissionListResponse)
async def list_submissions(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    status_filter: Optional[SubmissionStatus] = Query(None, alias="status"),
    current_admin: AdminUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """List all submissions with pagination (admin view)"""
    try:
        query = select(Submission)
        count_query = select(func.count()).select_from(Submission)
        if status_filter:
            query = query.where(Submission.status == status_filter.value)
            count_query = count_query.where(Submission.status == status_filter.value)

        total_result = await db.execute(count_query)
        total = total_result.scalar() or 0

        offset = (page - 1) * limit
        query = query.order_by(Submission.created_at.desc(), Submission.id.desc()).offset(offset).limit(limit)
        result = await db.execute(query)
        submissions = result.scalars().all()

        return SubmissionListResponse(
            items=[AdminSubmissionSchema.model_validate(s) for s in submissions],
            total=total,
            page=page,
            limit=limit,
            has_more=offset + limit < total,
        )

    except Exception as e:
        logger.error(f"Error listing submissions: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Error fetching submissions")


async def _set_status(db: AsyncSession, submission_id: int, new_status: SubmissionStatus) -> Submission:
    submission = await get_submission_or_404(db, submission_id)
    submission.status = new_status.value
    submission.approved_at = datetime.utcnow() if new_status == SubmissionStatus.APPROVED else None
    submission.updated_at = datetime.utcnow()
    await db.commit()
    return submission


@router.post("/approve/{submission_id}", response_model=ModerationResponse)
async def approve_submission(
    submission_id: int,
    current_admin: AdminUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Approve a submission so it appears in search"""
    try:
        submission = await _set_status(db, submission_id, SubmissionStatus.APPROVED)
        logger.info(f"Submission {submission_id} approved by '{current_admin.username}'")
        return ModerationResponse(success=True, id=submission.id, status=submission.status)

    except HTTPException:
        raise
    except Exception as e:
        await db.rollback()
        logger.error(f"Error approving submission {submission_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Error approving submission")


@router.post("/reject/{submission_id}", response_model=ModerationResponse)
async def reject_submission(
    submission_id: int,
    current_admin: AdminUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Reject a submission"""
    try:
        submission = await _set_status(db, submission_id, SubmissionStatus.REJECTED)
        logger.info(f"Submission {submission_id} rejected by '{current_admin.username}'")
        return ModerationResponse(success=True, id=submission.id, status=submission.status)

    except HTTPException:
        raise
    except Exception as e:
        await db.rollback()
        logger.error(f"Error rejecting submission {submission_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Error rejecting submission")


@router.patch("/submissions/{submission_id}", response_model=AdminSubmissionSchema)
async def update_submission(
    submission_id: int,
    submission_data: SubmissionUpdate,
    current_admin: AdminUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Update a listing's details and monetization settings"""
    try:
        submission = await get_submission_or_404(db, submission_id)

        updates = submission_data.model_dump(exclude_unset=True)
        for field_name, value in updates.items():
            if value is None and field_name in REQUIRED_FIELDS:
                continue
            if field_name in URL_FIELDS and value is not None:
                value = str(value)
            elif field_name == "category" and value is not None:
                value = value.value
            elif field_name == "sponsored_level":
                # "none" is stored as no sponsorship
                value = None if value in (None, SponsorshipLevel.NONE) else value.value
            setattr(submission, field_name, value)

        submission.updated_at = datetime.utcnow()
        await db.commit()
        await db.refresh(submission)

        logger.info(f"Submission {submission_id} updated fields {sorted(updates)}")
        return submission

    except HTTPException:
        raise
    except Exception as e:
        await db.rollback()
        logger.error(f"Error updating submission {submission_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Error updating submission")


@router.delete("/submissions/{submission_id}")
async def delete_submission(
    submission_id: int,
    current_admin: AdminUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Delete a listing and its reviews"""
    try:
        submission = await get_submission_or_404(db, submission_id)
        await db.delete(submission)
        await db.commit()

        logger.info(f"Submission {submission_id} deleted by '{current_admin.username}'")
        return {"message": "Submission deleted successfully", "id": submission_id}

    except HTTPException:
        raise
    except Exception as e:
        await db.rollback()
        logger.error(f"Error deleting submission {submission_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Error deleting submission")


@router.get("/stats", response_model=SubmissionStatsResponse)
async def get_submission_stats(
    current_admin: AdminUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Submission counts by moderation status and monetization"""
    try:
        status_result = await db.execute(
            select(Submission.status, func.count(Submission.id)).group_by(Submission.status)
        )
        by_status = {row[0]: row[1] for row in status_result.all()}

        featured_result = await db.execute(
            select(func.count(Submission.id)).where(Submission.featured.is_(True))
        )
        sponsored_result = await db.execute(
            select(func.count(Submission.id)).where(
                Submission.sponsored_level.isnot(None),
                Submission.sponsored_level != SponsorshipLevel.NONE.value,
            )
        )

        return SubmissionStatsResponse(
            total=sum(by_status.values()),
            approved=by_status.get(SubmissionStatus.APPROVED.value, 0),
            pending=by_status.get(SubmissionStatus.PENDING.value, 0),
            rejected=by_status.get(SubmissionStatus.REJECTED.value, 0),
            featured=featured_result.scalar() or 0,
            sponsored=sponsored_result.scalar() or 0,
        )

    except Exception as e:
        logger.error(f"Error fetching submission stats: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Error fetching stats")


@router.get("/search-queries", response_model=SearchAnalyticsResponse)
async def get_search_queries(
    days: int = Query(7, ge=1, le=365),
    limit: int = Query(50, ge=1, le=500),
    current_admin: AdminUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Recent searches and the most frequent queries over the last N days"""
    try:
        since = datetime.utcnow() - timedelta(days=days)

        totals_result = await db.execute(
            select(
                func.count(SearchQuery.id),
                func.coalesce(func.sum(case((SearchQuery.results_count == 0, 1), else_=0)), 0),
            ).where(SearchQuery.created_at >= since)
        )
        total_searches, zero_result_searches = totals_result.one()

        recent_result = await db.execute(
            select(SearchQuery)
            .where(SearchQuery.created_at >= since)
            .order_by(desc(SearchQuery.created_at), desc(SearchQuery.id))
            .limit(limit)
        )
        recent = recent_result.scalars().all()

        top_result = await db.execute(
            select(
                func.lower(SearchQuery.query).label("query"),
                func.count(SearchQuery.id).label("count"),
                func.avg(SearchQuery.results_count).label("avg_results"),
            )
            .where(SearchQuery.created_at >= since)
            .group_by(func.lower(SearchQuery.query))
            .order_by(desc("count"), "query")
            .limit(20)
        )
        top_queries = [
            TopSearchQuery(query=row.query, count=row.count, avg_results=round(float(row.avg_results or 0), 2))
            for row in top_result.all()
        ]

        return SearchAnalyticsResponse(
            days=days,
            total_searches=total_searches or 0,
            zero_result_searches=zero_result_searches or 0,
            recent=[SearchQueryEntry.model_validate(q) for q in recent],
            top_queries=top_queries,
        )

    except Exception as e:
        logger.error(f"Error fetching search analytics: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Error fetching search analytics")
