"""
Public submission API routes
"""
import logging
from datetime import datetime
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import and_, func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from directory_api.core.database import get_db
from directory_api.database.models import SponsorshipLevel, Submission, SubmissionStatus
from directory_api.schemas.submissions import ClickResponse, SubmissionCreate, SubmissionSchema

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/submissions", tags=["submissions"])


async def get_submission_or_404(db: AsyncSession, submission_id: int) -> Submission:
    result = await db.execute(select(Submission).where(Submission.id == submission_id))
    submission = result.scalar_one_or_none()
    if not submission:
        raise HTTPException(status_code=404, detail="Submission not found")
    return submission


@router.post("", response_model=SubmissionSchema, status_code=status.HTTP_201_CREATED)
async def create_submission(
    submission_data: SubmissionCreate,
    db: AsyncSession = Depends(get_db),
):
    """Submit a new tool, product or agent for moderation"""
    try:
        submission = Submission(
            name=submission_data.name.strip(),
            category=submission_data.category.value,
            url=str(submission_data.url),
            pricing=submission_data.pricing,
            short_description=submission_data.short_description,
            detailed_description=submission_data.detailed_description,
            contact_email=submission_data.contact_email,
            tags=submission_data.tags,
            images=submission_data.images,
            status=SubmissionStatus.PENDING.value,
        )
        db.add(submission)
        await db.commit()
        await db.refresh(submission)

        logger.info(f"New submission {submission.id} '{submission.name}' awaiting review")
        return submission

    except Exception as e:
        await db.rollback()
        logger.error(f"Submission creation error: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to create submission")


@router.get("/featured", response_model=List[SubmissionSchema])
async def get_featured_submissions(db: AsyncSession = Depends(get_db)):
    """Approved listings flagged as featured, newest first"""
    try:
        query = (
            select(Submission)
            .where(
                and_(
                    Submission.status == SubmissionStatus.APPROVED.value,
                    Submission.featured.is_(True),
                )
            )
            .order_by(Submission.created_at.desc())
        )
        result = await db.execute(query)
        return result.scalars().all()

    except Exception as e:
        logger.error(f"Error fetching featured submissions: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to get featured submissions")


@router.get("/sponsored", response_model=List[SubmissionSchema])
async def get_sponsored_submissions(db: AsyncSession = Depends(get_db)):
    """Approved listings with a sponsorship that has not ended"""
    try:
        query = (
            select(Submission)
            .where(
                and_(
                    Submission.status == SubmissionStatus.APPROVED.value,
                    Submission.sponsored_level.isnot(None),
                    Submission.sponsored_level != SponsorshipLevel.NONE.value,
                    or_(
                        Submission.sponsorship_end_date.is_(None),
                        Submission.sponsorship_end_date > datetime.utcnow(),
                    ),
                )
            )
            .order_by(Submission.created_at.desc())
        )
        result = await db.execute(query)
        return result.scalars().all()

    except Exception as e:
        logger.error(f"Error fetching sponsored submissions: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to get sponsored submissions")


@router.get("/{submission_id}", response_model=SubmissionSchema)
async def get_submission(submission_id: int, db: AsyncSession = Depends(get_db)):
    """Get a single listing"""
    try:
        return await get_submission_or_404(db, submission_id)

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error fetching submission {submission_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to get submission")


@router.post("/{submission_id}/click", response_model=ClickResponse)
async def track_submission_click(submission_id: int, db: AsyncSession = Depends(get_db)):
    """Count an outbound click and return where to send the visitor"""
    try:
        # Increment in SQL so concurrent clicks are not lost
        result = await db.execute(
            update(Submission)
            .where(Submission.id == submission_id)
            .values(monthly_clicks=func.coalesce(Submission.monthly_clicks, 0) + 1)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            await db.rollback()
            raise HTTPException(status_code=404, detail="Submission not found")
        await db.commit()

        result = await db.execute(
            select(Submission)
            .where(Submission.id == submission_id)
            .execution_options(populate_existing=True)
        )
        submission = result.scalar_one()
        return ClickResponse(id=submission.id, url=submission.affiliate_url or submission.url)

    except HTTPException:
        raise
    except Exception as e:
        await db.rollback()
        logger.error(f"Error tracking click for submission {submission_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to track click")
