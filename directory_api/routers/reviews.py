"""
Review API routes
"""
import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from directory_api.core.database import get_db
from directory_api.database.models import Review
from directory_api.routers.submissions import get_submission_or_404
from directory_api.schemas.reviews import ReviewCreate, ReviewSchema

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/reviews", tags=["reviews"])


@router.post("", response_model=ReviewSchema, status_code=status.HTTP_201_CREATED)
async def create_review(
    review_data: ReviewCreate,
    db: AsyncSession = Depends(get_db),
):
    """Leave a review on an existing listing"""
    try:
        await get_submission_or_404(db, review_data.submission_id)

        review = Review(**review_data.model_dump())
        db.add(review)
        await db.commit()
        await db.refresh(review)

        logger.info(f"Review {review.id} ({review.rating}/5) added to submission {review.submission_id}")
        return review

    except HTTPException:
        raise
    except Exception as e:
        await db.rollback()
        logger.error(f"Error creating review: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to create review")


@router.get("/{submission_id}", response_model=List[ReviewSchema])
async def get_reviews(submission_id: int, db: AsyncSession = Depends(get_db)):
    """Reviews for a listing, newest first"""
    try:
        result = await db.execute(
            select(Review)
            .where(Review.submission_id == submission_id)
            .order_by(Review.created_at.desc(), Review.id.desc())
        )
        return result.scalars().all()

    except Exception as e:
        logger.error(f"Error fetching reviews for submission {submission_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to get reviews")
