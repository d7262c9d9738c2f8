"""
Advertisement API routes: public placement slots and admin management
"""
import logging
from datetime import datetime
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import and_, func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from directory_api.core.auth import require_admin
from directory_api.core.database import get_db
from directory_api.database.models import AdminUser, AdPlacement, Advertisement
from directory_api.schemas.advertisements import (
    AdCounterResponse,
    AdvertisementCreate,
    AdvertisementSchema,
    AdvertisementUpdate,
)

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/advertisements", tags=["advertisements"])
admin_router = APIRouter(prefix="/admin/advertisements", tags=["admin"])


async def get_advertisement_or_404(db: AsyncSession, ad_id: int) -> Advertisement:
    result = await db.execute(select(Advertisement).where(Advertisement.id == ad_id))
    advertisement = result.scalar_one_or_none()
    if not advertisement:
        raise HTTPException(status_code=404, detail="Advertisement not found")
    return advertisement


@router.get("/{placement}", response_model=List[AdvertisementSchema])
async def get_advertisements_for_placement(
    placement: AdPlacement,
    db: AsyncSession = Depends(get_db),
):
    """Active advertisements for a page slot that are inside their run window"""
    try:
        now = datetime.utcnow()
        query = (
            select(Advertisement)
            .where(
                and_(
                    Advertisement.placement == placement.value,
                    Advertisement.is_active.is_(True),
                    or_(Advertisement.start_date.is_(None), Advertisement.start_date <= now),
                    or_(Advertisement.end_date.is_(None), Advertisement.end_date > now),
                )
            )
            .order_by(Advertisement.created_at.desc())
        )
        result = await db.execute(query)
        return result.scalars().all()

    except Exception as e:
        logger.error(f"Error fetching advertisements for {placement.value}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to get advertisements")


async def _increment(db: AsyncSession, ad_id: int, counter: str) -> AdCounterResponse:
    column = getattr(Advertisement, counter)
    result = await db.execute(
        update(Advertisement)
        .where(Advertisement.id == ad_id)
        .values({counter: func.coalesce(column, 0) + 1})
        .execution_options(synchronize_session=False)
    )
    if result.rowcount == 0:
        await db.rollback()
        raise HTTPException(status_code=404, detail="Advertisement not found")
    await db.commit()

    result = await db.execute(
        select(Advertisement)
        .where(Advertisement.id == ad_id)
        .execution_options(populate_existing=True)
    )
    advertisement = result.scalar_one()
    return AdCounterResponse(
        id=advertisement.id,
        click_count=advertisement.click_count,
        impression_count=advertisement.impression_count,
    )


@router.post("/{ad_id}/click", response_model=AdCounterResponse)
async def track_advertisement_click(ad_id: int, db: AsyncSession = Depends(get_db)):
    try:
        return await _increment(db, ad_id, "click_count")

    except HTTPException:
        raise
    except Exception as e:
        await db.rollback()
        logger.error(f"Error tracking click for advertisement {ad_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to track click")


@router.post("/{ad_id}/impression", response_model=AdCounterResponse)
async def track_advertisement_impression(ad_id: int, db: AsyncSession = Depends(get_db)):
    try:
        return await _increment(db, ad_id, "impression_count")

    except HTTPException:
        raise
    except Exception as e:
        await db.rollback()
        logger.error(f"Error tracking impression for advertisement {ad_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to track impression")


@admin_router.get("", response_model=List[AdvertisementSchema])
async def list_advertisements(
    current_admin: AdminUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """All advertisements, newest first"""
    try:
        result = await db.execute(select(Advertisement).order_by(Advertisement.created_at.desc()))
        return result.scalars().all()

    except Exception as e:
        logger.error(f"Error listing advertisements: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Error fetching advertisements")


@admin_router.post("", response_model=AdvertisementSchema, status_code=status.HTTP_201_CREATED)
async def create_advertisement(
    ad_data: AdvertisementCreate,
    current_admin: AdminUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    try:
        advertisement = Advertisement(
            title=ad_data.title,
            description=ad_data.description,
            image_url=ad_data.image_url,
            target_url=str(ad_data.target_url),
            placement=ad_data.placement.value,
            is_active=ad_data.is_active,
            budget=ad_data.budget,
            cost_per_click=ad_data.cost_per_click,
            start_date=ad_data.start_date or datetime.utcnow(),
            end_date=ad_data.end_date,
        )
        db.add(advertisement)
        await db.commit()
        await db.refresh(advertisement)

        logger.info(f"Advertisement {advertisement.id} created for {advertisement.placement}")
        return advertisement

    except Exception as e:
        await db.rollback()
        logger.error(f"Error creating advertisement: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Error creating advertisement")


@admin_router.put("/{ad_id}", response_model=AdvertisementSchema)
async def update_advertisement(
    ad_id: int,
    ad_data: AdvertisementUpdate,
    current_admin: AdminUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    try:
        advertisement = await get_advertisement_or_404(db, ad_id)

        updates = ad_data.model_dump(exclude_unset=True)
        for field_name, value in updates.items():
            if field_name == "target_url" and value is not None:
                value = str(value)
            elif field_name == "placement" and value is not None:
                value = value.value
            setattr(advertisement, field_name, value)

        advertisement.updated_at = datetime.utcnow()
        await db.commit()
        await db.refresh(advertisement)
        return advertisement

    except HTTPException:
        raise
    except Exception as e:
        await db.rollback()
        logger.error(f"Error updating advertisement {ad_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Error updating advertisement")


@admin_router.delete("/{ad_id}")
async def delete_advertisement(
    ad_id: int,
    current_admin: AdminUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    try:
        advertisement = await get_advertisement_or_404(db, ad_id)
        await db.delete(advertisement)
        await db.commit()

        return {"message": "Advertisement deleted successfully", "id": ad_id}

    except HTTPException:
        raise
    except Exception as e:
        await db.rollback()
        logger.error(f"Error deleting advertisement {ad_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Error deleting advertisement")
