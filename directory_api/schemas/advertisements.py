"""
Pydantic schemas for advertisement endpoints
"""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, HttpUrl

from directory_api.database.models import AdPlacement


class AdvertisementCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: str = Field(..., min_length=10, max_length=500)
    image_url: Optional[str] = None
    target_url: HttpUrl
    placement: AdPlacement
    is_active: bool = True
    budget: float = Field(0, ge=0)
    cost_per_click: float = Field(0, ge=0)
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None


class AdvertisementUpdate(BaseModel):
    """Partial update; only provided fields are changed"""

    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = Field(None, min_length=10, max_length=500)
    image_url: Optional[str] = None
    target_url: Optional[HttpUrl] = None
    placement: Optional[AdPlacement] = None
    is_active: Optional[bool] = None
    budget: Optional[float] = Field(None, ge=0)
    cost_per_click: Optional[float] = Field(None, ge=0)
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None


class AdvertisementSchema(BaseModel):
    id: int
    title: str
    description: str
    image_url: Optional[str] = None
    target_url: str
    placement: str
    is_active: bool
    click_count: int = 0
    impression_count: int = 0
    budget: Optional[float] = None
    cost_per_click: Optional[float] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    created_at: datetime

    class Config:
        from_attributes = True


class AdCounterResponse(BaseModel):
    id: int
    click_count: int
    impression_count: int
