"""
Pydantic schemas for the admin panel
"""
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, HttpUrl

from directory_api.database.models import SponsorshipLevel
from directory_api.schemas.submissions import ListingCategory


class AdminLogin(BaseModel):
    """Schema for admin login"""

    username: str = Field(..., min_length=1, max_length=100)
    password: str = Field(..., min_length=1)


class AdminUserResponse(BaseModel):
    id: int
    username: str
    role: str
    is_active: bool
    created_at: datetime

    class Config:
        from_attributes = True


class TokenResponse(BaseModel):
    """Schema for token response"""

    access_token: str
    token_type: str = "bearer"
    user: AdminUserResponse


class SubmissionUpdate(BaseModel):
    """Admin edit of a listing; only provided fields are changed"""

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    category: Optional[ListingCategory] = None
    url: Optional[HttpUrl] = None
    pricing: Optional[str] = Field(None, max_length=50)
    short_description: Optional[str] = Field(None, min_length=10, max_length=200)
    detailed_description: Optional[str] = Field(None, min_length=50)
    tags: Optional[List[str]] = None
    images: Optional[List[str]] = None
    rating: Optional[float] = Field(None, ge=0, le=5)
    review_count: Optional[int] = Field(None, ge=0)

    # Monetization
    featured: Optional[bool] = None
    sponsored_level: Optional[SponsorshipLevel] = None
    sponsorship_start_date: Optional[datetime] = None
    sponsorship_end_date: Optional[datetime] = None
    commission_rate: Optional[float] = Field(None, ge=0, le=9.99)
    affiliate_url: Optional[HttpUrl] = None
    promotional_banner: Optional[str] = None


class ModerationResponse(BaseModel):
    success: bool
    id: int
    status: str


class SubmissionStatsResponse(BaseModel):
    total: int
    approved: int
    pending: int
    rejected: int
    featured: int
    sponsored: int


class SearchQueryEntry(BaseModel):
    id: int
    query: str
    category_filter: Optional[str] = None
    results_count: Optional[int] = None
    created_at: datetime

    class Config:
        from_attributes = True


class TopSearchQuery(BaseModel):
    query: str
    count: int
    avg_results: float


class SearchAnalyticsResponse(BaseModel):
    """Recent and most frequent searches in a time window"""

    days: int
    total_searches: int
    zero_result_searches: int
    recent: List[SearchQueryEntry]
    top_queries: List[TopSearchQuery]
