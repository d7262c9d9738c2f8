"""
Pydantic schemas for listing reviews
"""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, Field


class ReviewCreate(BaseModel):
    submission_id: int = Field(..., gt=0)
    rating: int = Field(..., ge=1, le=5)
    comment: Optional[str] = Field(None, max_length=2000)
    reviewer_name: Optional[str] = Field(None, max_length=200)
    reviewer_email: Optional[EmailStr] = None


class ReviewSchema(BaseModel):
    id: int
    submission_id: int
    rating: int
    comment: Optional[str] = None
    reviewer_name: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True
