"""
Database module for the AI directory
"""
from .models import (
    AdminRole,
    AdminUser,
    AdPlacement,
    Advertisement,
    Base,
    Review,
    SearchQuery,
    SponsorshipLevel,
    Submission,
    SubmissionStatus,
)

__all__ = [
    "Base",
    "Submission",
    "SubmissionStatus",
    "SponsorshipLevel",
    "Advertisement",
    "AdPlacement",
    "SearchQuery",
    "Review",
    "AdminUser",
    "AdminRole",
]
