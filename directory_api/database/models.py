"""
Database models for the AI directory
"""
import enum
from datetime import datetime

from sqlalchemy import JSON, Boolean, Column, DateTime, ForeignKey, Index, Integer, Numeric, String, Text
from sqlalchemy.orm import declarative_base, relationship

Base = declarative_base()


class SubmissionStatus(str, enum.Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class SponsorshipLevel(str, enum.Enum):
    NONE = "none"
    PREMIUM = "premium"
    GOLD = "gold"
    PLATINUM = "platinum"


class AdPlacement(str, enum.Enum):
    HEADER = "header"
    SIDEBAR = "sidebar"
    FOOTER = "footer"
    BETWEEN_RESULTS = "between-results"


class AdminRole(str, enum.Enum):
    ADMIN = "admin"
    SUPER_ADMIN = "super_admin"


def sponsorship_active(level, end_date, now: datetime = None) -> bool:
    """A sponsorship counts only while a level is set and it has not ended"""
    if not level or level == SponsorshipLevel.NONE.value:
        return False
    if end_date is None:
        return True
    return end_date > (now or datetime.utcnow())


class Submission(Base):
    """A listed AI tool, product or agent"""

    __tablename__ = "submissions"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    category = Column(String(100), nullable=False)
    url = Column(Text, nullable=False)
    pricing = Column(String(50), nullable=True)  # free, freemium, subscription, pay-per-use, enterprise
    short_description = Column(Text, nullable=False)
    detailed_description = Column(Text, nullable=False)
    tags = Column(JSON, default=list)
    contact_email = Column(String(255), nullable=False)
    images = Column(JSON, default=list)

    # Moderation
    status = Column(String(20), default=SubmissionStatus.PENDING.value, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
    approved_at = Column(DateTime, nullable=True)

    # Reviews
    rating = Column(Numeric(2, 1), nullable=True)
    review_count = Column(Integer, default=0, nullable=False)

    # Monetization
    featured = Column(Boolean, default=False, nullable=False)
    sponsored_level = Column(String(20), nullable=True)  # premium, gold, platinum
    sponsorship_start_date = Column(DateTime, nullable=True)
    sponsorship_end_date = Column(DateTime, nullable=True)
    commission_rate = Column(Numeric(3, 2), default=0)  # percentage
    affiliate_url = Column(Text, nullable=True)
    promotional_banner = Column(Text, nullable=True)
    monthly_clicks = Column(Integer, default=0, nullable=False)
    impression_count = Column(Integer, default=0, nullable=False)
    total_revenue = Column(Numeric(10, 2), default=0)

    reviews = relationship("Review", back_populates="submission", cascade="all, delete-orphan")

    __table_args__ = (
        Index("idx_submissions_name", "name"),
        Index("idx_submissions_category", "category"),
        Index("idx_submissions_status", "status"),
        Index("idx_submissions_featured", "featured"),
        Index("idx_submissions_sponsored", "sponsored_level"),
    )

    def is_sponsorship_active(self, now: datetime = None) -> bool:
        return sponsorship_active(self.sponsored_level, self.sponsorship_end_date, now)

    def __repr__(self):
        return f"<Submission(id={self.id}, name='{self.name}', status='{self.status}')>"


class Advertisement(Base):
    """Paid banner shown in a page slot"""

    __tablename__ = "advertisements"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    image_url = Column(Text, nullable=True)
    target_url = Column(Text, nullable=False)
    placement = Column(String(30), nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    click_count = Column(Integer, default=0, nullable=False)
    impression_count = Column(Integer, default=0, nullable=False)
    budget = Column(Numeric(10, 2), default=0)
    cost_per_click = Column(Numeric(5, 2), default=0)
    start_date = Column(DateTime, default=datetime.utcnow)
    end_date = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    __table_args__ = (
        Index("idx_advertisements_placement", "placement"),
        Index("idx_advertisements_active", "is_active"),
        Index("idx_advertisements_start_date", "start_date"),
        Index("idx_advertisements_end_date", "end_date"),
    )

    def __repr__(self):
        return f"<Advertisement(id={self.id}, title='{self.title}', placement='{self.placement}')>"


class SearchQuery(Base):
    """Append-only log of searches run against the directory"""

    __tablename__ = "search_queries"

    id = Column(Integer, primary_key=True, index=True)
    query = Column(Text, nullable=False)
    category_filter = Column(String(100), nullable=True)
    results_count = Column(Integer, nullable=True)
    user_ip = Column(String(45), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)

    def __repr__(self):
        return f"<SearchQuery(id={self.id}, query='{self.query}', results={self.results_count})>"


class Review(Base):
    """User review of a listing"""

    __tablename__ = "reviews"

    id = Column(Integer, primary_key=True, index=True)
    submission_id = Column(Integer, ForeignKey("submissions.id"), nullable=False, index=True)
    rating = Column(Integer, nullable=False)
    comment = Column(Text, nullable=True)
    reviewer_name = Column(String(200), nullable=True)
    reviewer_email = Column(String(255), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    submission = relationship("Submission", back_populates="reviews")

    def __repr__(self):
        return f"<Review(id={self.id}, submission_id={self.submission_id}, rating={self.rating})>"


class AdminUser(Base):
    """Administrator account for the moderation panel"""

    __tablename__ = "admin_users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(100), unique=True, nullable=False, index=True)
    hashed_password = Column(String(255), nullable=False)
    role = Column(String(20), default=AdminRole.ADMIN.value, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f"<AdminUser(id={self.id}, username='{self.username}', role='{self.role}')>"
