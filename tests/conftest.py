"""
Shared pytest fixtures and configuration for all tests
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, AsyncGenerator, List, Optional

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from directory_api.core.database import get_db
from directory_api.database.models import Base, Submission, SubmissionStatus
from directory_api.main import app
from directory_api.services.auth_service import auth_service

# Fixed reference time so recency and sponsorship checks are deterministic
NOW = datetime(2025, 6, 1, 12, 0, 0)


@dataclass
class MockListing:
    """Plain stand-in for a Submission row in ranking tests."""

    id: int
    name: str
    category: str = "ai-tools"
    pricing: Optional[str] = None
    short_description: str = ""
    detailed_description: str = ""
    tags: List[str] = field(default_factory=list)
    rating: Any = None
    review_count: Any = 0
    featured: bool = False
    sponsored_level: Optional[str] = None
    sponsorship_end_date: Optional[datetime] = None
    created_at: Optional[datetime] = None


@pytest.fixture
def sample_listings():
    """A small mixed catalogue of listings"""
    return [
        MockListing(
            id=1,
            name="ArtGen",
            category="ai-art-generators",
            pricing="free",
            short_description="Generate artwork from prompts.",
            detailed_description="Turns short prompts into paintings and illustrations.",
            tags=["art", "free"],
            rating="4.6",
            review_count=1500,
        ),
        MockListing(
            id=2,
            name="OpenAI GPT-4",
            category="large-language-models",
            pricing="subscription",
            short_description="Advanced language model with strong reasoning.",
            detailed_description="GPT-4 answers questions, writes code and drafts documents.",
            tags=["llm", "chat", "api"],
            rating="4.8",
            review_count=12000,
        ),
        MockListing(
            id=3,
            name="CodePilot",
            category="ai-code-assistants",
            pricing="freemium",
            short_description="Autocomplete for your editor.",
            detailed_description="Suggests whole functions while you type in the IDE.",
            tags=["code", "ide"],
            rating="4.1",
            review_count=300,
        ),
    ]


@pytest.fixture
async def test_engine():
    """In-memory database shared by every session in a test"""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
        echo=False,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(test_engine):
    return async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Create a fresh database session for each test"""
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
def create_submission(session_factory):
    """Factory that persists a submission; approved unless told otherwise"""

    async def _create(**overrides) -> Submission:
        values = {
            "name": "Sample Tool",
            "category": "ai-tools",
            "url": "https://example.com/tool",
            "pricing": "free",
            "short_description": "A sample AI tool for testing.",
            "detailed_description": "A sample AI tool used in tests. It does nothing useful at all, really.",
            "tags": [],
            "contact_email": "owner@example.com",
            "status": SubmissionStatus.APPROVED.value,
        }
        values.update(overrides)
        async with session_factory() as session:
            submission = Submission(**values)
            session.add(submission)
            await session.commit()
            await session.refresh(submission)
            return submission

    return _create


@pytest.fixture
async def client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client bound to the app with the database dependency pointed at the test engine"""

    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
async def admin_user(session_factory):
    async with session_factory() as session:
        return await auth_service.create_admin(session, "moderator", "correct-horse")


@pytest.fixture
def admin_headers(admin_user):
    token = auth_service.create_access_token({"sub": str(admin_user.id)})
    return {"Authorization": f"Bearer {token}"}
