"""
Integration tests for public submission, review and advertisement endpoints
"""
import asyncio
from datetime import datetime, timedelta

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from directory_api.database.models import Advertisement, Base, Submission, SubmissionStatus
from directory_api.routers.advertisements import track_advertisement_click, track_advertisement_impression
from directory_api.routers.submissions import track_submission_click

VALID_SUBMISSION = {
    "name": "Promptly",
    "category": "ai-writing-assistants",
    "url": "https://promptly.example.com/app",
    "pricing": "freemium",
    "short_description": "Writes marketing copy from a brief.",
    "detailed_description": "Promptly turns a one-line brief into landing page copy, emails and ads in seconds.",
    "contact_email": "founder@promptly.example.com",
    "tags": [" copywriting ", "marketing", ""],
}


class TestCreateSubmission:
    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_created_as_pending(self, client):
        response = await client.post("/api/submissions", json=VALID_SUBMISSION)

        assert response.status_code == 201
        data = response.json()
        assert data["status"] == "pending"
        assert data["url"] == "https://promptly.example.com/app"
        assert data["tags"] == ["copywriting", "marketing"]
        assert data["approved_at"] is None

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_pending_submission_is_not_searchable(self, client):
        await client.post("/api/submissions", json=VALID_SUBMISSION)

        response = await client.get("/api/search", params={"q": "promptly"})
        assert response.json()["total"] == 0

    @pytest.mark.integration
    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "field,value",
        [
            ("category", "not-a-category"),
            ("url", "not a url"),
            ("contact_email", "nobody"),
            ("short_description", "too short"),
            ("detailed_description", "Also too short."),
            ("name", ""),
        ],
    )
    async def test_validation(self, client, field, value):
        payload = {**VALID_SUBMISSION, field: value}
        response = await client.post("/api/submissions", json=payload)
        assert response.status_code == 422


class TestReadSubmissions:
    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_get_by_id(self, client, create_submission):
        submission = await create_submission(name="Lookup")

        response = await client.get(f"/api/submissions/{submission.id}")
        assert response.status_code == 200
        assert response.json()["name"] == "Lookup"

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_missing_is_404(self, client):
        response = await client.get("/api/submissions/9999")
        assert response.status_code == 404

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_featured(self, client, create_submission):
        await create_submission(name="Star", featured=True)
        await create_submission(name="Plain")
        await create_submission(name="Unapproved Star", featured=True, status=SubmissionStatus.PENDING.value)

        response = await client.get("/api/submissions/featured")
        assert [s["name"] for s in response.json()] == ["Star"]

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_sponsored_only_while_active(self, client, create_submission):
        now = datetime.utcnow()
        await create_submission(name="Running", sponsored_level="gold", sponsorship_end_date=now + timedelta(days=5))
        await create_submission(name="Open Ended", sponsored_level="premium")
        await create_submission(name="Lapsed", sponsored_level="platinum", sponsorship_end_date=now - timedelta(days=5))
        await create_submission(name="Unsponsored")

        response = await client.get("/api/submissions/sponsored")
        assert sorted(s["name"] for s in response.json()) == ["Open Ended", "Running"]


class TestClickTracking:
    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_click_prefers_affiliate_url(self, client, create_submission):
        submission = await create_submission(affiliate_url="https://partner.example.com/ref/42")

        response = await client.post(f"/api/submissions/{submission.id}/click")
        assert response.status_code == 200
        assert response.json() == {"id": submission.id, "url": "https://partner.example.com/ref/42"}

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_click_counts(self, client, create_submission, admin_headers):
        submission = await create_submission()

        await client.post(f"/api/submissions/{submission.id}/click")
        response = await client.post(f"/api/submissions/{submission.id}/click")
        assert response.json()["url"] == "https://example.com/tool"

        listing = await client.get("/api/admin/submissions", headers=admin_headers)
        assert listing.json()["items"][0]["monthly_clicks"] == 2

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_click_on_missing_listing(self, client):
        response = await client.post("/api/submissions/9999/click")
        assert response.status_code == 404


class TestReviews:
    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_create_and_list(self, client, create_submission):
        submission = await create_submission()

        response = await client.post(
            "/api/reviews",
            json={"submission_id": submission.id, "rating": 5, "comment": "Great", "reviewer_name": "Sam"},
        )
        assert response.status_code == 201

        reviews = await client.get(f"/api/reviews/{submission.id}")
        assert [r["rating"] for r in reviews.json()] == [5]
        assert "reviewer_email" not in reviews.json()[0]

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_review_for_missing_listing(self, client):
        response = await client.post("/api/reviews", json={"submission_id": 9999, "rating": 4})
        assert response.status_code == 404

    @pytest.mark.integration
    @pytest.mark.asyncio
    @pytest.mark.parametrize("rating", [0, 6])
    async def test_rating_bounds(self, client, create_submission, rating):
        submission = await create_submission()
        response = await client.post("/api/reviews", json={"submission_id": submission.id, "rating": rating})
        assert response.status_code == 422


@pytest.fixture
def create_advertisement(session_factory):
    async def _create(**overrides) -> Advertisement:
        values = {
            "title": "Sidebar ad",
            "description": "Try our hosted GPU cluster today.",
            "target_url": "https://ads.example.com/gpu",
            "placement": "sidebar",
        }
        values.update(overrides)
        async with session_factory() as session:
            advertisement = Advertisement(**values)
            session.add(advertisement)
            await session.commit()
            await session.refresh(advertisement)
            return advertisement

    return _create


class TestAdvertisements:
    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_placement_returns_running_ads(self, client, create_advertisement):
        now = datetime.utcnow()
        await create_advertisement(title="Running")
        await create_advertisement(title="Paused", is_active=False)
        await create_advertisement(title="Ended", end_date=now - timedelta(days=1))
        await create_advertisement(title="Scheduled", start_date=now + timedelta(days=1))
        await create_advertisement(title="Header", placement="header")

        response = await client.get("/api/advertisements/sidebar")
        assert [ad["title"] for ad in response.json()] == ["Running"]

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_unknown_placement(self, client):
        response = await client.get("/api/advertisements/popup")
        assert response.status_code == 422

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_counters(self, client, create_advertisement):
        advertisement = await create_advertisement()

        await client.post(f"/api/advertisements/{advertisement.id}/impression")
        await client.post(f"/api/advertisements/{advertisement.id}/impression")
        response = await client.post(f"/api/advertisements/{advertisement.id}/click")

        assert response.json() == {"id": advertisement.id, "click_count": 1, "impression_count": 2}

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_counter_on_missing_ad(self, client):
        response = await client.post("/api/advertisements/9999/click")
        assert response.status_code == 404


@pytest.fixture
async def file_session_factory(tmp_path):
    """Sessions on a file-backed database so each one holds its own connection"""
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'counters.db'}",
        poolclass=NullPool,
        connect_args={"timeout": 30},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    await engine.dispose()


class TestConcurrentCounters:
    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_simultaneous_clicks_are_all_counted(self, file_session_factory):
        async with file_session_factory() as session:
            submission = Submission(
                name="Busy Tool",
                category="ai-tools",
                url="https://example.com/busy",
                short_description="A listing that gets a lot of traffic.",
                detailed_description="A listing used to check that simultaneous clicks are all recorded.",
                contact_email="owner@example.com",
                status=SubmissionStatus.APPROVED.value,
            )
            session.add(submission)
            await session.commit()
            submission_id = submission.id

        async def click():
            async with file_session_factory() as session:
                return await track_submission_click(submission_id, db=session)

        responses = await asyncio.gather(*(click() for _ in range(10)))

        assert all(r.url == "https://example.com/busy" for r in responses)
        async with file_session_factory() as session:
            stored = await session.get(Submission, submission_id)
            assert stored.monthly_clicks == 10

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_simultaneous_ad_events_are_all_counted(self, file_session_factory):
        async with file_session_factory() as session:
            advertisement = Advertisement(
                title="Banner",
                description="Managed vector database, free tier available.",
                target_url="https://ads.example.com/banner",
                placement="header",
            )
            session.add(advertisement)
            await session.commit()
            ad_id = advertisement.id

        async def track(handler):
            async with file_session_factory() as session:
                return await handler(ad_id, db=session)

        handlers = [track_advertisement_click] * 4 + [track_advertisement_impression] * 6
        await asyncio.gather(*(track(h) for h in handlers))

        async with file_session_factory() as session:
            stored = await session.get(Advertisement, ad_id)
            assert stored.click_count == 4
            assert stored.impression_count == 6
