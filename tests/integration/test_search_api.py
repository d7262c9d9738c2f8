"""
Integration tests for the search endpoints
"""
from datetime import datetime, timedelta

import pytest
from sqlalchemy import select

from directory_api.database.models import SearchQuery, SubmissionStatus


@pytest.fixture
async def listings(create_submission):
    base = datetime.utcnow() - timedelta(days=365)
    return [
        await create_submission(
            name="ArtGen",
            category="ai-art-generators",
            pricing="free",
            tags=["art", "free"],
            rating=4.6,
            review_count=1500,
            created_at=base,
        ),
        await create_submission(
            name="OpenAI GPT-4",
            category="large-language-models",
            pricing="subscription",
            tags=["llm", "chat"],
            rating=4.8,
            review_count=12000,
            created_at=base + timedelta(days=1),
        ),
        await create_submission(
            name="Hidden Draft",
            category="ai-art-generators",
            pricing="free",
            status=SubmissionStatus.PENDING.value,
        ),
    ]


class TestSearchEndpoint:
    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_envelope(self, client, listings):
        response = await client.get("/api/search", params={"q": "free AI art"})

        assert response.status_code == 200
        data = response.json()
        assert set(data) == {"submissions", "total", "page", "limit", "hasMore", "intent", "metrics"}
        assert data["page"] == 1
        assert data["limit"] == 10
        assert data["hasMore"] is False
        assert data["intent"]["type"] == "free_tools"
        assert data["intent"]["category"] == "ai-art-generators"
        assert data["metrics"]["total_scanned"] == 2

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_best_match_first_with_score(self, client, listings):
        response = await client.get("/api/search", params={"q": "free AI art"})
        submissions = response.json()["submissions"]

        assert submissions[0]["name"] == "ArtGen"
        assert submissions[0]["relevance_score"] > 0
        assert all(s["name"] != "Hidden Draft" for s in submissions)
        assert "contact_email" not in submissions[0]

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_browse_without_query(self, client, listings):
        response = await client.get("/api/search")
        data = response.json()

        assert response.status_code == 200
        assert data["total"] == 2
        assert data["intent"] is None
        assert data["metrics"] is None
        assert [s["relevance_score"] for s in data["submissions"]] == [None, None]
        # higher rating first when nothing is featured or sponsored
        assert data["submissions"][0]["name"] == "OpenAI GPT-4"

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_filters_and_paging(self, client, listings):
        response = await client.get(
            "/api/search", params={"category": "large-language-models", "page": 1, "limit": 1}
        )
        data = response.json()

        assert data["total"] == 1
        assert data["limit"] == 1
        assert data["submissions"][0]["name"] == "OpenAI GPT-4"

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_invalid_paging_is_rejected(self, client):
        assert (await client.get("/api/search", params={"page": 0})).status_code == 422
        assert (await client.get("/api/search", params={"limit": 1000})).status_code == 422
        assert (await client.get("/api/search", params={"min_rating": 6})).status_code == 422

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_queries_are_logged_with_client_ip(self, client, listings, session_factory):
        await client.get(
            "/api/search", params={"q": "gpt"}, headers={"X-Forwarded-For": "203.0.113.9, 10.0.0.1"}
        )

        async with session_factory() as session:
            result = await session.execute(select(SearchQuery))
            logged = result.scalars().all()

        assert len(logged) == 1
        assert logged[0].query == "gpt"
        assert logged[0].user_ip == "203.0.113.9"

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_request_id_header(self, client):
        response = await client.get("/api/search")
        assert response.headers.get("X-Request-ID")

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_request_id_from_proxy_is_kept(self, client):
        kept = await client.get("/api/search", headers={"X-Request-ID": "edge-42"})
        replaced = await client.get("/api/search", headers={"X-Request-ID": "bad id with spaces"})

        assert kept.headers["X-Request-ID"] == "edge-42"
        assert replaced.headers["X-Request-ID"] != "bad id with spaces"


class TestSuggestionsEndpoint:
    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_suggestions(self, client, listings):
        response = await client.get("/api/search/suggestions", params={"q": "gpt"})

        assert response.status_code == 200
        data = response.json()
        assert data["query"] == "gpt"
        assert data["suggestions"][0] == "OpenAI GPT-4"
        assert len(data["suggestions"]) <= 8

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_empty_query(self, client):
        response = await client.get("/api/search/suggestions")
        assert response.json() == {"query": "", "suggestions": []}


class TestServiceEndpoints:
    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_health(self, client):
        response = await client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_root(self, client):
        response = await client.get("/")
        assert response.json()["endpoints"]["search"] == "/api/search"
