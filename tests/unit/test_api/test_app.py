"""Unit tests for the feed HTTP API."""

from collections.abc import AsyncIterator
from typing import Any

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from src.api.app import create_app
from src.feed import orchestrator as orchestrator_module
from src.settings import FeedSettings
from src.store.memory import InMemoryFeedStore
from tests.helpers.rows import make_news_row, make_thread_row


def _make_store() -> InMemoryFeedStore:
    """Create a small store with threads and news."""
    return InMemoryFeedStore(
        threads=[
            make_thread_row(f"t{i}", hours_ago=i, author_id=f"a{i}") for i in range(6)
        ],
        news=[make_news_row(i, hours_ago=i) for i in range(1, 4)],
    )


@pytest_asyncio.fixture
async def client() -> AsyncIterator[AsyncClient]:
    """Async HTTP client bound to an app over the small store."""
    app = create_app(_make_store(), FeedSettings(fetch_workers=1))
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


class TestHealth:
    """Tests for GET /health."""

    @pytest.mark.asyncio
    async def test_health(self, client: AsyncClient) -> None:
        """Liveness check reports healthy."""
        response = await client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "healthy"}


class TestFeedHome:
    """Tests for GET /api/feed/home."""

    @pytest.mark.asyncio
    async def test_default_page(self, client: AsyncClient) -> None:
        """The endpoint serves a camelCase page."""
        response = await client.get("/api/feed/home")
        assert response.status_code == 200

        data = response.json()
        assert data["success"] is True
        assert data["page"] == 1
        assert data["limit"] == 20
        assert data["filter"] == "all"
        assert "hasMore" in data
        assert "nextCursor" in data
        assert len(data["items"]) > 0

    @pytest.mark.asyncio
    async def test_lenient_query(self, client: AsyncClient) -> None:
        """Bad values fall back instead of failing validation."""
        response = await client.get(
            "/api/feed/home",
            params={
                "page": "zero",
                "limit": "999",
                "filter": "bogus",
                "cursor": "!!",
            },
        )
        assert response.status_code == 200
        data = response.json()
        assert data["page"] == 1
        assert data["limit"] == 30
        assert data["filter"] == "all"

    @pytest.mark.asyncio
    async def test_news_filter(self, client: AsyncClient) -> None:
        """Single-type filters reach the orchestrator."""
        response = await client.get("/api/feed/home", params={"filter": "news"})
        items = response.json()["items"]
        assert [i["id"] for i in items] == ["news-1", "news-2", "news-3"]

    @pytest.mark.asyncio
    async def test_request_id_header(self, client: AsyncClient) -> None:
        """A supplied request id is echoed back."""
        response = await client.get(
            "/api/feed/home", headers={"X-Request-ID": "req-abc"}
        )
        assert response.headers["X-Request-ID"] == "req-abc"
        assert "X-Process-Time-Ms" in response.headers

    @pytest.mark.asyncio
    async def test_generated_request_id(self, client: AsyncClient) -> None:
        """A request id is generated when none is supplied."""
        response = await client.get("/health")
        assert response.headers["X-Request-ID"]

    @pytest.mark.asyncio
    async def test_internal_error(
        self, client: AsyncClient, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Unexpected failures return the generic 500 body."""

        def _boom(*args: Any, **kwargs: Any) -> Any:
            msg = "builder exploded"
            raise RuntimeError(msg)

        monkeypatch.setattr(orchestrator_module, "build_thread_item", _boom)
        response = await client.get("/api/feed/home")
        assert response.status_code == 500
        assert response.json() == {"success": False, "error": "Internal server error"}
