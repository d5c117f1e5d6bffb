from unittest.mock import AsyncMock

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine

from tests.support import CLIENT_USER_ID, bearer
from wehoware.web.app import create_app


@pytest.mark.integration
class TestAppFactory:
    async def test_app_creates_successfully(self, app) -> None:
        assert app is not None
        assert app.title == "Wehoware"

    async def test_health_endpoint(self, client: AsyncClient) -> None:
        resp = await client.get("/api/health")
        assert resp.status_code == 200
        assert resp.json() == {"status": "healthy", "database": "connected"}

    async def test_health_degraded_without_database(self) -> None:
        engine = create_async_engine("sqlite+aiosqlite:////nonexistent-dir/wehoware.db")
        app = create_app(engine=engine)
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            resp = await client.get("/api/health")
        await engine.dispose()
        assert resp.status_code == 200
        assert resp.json()["status"] == "degraded"

    async def test_request_id_header(self, client: AsyncClient) -> None:
        resp = await client.get("/api/health")
        assert "x-request-id" in resp.headers

    async def test_request_id_is_echoed(self, client: AsyncClient) -> None:
        resp = await client.get("/api/health", headers={"X-Request-ID": "req-abc"})
        assert resp.headers["x-request-id"] == "req-abc"

    async def test_cors_headers(self, client: AsyncClient) -> None:
        resp = await client.options(
            "/api/health",
            headers={
                "Origin": "http://localhost:3000",
                "Access-Control-Request-Method": "GET",
            },
        )
        assert resp.status_code in (200, 204, 405)

    async def test_404_for_unknown_route(self, client: AsyncClient) -> None:
        resp = await client.get("/api/nonexistent")
        assert resp.status_code == 404

    async def test_unexpected_route_error_is_json_500(self, app) -> None:
        app.state.blog_repo.list_page = AsyncMock(
            side_effect=ConnectionError("db at 10.0.0.5 refused connection")
        )
        transport = ASGITransport(app=app, raise_app_exceptions=False)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            resp = await client.get("/api/v1/blogs", headers=bearer(CLIENT_USER_ID))
        assert resp.status_code == 500
        assert resp.headers["content-type"].startswith("application/json")
        assert resp.json() == {"error": "Internal server error"}
        assert "10.0.0.5" not in resp.text
