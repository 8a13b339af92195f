"""
HotOrNot Backend — Middleware Tests
=====================================

What we test:
    ✅ Rate limiter answers 429 with Retry-After once the window is full
    ✅ Excluded paths are never limited
    ✅ Request IDs are generated or propagated, 429s included
    ✅ Access log carries the route template and image id
"""

import logging

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from hotornot.middleware.logging import RequestLoggingMiddleware, level_for_status
from hotornot.middleware.rate_limit import RateLimitMiddleware
from hotornot.middleware.request_id import RequestIDMiddleware, request_id_var


def build_app(max_requests: int = 2) -> FastAPI:
    app = FastAPI()
    # Same order as create_app(): RequestID wraps the limiter
    app.add_middleware(RateLimitMiddleware, max_requests=max_requests, window=60)
    app.add_middleware(RequestIDMiddleware)

    @app.get("/ping")
    async def ping():
        return {"request_id": request_id_var.get()}

    @app.get("/health")
    async def health():
        return {"status": "healthy"}

    return app


@pytest.fixture
def client():
    transport = ASGITransport(app=build_app())
    return AsyncClient(transport=transport, base_url="http://test")


class TestRateLimit:

    @pytest.mark.asyncio
    async def test_blocks_after_limit(self, client):
        async with client:
            assert (await client.get("/ping")).status_code == 200
            assert (await client.get("/ping")).status_code == 200
            blocked = await client.get("/ping")

        assert blocked.status_code == 429
        assert blocked.json()["error"] == "rate_limit_exceeded"
        assert 1 <= int(blocked.headers["Retry-After"]) <= 61

    @pytest.mark.asyncio
    async def test_rejection_carries_request_id(self, client):
        async with client:
            await client.get("/ping")
            await client.get("/ping")
            blocked = await client.get("/ping", headers={"X-Request-ID": "trace-1"})

        assert blocked.status_code == 429
        assert blocked.headers["X-Request-ID"] == "trace-1"
        assert blocked.json()["request_id"] == "trace-1"

    @pytest.mark.asyncio
    async def test_excluded_paths_not_counted(self, client):
        async with client:
            for _ in range(5):
                assert (await client.get("/health")).status_code == 200
            assert (await client.get("/ping")).status_code == 200


class TestRequestID:

    @pytest.mark.asyncio
    async def test_generates_id(self, client):
        async with client:
            response = await client.get("/ping")

        rid = response.headers["X-Request-ID"]
        assert len(rid) == 8
        assert response.json()["request_id"] == rid

    @pytest.mark.asyncio
    async def test_propagates_client_id(self, client):
        async with client:
            response = await client.get("/ping", headers={"X-Request-ID": "abc-123"})

        assert response.headers["X-Request-ID"] == "abc-123"
        assert response.json()["request_id"] == "abc-123"


class TestAccessLog:

    @pytest.fixture
    def logged_client(self):
        app = FastAPI()
        app.add_middleware(RequestLoggingMiddleware)
        app.add_middleware(RequestIDMiddleware)

        @app.post("/api/vote/{image_id}")
        async def vote(image_id: int):
            return {"success": True}

        @app.get("/health")
        async def health():
            return {"status": "healthy"}

        transport = ASGITransport(app=app)
        return AsyncClient(transport=transport, base_url="http://test")

    @pytest.mark.asyncio
    async def test_logs_route_and_image_id(self, logged_client, caplog):
        caplog.set_level(logging.INFO, logger="hotornot.access")

        async with logged_client:
            await logged_client.post("/api/vote/42", headers={"X-Request-ID": "abc"})

        records = [r for r in caplog.records if r.name == "hotornot.access"]
        assert len(records) == 1
        record = records[0]
        assert record.route == "/api/vote/{image_id}"
        assert record.image_id == "42"
        assert record.request_id == "abc"
        assert "image=42" in record.getMessage()

    @pytest.mark.asyncio
    async def test_health_not_logged(self, logged_client, caplog):
        caplog.set_level(logging.INFO, logger="hotornot.access")

        async with logged_client:
            await logged_client.get("/health")

        assert not [r for r in caplog.records if r.name == "hotornot.access"]

    @pytest.mark.parametrize(
        "status, level",
        [(200, logging.INFO), (404, logging.WARNING), (429, logging.WARNING), (500, logging.ERROR)],
    )
    def test_level_for_status(self, status, level):
        assert level_for_status(status) == level
