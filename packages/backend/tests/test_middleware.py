"""Tests for request ID and CORS middleware."""

import asyncio

import pytest

from conftest import wait_for_subscribers


@pytest.mark.asyncio
async def test_request_id_generated(client):
    """Each request gets a unique X-Request-ID header."""
    r1 = await client.get("/api/health")
    r2 = await client.get("/api/health")
    assert "X-Request-ID" in r1.headers
    assert "X-Request-ID" in r2.headers
    assert r1.headers["X-Request-ID"] != r2.headers["X-Request-ID"]


@pytest.mark.asyncio
async def test_request_id_propagated(client):
    """Incoming X-Request-ID is propagated through the response."""
    r = await client.get("/api/health", headers={"X-Request-ID": "trace-12345"})
    assert r.headers["X-Request-ID"] == "trace-12345"


@pytest.mark.asyncio
async def test_request_id_on_event_stream(client, hub):
    """Streaming responses carry the request ID too."""
    request = asyncio.create_task(
        client.get("/api/public/events", headers={"X-Request-ID": "stream-1"})
    )
    await wait_for_subscribers(hub, 1)
    await hub.aclose()
    r = await asyncio.wait_for(request, 5)
    assert r.headers["X-Request-ID"] == "stream-1"


@pytest.mark.asyncio
async def test_cors_allows_dashboard_origin_with_credentials(client):
    r = await client.get("/api/health", headers={"Origin": "http://localhost:5173"})
    assert r.headers["access-control-allow-origin"] == "http://localhost:5173"
    assert r.headers["access-control-allow-credentials"] == "true"
