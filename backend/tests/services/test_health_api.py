"""Health & overview tests — liveness, readiness, detailed checks, API index.

Invariants:
    - Liveness answers 200 regardless of dependencies
    - Detailed health is 503 as soon as one check is unhealthy
"""

import app.api.routes.health as health


async def test_liveness(client):
    resp = await client.get("/api/v1/health/")
    assert resp.json()["service"] == "voice-translator-api"

    api = (await client.get("/api/health")).json()
    assert api["status"] == "healthy"
    assert api["uptime"] >= 0


async def test_readiness(client):
    resp = await client.get("/api/v1/health/ready")
    assert resp.status_code == 200
    assert resp.json()["checks"]["database"] == "healthy"


async def test_detailed_health(client, monkeypatch):
    monkeypatch.setattr(health, "rss_megabytes", lambda: 128.0)
    resp = await client.get("/api/health/detailed")
    body = resp.json()
    assert resp.status_code == 200
    assert body["checks"]["gemini"]["model"] == "gemini-test"
    assert body["checks"]["socket"]["status"] == "healthy"


async def test_detailed_health_unhealthy(client, gemini, monkeypatch):
    monkeypatch.setattr(health, "rss_megabytes", lambda: 128.0)
    gemini.is_configured = False
    resp = await client.get("/api/health/detailed")
    assert resp.status_code == 503
    assert resp.json()["checks"]["gemini"]["status"] == "unhealthy"


async def test_security_headers_present(client):
    resp = await client.get("/api/health")
    assert resp.headers["x-frame-options"] == "SAMEORIGIN"
    assert resp.headers["x-content-type-options"] == "nosniff"


async def test_unknown_route_envelope(client):
    resp = await client.get("/api/nope")
    assert resp.status_code == 404
    assert resp.json()["message"] == "Route /api/nope not found"


async def test_overview_and_socket_stats(client, sockets):
    index = (await client.get("/api")).json()
    assert index["success"] is True

    sockets.register_connection("sid-1")
    sockets.identify("sid-1", "u1", "Alice")
    users = (await client.get("/api/socket/users")).json()
    assert users["count"] == 1

    status = (await client.get("/api/gemini/status")).json()
    assert status["success"] is True
