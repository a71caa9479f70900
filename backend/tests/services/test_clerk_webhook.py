"""Clerk webhook tests — Svix signature checks and user sync.

Invariants:
    - Unsigned, stale or tampered deliveries never touch the database
    - user.created creates, user.updated updates, user.deleted hard-deletes
    - Unknown event types are acknowledged with 200
"""

import json
import time

import pytest

from app.core.errors import AuthenticationError, ServiceUnavailableError
from app.infrastructure.clerk_client import sign_svix_payload, verify_svix_signature

from tests.services.fakes import WEBHOOK_SECRET


def _clerk_user(**overrides) -> dict:
    user = {
        "id": "user_abc",
        "username": None,
        "first_name": "Dana",
        "last_name": "Lee",
        "image_url": "https://img/d.png",
        "primary_email_address_id": "em_1",
        "email_addresses": [
            {"id": "em_0", "email_address": "old@example.com"},
            {"id": "em_1", "email_address": "Dana.Lee@Example.com"},
        ],
        "phone_numbers": [{"phone_number": "+15550100"}],
    }
    user.update(overrides)
    return user


def _signed(event, secret: str = WEBHOOK_SECRET, timestamp: int | None = None):
    body = json.dumps(event).encode()
    ts = str(timestamp if timestamp is not None else int(time.time()))
    headers = {
        "svix-id": "msg_1",
        "svix-timestamp": ts,
        "svix-signature": f"v1,{sign_svix_payload(secret, 'msg_1', ts, body)}",
        "content-type": "application/json",
    }
    return body, headers


# -- signature ----------------------------------------------------------------

def test_signature_accepts_any_v1_entry():
    body = b'{"type":"ping"}'
    sig = sign_svix_payload(WEBHOOK_SECRET, "m", "1000", body)
    headers = {"svix-id": "m", "svix-timestamp": "1000", "svix-signature": f"v1,bogus v1,{sig}"}
    verify_svix_signature(WEBHOOK_SECRET, headers, body, now=1000)


def test_signature_rejects_stale_timestamp():
    body = b"{}"
    sig = sign_svix_payload(WEBHOOK_SECRET, "m", "1000", body)
    headers = {"svix-id": "m", "svix-timestamp": "1000", "svix-signature": f"v1,{sig}"}
    with pytest.raises(AuthenticationError) as exc:
        verify_svix_signature(WEBHOOK_SECRET, headers, body, now=1000 + 301)
    assert exc.value.message == "Webhook timestamp too old"



def test_malformed_secret_is_a_configuration_error():
    headers = {"svix-id": "m", "svix-timestamp": "1000", "svix-signature": "v1,AAAA"}
    with pytest.raises(ServiceUnavailableError):
        verify_svix_signature("whsec_not%base64!", headers, b"{}", now=1000)

# -- webhook route ------------------------------------------------------------

async def test_user_created_then_updated(client):
    body, headers = _signed({"type": "user.created", "data": _clerk_user()})
    resp = await client.post("/api/webhooks/clerk", content=body, headers=headers)
    assert resp.status_code == 200
    assert resp.json()["message"] == "Processed user.created"

    fields = (await client.get("/api/users/debug/user/user_abc")).json()["data"]
    assert fields["email"] == "dana.lee@example.com"
    assert fields["username"] == "dana.lee"

    body, headers = _signed({"type": "user.updated", "data": _clerk_user(username="dana")})
    await client.post("/api/clerk/webhook", content=body, headers=headers)
    fields = (await client.get("/api/users/debug/user/user_abc")).json()["data"]
    assert fields["username"] == "dana"
    assert fields["totalUsers"] == 1


async def test_user_deleted(client):
    body, headers = _signed({"type": "user.created", "data": _clerk_user()})
    await client.post("/api/webhooks/clerk", content=body, headers=headers)

    body, headers = _signed({"type": "user.deleted", "data": {"id": "user_abc"}})
    resp = await client.post("/api/webhooks/clerk", content=body, headers=headers)
    assert resp.json()["data"] == {"deleted": True}
    assert (await client.get("/api/users/debug/user/user_abc")).status_code == 404


async def test_unknown_event_acknowledged(client):
    body, headers = _signed({"type": "session.created", "data": {}})
    resp = await client.post("/api/webhooks/clerk", content=body, headers=headers)
    assert resp.status_code == 200
    assert resp.json()["message"] == "Ignored session.created"


async def test_bad_signature_rejected(client):
    body, headers = _signed({"type": "user.created", "data": _clerk_user()})
    headers["svix-signature"] = "v1,AAAA"
    resp = await client.post("/api/webhooks/clerk", content=body, headers=headers)
    assert resp.status_code == 401
    assert (await client.get("/api/users/debug/user/user_abc")).status_code == 404


async def test_missing_headers(client):
    resp = await client.post("/api/webhooks/clerk", json={"type": "user.created"})
    assert resp.status_code == 400
    assert resp.json()["message"] == "Missing svix headers"


async def test_sync_user_from_clerk_api(client, clerk):
    clerk.users["user_abc"] = _clerk_user()
    resp = await client.post("/api/clerk/sync-user/user_abc")
    assert resp.json()["user"]["email"] == "dana.lee@example.com"
    assert (await client.post("/api/clerk/sync-user/user_zzz")).status_code == 404


@pytest.mark.parametrize("event", [["user.created"], "user.created", {"type": "user.created", "data": [1]}])
async def test_signed_non_object_payload_is_400(client, event):
    body, headers = _signed(event)
    resp = await client.post("/api/webhooks/clerk", content=body, headers=headers)
    assert resp.status_code == 400
    assert resp.json()["message"] == "Invalid webhook payload"


async def test_malformed_secret_answers_503(client, test_settings):
    test_settings.clerk_webhook_secret = "whsec_not%base64!"
    body, headers = _signed({"type": "user.created", "data": _clerk_user()})
    resp = await client.post("/api/webhooks/clerk", content=body, headers=headers)
    assert resp.status_code == 503
    assert resp.json()["error"]["code"] == "SERVICE_UNAVAILABLE"
