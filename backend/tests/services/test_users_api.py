"""User API tests — Clerk-keyed additional fields and profile sync.

Invariants:
    - Unknown Clerk ids → 404 "User not found"
    - Additional fields fall back to defaults (prefer-not-to-say, en, light)
    - Every payload is mirrored under `user`
"""

import pytest

from app.models.user import User


@pytest.fixture
async def clerk_user(test_db):
    user = User(clerk_id="user_123", email="carol@example.com", username="carol")
    test_db.add(user)
    await test_db.commit()
    return user


async def test_unknown_clerk_id(client):
    resp = await client.get("/api/users/additional-fields/user_missing")
    assert resp.status_code == 404
    assert resp.json()["message"] == "User not found"


async def test_additional_fields_defaults(client, clerk_user):
    resp = await client.get("/api/users/additional-fields/user_123")
    assert resp.json()["user"] == {
        "country": "", "state": "", "age": None,
        "gender": "prefer-not-to-say", "preferredLanguage": "en", "theme": "light",
    }


async def test_update_additional_fields(client, clerk_user):
    resp = await client.put("/api/users/additional-fields/user_123", json={
        "country": "ES", "age": 41, "preferredLanguage": "es", "theme": "dark",
    })
    assert resp.json()["message"] == "Additional fields updated successfully"
    fields = resp.json()["data"]
    assert fields["country"] == "ES"
    assert fields["theme"] == "dark"
    assert fields["gender"] == "prefer-not-to-say"


async def test_update_additional_fields_validates_age(client, clerk_user):
    resp = await client.put("/api/users/additional-fields/user_123", json={"age": 0})
    assert resp.status_code == 400


async def test_update_clerk_profile(client, clerk_user):
    resp = await client.put("/api/users/clerk-profile/user_123", json={
        "firstName": "Carol", "email": "CAROL@NEW.COM", "imageUrl": "https://img/c.png",
    })
    user = resp.json()["user"]
    assert user["firstName"] == "Carol"
    assert user["email"] == "carol@new.com"
    assert user["avatar"] == "https://img/c.png"


async def test_debug_user(client, clerk_user):
    info = (await client.get("/api/users/debug/user/user_123")).json()["data"]
    assert info["username"] == "carol"
    assert info["totalUsers"] == 1
