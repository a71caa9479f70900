"""Firebase Auth API tests — token-gated profile of the signed-in user.

Invariants:
    - First authenticated request creates the local user (email lowercased,
      username from the email prefix, names split from the display name)
    - Deactivated accounts are rejected with 401
    - /user/{uid} hides private fields from everyone but the owner
"""


async def test_me_creates_user(client, auth_headers):
    resp = await client.get("/api/firebase-auth/me", headers=auth_headers)
    assert resp.status_code == 200
    user = resp.json()["user"]
    assert user["email"] == "alice@example.com"
    assert user["username"] == "alice"
    assert (user["firstName"], user["lastName"]) == ("Alice", "Smith")
    assert user["role"] == "user"


async def test_invalid_token(client):
    resp = await client.get("/api/firebase-auth/me", headers={"Authorization": "Bearer nope"})
    assert resp.status_code == 401
    assert resp.json()["error"]["code"] == "INVALID_TOKEN"


async def test_missing_token(client):
    resp = await client.get("/api/firebase-auth/me")
    assert resp.status_code == 401
    assert resp.json()["error"]["code"] == "TOKEN_REQUIRED"


async def test_update_profile_merges_settings(client, auth_headers):
    resp = await client.put("/api/firebase-auth/profile", headers=auth_headers, json={
        "country": "IN", "age": 30, "settings": {"theme": "dark"}, "role": "admin",
    })
    user = resp.json()["user"]
    assert user["country"] == "IN"
    assert user["age"] == 30
    assert user["settings"]["theme"] == "dark"
    assert user["role"] == "user"


async def test_update_profile_without_fields(client, auth_headers):
    resp = await client.put("/api/firebase-auth/profile", headers=auth_headers, json={"role": "admin"})
    assert resp.status_code == 400
    assert resp.json()["message"] == "No valid fields to update"


async def test_delete_account_is_soft(client, auth_headers):
    resp = await client.delete("/api/firebase-auth/account", headers=auth_headers)
    assert resp.json()["message"] == "Account deactivated successfully"

    again = await client.get("/api/firebase-auth/me", headers=auth_headers)
    assert again.status_code == 401
    assert again.json()["error"]["code"] == "ACCOUNT_INACTIVE"
    assert (await client.get("/api/firebase-auth/user/fb-user-1")).status_code == 404


async def test_public_profile_hides_private_fields(client, auth_headers, verifier):
    await client.get("/api/firebase-auth/me", headers=auth_headers)

    anonymous = (await client.get("/api/firebase-auth/user/fb-user-1")).json()["user"]
    assert "email" not in anonymous
    assert anonymous["username"] == "alice"

    owner = (await client.get("/api/firebase-auth/user/fb-user-1", headers=auth_headers)).json()["user"]
    assert owner["email"] == "alice@example.com"

    verifier.add("bob-token", uid="fb-user-2", email="bob@example.com")
    other = await client.get(
        "/api/firebase-auth/user/fb-user-1", headers={"Authorization": "Bearer bob-token"},
    )
    assert "email" not in other.json()["user"]


async def test_existing_email_is_linked(client, verifier):
    verifier.add("t1", uid="uid-a", email="shared@example.com")
    verifier.add("t2", uid="uid-b", email="Shared@Example.com")
    first = (await client.get("/api/firebase-auth/me", headers={"Authorization": "Bearer t1"})).json()["user"]
    second = (await client.get("/api/firebase-auth/me", headers={"Authorization": "Bearer t2"})).json()["user"]
    assert first["id"] == second["id"]
    assert second["firebaseUid"] == "uid-b"
