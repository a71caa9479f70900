"""Room API tests — lifecycle over REST with socket side effects.

Invariants:
    - Room ids are unique; creation answers 201 with the serialized room
    - Only the creator may end, pause, resume, reconfigure or delete a room
    - The last participant leaving ends the room
    - Socket events go to the room channel, only for sockets the manager knows
"""

import pytest


def _creator(user_id: str = "u1", username: str = "Alice") -> dict:
    return {
        "userId": user_id, "username": username,
        "userLanguage": "en", "targetLanguage": "es",
    }


async def _create(client, room_id: str = "room-1", **extra) -> dict:
    resp = await client.post("/api/rooms", json={
        "roomId": room_id, "creator": _creator(), **extra,
    })
    assert resp.status_code == 201, resp.text
    return resp.json()["data"]


async def _join(client, room_id: str, user_id: str = "u2", username: str = "Bob"):
    return await client.post(f"/api/rooms/{room_id}/join", json={
        "userId": user_id, "username": username,
        "userLanguage": "es", "targetLanguage": "en",
    })


# -- create -------------------------------------------------------------------

async def test_create_room(client):
    room = await _create(client)
    assert room["roomId"] == "room-1"
    assert room["status"] == "active"
    assert room["participantCount"] == 1
    assert room["settings"]["maxParticipants"] == 10
    assert room["creator"]["username"] == "Alice"


async def test_create_duplicate_is_conflict(client):
    await _create(client)
    resp = await client.post("/api/rooms", json={"roomId": "room-1", "creator": _creator()})
    assert resp.status_code == 409
    assert resp.json()["message"] == "Room ID already exists"


async def test_create_invalid_lists_every_error(client):
    resp = await client.post("/api/rooms", json={"roomId": "x"})
    assert resp.status_code == 400
    details = resp.json()["error"]["details"]
    assert "Room ID must be between 3 and 50 characters" in details
    assert "Creator information is required" in details


@pytest.mark.parametrize("creator,message", [
    ({"userId": "u1", "username": "A", "userLanguage": "en", "targetLanguage": "es"},
     "Username must be between 2 and 50 characters"),
    ("alice", "Creator information is required"),
    ({"userId": "u" * 200, "username": "Alice", "userLanguage": "en", "targetLanguage": "es"},
     None),
])
async def test_create_malformed_creator_is_400(client, creator, message):
    resp = await client.post("/api/rooms", json={"roomId": "room-1", "creator": creator})
    assert resp.status_code == 400
    body = resp.json()
    assert body["error"]["code"] == "VALIDATION_ERROR"
    if message:
        assert message in body["error"]["details"]


async def test_validate_endpoint_malformed_creator(client):
    resp = await client.post("/api/rooms/validate", json={"roomId": "ok-room", "creator": "alice"})
    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data["isValid"] is False
    assert "Creator information is required" in data["errors"]


async def test_create_with_socket_joins_channel(client, sockets, fake_sio):
    sockets.register_connection("sid-1")
    await _create(client, socketId="sid-1")

    assert fake_sio.entered == [("sid-1", "room-1")]
    created = fake_sio.events("room-created")
    assert len(created) == 1
    assert created[0]["room"] == "room-1"
    assert fake_sio.events("user-joined")[0]["data"]["isCreator"] is True


async def test_create_without_socket_emits_nothing(client, fake_sio):
    await _create(client)
    assert fake_sio.emitted == []


async def test_validate_endpoint(client):
    resp = await client.post("/api/rooms/validate", json={"roomId": "ok-room", "creator": _creator()})
    assert resp.json()["data"] == {"isValid": True, "errors": []}


# -- join / leave -------------------------------------------------------------

async def test_join_and_participant_lookup(client, fake_sio):
    await _create(client)
    resp = await _join(client, "room-1")
    assert resp.status_code == 200
    assert resp.json()["message"] == "Joined room successfully"
    assert resp.json()["data"]["participantCount"] == 2
    assert fake_sio.events("room-joined")[0]["data"]["message"] == "Bob joined the room"

    rooms = (await client.get("/api/rooms/participant/u2")).json()["data"]
    assert [r["roomId"] for r in rooms] == ["room-1"]


async def test_join_full_room_rejected(client):
    await _create(client, settings={"maxParticipants": 2})
    assert (await _join(client, "room-1", "u2")).status_code == 200
    resp = await _join(client, "room-1", "u3", "Carol")
    assert resp.status_code == 400
    assert resp.json()["message"] == "Room full"


async def test_rejoin_active_participant_allowed_when_full(client):
    await _create(client, settings={"maxParticipants": 2})
    await _join(client, "room-1", "u2")
    resp = await _join(client, "room-1", "u2")
    assert resp.status_code == 200
    assert resp.json()["data"]["participantCount"] == 2


async def test_last_leave_ends_room(client, fake_sio):
    await _create(client)
    resp = await client.post("/api/rooms/room-1/leave", json={"userId": "u1"})
    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data["status"] == "ended"
    assert data["isActive"] is False
    assert fake_sio.events("call-ended")[0]["data"]["message"] == "Room ended due to no participants"

    assert (await client.get("/api/rooms/room-1")).status_code == 404


# -- creator-only actions -----------------------------------------------------

async def test_end_by_non_creator_forbidden(client):
    await _create(client)
    resp = await client.post("/api/rooms/room-1/end", json={"userId": "u2"})
    assert resp.status_code == 403


async def test_end_room(client, fake_sio):
    await _create(client)
    await _join(client, "room-1")
    resp = await client.post("/api/rooms/room-1/end", json={"userId": "u1"})
    data = resp.json()["data"]
    assert data["status"] == "ended"
    assert data["participantCount"] == 0
    assert data["metadata"]["endTime"] is not None
    assert fake_sio.events("call-ended")[0]["data"]["message"] == "Alice ended the call"


async def test_pause_and_resume(client):
    await _create(client)
    paused = await client.post("/api/rooms/room-1/pause", json={"userId": "u1"})
    assert paused.json()["data"]["status"] == "paused"

    blocked = await _join(client, "room-1")
    assert blocked.status_code == 400
    assert blocked.json()["message"] == "Room not active"

    again = await client.post("/api/rooms/room-1/pause", json={"userId": "u1"})
    assert again.status_code == 400

    resumed = await client.post("/api/rooms/room-1/resume", json={"userId": "u1"})
    assert resumed.json()["data"]["status"] == "active"


@pytest.mark.parametrize("value,expected", [(20, 200), (1, 400)])
async def test_update_settings(client, value, expected):
    await _create(client)
    resp = await client.put("/api/rooms/room-1/settings", json={
        "userId": "u1", "settings": {"maxParticipants": value},
    })
    assert resp.status_code == expected
    if expected == 200:
        assert resp.json()["data"]["settings"]["maxParticipants"] == value


async def test_delete_is_soft_and_keeps_id_taken(client):
    await _create(client)
    resp = await client.request("DELETE", "/api/rooms/room-1", json={"userId": "u1"})
    assert resp.json() == {"success": True, "message": "Room deleted successfully"}
    assert (await client.get("/api/rooms/room-1")).status_code == 404

    again = await client.post("/api/rooms", json={"roomId": "room-1", "creator": _creator()})
    assert again.status_code == 409


# -- queries ------------------------------------------------------------------

async def test_search_requires_query(client):
    resp = await client.get("/api/rooms/search")
    assert resp.status_code == 400
    assert resp.json()["message"] == "Search query is required"


async def test_search_and_stats(client):
    await _create(client, "alpha-room")
    await _create(client, "beta-room")
    found = (await client.get("/api/rooms/search", params={"query": "alpha"})).json()["data"]
    assert [r["roomId"] for r in found] == ["alpha-room"]

    await client.post("/api/rooms/beta-room/end", json={"userId": "u1"})
    stats = (await client.get("/api/rooms/stats")).json()["data"]
    assert stats["totalRooms"] == 2
    assert stats["activeRooms"] == 1
    assert stats["endedRooms"] == 1


async def test_rooms_by_creator(client):
    await _create(client)
    rooms = (await client.get("/api/rooms/creator/u1")).json()["data"]
    assert [r["roomId"] for r in rooms] == ["room-1"]
    assert (await client.get("/api/rooms/creator/nobody")).json()["data"] == []
