"""Room Routes — voice-call room lifecycle over REST.

Invariants:
    - Static paths (/search, /stats, /validate, /creator, /participant) are declared
      before /{room_id} so they are never captured as room ids
    - Mutations take the acting userId from the body; ownership is checked in RoomService
    - POST / answers 201 with the serialized room

Design Decisions:
    - Creation payload is a raw dict: room_rules reports every problem at once,
      which a Pydantic model would cut short at the first nested failure
"""

import logging

from fastapi import APIRouter, Body, Depends, Query, status

from app.api.dependencies import get_room_service
from app.api.responses import ok
from app.core.errors import ValidationError
from app.core.room_rules import validate_room_data
from app.schemas.room import (
    ParticipantIn, RoomSettingsUpdate, RoomUserAction, serialize_room,
)
from app.services.room_service import RoomService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/rooms", tags=["rooms"])


@router.post("", status_code=status.HTTP_201_CREATED)
@router.post("/", status_code=status.HTTP_201_CREATED, include_in_schema=False)
async def create_room(
    body: dict = Body(...), rooms: RoomService = Depends(get_room_service),
):
    room = await rooms.create_room(body, body.get("socketId"))
    return ok(serialize_room(room), "Room created successfully")


@router.get("")
@router.get("/", include_in_schema=False)
async def list_active_rooms(rooms: RoomService = Depends(get_room_service)):
    return ok([serialize_room(r) for r in await rooms.get_active_rooms()])


@router.get("/search")
async def search_rooms(
    query: str | None = Query(None), rooms: RoomService = Depends(get_room_service),
):
    if not query or not query.strip():
        raise ValidationError("Search query is required", field="query")
    return ok([serialize_room(r) for r in await rooms.search_rooms(query.strip())])


@router.get("/stats")
async def room_stats(rooms: RoomService = Depends(get_room_service)):
    return ok(await rooms.get_room_stats())


@router.post("/validate")
async def validate_room(body: dict = Body(...)):
    errors = validate_room_data(body)
    return ok({"isValid": not errors, "errors": errors})


@router.get("/creator/{user_id}")
async def rooms_by_creator(user_id: str, rooms: RoomService = Depends(get_room_service)):
    return ok([serialize_room(r) for r in await rooms.get_rooms_by_creator(user_id)])


@router.get("/participant/{user_id}")
async def rooms_by_participant(
    user_id: str, rooms: RoomService = Depends(get_room_service),
):
    return ok([serialize_room(r) for r in await rooms.get_rooms_by_participant(user_id)])


@router.get("/{room_id}")
async def get_room(room_id: str, rooms: RoomService = Depends(get_room_service)):
    return ok(serialize_room(await rooms.get_room(room_id)))


@router.post("/{room_id}/join")
async def join_room(
    room_id: str, body: ParticipantIn, rooms: RoomService = Depends(get_room_service),
):
    room = await rooms.join_room(room_id, body, body.socket_id)
    return ok(serialize_room(room), "Joined room successfully")


@router.post("/{room_id}/leave")
async def leave_room(
    room_id: str, body: RoomUserAction, rooms: RoomService = Depends(get_room_service),
):
    room = await rooms.leave_room(room_id, body.user_id, body.socket_id)
    return ok(serialize_room(room), "Left room successfully")


@router.post("/{room_id}/end")
async def end_room(
    room_id: str, body: RoomUserAction, rooms: RoomService = Depends(get_room_service),
):
    room = await rooms.end_room(room_id, body.user_id)
    return ok(serialize_room(room), "Room ended successfully")


@router.post("/{room_id}/pause")
async def pause_room(
    room_id: str, body: RoomUserAction, rooms: RoomService = Depends(get_room_service),
):
    room = await rooms.pause_room(room_id, body.user_id)
    return ok(serialize_room(room), "Room paused successfully")


@router.post("/{room_id}/resume")
async def resume_room(
    room_id: str, body: RoomUserAction, rooms: RoomService = Depends(get_room_service),
):
    room = await rooms.resume_room(room_id, body.user_id)
    return ok(serialize_room(room), "Room resumed successfully")


@router.put("/{room_id}/settings")
async def update_settings(
    room_id: str, body: RoomSettingsUpdate,
    rooms: RoomService = Depends(get_room_service),
):
    room = await rooms.update_room_settings(room_id, body.user_id, body.settings)
    return ok(serialize_room(room), "Room settings updated successfully")


@router.delete("/{room_id}")
async def delete_room(
    room_id: str, body: RoomUserAction, rooms: RoomService = Depends(get_room_service),
):
    await rooms.delete_room(room_id, body.user_id)
    return ok(message="Room deleted successfully")
