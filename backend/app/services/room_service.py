"""Room Service — room/call lifecycle with best-effort Socket.IO choreography.

Invariants:
    - Creator is always the first participant of a new room
    - Only the creator may end, pause, resume, reconfigure or delete a room
    - A room whose last active participant leaves is ended automatically
    - Ending a room deactivates it and every participant, and records call_duration
    - Socket emits never fail an operation: errors are logged as warnings
    - All DB writes commit before any socket event is emitted

Design Decisions:
    - Service raises TranslatorError subclasses; routes stay free of status mapping
    - Socket channel name == public room_id, so clients join by the code they typed
    - Soft delete (is_active=False) keeps ended rooms for stats (ADR: call history)
"""

import logging

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy import select, func, or_
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.domain_types import RoomStatus, RoomEvent
from app.core.errors import (
    ConflictError, ErrorContext, PermissionDeniedError, ResourceNotFoundError,
    RoomStateError, ValidationError,
)
from app.core.room_rules import (
    DEFAULT_ROOM_SETTINGS, call_duration_seconds, can_transition,
    join_rejection, merge_settings, validate_room_data,
)
from app.db.base import utcnow
from app.infrastructure.socket_manager import SocketManager
from app.models.room import Room, RoomParticipant
from app.schemas.room import ParticipantIn

logger = logging.getLogger(__name__)


class RoomService:
    """Room/call use cases bound to one DB session."""

    def __init__(self, db: AsyncSession, sockets: SocketManager):
        self.db = db
        self.sockets = sockets

    # ─── queries ────────────────────────────────────────────────

    async def get_room(self, room_id: str) -> Room:
        room = await self._find(room_id)
        if room is None:
            raise ResourceNotFoundError("Room", room_id, "Room not found")
        return room

    async def get_active_rooms(self) -> list[Room]:
        result = await self.db.execute(
            select(Room)
            .where(Room.is_active.is_(True), Room.status == RoomStatus.ACTIVE.value)
            .order_by(Room.created_at.desc()),
        )
        return list(result.scalars().all())

    async def get_rooms_by_creator(self, user_id: str) -> list[Room]:
        result = await self.db.execute(
            select(Room)
            .where(Room.creator_user_id == user_id, Room.is_active.is_(True))
            .order_by(Room.created_at.desc()),
        )
        return list(result.scalars().all())

    async def get_rooms_by_participant(self, user_id: str) -> list[Room]:
        member_of = select(RoomParticipant.room_pk).where(
            RoomParticipant.user_id == user_id,
        )
        result = await self.db.execute(
            select(Room)
            .where(Room.id.in_(member_of), Room.is_active.is_(True))
            .order_by(Room.created_at.desc()),
        )
        return list(result.scalars().all())

    async def search_rooms(self, query: str) -> list[Room]:
        named = select(RoomParticipant.room_pk).where(
            RoomParticipant.username.icontains(query, autoescape=True),
        )
        result = await self.db.execute(
            select(Room)
            .where(
                Room.is_active.is_(True),
                or_(
                    Room.room_id.icontains(query, autoescape=True),
                    Room.creator_username.icontains(query, autoescape=True),
                    Room.id.in_(named),
                ),
            )
            .order_by(Room.created_at.desc()),
        )
        return list(result.scalars().all())

    async def get_room_stats(self) -> dict:
        total = await self.db.scalar(select(func.count(Room.id)))
        active = await self.db.scalar(
            select(func.count(Room.id)).where(
                Room.is_active.is_(True), Room.status == RoomStatus.ACTIVE.value,
            ),
        )
        ended = await self.db.scalar(
            select(func.count(Room.id)).where(Room.status == RoomStatus.ENDED.value),
        )
        participants = await self.db.scalar(select(func.count(RoomParticipant.id)))
        avg_duration = await self.db.scalar(
            select(func.avg(Room.call_duration)).where(
                Room.status == RoomStatus.ENDED.value,
            ),
        )
        return {
            "totalRooms": total or 0,
            "activeRooms": active or 0,
            "endedRooms": ended or 0,
            "totalParticipants": participants or 0,
            "avgCallDuration": round(float(avg_duration or 0), 2),
        }

    # ─── lifecycle ──────────────────────────────────────────────

    async def create_room(self, data: dict, socket_id: str | None = None) -> Room:
        errors = validate_room_data(data)
        if errors:
            raise ValidationError("Validation failed", errors=errors)
        try:
            creator = ParticipantIn.model_validate(data["creator"])
        except PydanticValidationError as e:
            details = [
                f"creator.{'.'.join(map(str, err['loc']))}: {err['msg']}"
                for err in e.errors()
            ]
            raise ValidationError("Validation failed", errors=details)
        socket_id = socket_id or creator.socket_id

        if await self._exists(data["roomId"]):
            raise ConflictError("Room ID already exists")

        room = Room(
            room_id=data["roomId"],
            creator_user_id=creator.user_id,
            creator_username=creator.username,
            creator_user_language=creator.user_language,
            creator_target_language=creator.target_language,
            settings={**DEFAULT_ROOM_SETTINGS, **(data.get("settings") or {})},
            participants=[_participant_from(creator)],
        )
        self.db.add(room)
        await self.db.commit()
        logger.info(f"Room created: {room.room_id}", extra={"room_id": room.room_id})

        if socket_id:
            await self._join_channel(socket_id, room.room_id)
            await self._emit(room.room_id, RoomEvent.ROOM_CREATED, {
                "roomId": room.room_id,
                "creator": room.creator_dict(),
                "message": "Room created successfully",
            })
            await self._emit(room.room_id, RoomEvent.USER_JOINED, {
                **_participant_event(creator), "isCreator": True,
            })
        return room

    async def join_room(
        self, room_id: str, participant: ParticipantIn, socket_id: str | None = None,
    ) -> Room:
        room = await self.get_room(room_id)
        existing = room.find_participant(participant.user_id)
        already_in = existing is not None and existing.is_active
        if not already_in:
            reason = join_rejection(room.status, room.participant_count, room.settings)
            if reason:
                raise RoomStateError(reason, room_id)

        now = utcnow()
        if existing is None:
            room.participants.append(_participant_from(participant))
        else:
            existing.username = participant.username
            existing.user_language = participant.user_language
            existing.target_language = participant.target_language
            existing.joined_at = now
            existing.is_active = True
            existing.left_at = None
        await self.db.commit()
        logger.info(
            f"User {participant.user_id} joined room {room_id}",
            extra={"room_id": room_id, "user_id": participant.user_id},
        )

        socket_id = socket_id or participant.socket_id
        if socket_id:
            await self._join_channel(socket_id, room_id)
        await self._emit(room_id, RoomEvent.USER_JOINED, {
            **_participant_event(participant), "isCreator": False,
        })
        await self._emit(room_id, RoomEvent.ROOM_JOINED, {
            "roomId": room_id,
            "joiner": _participant_event(participant),
            "message": f"{participant.username} joined the room",
        })
        return room

    async def leave_room(
        self, room_id: str, user_id: str, socket_id: str | None = None,
    ) -> Room:
        room = await self.get_room(room_id)
        participant = room.find_participant(user_id)
        if participant is not None and participant.is_active:
            participant.is_active = False
            participant.left_at = utcnow()

        auto_end = room.participant_count == 0 and room.status != RoomStatus.ENDED.value
        if auto_end:
            self._finish(room)
        await self.db.commit()

        for sid in ([socket_id] if socket_id else self.sockets.sids_for_user(room_id, user_id)):
            await self._leave_channel(sid, room_id)
        await self._emit(room_id, RoomEvent.USER_LEFT, {
            "userId": user_id,
            "username": participant.username if participant else "Unknown User",
        })
        if auto_end:
            logger.info(f"Room {room_id} ended: no participants left", extra={"room_id": room_id})
            await self._emit(room_id, RoomEvent.CALL_ENDED, {
                "message": "Room ended due to no participants",
            })
        return room

    async def end_room(self, room_id: str, user_id: str) -> Room:
        room = await self._get_owned(room_id, user_id)
        if room.status == RoomStatus.ENDED.value:
            raise RoomStateError("Room already ended", room_id)
        self._finish(room)
        await self.db.commit()
        logger.info(
            f"Room {room_id} ended by creator after {room.call_duration}s",
            extra={"room_id": room_id, "user_id": user_id},
        )

        await self._emit(room_id, RoomEvent.CALL_ENDED, {
            "userId": user_id,
            "username": room.creator_username,
            "message": f"{room.creator_username} ended the call",
        })
        for sid in self.sockets.room_members(room_id):
            await self._leave_channel(sid, room_id)
        return room

    async def pause_room(self, room_id: str, user_id: str) -> Room:
        return await self._transition(room_id, user_id, RoomStatus.PAUSED, RoomEvent.CALL_PAUSED)

    async def resume_room(self, room_id: str, user_id: str) -> Room:
        return await self._transition(room_id, user_id, RoomStatus.ACTIVE, RoomEvent.CALL_RESUMED)

    async def update_room_settings(self, room_id: str, user_id: str, settings: dict) -> Room:
        room = await self._get_owned(room_id, user_id)
        try:
            room.settings = merge_settings(room.settings, settings)
        except ValueError as e:
            raise ValidationError(str(e), field="settings.maxParticipants")
        await self.db.commit()
        await self._emit(room_id, RoomEvent.SETTINGS_UPDATED, {
            "roomId": room_id, "settings": room.settings,
        })
        return room

    async def delete_room(self, room_id: str, user_id: str) -> None:
        room = await self._get_owned(room_id, user_id)
        room.is_active = False
        await self.db.commit()
        logger.info(f"Room {room_id} deleted", extra={"room_id": room_id})

    # ─── helpers ────────────────────────────────────────────────

    async def _find(self, room_id: str) -> Room | None:
        result = await self.db.execute(
            select(Room).where(Room.room_id == room_id, Room.is_active.is_(True)),
        )
        return result.scalar_one_or_none()

    async def _exists(self, room_id: str) -> bool:
        # unique across soft-deleted rooms too
        found = await self.db.scalar(select(Room.id).where(Room.room_id == room_id))
        return found is not None

    async def _get_owned(self, room_id: str, user_id: str) -> Room:
        room = await self.get_room(room_id)
        if room.creator_user_id != user_id:
            raise PermissionDeniedError(
                "Unauthorized", ErrorContext(room_id=room_id, user_id=user_id),
            )
        return room

    async def _transition(
        self, room_id: str, user_id: str, target: RoomStatus, event: RoomEvent,
    ) -> Room:
        room = await self._get_owned(room_id, user_id)
        if not can_transition(room.status, target):
            raise RoomStateError(
                f"Cannot change room from {room.status} to {target.value}", room_id,
            )
        room.status = target.value
        await self.db.commit()
        await self._emit(room_id, event, {
            "roomId": room_id, "status": room.status, "userId": user_id,
        })
        return room

    def _finish(self, room: Room) -> None:
        now = utcnow()
        room.status = RoomStatus.ENDED.value
        room.is_active = False
        room.end_time = now
        room.call_duration = call_duration_seconds(room.start_time, now)
        for p in room.participants:
            if p.is_active:
                p.is_active = False
                p.left_at = now

    async def _emit(self, room_id: str, event: RoomEvent, data: dict) -> None:
        if not self.sockets.is_ready():
            return
        try:
            await self.sockets.broadcast_to_room(room_id, event.value, data)
        except Exception as e:
            logger.warning(
                f"Socket emit {event.value} failed: {e}",
                extra={"room_id": room_id, "event": event.value},
            )

    async def _join_channel(self, sid: str, room_id: str) -> None:
        if not self.sockets.is_ready():
            return
        try:
            await self.sockets.join_user_to_room(sid, room_id)
        except Exception as e:
            logger.warning(f"Socket join failed: {e}", extra={"room_id": room_id, "sid": sid})

    async def _leave_channel(self, sid: str, room_id: str) -> None:
        if not self.sockets.is_ready():
            return
        try:
            await self.sockets.remove_user_from_room(sid, room_id)
        except Exception as e:
            logger.warning(f"Socket leave failed: {e}", extra={"room_id": room_id, "sid": sid})


def _participant_from(p: ParticipantIn) -> RoomParticipant:
    return RoomParticipant(
        user_id=p.user_id,
        username=p.username,
        user_language=p.user_language,
        target_language=p.target_language,
        joined_at=utcnow(),
        is_active=True,
    )


def _participant_event(p: ParticipantIn) -> dict:
    return {
        "userId": p.user_id,
        "username": p.username,
        "userLanguage": p.user_language,
        "targetLanguage": p.target_language,
    }
