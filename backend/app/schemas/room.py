"""Room Schemas — request bodies and serializers for the room/call API.

Invariants:
    - Room creation payloads are validated by core.room_rules (field messages kept verbatim)
    - Join/leave/end/pause/resume bodies always carry the acting userId
    - socketId is optional everywhere: REST-only clients never join a socket channel
"""

from pydantic import Field, field_validator

from app.models.room import Room, RoomParticipant
from app.schemas import CamelModel, iso


class ParticipantIn(CamelModel):
    user_id: str = Field(min_length=1, max_length=128)
    username: str = Field(min_length=2, max_length=50)
    user_language: str = Field(min_length=2, max_length=10)
    target_language: str = Field(min_length=2, max_length=10)
    socket_id: str | None = None

    @field_validator("username")
    @classmethod
    def strip_username(cls, v: str) -> str:
        v = v.strip()
        if len(v) < 2:
            raise ValueError("username must be at least 2 characters")
        return v


class RoomUserAction(CamelModel):
    """Body of leave/end/pause/resume/delete."""
    user_id: str = Field(min_length=1)
    socket_id: str | None = None


class RoomSettingsUpdate(CamelModel):
    user_id: str = Field(min_length=1)
    settings: dict


def serialize_participant(p: RoomParticipant) -> dict:
    return {
        "userId": p.user_id,
        "username": p.username,
        "userLanguage": p.user_language,
        "targetLanguage": p.target_language,
        "joinedAt": iso(p.joined_at),
        "isActive": p.is_active,
        "leftAt": iso(p.left_at),
    }


def serialize_room(room: Room) -> dict:
    return {
        "id": str(room.id),
        "roomId": room.room_id,
        "creator": room.creator_dict(),
        "participants": [serialize_participant(p) for p in room.participants],
        "participantCount": room.participant_count,
        "status": room.status,
        "settings": room.settings,
        "metadata": {
            "callDuration": room.call_duration,
            "totalMessages": room.total_messages,
            "totalTranslations": room.total_translations,
            "startTime": iso(room.start_time),
            "endTime": iso(room.end_time),
        },
        "isActive": room.is_active,
        "createdAt": iso(room.created_at),
        "updatedAt": iso(room.updated_at),
    }
