"""Room Rules — pure validation and lifecycle rules for voice-call rooms.

Invariants:
    - Lifecycle: active ⇄ paused, active|paused → ended; ended is terminal
    - A room never holds more active participants than settings.maxParticipants
    - maxParticipants ∈ [2, 50]; roomId matches ^[a-zA-Z0-9_-]{3,50}$
    - call duration is whole seconds, floor((end - start) / 1s), never negative

Design Decisions:
    - Validation returns a list of human-readable messages (not the first failure):
      the /validate endpoint shows every problem at once
    - Rules take plain values, not ORM rows: testable without a database
"""

import math
import re
from datetime import datetime

from app.core.domain_types import RoomStatus

ROOM_ID_PATTERN = re.compile(r"^[a-zA-Z0-9_-]{3,50}$")
MIN_PARTICIPANTS = 2
MAX_PARTICIPANTS = 50

DEFAULT_ROOM_SETTINGS: dict = {
    "maxParticipants": 10,
    "allowJoinAfterStart": True,
    "autoRecord": False,
    "translationEnabled": True,
}

_TRANSITIONS: dict[RoomStatus, frozenset[RoomStatus]] = {
    RoomStatus.ACTIVE: frozenset({RoomStatus.PAUSED, RoomStatus.ENDED}),
    RoomStatus.PAUSED: frozenset({RoomStatus.ACTIVE, RoomStatus.ENDED}),
    RoomStatus.ENDED: frozenset(),
}


def validate_room_data(data: dict) -> list[str]:
    """Validate a room-creation payload (camelCase keys, as sent by clients)."""
    errors: list[str] = []
    room_id = data.get("roomId") or ""
    if not isinstance(room_id, str) or not 3 <= len(room_id) <= 50:
        errors.append("Room ID must be between 3 and 50 characters")
    elif not ROOM_ID_PATTERN.match(room_id):
        errors.append(
            "Room ID can only contain letters, numbers, hyphens, and underscores",
        )

    creator = data.get("creator")
    if not isinstance(creator, dict):
        creator = {}
    errors.extend(_creator_errors(creator))

    settings = data.get("settings")
    if not isinstance(settings, dict):
        settings = {}
    max_participants = settings.get("maxParticipants")
    if max_participants is not None and not _valid_max_participants(max_participants):
        errors.append("Max participants must be between 2 and 50")
    return errors


def _creator_errors(creator: dict) -> list[str]:
    errors: list[str] = []
    user_id, username = creator.get("userId"), creator.get("username")
    if not isinstance(user_id, str) or not user_id or not username:
        errors.append("Creator information is required")
    elif not isinstance(username, str) or not 2 <= len(username.strip()) <= 50:
        errors.append("Username must be between 2 and 50 characters")

    languages = (creator.get("userLanguage"), creator.get("targetLanguage"))
    if not all(languages):
        errors.append("Creator languages are required")
    elif not all(isinstance(code, str) and 2 <= len(code) <= 10 for code in languages):
        errors.append("Language codes must be between 2 and 10 characters")
    return errors


def _valid_max_participants(value) -> bool:
    return (
        isinstance(value, int) and not isinstance(value, bool)
        and MIN_PARTICIPANTS <= value <= MAX_PARTICIPANTS
    )


def merge_settings(current: dict | None, updates: dict | None) -> dict:
    """Shallow-merge settings over the defaults; rejects an invalid maxParticipants."""
    merged = {**DEFAULT_ROOM_SETTINGS, **(current or {}), **(updates or {})}
    if not _valid_max_participants(merged["maxParticipants"]):
        raise ValueError("Max participants must be between 2 and 50")
    return merged


def join_rejection(status: str, active_count: int, settings: dict | None) -> str | None:
    """Reason a new participant cannot join, or None when joining is allowed."""
    if status != RoomStatus.ACTIVE.value:
        return "Room not active"
    limit = (settings or {}).get("maxParticipants", DEFAULT_ROOM_SETTINGS["maxParticipants"])
    if active_count >= limit:
        return "Room full"
    return None


def can_transition(current: str, target: RoomStatus) -> bool:
    return target in _TRANSITIONS[RoomStatus(current)]


def call_duration_seconds(start: datetime | None, end: datetime) -> int:
    if start is None:
        return 0
    # SQLite round-trips timestamps without tzinfo
    if start.tzinfo is None and end.tzinfo is not None:
        start = start.replace(tzinfo=end.tzinfo)
    return max(0, math.floor((end - start).total_seconds()))
