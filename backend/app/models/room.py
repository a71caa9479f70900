"""Room ORM — voice-call rooms and their participants.

Invariants:
    - room_id is the public, unique room code (3-50 chars, [a-zA-Z0-9_-])
    - status ∈ {active, paused, ended}; is_active is the soft-delete flag
    - (room, user_id) unique: re-joining reactivates the existing participant row
    - participant_count counts only active participants

Design Decisions:
    - Participants as child rows, not a JSON array: participant search and
      "rooms by participant" become indexed queries
    - settings as JSON: clients merge arbitrary flags (ADR: shallow merge on update)
    - Creator denormalized onto the room: endRoom authorization needs no join
"""

import uuid
from datetime import datetime

from sqlalchemy import (
    String, Integer, Boolean, DateTime, JSON, ForeignKey, UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import UUID

from app.core.room_rules import DEFAULT_ROOM_SETTINGS
from app.db.base import Base, TimestampMixin, utcnow


class Room(TimestampMixin, Base):
    """Voice-call room — owns its participants."""
    __tablename__ = "rooms"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    room_id: Mapped[str] = mapped_column(
        String(50), nullable=False, unique=True, index=True,
    )
    creator_user_id: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    creator_username: Mapped[str] = mapped_column(String(50), nullable=False)
    creator_user_language: Mapped[str] = mapped_column(String(10), nullable=False)
    creator_target_language: Mapped[str] = mapped_column(String(10), nullable=False)
    status: Mapped[str] = mapped_column(
        String(10), nullable=False, default="active", index=True,
    )
    settings: Mapped[dict] = mapped_column(
        JSON, nullable=False, default=lambda: dict(DEFAULT_ROOM_SETTINGS),
    )
    call_duration: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    total_messages: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    total_translations: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    start_time: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow,
    )
    end_time: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True, index=True,
    )

    participants: Mapped[list["RoomParticipant"]] = relationship(
        "RoomParticipant", back_populates="room",
        cascade="all, delete-orphan", lazy="selectin",
        order_by="RoomParticipant.joined_at",
    )

    @property
    def active_participants(self) -> list["RoomParticipant"]:
        return [p for p in self.participants if p.is_active]

    @property
    def participant_count(self) -> int:
        return len(self.active_participants)

    def find_participant(self, user_id: str) -> "RoomParticipant | None":
        return next((p for p in self.participants if p.user_id == user_id), None)

    def creator_dict(self) -> dict:
        return {
            "userId": self.creator_user_id,
            "username": self.creator_username,
            "userLanguage": self.creator_user_language,
            "targetLanguage": self.creator_target_language,
        }


class RoomParticipant(Base):
    """A user's membership in a room, with its language pair."""
    __tablename__ = "room_participants"
    __table_args__ = (
        UniqueConstraint("room_pk", "user_id", name="uq_room_participant"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    room_pk: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("rooms.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    user_id: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    username: Mapped[str] = mapped_column(String(50), nullable=False)
    user_language: Mapped[str] = mapped_column(String(10), nullable=False)
    target_language: Mapped[str] = mapped_column(String(10), nullable=False)
    joined_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow,
    )
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    left_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )

    room: Mapped["Room"] = relationship("Room", back_populates="participants")
