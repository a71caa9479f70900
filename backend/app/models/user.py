"""User ORM — application users linked to Firebase and/or Clerk identities.

Invariants:
    - email unique and stored lowercase
    - firebase_uid, clerk_id, username unique when present
    - subscription.usedThisMonth only meaningful for the free plan
    - is_active=False is a soft delete; auth rejects inactive users

Design Decisions:
    - settings / usage_stats / subscription / provider metadata as JSON columns:
      they were nested sub-documents and are always read whole
    - JSON dicts are replaced, never mutated in place: SQLAlchemy only tracks
      reassignment of plain JSON columns
"""

import uuid

from sqlalchemy import String, Integer, Boolean, JSON
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import UUID

from app.db.base import Base, TimestampMixin


def default_settings() -> dict:
    return {
        "theme": "light",
        "notifications": {"email": True, "push": True},
        "privacy": {"profileVisibility": "public"},
    }


def default_usage_stats() -> dict:
    return {
        "totalTranslations": 0,
        "textTranslations": 0,
        "voiceTranslations": 0,
        "documentTranslations": 0,
        "imageTranslations": 0,
        "conversationSessions": 0,
        "voiceCallSessions": 0,
        "lastActivity": None,
    }


def default_subscription() -> dict:
    return {"plan": "free", "monthlyLimit": 1000, "usedThisMonth": 0}


class User(TimestampMixin, Base):
    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    firebase_uid: Mapped[str | None] = mapped_column(
        String(128), unique=True, nullable=True, index=True,
    )
    clerk_id: Mapped[str | None] = mapped_column(
        String(128), unique=True, nullable=True, index=True,
    )
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    username: Mapped[str | None] = mapped_column(String(50), unique=True, nullable=True)
    first_name: Mapped[str | None] = mapped_column(String(50), nullable=True)
    last_name: Mapped[str | None] = mapped_column(String(50), nullable=True)
    avatar: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    phone_number: Mapped[str | None] = mapped_column(String(32), nullable=True)
    age: Mapped[int | None] = mapped_column(Integer, nullable=True)
    gender: Mapped[str | None] = mapped_column(String(32), nullable=True)
    country: Mapped[str | None] = mapped_column(String(100), nullable=True)
    state: Mapped[str | None] = mapped_column(String(100), nullable=True)
    preferred_language: Mapped[str] = mapped_column(String(10), nullable=False, default="en")
    recommended_voice: Mapped[str | None] = mapped_column(String(64), nullable=True)
    role: Mapped[str] = mapped_column(String(20), nullable=False, default="user")
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    settings: Mapped[dict] = mapped_column(JSON, nullable=False, default=default_settings)
    usage_stats: Mapped[dict] = mapped_column(JSON, nullable=False, default=default_usage_stats)
    subscription: Mapped[dict] = mapped_column(JSON, nullable=False, default=default_subscription)
    firebase_metadata: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    clerk_metadata: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)

    @property
    def full_name(self) -> str:
        return " ".join(p for p in (self.first_name, self.last_name) if p)
