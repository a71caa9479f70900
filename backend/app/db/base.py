"""SQLAlchemy Declarative Base — shared base class and timestamp mixin for all ORM models.

Invariants:
    - All models inherit from Base
    - Base is the single source of truth for table metadata
    - created_at / updated_at are timezone-aware UTC; updated_at bumps on every UPDATE

Design Decisions:
    - Separate file for Base: avoids circular imports between models (ADR: SQLAlchemy best practice)
    - Timestamps as a mixin: every collection carried createdAt/updatedAt in the document store
"""

from datetime import datetime, timezone

from sqlalchemy import DateTime
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    """Base class for all translator ORM models."""
    pass


class TimestampMixin:
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow,
    )
