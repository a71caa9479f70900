"""ORM Models — SQLAlchemy declarative models for all domain entities.

Invariants:
    - All models inherit from Base (db/base.py)
    - Room is the aggregate root for call state; User for identity and usage

Design Decisions:
    - One file per entity for locality
    - All models imported here so SQLAlchemy resolves string-based relationship()
      references before any query runs (ADR: standard SQLAlchemy pattern)
"""

from app.models.room import Room, RoomParticipant  # noqa: F401
from app.models.user import User  # noqa: F401
from app.models.language import Language  # noqa: F401
from app.models.voice import Voice  # noqa: F401
from app.models.theme import Theme  # noqa: F401
from app.models.gender import Gender  # noqa: F401
from app.models.country import Country  # noqa: F401
from app.models.country_code import CountryCode  # noqa: F401
