"""CountryCode ORM — international dialing codes (master data).

Invariants:
    - country_code stored uppercase, unique
    - dialing_code matches ^\\+[1-9]\\d{0,3}$ and may be shared (+1: US, CA)
"""

import uuid

from sqlalchemy import String, Boolean
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import UUID

from app.db.base import Base, TimestampMixin


class CountryCode(TimestampMixin, Base):
    __tablename__ = "country_codes"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    country: Mapped[str] = mapped_column(String(100), nullable=False)
    country_code: Mapped[str] = mapped_column(String(3), unique=True, nullable=False, index=True)
    dialing_code: Mapped[str] = mapped_column(String(5), nullable=False, index=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
