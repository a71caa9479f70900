"""Initial schema — rooms, participants, users, languages and master-data catalogs.

Revision ID: 001_initial
Revises: None
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID

revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    ]


def _is_active(index: bool = False) -> sa.Column:
    return sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.true(), index=index)


def upgrade() -> None:
    op.create_table(
        "rooms",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("room_id", sa.String(50), nullable=False, unique=True, index=True),
        sa.Column("creator_user_id", sa.String(128), nullable=False, index=True),
        sa.Column("creator_username", sa.String(50), nullable=False),
        sa.Column("creator_user_language", sa.String(10), nullable=False),
        sa.Column("creator_target_language", sa.String(10), nullable=False),
        sa.Column("status", sa.String(10), nullable=False, server_default="active", index=True),
        sa.Column("settings", sa.JSON, nullable=False),
        sa.Column("call_duration", sa.Integer, nullable=False, server_default="0"),
        sa.Column("total_messages", sa.Integer, nullable=False, server_default="0"),
        sa.Column("total_translations", sa.Integer, nullable=False, server_default="0"),
        sa.Column("start_time", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("end_time", sa.DateTime(timezone=True), nullable=True),
        _is_active(index=True),
        *_timestamps(),
    )

    op.create_table(
        "room_participants",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "room_pk", UUID(as_uuid=True),
            sa.ForeignKey("rooms.id", ondelete="CASCADE"), nullable=False, index=True,
        ),
        sa.Column("user_id", sa.String(128), nullable=False, index=True),
        sa.Column("username", sa.String(50), nullable=False),
        sa.Column("user_language", sa.String(10), nullable=False),
        sa.Column("target_language", sa.String(10), nullable=False),
        sa.Column("joined_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        _is_active(),
        sa.Column("left_at", sa.DateTime(timezone=True), nullable=True),
        sa.UniqueConstraint("room_pk", "user_id", name="uq_room_participant"),
    )

    op.create_table(
        "users",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("firebase_uid", sa.String(128), nullable=True, unique=True, index=True),
        sa.Column("clerk_id", sa.String(128), nullable=True, unique=True, index=True),
        sa.Column("email", sa.String(255), nullable=False, unique=True),
        sa.Column("username", sa.String(50), nullable=True, unique=True),
        sa.Column("first_name", sa.String(50), nullable=True),
        sa.Column("last_name", sa.String(50), nullable=True),
        sa.Column("avatar", sa.String(1024), nullable=True),
        sa.Column("phone_number", sa.String(32), nullable=True),
        sa.Column("age", sa.Integer, nullable=True),
        sa.Column("gender", sa.String(32), nullable=True),
        sa.Column("country", sa.String(100), nullable=True),
        sa.Column("state", sa.String(100), nullable=True),
        sa.Column("preferred_language", sa.String(10), nullable=False, server_default="en"),
        sa.Column("recommended_voice", sa.String(64), nullable=True),
        sa.Column("role", sa.String(20), nullable=False, server_default="user"),
        _is_active(),
        sa.Column("settings", sa.JSON, nullable=False),
        sa.Column("usage_stats", sa.JSON, nullable=False),
        sa.Column("subscription", sa.JSON, nullable=False),
        sa.Column("firebase_metadata", sa.JSON, nullable=False),
        sa.Column("clerk_metadata", sa.JSON, nullable=False),
        *_timestamps(),
    )

    op.create_table(
        "languages",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("shortcode", sa.String(6), nullable=False, unique=True, index=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("country", sa.String(100), nullable=False),
        _is_active(index=True),
        *_timestamps(),
    )

    op.create_table(
        "voices",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("voice_id", sa.String(64), nullable=False, unique=True, index=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("display_name", sa.String(100), nullable=False),
        sa.Column("language", sa.String(50), nullable=False, index=True),
        sa.Column("country", sa.String(100), nullable=False, index=True),
        sa.Column("gender", sa.String(10), nullable=False),
        sa.Column("accent", sa.String(50), nullable=False),
        sa.Column("description", sa.String(200), nullable=False),
        _is_active(index=True),
        *_timestamps(),
    )

    op.create_table(
        "themes",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("theme_id", sa.String(50), nullable=False, unique=True, index=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("display_name", sa.String(50), nullable=False),
        sa.Column("description", sa.String(200), nullable=False),
        sa.Column("icon", sa.String(10), nullable=False),
        sa.Column("category", sa.String(50), nullable=False, index=True),
        sa.Column("colors", sa.JSON, nullable=False),
        _is_active(index=True),
        *_timestamps(),
    )

    op.create_table(
        "genders",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("gender_id", sa.String(50), nullable=False, unique=True, index=True),
        sa.Column("name", sa.String(50), nullable=False),
        sa.Column("display_name", sa.String(50), nullable=False),
        sa.Column("description", sa.String(200), nullable=False),
        _is_active(),
        *_timestamps(),
    )

    op.create_table(
        "countries",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("country_code", sa.String(3), nullable=False, unique=True, index=True),
        sa.Column("name", sa.String(100), nullable=False, index=True),
        _is_active(),
        *_timestamps(),
    )

    op.create_table(
        "country_codes",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("country", sa.String(100), nullable=False),
        sa.Column("country_code", sa.String(3), nullable=False, unique=True, index=True),
        sa.Column("dialing_code", sa.String(5), nullable=False, index=True),
        _is_active(),
        *_timestamps(),
    )


def downgrade() -> None:
    for table in (
        "country_codes", "countries", "genders", "themes", "voices",
        "languages", "users", "room_participants", "rooms",
    ):
        op.drop_table(table)
