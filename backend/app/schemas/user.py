"""User Schemas — profile bodies and the public/full user serializers.

Invariants:
    - ProfileUpdate only admits whitelisted fields; unknown keys are dropped, not rejected
    - public serializer never exposes email, usage, subscription or provider metadata
"""

from pydantic import ConfigDict, Field

from app.models.user import User
from app.schemas import CamelModel, iso


class AdditionalFieldsUpdate(CamelModel):
    country: str | None = None
    state: str | None = None
    age: int | None = Field(None, ge=1, le=150)
    gender: str | None = None
    preferred_language: str | None = None
    theme: str | None = None


class ProfileUpdate(CamelModel):
    model_config = ConfigDict(extra="ignore")

    first_name: str | None = Field(None, max_length=50)
    last_name: str | None = Field(None, max_length=50)
    age: int | None = Field(None, ge=1, le=150)
    phone_number: str | None = Field(None, max_length=32)
    gender: str | None = None
    country: str | None = None
    state: str | None = None
    preferred_language: str | None = None
    recommended_voice: str | None = None
    settings: dict | None = None


def serialize_additional_fields(user: User) -> dict:
    return {
        "country": user.country or "",
        "state": user.state or "",
        "age": user.age,
        "gender": user.gender or "prefer-not-to-say",
        "preferredLanguage": user.preferred_language or "en",
        "theme": (user.settings or {}).get("theme") or "light",
    }


def serialize_public_user(user: User) -> dict:
    return {
        "id": str(user.id),
        "username": user.username,
        "firstName": user.first_name,
        "lastName": user.last_name,
        "avatar": user.avatar,
        "country": user.country,
        "preferredLanguage": user.preferred_language,
    }


def serialize_user(user: User) -> dict:
    return {
        **serialize_public_user(user),
        "firebaseUid": user.firebase_uid,
        "clerkId": user.clerk_id,
        "email": user.email,
        "phoneNumber": user.phone_number,
        "age": user.age,
        "gender": user.gender,
        "state": user.state,
        "recommendedVoice": user.recommended_voice,
        "role": user.role,
        "isActive": user.is_active,
        "settings": user.settings,
        "usageStats": user.usage_stats,
        "subscription": user.subscription,
        "createdAt": iso(user.created_at),
        "updatedAt": iso(user.updated_at),
    }
