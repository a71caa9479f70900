"""User Service — local user records synced from Firebase and Clerk identities.

Invariants:
    - Every clerk-id operation on an unknown id → ResourceNotFoundError("User not found")
    - Emails stored lowercase; lookups by email are case-insensitive through that
    - Generated usernames are unique: email prefix, then prefix + counter
    - JSON columns (settings, usage_stats, subscription, metadata) are reassigned, never mutated
    - Only the free plan is metered by can_translate()

Design Decisions:
    - Clerk sync upserts by clerk_id first, then email: a user who signed in with
      Firebase first is linked, not duplicated
    - Firebase identities arrive as FirebaseIdentity dataclasses: no SDK objects here
"""

import logging
import re

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.domain_types import SubscriptionPlan, UsageType
from app.core.errors import (
    ResourceNotFoundError, UsageLimitExceededError, ValidationError,
)
from app.db.base import utcnow
from app.infrastructure.firebase_auth import FirebaseIdentity
from app.models.user import User
from app.schemas.user import (
    AdditionalFieldsUpdate, ProfileUpdate, serialize_additional_fields,
)

logger = logging.getLogger(__name__)

DEFAULT_GENDER = "prefer-not-to-say"
DEFAULT_LANGUAGE = "en"
DEFAULT_THEME = "light"

_USERNAME_UNSAFE = re.compile(r"[^a-z0-9_.]")
_USERNAME_MAX = 40

_CLERK_PROFILE_FIELDS = {
    "firstName": "first_name",
    "lastName": "last_name",
    "username": "username",
    "email": "email",
    "imageUrl": "avatar",
}


def primary_email(clerk_user: dict) -> str | None:
    primary_id = clerk_user.get("primary_email_address_id")
    for entry in clerk_user.get("email_addresses") or []:
        if entry.get("id") == primary_id:
            return entry.get("email_address")
    return None


class UserService:

    def __init__(self, db: AsyncSession):
        self.db = db

    # ─── lookups ────────────────────────────────────────────────

    async def get_by_clerk_id(self, clerk_id: str) -> User:
        user = await self.db.scalar(select(User).where(User.clerk_id == clerk_id))
        if user is None:
            raise ResourceNotFoundError("User", clerk_id, "User not found")
        return user

    async def get_by_firebase_uid(self, firebase_uid: str) -> User | None:
        return await self.db.scalar(select(User).where(User.firebase_uid == firebase_uid))

    async def get_by_email(self, email: str) -> User | None:
        return await self.db.scalar(select(User).where(User.email == email.lower()))

    # ─── additional fields / clerk profile ──────────────────────

    async def get_additional_fields(self, clerk_id: str) -> dict:
        return serialize_additional_fields(await self.get_by_clerk_id(clerk_id))

    async def update_additional_fields(
        self, clerk_id: str, fields: AdditionalFieldsUpdate,
    ) -> dict:
        user = await self.get_by_clerk_id(clerk_id)
        user.country = fields.country or ""
        user.state = fields.state or ""
        user.age = fields.age
        user.gender = fields.gender or DEFAULT_GENDER
        user.preferred_language = fields.preferred_language or DEFAULT_LANGUAGE
        user.settings = {**(user.settings or {}), "theme": fields.theme or DEFAULT_THEME}
        await self.db.commit()
        logger.info(f"Additional fields updated for {clerk_id}")
        return serialize_additional_fields(user)

    async def update_clerk_profile(self, clerk_id: str, data: dict) -> User:
        user = await self.get_by_clerk_id(clerk_id)
        for key, attr in _CLERK_PROFILE_FIELDS.items():
            value = data.get(key)
            if value is None:
                continue
            setattr(user, attr, value.lower() if attr == "email" else value)

        clerk_data = dict((user.clerk_metadata or {}).get("clerkData") or {})
        clerk_data.update({k: v for k, v in data.items() if v is not None})
        user.clerk_metadata = {
            **(user.clerk_metadata or {}),
            "lastSync": utcnow().isoformat(),
            "clerkData": clerk_data,
        }
        await self.db.commit()
        return user

    async def debug_user(self, clerk_id: str) -> dict:
        user = await self.get_by_clerk_id(clerk_id)
        total = await self.db.scalar(select(func.count(User.id)))
        return {
            "id": str(user.id),
            "clerkId": user.clerk_id,
            "firebaseUid": user.firebase_uid,
            "email": user.email,
            "username": user.username,
            "isActive": user.is_active,
            "totalUsers": total or 0,
        }

    # ─── firebase ───────────────────────────────────────────────

    async def find_or_create_firebase_user(self, identity: FirebaseIdentity) -> User:
        user = await self.get_by_firebase_uid(identity.uid)
        if user is None and identity.email:
            user = await self.get_by_email(identity.email)
            if user is not None:
                user.firebase_uid = identity.uid
                logger.info(f"Linked Firebase uid to existing user {user.id}")

        if user is None:
            if not identity.email:
                raise ValidationError("Email is required for user creation", field="email")
            first, _, last = (identity.display_name or "").partition(" ")
            user = User(
                firebase_uid=identity.uid,
                email=identity.email.lower(),
                username=await self.generate_username(identity.email),
                first_name=first or None,
                last_name=last or None,
                avatar=identity.photo_url,
                phone_number=identity.phone_number,
            )
            self.db.add(user)
            logger.info(f"Created user for Firebase uid {identity.uid}")
        elif identity.email:
            user.email = identity.email.lower()

        user.firebase_metadata = {**identity.to_metadata(), "lastSync": utcnow().isoformat()}
        await self.db.commit()
        return user

    async def update_profile(self, user: User, data: ProfileUpdate) -> User:
        changes = data.model_dump(exclude_unset=True, exclude_none=True)
        if not changes:
            raise ValidationError("No valid fields to update")
        settings = changes.pop("settings", None)
        if settings is not None:
            user.settings = {**(user.settings or {}), **settings}
        for attr, value in changes.items():
            setattr(user, attr, value)
        await self.db.commit()
        return user

    async def soft_delete(self, user: User) -> None:
        user.is_active = False
        await self.db.commit()
        logger.info(f"User {user.id} deactivated")

    # ─── usage ──────────────────────────────────────────────────

    async def increment_usage(self, user: User, usage_type: UsageType) -> User:
        stats = dict(user.usage_stats or {})
        stats["totalTranslations"] = stats.get("totalTranslations", 0) + 1
        stats[usage_type.value] = stats.get(usage_type.value, 0) + 1
        stats["lastActivity"] = utcnow().isoformat()
        user.usage_stats = stats

        subscription = dict(user.subscription or {})
        subscription["usedThisMonth"] = subscription.get("usedThisMonth", 0) + 1
        user.subscription = subscription
        await self.db.commit()
        return user

    @staticmethod
    def can_translate(user: User) -> bool:
        subscription = user.subscription or {}
        if subscription.get("plan", SubscriptionPlan.FREE.value) != SubscriptionPlan.FREE.value:
            return True
        return subscription.get("usedThisMonth", 0) < subscription.get("monthlyLimit", 1000)

    def ensure_can_translate(self, user: User) -> None:
        if not self.can_translate(user):
            subscription = user.subscription or {}
            raise UsageLimitExceededError(
                subscription.get("usedThisMonth", 0), subscription.get("monthlyLimit", 1000),
            )

    # ─── clerk sync ─────────────────────────────────────────────

    async def sync_user_from_clerk(self, clerk_user: dict) -> User:
        clerk_id = clerk_user.get("id")
        email = primary_email(clerk_user)
        if not email:
            raise ValidationError("Email is required for user creation", field="email")
        email = email.lower()

        user = await self.db.scalar(select(User).where(User.clerk_id == clerk_id))
        if user is None:
            user = await self.get_by_email(email)
        username = clerk_user.get("username") or (user.username if user else None)
        if not username:
            username = await self.generate_username(email)
        created = user is None
        if created:
            user = User(
                email=email,
                country="",
                state="",
                gender=DEFAULT_GENDER,
                preferred_language=DEFAULT_LANGUAGE,
            )
            self.db.add(user)

        phones = clerk_user.get("phone_numbers") or []
        user.clerk_id = clerk_id
        user.email = email
        user.username = username
        user.first_name = clerk_user.get("first_name") or user.first_name
        user.last_name = clerk_user.get("last_name") or user.last_name
        user.avatar = clerk_user.get("image_url") or user.avatar
        if phones:
            user.phone_number = phones[0].get("phone_number")
        user.clerk_metadata = {
            "lastSync": utcnow().isoformat(),
            "clerkData": {
                "id": clerk_id,
                "createdAt": clerk_user.get("created_at"),
                "updatedAt": clerk_user.get("updated_at"),
                "imageUrl": clerk_user.get("image_url"),
                "externalId": clerk_user.get("external_id"),
            },
        }
        await self.db.commit()
        logger.info(
            f"{'Created' if created else 'Updated'} user from Clerk {clerk_id}",
            extra={"user_id": str(user.id)},
        )
        return user

    async def delete_user_by_clerk_id(self, clerk_id: str) -> bool:
        user = await self.db.scalar(select(User).where(User.clerk_id == clerk_id))
        if user is None:
            return False
        await self.db.delete(user)
        await self.db.commit()
        logger.info(f"Deleted user for Clerk id {clerk_id}")
        return True

    async def generate_username(self, email: str) -> str:
        base = _USERNAME_UNSAFE.sub("", email.split("@")[0].lower())[:_USERNAME_MAX] or "user"
        candidate, suffix = base, 0
        while await self._username_taken(candidate):
            suffix += 1
            candidate = f"{base}{suffix}"
        return candidate

    async def _username_taken(self, username: str) -> bool:
        found = await self.db.scalar(select(User.id).where(User.username == username))
        return found is not None
