"""Firebase Auth Routes — profile of the signed-in Firebase user.

Invariants:
    - /me, /profile and /account require a valid bearer token (get_current_user)
    - /user/{firebase_uid} returns the full profile only to its owner; anyone
      else (or an anonymous caller) gets the public profile
    - DELETE /account is a soft delete: the row stays, is_active=False
"""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from app.api.dependencies import get_current_user, get_optional_user, get_user_service
from app.api.responses import ok
from app.core.errors import ResourceNotFoundError
from app.models.user import User
from app.schemas.user import ProfileUpdate, serialize_public_user, serialize_user
from app.services.user_service import UserService

router = APIRouter(prefix="/api/firebase-auth", tags=["firebase-auth"])


@router.get("/health")
async def firebase_health():
    return ok(
        {"timestamp": datetime.now(timezone.utc).isoformat()},
        "Firebase authentication is healthy",
    )


@router.get("/me")
async def me(user: User = Depends(get_current_user)):
    profile = serialize_user(user)
    return ok(profile, user=profile)


@router.put("/profile")
async def update_profile(
    body: ProfileUpdate,
    user: User = Depends(get_current_user),
    users: UserService = Depends(get_user_service),
):
    profile = serialize_user(await users.update_profile(user, body))
    return ok(profile, "Profile updated successfully", user=profile)


@router.delete("/account")
async def delete_account(
    user: User = Depends(get_current_user),
    users: UserService = Depends(get_user_service),
):
    await users.soft_delete(user)
    return ok(message="Account deactivated successfully")


@router.get("/user/{firebase_uid}")
async def user_by_firebase_uid(
    firebase_uid: str,
    caller: User | None = Depends(get_optional_user),
    users: UserService = Depends(get_user_service),
):
    user = await users.get_by_firebase_uid(firebase_uid)
    if user is None or not user.is_active:
        raise ResourceNotFoundError("User", firebase_uid, "User not found")
    is_owner = caller is not None and caller.id == user.id
    profile = serialize_user(user) if is_owner else serialize_public_user(user)
    return ok(profile, user=profile)
