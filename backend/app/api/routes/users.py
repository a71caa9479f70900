"""User Routes — Clerk-keyed profile fields used by the web client.

Invariants:
    - Every route is addressed by Clerk user id; unknown id → 404 "User not found"
    - Payloads are returned under both data and user (the web client reads user)
"""

from fastapi import APIRouter, Body, Depends

from app.api.dependencies import get_user_service
from app.api.responses import ok
from app.schemas.user import AdditionalFieldsUpdate, serialize_user
from app.services.user_service import UserService

router = APIRouter(prefix="/api/users", tags=["users"])


@router.get("/additional-fields/{clerk_id}")
async def get_additional_fields(
    clerk_id: str, users: UserService = Depends(get_user_service),
):
    fields = await users.get_additional_fields(clerk_id)
    return ok(fields, user=fields)


@router.put("/additional-fields/{clerk_id}")
async def update_additional_fields(
    clerk_id: str,
    body: AdditionalFieldsUpdate,
    users: UserService = Depends(get_user_service),
):
    fields = await users.update_additional_fields(clerk_id, body)
    return ok(fields, "Additional fields updated successfully", user=fields)


@router.put("/clerk-profile/{clerk_id}")
async def update_clerk_profile(
    clerk_id: str,
    body: dict = Body(...),
    users: UserService = Depends(get_user_service),
):
    user = serialize_user(await users.update_clerk_profile(clerk_id, body))
    return ok(user, "Clerk profile data updated successfully", user=user)


@router.get("/debug/user/{clerk_id}")
async def debug_user(clerk_id: str, users: UserService = Depends(get_user_service)):
    info = await users.debug_user(clerk_id)
    return ok(info, user=info)
