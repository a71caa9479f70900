"""Clerk Routes — Svix-signed user webhooks and Clerk user sync helpers.

Invariants:
    - The webhook body is verified on the raw bytes before it is parsed
    - user.created / user.updated → sync; user.deleted → hard delete; other events acknowledged
    - The same handler serves /api/webhooks/clerk and /api/clerk/webhook

Design Decisions:
    - Unknown event types answer 200: Clerk retries non-2xx deliveries forever
"""

import json
import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Request

from app.api.dependencies import get_user_service
from app.api.responses import ok
from app.config import Settings, get_settings
from app.core.errors import ResourceNotFoundError, ValidationError
from app.infrastructure.clerk_client import ClerkClient, verify_svix_signature
from app.infrastructure.http_clients import get_clerk_client
from app.schemas.user import serialize_user
from app.services.user_service import UserService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/clerk", tags=["clerk"])
webhooks = APIRouter(prefix="/api/webhooks", tags=["clerk"])

SYNC_EVENTS = ("user.created", "user.updated")


async def handle_clerk_webhook(
    request: Request,
    settings: Settings = Depends(get_settings),
    users: UserService = Depends(get_user_service),
):
    body = await request.body()
    verify_svix_signature(settings.clerk_webhook_secret, request.headers, body)
    try:
        event = json.loads(body)
    except json.JSONDecodeError:
        raise ValidationError("Invalid webhook payload")
    if not isinstance(event, dict):
        raise ValidationError("Invalid webhook payload")

    event_type = event.get("type")
    data = event.get("data") or {}
    if not isinstance(data, dict):
        raise ValidationError("Invalid webhook payload", field="data")
    logger.info(f"Clerk webhook: {event_type}", extra={"event": event_type})

    if event_type in SYNC_EVENTS:
        user = await users.sync_user_from_clerk(data)
        return ok({"userId": str(user.id)}, f"Processed {event_type}")
    if event_type == "user.deleted":
        deleted = await users.delete_user_by_clerk_id(data.get("id") or "")
        return ok({"deleted": deleted}, f"Processed {event_type}")
    return ok(message=f"Ignored {event_type}")


router.add_api_route("/webhook", handle_clerk_webhook, methods=["POST"])
webhooks.add_api_route("/clerk", handle_clerk_webhook, methods=["POST"])


@router.get("/health")
async def clerk_health(settings: Settings = Depends(get_settings)):
    return ok(
        {
            "webhookConfigured": bool(settings.clerk_webhook_secret),
            "apiConfigured": bool(settings.clerk_secret_key),
            "timestamp": datetime.now(timezone.utc).isoformat(),
        },
        "Clerk integration is healthy",
    )


@router.get("/user/{clerk_id}")
async def clerk_user(clerk_id: str, clerk: ClerkClient = Depends(get_clerk_client)):
    data = await clerk.get_user(clerk_id)
    if data is None:
        raise ResourceNotFoundError("User", clerk_id, "User not found in Clerk")
    return ok(data, user=data)


@router.post("/sync-user/{clerk_id}")
async def sync_clerk_user(
    clerk_id: str,
    clerk: ClerkClient = Depends(get_clerk_client),
    users: UserService = Depends(get_user_service),
):
    data = await clerk.get_user(clerk_id)
    if data is None:
        raise ResourceNotFoundError("User", clerk_id, "User not found in Clerk")
    user = serialize_user(await users.sync_user_from_clerk(data))
    return ok(user, "User synced successfully", user=user)
