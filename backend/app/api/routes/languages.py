"""Language Routes — public lookups, authenticated listing, admin CRUD.

Invariants:
    - Public: /active, /search, /stats, /validate, /{shortcode}
    - Authenticated: GET /, /id/{id}
    - Admin: POST /, /bulk; PUT /{id}; PATCH /{id}/toggle; DELETE /{id}
    - Static paths are declared before /{shortcode}
"""

import uuid

from fastapi import APIRouter, Body, Depends, Query, status

from app.api.dependencies import get_current_user, get_language_service, require_admin
from app.api.responses import ok
from app.core.errors import ValidationError
from app.models.user import User
from app.schemas.language import (
    LanguageBulkCreate, LanguageCreate, LanguageUpdate, serialize_language,
)
from app.services.language_service import LanguageService

router = APIRouter(prefix="/api/languages", tags=["languages"])


# ─── public ─────────────────────────────────────────────────────

@router.get("/active")
async def active_languages(service: LanguageService = Depends(get_language_service)):
    languages = await service.get_active()
    return ok([serialize_language(lang) for lang in languages], count=len(languages))


@router.get("/search")
async def search_languages(
    q: str | None = Query(None), service: LanguageService = Depends(get_language_service),
):
    if not q or not q.strip():
        raise ValidationError("Search query is required", field="q")
    languages = await service.search(q.strip())
    return ok(
        [serialize_language(lang) for lang in languages],
        "Languages search completed", query=q,
    )


@router.get("/stats")
async def language_stats(service: LanguageService = Depends(get_language_service)):
    return ok(await service.stats())


@router.post("/validate")
async def validate_language(body: dict = Body(...)):
    return ok(LanguageService.validate(body))


# ─── authenticated ──────────────────────────────────────────────

@router.get("")
@router.get("/", include_in_schema=False)
async def list_languages(
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=500),
    search: str = "",
    is_active: bool | None = Query(None, alias="isActive"),
    sort_by: str = Query("name", alias="sortBy"),
    sort_order: str = Query("asc", alias="sortOrder"),
    user: User = Depends(get_current_user),
    service: LanguageService = Depends(get_language_service),
):
    result = await service.list_languages(page, limit, search, is_active, sort_by, sort_order)
    return ok(
        [serialize_language(lang) for lang in result["languages"]],
        pagination=result["pagination"],
    )


@router.get("/id/{language_id}")
async def language_by_id(
    language_id: uuid.UUID,
    user: User = Depends(get_current_user),
    service: LanguageService = Depends(get_language_service),
):
    return ok(serialize_language(await service.get_by_id(language_id)))


# ─── admin ──────────────────────────────────────────────────────

@router.post("", status_code=status.HTTP_201_CREATED)
async def create_language(
    body: LanguageCreate,
    admin: User = Depends(require_admin),
    service: LanguageService = Depends(get_language_service),
):
    lang = await service.create(body)
    return ok(serialize_language(lang), "Language created successfully")


@router.post("/bulk", status_code=status.HTTP_201_CREATED)
async def bulk_create_languages(
    body: LanguageBulkCreate,
    admin: User = Depends(require_admin),
    service: LanguageService = Depends(get_language_service),
):
    result = await service.bulk_create(body.languages)
    return ok(
        {
            "created": [serialize_language(lang) for lang in result["created"]],
            "skipped": result["skipped"],
        },
        f"{len(result['created'])} languages created",
    )


@router.put("/{language_id}")
async def update_language(
    language_id: uuid.UUID,
    body: LanguageUpdate,
    admin: User = Depends(require_admin),
    service: LanguageService = Depends(get_language_service),
):
    lang = await service.update(language_id, body)
    return ok(serialize_language(lang), "Language updated successfully")


@router.patch("/{language_id}/toggle")
async def toggle_language(
    language_id: uuid.UUID,
    admin: User = Depends(require_admin),
    service: LanguageService = Depends(get_language_service),
):
    lang = await service.toggle(language_id)
    state = "activated" if lang.is_active else "deactivated"
    return ok(serialize_language(lang), f"Language {state} successfully")


@router.delete("/{language_id}")
async def delete_language(
    language_id: uuid.UUID,
    admin: User = Depends(require_admin),
    service: LanguageService = Depends(get_language_service),
):
    await service.delete(language_id)
    return ok(message="Language deleted successfully")


# ─── public, catch-all last ─────────────────────────────────────

@router.get("/{shortcode}")
async def language_by_shortcode(
    shortcode: str, service: LanguageService = Depends(get_language_service),
):
    return ok(serialize_language(await service.get_by_shortcode(shortcode)))
