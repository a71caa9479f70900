"""Catalog Routes — one router per master-data catalog, built from its descriptor.

Invariants:
    - Route order per router: list, /search, /admin/*, catalog-specific routes,
      writes, then GET /{key} last so it never shadows a static path
    - Public reads only return active entries; /admin/* require the admin role
    - List filters are the catalog's filter_fields, passed as camelCase query params

Design Decisions:
    - build_catalog_router() instead of five route modules: the catalogs share
      every generic route and differ only in a few lookups
"""

from collections.abc import Callable

from fastapi import APIRouter, Body, Depends, Request, status
from pydantic import BaseModel, ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.dependencies import require_admin
from app.api.responses import ok
from app.core.errors import ValidationError
from app.infrastructure.database import get_db
from app.models.user import User
from app.services.catalog_service import (
    CATALOGS, COUNTRY_CODES, THEMES, VOICES, Catalog, CatalogService, serialize_entry,
)


def _entries(catalog: Catalog, rows) -> list[dict]:
    return [serialize_entry(catalog, row) for row in rows]


def _parse(schema: type[BaseModel], body: dict) -> BaseModel:
    try:
        return schema.model_validate(body)
    except PydanticValidationError as e:
        raise ValidationError(
            "Invalid request data",
            errors=[f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()],
        )


def build_catalog_router(
    catalog: Catalog,
    extra_routes: Callable[[APIRouter, Callable], None] | None = None,
) -> APIRouter:
    router = APIRouter(prefix=f"/api/{catalog.slug}", tags=[catalog.slug])

    def get_service(db: AsyncSession = Depends(get_db)) -> CatalogService:
        return CatalogService(db, catalog)

    @router.get("")
    async def list_entries(request: Request, service: CatalogService = Depends(get_service)):
        filters = {
            name: request.query_params[to_camel(name)]
            for name in catalog.filter_fields if to_camel(name) in request.query_params
        }
        rows = await service.list_active(filters)
        return ok(_entries(catalog, rows), count=len(rows))

    @router.get("/search")
    async def search_entries(q: str | None = None, service: CatalogService = Depends(get_service)):
        rows = await service.search(q or "")
        return ok(_entries(catalog, rows), count=len(rows), query=q)

    @router.get("/admin/all")
    async def admin_list(
        admin: User = Depends(require_admin), service: CatalogService = Depends(get_service),
    ):
        rows = await service.list_all()
        return ok(_entries(catalog, rows), count=len(rows))

    @router.get("/admin/{key}")
    async def admin_get(
        key: str,
        admin: User = Depends(require_admin),
        service: CatalogService = Depends(get_service),
    ):
        return ok(serialize_entry(catalog, await service.get(key, include_inactive=True)))

    if extra_routes is not None:
        extra_routes(router, get_service)

    @router.post("", status_code=status.HTTP_201_CREATED)
    async def create_entry(
        body: dict = Body(...),
        admin: User = Depends(require_admin),
        service: CatalogService = Depends(get_service),
    ):
        row = await service.create(_parse(catalog.create_schema, body))
        return ok(serialize_entry(catalog, row), f"{catalog.label} created successfully")

    @router.put("/{key}")
    async def update_entry(
        key: str,
        body: dict = Body(...),
        admin: User = Depends(require_admin),
        service: CatalogService = Depends(get_service),
    ):
        row = await service.update(key, _parse(catalog.update_schema, body))
        return ok(serialize_entry(catalog, row), f"{catalog.label} updated successfully")

    @router.delete("/{key}")
    async def delete_entry(
        key: str,
        admin: User = Depends(require_admin),
        service: CatalogService = Depends(get_service),
    ):
        await service.soft_delete(key)
        return ok(message=f"{catalog.label} deleted successfully")

    @router.patch("/{key}/restore")
    async def restore_entry(
        key: str,
        admin: User = Depends(require_admin),
        service: CatalogService = Depends(get_service),
    ):
        row = await service.restore(key)
        return ok(serialize_entry(catalog, row), f"{catalog.label} restored successfully")

    @router.get("/{key}")
    async def get_entry(key: str, service: CatalogService = Depends(get_service)):
        return ok(serialize_entry(catalog, await service.get(key)))

    return router


# ─── catalog-specific lookups ───────────────────────────────────

def _voice_routes(router: APIRouter, get_service: Callable) -> None:

    @router.get("/languages")
    async def voice_languages(service: CatalogService = Depends(get_service)):
        return ok(await service.distinct_values("language"))

    @router.get("/countries")
    async def voice_countries(service: CatalogService = Depends(get_service)):
        return ok(await service.distinct_values("country"))

    @router.get("/language/{language}")
    async def voices_by_language(language: str, service: CatalogService = Depends(get_service)):
        return ok(_entries(VOICES, await service.list_by("language", language)))

    @router.get("/country/{country}")
    async def voices_by_country(country: str, service: CatalogService = Depends(get_service)):
        return ok(_entries(VOICES, await service.list_by("country", country)))

    @router.get("/gender/{gender}")
    async def voices_by_gender(gender: str, service: CatalogService = Depends(get_service)):
        return ok(_entries(VOICES, await service.list_by("gender", gender)))


def _theme_routes(router: APIRouter, get_service: Callable) -> None:

    @router.get("/categories")
    async def theme_categories(service: CatalogService = Depends(get_service)):
        return ok(await service.distinct_values("category"))

    @router.get("/category/{category}")
    async def themes_by_category(category: str, service: CatalogService = Depends(get_service)):
        return ok(_entries(THEMES, await service.list_by("category", category)))

    @router.get("/default")
    async def default_theme(service: CatalogService = Depends(get_service)):
        return ok(serialize_entry(THEMES, await service.default_theme()))


def _country_code_routes(router: APIRouter, get_service: Callable) -> None:

    @router.get("/dialing/{code}")
    async def by_dialing_code(code: str, service: CatalogService = Depends(get_service)):
        code = code.strip()
        if not code.startswith("+"):
            code = f"+{code}"
        if not code[1:].isdigit():
            raise ValidationError("Invalid dialing code", field="code")
        return ok(_entries(COUNTRY_CODES, await service.list_by("dialing_code", code)))


_EXTRA_ROUTES = {
    VOICES.slug: _voice_routes,
    THEMES.slug: _theme_routes,
    COUNTRY_CODES.slug: _country_code_routes,
}

catalog_routers: list[APIRouter] = [
    build_catalog_router(catalog, _EXTRA_ROUTES.get(slug))
    for slug, catalog in CATALOGS.items()
]
