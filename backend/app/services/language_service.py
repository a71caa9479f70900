"""Language Service — paginated queries and admin CRUD for the languages master table.

Invariants:
    - shortcode unique: duplicates → ConflictError (409), checked before insert
    - Public lookups (active, search, by shortcode) only see is_active rows
    - bulk_create never aborts on one bad entry: duplicates are reported as skipped
    - delete is a hard delete; toggle flips is_active

Design Decisions:
    - Sort column from a whitelist (camelCase or snake_case accepted): user input
      never reaches getattr on the model
"""

import logging
import math
import uuid

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import ConflictError, ResourceNotFoundError
from app.models.language import Language
from app.schemas.language import LanguageCreate, LanguageUpdate

logger = logging.getLogger(__name__)

DUPLICATE_MESSAGE = "Language with this shortcode already exists"

_SORT_COLUMNS = {
    "name": Language.name,
    "shortcode": Language.shortcode,
    "country": Language.country,
    "createdAt": Language.created_at,
    "created_at": Language.created_at,
    "isActive": Language.is_active,
}


def _search_clause(query: str):
    return or_(
        Language.name.icontains(query, autoescape=True),
        Language.country.icontains(query, autoescape=True),
        Language.shortcode.icontains(query, autoescape=True),
    )


class LanguageService:

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_languages(
        self,
        page: int = 1,
        limit: int = 50,
        search: str = "",
        is_active: bool | None = None,
        sort_by: str = "name",
        sort_order: str = "asc",
    ) -> dict:
        filters = []
        if search:
            filters.append(_search_clause(search))
        if is_active is not None:
            filters.append(Language.is_active.is_(is_active))

        column = _SORT_COLUMNS.get(sort_by, Language.name)
        order = column.desc() if sort_order == "desc" else column.asc()
        rows = await self.db.execute(
            select(Language).where(*filters).order_by(order)
            .offset((page - 1) * limit).limit(limit),
        )
        total = await self.db.scalar(select(func.count(Language.id)).where(*filters)) or 0
        pages = math.ceil(total / limit) if limit else 0
        return {
            "languages": list(rows.scalars().all()),
            "pagination": {
                "page": page,
                "limit": limit,
                "total": total,
                "pages": pages,
                "hasNext": page < pages,
                "hasPrev": page > 1,
            },
        }

    async def get_active(self) -> list[Language]:
        rows = await self.db.execute(
            select(Language).where(Language.is_active.is_(True)).order_by(Language.name),
        )
        return list(rows.scalars().all())

    async def search(self, query: str) -> list[Language]:
        rows = await self.db.execute(
            select(Language)
            .where(Language.is_active.is_(True), _search_clause(query))
            .order_by(Language.name),
        )
        return list(rows.scalars().all())

    async def get_by_shortcode(self, shortcode: str) -> Language:
        lang = await self.db.scalar(
            select(Language).where(
                Language.shortcode == shortcode.upper(), Language.is_active.is_(True),
            ),
        )
        if lang is None:
            raise ResourceNotFoundError("Language", shortcode, "Language not found")
        return lang

    async def get_by_id(self, language_id: uuid.UUID) -> Language:
        lang = await self.db.get(Language, language_id)
        if lang is None:
            raise ResourceNotFoundError("Language", str(language_id), "Language not found")
        return lang

    async def stats(self) -> dict:
        total = await self.db.scalar(select(func.count(Language.id))) or 0
        active = await self.db.scalar(
            select(func.count(Language.id)).where(Language.is_active.is_(True)),
        ) or 0
        return {
            "total": total,
            "active": active,
            "inactive": total - active,
            "activePercentage": round(active / total * 100) if total else 0,
        }

    # ─── writes ─────────────────────────────────────────────────

    async def create(self, data: LanguageCreate) -> Language:
        if await self._shortcode_taken(data.shortcode):
            raise ConflictError(DUPLICATE_MESSAGE)
        lang = Language(**data.model_dump())
        self.db.add(lang)
        await self.db.commit()
        logger.info(f"Language {lang.shortcode} created")
        return lang

    async def bulk_create(self, items: list[LanguageCreate]) -> dict:
        created: list[Language] = []
        skipped: list[dict] = []
        seen: set[str] = set()
        for item in items:
            if item.shortcode in seen or await self._shortcode_taken(item.shortcode):
                skipped.append({"shortcode": item.shortcode, "reason": DUPLICATE_MESSAGE})
                continue
            seen.add(item.shortcode)
            lang = Language(**item.model_dump())
            self.db.add(lang)
            created.append(lang)
        await self.db.commit()
        logger.info(f"Bulk language import: {len(created)} created, {len(skipped)} skipped")
        return {"created": created, "skipped": skipped}

    async def update(self, language_id: uuid.UUID, data: LanguageUpdate) -> Language:
        lang = await self.get_by_id(language_id)
        changes = data.model_dump(exclude_unset=True, exclude_none=True)
        new_code = changes.get("shortcode")
        if new_code and new_code != lang.shortcode and await self._shortcode_taken(new_code):
            raise ConflictError(DUPLICATE_MESSAGE)
        for key, value in changes.items():
            setattr(lang, key, value)
        await self.db.commit()
        return lang

    async def toggle(self, language_id: uuid.UUID) -> Language:
        lang = await self.get_by_id(language_id)
        lang.is_active = not lang.is_active
        await self.db.commit()
        return lang

    async def delete(self, language_id: uuid.UUID) -> None:
        lang = await self.get_by_id(language_id)
        await self.db.delete(lang)
        await self.db.commit()
        logger.info(f"Language {lang.shortcode} deleted")

    @staticmethod
    def validate(data: dict) -> dict:
        try:
            LanguageCreate.model_validate(data)
        except PydanticValidationError as e:
            return {
                "valid": False,
                "errors": [
                    f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}"
                    for err in e.errors()
                ],
            }
        return {"valid": True, "errors": []}

    async def _shortcode_taken(self, shortcode: str) -> bool:
        found = await self.db.scalar(
            select(Language.id).where(Language.shortcode == shortcode),
        )
        return found is not None
