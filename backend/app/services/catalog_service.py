"""Catalog Service — one generic CRUD service for every master-data catalog.

Invariants:
    - Public reads only see is_active rows; admin reads see everything
    - Natural keys are unique per catalog: duplicates → ConflictError (409)
    - delete is soft (is_active=False); restore flips it back
    - seed_master_data() only inserts missing keys: re-running it is a no-op

Design Decisions:
    - A Catalog descriptor per table instead of five copy-pasted services
      (ADR: catalogs differ only in key, search and filter columns)
    - Wire format derived from the table columns: the key column is exposed
      under its client alias ("id" for voices/themes/genders)
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field

from pydantic import BaseModel
from pydantic.alias_generators import to_camel
from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import ConflictError, ResourceNotFoundError, ValidationError
from app.models.country import Country
from app.models.country_code import CountryCode
from app.models.gender import Gender
from app.models.language import Language
from app.models.theme import Theme
from app.models.voice import Voice
from app.schemas import iso
from app.schemas.catalog import (
    CountryCodeCreate, CountryCodeUpdate, CountryCreate, CountryUpdate,
    GenderCreate, GenderUpdate, ThemeCreate, ThemeUpdate, VoiceCreate, VoiceUpdate,
)
from app.schemas.language import LanguageCreate
from app.services import master_data

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Catalog:
    slug: str
    label: str
    model: type
    key: str
    key_alias: str
    create_schema: type[BaseModel]
    update_schema: type[BaseModel]
    search_fields: tuple[str, ...]
    order_by: tuple[str, ...]
    filter_fields: tuple[str, ...] = ()
    normalize_key: Callable[[str], str] = str.strip
    seed: list[dict] = field(default_factory=list)


def _lower(v: str) -> str:
    return v.strip().lower()


def _upper(v: str) -> str:
    return v.strip().upper()


VOICES = Catalog(
    slug="voices", label="Voice", model=Voice, key="voice_id", key_alias="id",
    create_schema=VoiceCreate, update_schema=VoiceUpdate,
    search_fields=("name", "display_name", "language", "country", "accent"),
    order_by=("language", "name"),
    filter_fields=("language", "country", "gender"),
    seed=master_data.VOICES,
)
THEMES = Catalog(
    slug="themes", label="Theme", model=Theme, key="theme_id", key_alias="id",
    create_schema=ThemeCreate, update_schema=ThemeUpdate,
    search_fields=("name", "display_name", "description", "category"),
    order_by=("category", "name"),
    filter_fields=("category",),
    normalize_key=_lower,
    seed=master_data.THEMES,
)
GENDERS = Catalog(
    slug="genders", label="Gender", model=Gender, key="gender_id", key_alias="id",
    create_schema=GenderCreate, update_schema=GenderUpdate,
    search_fields=("name", "display_name", "description"),
    order_by=("name",),
    normalize_key=_lower,
    seed=master_data.GENDERS,
)
COUNTRIES = Catalog(
    slug="countries", label="Country", model=Country, key="country_code",
    key_alias="countryCode",
    create_schema=CountryCreate, update_schema=CountryUpdate,
    search_fields=("name", "country_code"),
    order_by=("name",),
    normalize_key=_upper,
    seed=master_data.COUNTRIES,
)
COUNTRY_CODES = Catalog(
    slug="country-codes", label="Country code", model=CountryCode, key="country_code",
    key_alias="countryCode",
    create_schema=CountryCodeCreate, update_schema=CountryCodeUpdate,
    search_fields=("country", "country_code", "dialing_code"),
    order_by=("country",),
    filter_fields=("dialing_code",),
    normalize_key=_upper,
    seed=master_data.COUNTRY_CODES,
)

CATALOGS: dict[str, Catalog] = {
    c.slug: c for c in (VOICES, THEMES, GENDERS, COUNTRIES, COUNTRY_CODES)
}

DEFAULT_THEME_ID = "light"


def serialize_entry(catalog: Catalog, row) -> dict:
    data: dict = {}
    if catalog.key_alias != "id":
        data["id"] = str(row.id)
    for column in row.__table__.columns:
        name = column.name
        if name == "id":
            continue
        value = getattr(row, name)
        if name in ("created_at", "updated_at"):
            value = iso(value)
        data[catalog.key_alias if name == catalog.key else to_camel(name)] = value
    return data


class CatalogService:
    """CRUD and lookups for one catalog."""

    def __init__(self, db: AsyncSession, catalog: Catalog):
        self.db = db
        self.catalog = catalog
        self.model = catalog.model

    def _col(self, name: str):
        return getattr(self.model, name)

    def _ordered(self, stmt):
        return stmt.order_by(*(self._col(c) for c in self.catalog.order_by))

    def _not_found(self, key: str) -> ResourceNotFoundError:
        return ResourceNotFoundError(
            self.catalog.label, key, f"{self.catalog.label} not found",
        )

    # ─── public reads ───────────────────────────────────────────

    async def list_active(self, filters: dict[str, str] | None = None) -> list:
        clauses = [self.model.is_active.is_(True)]
        for name, value in (filters or {}).items():
            if name not in self.catalog.filter_fields:
                raise ValidationError(f"Unknown filter: {name}", field=name)
            if value:
                clauses.append(func.lower(self._col(name)) == value.lower())
        rows = await self.db.execute(self._ordered(select(self.model).where(*clauses)))
        return list(rows.scalars().all())

    async def search(self, query: str) -> list:
        if not query or not query.strip():
            raise ValidationError("Search query is required", field="q")
        matches = or_(*(
            self._col(f).icontains(query.strip(), autoescape=True)
            for f in self.catalog.search_fields
        ))
        rows = await self.db.execute(
            self._ordered(select(self.model).where(self.model.is_active.is_(True), matches)),
        )
        return list(rows.scalars().all())

    async def get(self, key: str, include_inactive: bool = False):
        stmt = select(self.model).where(
            self._col(self.catalog.key) == self.catalog.normalize_key(key),
        )
        if not include_inactive:
            stmt = stmt.where(self.model.is_active.is_(True))
        row = await self.db.scalar(stmt)
        if row is None:
            raise self._not_found(key)
        return row

    async def distinct_values(self, field_name: str) -> list[str]:
        column = self._col(field_name)
        rows = await self.db.execute(
            select(column).where(self.model.is_active.is_(True)).distinct().order_by(column),
        )
        return [v for v in rows.scalars().all() if v]

    async def list_by(self, field_name: str, value: str) -> list:
        return await self.list_active({field_name: value})

    async def default_theme(self):
        return await self.get(DEFAULT_THEME_ID)

    # ─── admin ──────────────────────────────────────────────────

    async def list_all(self) -> list:
        rows = await self.db.execute(self._ordered(select(self.model)))
        return list(rows.scalars().all())

    async def create(self, data: BaseModel):
        values = data.model_dump()
        key_value = values[self.catalog.key]
        if await self._key_taken(key_value):
            raise ConflictError(f"{self.catalog.label} with this ID already exists")
        row = self.model(**values)
        self.db.add(row)
        await self.db.commit()
        logger.info(f"{self.catalog.label} {key_value} created")
        return row

    async def update(self, key: str, data: BaseModel):
        row = await self.get(key, include_inactive=True)
        for name, value in data.model_dump(exclude_unset=True, exclude_none=True).items():
            setattr(row, name, value)
        await self.db.commit()
        return row

    async def soft_delete(self, key: str):
        return await self._set_active(key, False)

    async def restore(self, key: str):
        return await self._set_active(key, True)

    async def _set_active(self, key: str, active: bool):
        row = await self.get(key, include_inactive=True)
        row.is_active = active
        await self.db.commit()
        logger.info(
            f"{self.catalog.label} {key} {'restored' if active else 'deactivated'}",
        )
        return row

    async def _key_taken(self, key_value: str) -> bool:
        found = await self.db.scalar(
            select(self.model.id).where(self._col(self.catalog.key) == key_value),
        )
        return found is not None


async def seed_master_data(db: AsyncSession) -> dict[str, int]:
    """Insert built-in catalog rows whose natural key is missing. Returns inserted counts."""
    inserted: dict[str, int] = {}
    for catalog in CATALOGS.values():
        existing = set((await db.execute(select(catalog.model.__table__.c[catalog.key]))).scalars())
        count = 0
        for raw in catalog.seed:
            row = catalog.create_schema.model_validate(raw)
            if getattr(row, catalog.key) in existing:
                continue
            db.add(catalog.model(**row.model_dump()))
            existing.add(getattr(row, catalog.key))
            count += 1
        inserted[catalog.slug] = count

    existing_codes = set((await db.execute(select(Language.shortcode))).scalars())
    count = 0
    for shortcode, name, country in master_data.LANGUAGES:
        if shortcode in existing_codes:
            continue
        lang = LanguageCreate(shortcode=shortcode, name=name, country=country)
        db.add(Language(**lang.model_dump()))
        existing_codes.add(shortcode)
        count += 1
    inserted["languages"] = count

    await db.commit()
    logger.info(f"Master data seeded: {inserted}")
    return inserted
