"""Language Schemas — admin CRUD bodies and the language serializer.

Invariants:
    - shortcode normalized to uppercase before pattern validation
"""

from pydantic import Field, field_validator

from app.core.language_codes import LANGUAGE_SHORTCODE_PATTERN
from app.models.language import Language
from app.schemas import CamelModel, iso


def _normalize_shortcode(v: str) -> str:
    v = v.strip().upper()
    if not LANGUAGE_SHORTCODE_PATTERN.match(v):
        raise ValueError("Shortcode must be 2-3 letters, optionally followed by -XX")
    return v


class LanguageCreate(CamelModel):
    shortcode: str
    name: str = Field(min_length=2, max_length=100)
    country: str = Field(min_length=2, max_length=100)
    is_active: bool = True

    @field_validator("shortcode")
    @classmethod
    def normalize_shortcode(cls, v: str) -> str:
        return _normalize_shortcode(v)


class LanguageUpdate(CamelModel):
    shortcode: str | None = None
    name: str | None = Field(None, min_length=2, max_length=100)
    country: str | None = Field(None, min_length=2, max_length=100)
    is_active: bool | None = None

    @field_validator("shortcode")
    @classmethod
    def normalize_shortcode(cls, v: str | None) -> str | None:
        return _normalize_shortcode(v) if v is not None else None


class LanguageBulkCreate(CamelModel):
    languages: list[LanguageCreate] = Field(min_length=1)


def serialize_language(lang: Language) -> dict:
    return {
        "id": str(lang.id),
        "shortcode": lang.shortcode,
        "name": lang.name,
        "country": lang.country,
        "isActive": lang.is_active,
        "createdAt": iso(lang.created_at),
        "updatedAt": iso(lang.updated_at),
    }
