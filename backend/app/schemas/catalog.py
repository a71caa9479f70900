"""Catalog Schemas — admin create/update bodies for master-data catalogs.

Invariants:
    - Natural keys normalized on input: theme/gender ids lowercase, country codes uppercase
    - Update bodies are all-optional; only provided fields are written
    - Each Create model's snake_case fields match the ORM column names one-to-one
"""

from typing import Literal

from pydantic import Field, field_validator

from app.schemas import CamelModel


class VoiceCreate(CamelModel):
    voice_id: str = Field(min_length=1, max_length=64, alias="id")
    name: str = Field(min_length=1, max_length=100)
    display_name: str = Field(min_length=1, max_length=100)
    language: str = Field(min_length=1, max_length=50)
    country: str = Field(min_length=1, max_length=100)
    gender: Literal["Male", "Female"]
    accent: str = Field(min_length=1, max_length=50)
    description: str = Field(min_length=1, max_length=200)
    is_active: bool = True


class VoiceUpdate(CamelModel):
    name: str | None = Field(None, max_length=100)
    display_name: str | None = Field(None, max_length=100)
    language: str | None = Field(None, max_length=50)
    country: str | None = Field(None, max_length=100)
    gender: Literal["Male", "Female"] | None = None
    accent: str | None = Field(None, max_length=50)
    description: str | None = Field(None, max_length=200)
    is_active: bool | None = None


class ThemeCreate(CamelModel):
    theme_id: str = Field(min_length=1, max_length=50, alias="id")
    name: str = Field(min_length=1, max_length=100)
    display_name: str = Field(min_length=1, max_length=50)
    description: str = Field(min_length=1, max_length=200)
    icon: str = Field(min_length=1, max_length=10)
    category: str = Field(min_length=1, max_length=50)
    colors: dict[str, str]
    is_active: bool = True

    @field_validator("theme_id")
    @classmethod
    def lower_id(cls, v: str) -> str:
        return v.strip().lower()


class ThemeUpdate(CamelModel):
    name: str | None = Field(None, max_length=100)
    display_name: str | None = Field(None, max_length=50)
    description: str | None = Field(None, max_length=200)
    icon: str | None = Field(None, max_length=10)
    category: str | None = Field(None, max_length=50)
    colors: dict[str, str] | None = None
    is_active: bool | None = None


class GenderCreate(CamelModel):
    gender_id: str = Field(min_length=1, max_length=50, alias="id")
    name: str = Field(min_length=1, max_length=50)
    display_name: str = Field(min_length=1, max_length=50)
    description: str = Field(min_length=1, max_length=200)
    is_active: bool = True

    @field_validator("gender_id")
    @classmethod
    def lower_id(cls, v: str) -> str:
        return v.strip().lower()


class GenderUpdate(CamelModel):
    name: str | None = Field(None, max_length=50)
    display_name: str | None = Field(None, max_length=50)
    description: str | None = Field(None, max_length=200)
    is_active: bool | None = None


def _upper_code(v: str) -> str:
    return v.strip().upper()


class CountryCreate(CamelModel):
    country_code: str = Field(min_length=2, max_length=3)
    name: str = Field(min_length=2, max_length=100)
    is_active: bool = True

    @field_validator("country_code")
    @classmethod
    def upper_code(cls, v: str) -> str:
        return _upper_code(v)


class CountryUpdate(CamelModel):
    name: str | None = Field(None, min_length=2, max_length=100)
    is_active: bool | None = None


class CountryCodeCreate(CamelModel):
    country: str = Field(min_length=1, max_length=100)
    country_code: str = Field(min_length=2, max_length=3)
    dialing_code: str = Field(pattern=r"^\+[1-9]\d{0,3}$")
    is_active: bool = True

    @field_validator("country_code")
    @classmethod
    def upper_code(cls, v: str) -> str:
        return _upper_code(v)


class CountryCodeUpdate(CamelModel):
    country: str | None = Field(None, max_length=100)
    dialing_code: str | None = Field(None, pattern=r"^\+[1-9]\d{0,3}$")
    is_active: bool | None = None
