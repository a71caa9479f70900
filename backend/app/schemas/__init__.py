"""Pydantic Schemas — request/response validation for API endpoints.

Invariants:
    - Schemas validate at system boundary (user input, API responses)
    - Wire format is camelCase (web and mobile clients); Python attributes are snake_case

Design Decisions:
    - Separate from models: schemas are API contracts, models are persistence (ADR: DDD boundary)
    - Serializers (ORM row → camelCase dict) live next to the schemas of the same resource
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Accepts camelCase or snake_case input; dumps camelCase with by_alias=True."""
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True,
    )


def iso(value) -> str | None:
    return value.isoformat() if value is not None else None
