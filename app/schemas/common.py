from math import ceil
from typing import Any, Optional

from pydantic import BaseModel, field_validator


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    pages: int

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> "Pagination":
        return cls(page=page, limit=limit, total=total, pages=ceil(total / limit) if limit else 0)


def coerce_identifier(value: Any) -> Optional[str]:
    """Platform ids arrive as strings or numbers; store them as strings."""
    if value is None:
        return None
    if isinstance(value, bool):
        return str(value).lower()
    if isinstance(value, (int, float)):
        return str(value)
    return value


class IdentifierModel(BaseModel):
    """Base for ingress payloads. Platforms send ids and text fields as numbers too."""

    class Config:
        coerce_numbers_to_str = True

    @field_validator("*", mode="before")
    @classmethod
    def _ids_as_strings(cls, value, info):
        if info.field_name.endswith("_id"):
            return coerce_identifier(value)
        return value
