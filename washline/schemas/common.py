"""Washline — Common response envelope and the camelCase wire base."""
from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class CamelModel(BaseModel):
    """Snake_case in Python, camelCase on the wire. Accepts either on input."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class Pagination(CamelModel):
    page: int = 1
    limit: int = 20
    total: int = 0
    pages: int = 0


class ApiResponse(CamelModel, Generic[T]):
    """Standard response envelope: {success, data, message, errors}."""

    success: bool = True
    data: T | None = None
    message: str | None = None
    errors: dict[str, str] | None = None
    pagination: Pagination | None = None
