"""Pydantic models describing Category and Size payloads."""

from datetime import datetime

from pydantic import Field

from app.api.schemas.common import CamelModel, PaginationRead, RequestModel

NAME_PATTERN = r"^[a-zA-Z0-9\s\-_&]+$"


class CategoryCreate(RequestModel):
    name: str = Field(..., min_length=2, max_length=100, pattern=NAME_PATTERN)


class CategoryUpdate(RequestModel):
    name: str | None = Field(None, min_length=2, max_length=100, pattern=NAME_PATTERN)


class SizeCreate(RequestModel):
    name: str = Field(..., min_length=1, max_length=50, pattern=NAME_PATTERN)


class SizeUpdate(RequestModel):
    name: str | None = Field(None, min_length=1, max_length=50, pattern=NAME_PATTERN)


class CatalogEntityRead(CamelModel):
    id: int
    name: str
    code: str | None = None
    slug: str | None = None
    created_by: str
    updated_by: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class CatalogEntityListResponse(CamelModel):
    items: list[CatalogEntityRead]
    pagination: PaginationRead


class PublicCategoryRead(CamelModel):
    """Fields exposed to anonymous clients."""

    id: int
    name: str
    code: str | None = None
    slug: str | None = None
    created_at: datetime | None = None


class PublicCategoryListResponse(CamelModel):
    items: list[PublicCategoryRead]
    pagination: PaginationRead
