"""Base schema configuration and pagination payloads."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from app.services.pagination import PageMeta


class CamelModel(BaseModel):
    """Schemas exchanged with clients use camelCase keys."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class RequestModel(CamelModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
    )


class PaginationRead(CamelModel):
    current_page: int
    total_pages: int
    total_items: int
    total_products: int
    items_per_page: int
    limit: int
    has_next_page: bool
    has_prev_page: bool

    @classmethod
    def from_meta(cls, meta: PageMeta) -> "PaginationRead":
        return cls(
            current_page=meta.current_page,
            total_pages=meta.total_pages,
            total_items=meta.total_items,
            total_products=meta.total_items,
            items_per_page=meta.items_per_page,
            limit=meta.items_per_page,
            has_next_page=meta.has_next_page,
            has_prev_page=meta.has_prev_page,
        )
