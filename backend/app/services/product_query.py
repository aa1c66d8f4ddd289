"""Translate untrusted listing parameters into a product query plan.

Parsing produces a ``ProductQuery``: a list of tagged filter terms, a sort
sort order and a page window. ``compile_filters`` lowers the terms into SQLAlchemy
expressions that the store AND-s together, so a search term and a price
range always compose instead of competing for the same slot. Client text
only ever reaches the database as a bound, LIKE-escaped value.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Union

from sqlalchemy import ColumnElement, and_, or_

from app.core.exceptions import InvalidReferenceError
from app.db.models import Product, ProductSizeVariant, ProductTag
from app.services.pagination import PageWindow
from app.utils.identifiers import parse_entity_id

logger = logging.getLogger(__name__)

TRUTHY_TOKEN = "true"
DESCENDING_TOKEN = "desc"
DEFAULT_SORT_FIELD = "createdAt"

SORTABLE_COLUMNS = {
    "createdAt": Product.created_at,
    "updatedAt": Product.updated_at,
    "name": Product.name,
    "sku": Product.sku,
    "brand": Product.brand,
    "viewCount": Product.view_count,
    "wishlistCount": Product.wishlist_count,
    "isFeatured": Product.is_featured,
}

BOOLEAN_FLAGS = {
    "isActive": Product.is_active,
    "isFeatured": Product.is_featured,
    "isOnSale": Product.is_on_sale,
}


@dataclass(frozen=True)
class TextSearch:
    text: str


@dataclass(frozen=True)
class CategoryEq:
    category_id: int


@dataclass(frozen=True)
class SizeEq:
    size_id: int


@dataclass(frozen=True)
class BrandSubstring:
    text: str


@dataclass(frozen=True)
class BooleanFlag:
    flag: str
    value: bool


@dataclass(frozen=True)
class PriceRange:
    min_price: float | None = None
    max_price: float | None = None


ProductFilter = Union[TextSearch, CategoryEq, SizeEq, BrandSubstring, BooleanFlag, PriceRange]


@dataclass(frozen=True)
class SortSpec:
    field: str = DEFAULT_SORT_FIELD
    descending: bool = True


@dataclass
class ProductQuery:
    filters: list[ProductFilter] = field(default_factory=list)
    sort: SortSpec = field(default_factory=SortSpec)
    window: PageWindow = field(default_factory=PageWindow)


def parse_flag(value: Any) -> bool | None:
    """Tri-state flag: None when absent, else exact match on the truthy token."""
    if value is None:
        return None
    if isinstance(value, bool):
        return value
    return value == TRUTHY_TOKEN


def parse_price(value: Any) -> float | None:
    if value is None or value == "" or isinstance(value, bool):
        return None
    try:
        price = float(value)
    except (TypeError, ValueError):
        logger.debug(f"Ignoring non-numeric price bound {value!r}")
        return None
    return price if math.isfinite(price) else None


def parse_sort(sort_by: Any, sort_order: Any) -> SortSpec:
    sort_field = sort_by if sort_by in SORTABLE_COLUMNS else DEFAULT_SORT_FIELD
    if sort_order is None:
        return SortSpec(field=sort_field, descending=True)
    return SortSpec(field=sort_field, descending=sort_order == DESCENDING_TOKEN)


def _reference(params: Mapping[str, Any], key: str, message: str) -> int | None:
    raw = params.get(key)
    if raw is None or raw == "":
        return None
    parsed = parse_entity_id(raw)
    if parsed is None:
        raise InvalidReferenceError(
            message, field=key, reason=InvalidReferenceError.MALFORMED, value=raw
        )
    return parsed


def build_product_query(
    params: Mapping[str, Any],
    *,
    default_limit: int = 10,
    max_limit: int | None = None,
) -> ProductQuery:
    """Parse raw listing parameters (camelCase keys) into a ``ProductQuery``.

    Raises ``InvalidReferenceError`` for a malformed ``category`` or ``size``
    before anything touches the database.
    """
    filters: list[ProductFilter] = []

    search = params.get("search")
    if isinstance(search, str) and search.strip():
        filters.append(TextSearch(search.strip()))

    category_id = _reference(params, "category", "Invalid category ID")
    if category_id is not None:
        filters.append(CategoryEq(category_id))

    size_id = _reference(params, "size", "Invalid size ID")
    if size_id is not None:
        filters.append(SizeEq(size_id))

    brand = params.get("brand")
    if isinstance(brand, str) and brand.strip():
        filters.append(BrandSubstring(brand.strip()))

    for flag in BOOLEAN_FLAGS:
        value = parse_flag(params.get(flag))
        if value is not None:
            filters.append(BooleanFlag(flag, value))

    min_price = parse_price(params.get("minPrice"))
    max_price = parse_price(params.get("maxPrice"))
    if min_price is not None or max_price is not None:
        filters.append(PriceRange(min_price, max_price))

    return ProductQuery(
        filters=filters,
        sort=parse_sort(params.get("sortBy"), params.get("sortOrder")),
        window=PageWindow.parse(
            params.get("page"),
            params.get("limit"),
            default_limit=default_limit,
            max_limit=max_limit,
        ),
    )


def _within(column, low: float | None, high: float | None) -> ColumnElement[bool]:
    bounds = [column.is_not(None)]
    if low is not None:
        bounds.append(column >= low)
    if high is not None:
        bounds.append(column <= high)
    return and_(*bounds)


def compile_filter(term: ProductFilter) -> ColumnElement[bool]:
    """Lower one filter term into a SQLAlchemy boolean expression."""
    if isinstance(term, TextSearch):
        return or_(
            Product.name.icontains(term.text, autoescape=True),
            Product.description.icontains(term.text, autoescape=True),
            Product.brand.icontains(term.text, autoescape=True),
            Product.tag_entries.any(
                ProductTag.value.icontains(term.text, autoescape=True)
            ),
        )
    if isinstance(term, CategoryEq):
        return Product.category_id == term.category_id
    if isinstance(term, SizeEq):
        return Product.sizes.any(ProductSizeVariant.size_id == term.size_id)
    if isinstance(term, BrandSubstring):
        return Product.brand.icontains(term.text, autoescape=True)
    if isinstance(term, BooleanFlag):
        return BOOLEAN_FLAGS[term.flag] == term.value
    if isinstance(term, PriceRange):
        # Both bounds must hold for the same field of the same active variant
        return Product.sizes.any(
            and_(
                ProductSizeVariant.is_active.is_(True),
                or_(
                    _within(ProductSizeVariant.price, term.min_price, term.max_price),
                    _within(
                        ProductSizeVariant.sale_price, term.min_price, term.max_price
                    ),
                ),
            )
        )
    raise TypeError(f"Unsupported product filter: {term!r}")


def compile_filters(filters: list[ProductFilter]) -> list[ColumnElement[bool]]:
    return [compile_filter(term) for term in filters]


def compile_sort(sort: SortSpec) -> list[Any]:
    """ORDER BY for the requested sort, with insertion order as the tiebreak."""
    column = SORTABLE_COLUMNS.get(sort.field, SORTABLE_COLUMNS[DEFAULT_SORT_FIELD])
    primary = column.desc() if sort.descending else column.asc()
    return [primary, Product.id.asc()]
