"""Price/stock rules and image normalization applied to every product write."""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping, Sequence
from typing import Any

from app.core.exceptions import InvariantViolationError

logger = logging.getLogger(__name__)


def _is_number(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def check_size_variant(variant: Mapping[str, Any], index: int = 0) -> None:
    """Reject a variant whose price, sale price, stock or weight is out of range."""
    price = variant.get("price")
    if not _is_number(price) or price < 0:
        raise InvariantViolationError(
            "Valid price is required for each size", field="sizes.price", index=index
        )

    sale_price = variant.get("sale_price")
    if sale_price is not None:
        if not _is_number(sale_price) or sale_price < 0:
            raise InvariantViolationError(
                "Sale price must be a non-negative number",
                field="sizes.salePrice",
                index=index,
            )
        if sale_price >= price:
            raise InvariantViolationError(
                "Sale price must be less than regular price",
                field="sizes.salePrice",
                index=index,
            )

    stock = variant.get("stock")
    if not _is_number(stock) or stock < 0:
        raise InvariantViolationError(
            "Stock must be a non-negative number", field="sizes.stock", index=index
        )

    weight = variant.get("weight")
    if weight is not None and (not _is_number(weight) or weight < 0):
        raise InvariantViolationError(
            "Weight cannot be negative", field="sizes.weight", index=index
        )


def check_size_variants(variants: Sequence[Mapping[str, Any]] | None) -> None:
    if not variants:
        raise InvariantViolationError("At least one size is required", field="sizes")
    for index, variant in enumerate(variants):
        check_size_variant(variant, index)


def check_physical_attributes(
    weight: Any = None, dimensions: Mapping[str, Any] | None = None
) -> None:
    """Product-level weight and dimensions cannot be negative."""
    if weight is not None and (not _is_number(weight) or weight < 0):
        raise InvariantViolationError("Weight cannot be negative", field="weight")
    for axis, value in (dimensions or {}).items():
        if value is not None and (not _is_number(value) or value < 0):
            raise InvariantViolationError(
                f"{axis.capitalize()} cannot be negative", field=f"dimensions.{axis}"
            )


def normalize_images(images: Sequence[Mapping[str, Any]] | None) -> list[dict[str, Any]]:
    """Return a copy of ``images`` with exactly one primary image.

    No image marked: the first becomes primary. Several marked: only the first
    one keeps the flag. An empty list stays empty.
    """
    normalized = [dict(image) for image in images or []]
    if not normalized:
        return normalized

    primary_seen = False
    for image in normalized:
        if image.get("is_primary") and not primary_seen:
            primary_seen = True
            image["is_primary"] = True
        else:
            image["is_primary"] = False

    if not primary_seen:
        normalized[0]["is_primary"] = True
    return normalized


def normalize_terms(values: Sequence[str] | None) -> list[str]:
    """Trim and lowercase tag-like strings, dropping empty ones."""
    terms = []
    for value in values or []:
        if not isinstance(value, str):
            continue
        term = value.strip().lower()
        if term:
            terms.append(term)
    return terms
