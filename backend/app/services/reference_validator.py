"""Cross-entity reference checks run before a product is written."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from sqlalchemy.orm import Session

from app.core.exceptions import InvalidReferenceError, InvariantViolationError
from app.db.models import Category, Size
from app.db.store import SqlAlchemyStore
from app.utils.identifiers import parse_entity_id

logger = logging.getLogger(__name__)


def _size_ref(size_variant: Any) -> Any:
    if isinstance(size_variant, dict):
        return size_variant.get("size")
    return getattr(size_variant, "size", None)


class ReferenceValidator:
    """Resolve category and size references against the store.

    Each check distinguishes a malformed identifier from one that does not
    resolve, and returns the parsed integer id on success.
    """

    def __init__(self, db: Session):
        self.categories = SqlAlchemyStore(db, Category)
        self.sizes = SqlAlchemyStore(db, Size)

    def validate_category(self, value: Any) -> int:
        category_id = parse_entity_id(value)
        if category_id is None:
            raise InvalidReferenceError(
                "Invalid category ID",
                field="category",
                reason=InvalidReferenceError.MALFORMED,
                value=value,
            )
        if not self.categories.exists(category_id):
            raise InvalidReferenceError(
                "Category not found",
                field="category",
                reason=InvalidReferenceError.NOT_FOUND,
                value=value,
            )
        return category_id

    def validate_sizes(self, size_variants: Sequence[Any] | None) -> list[int]:
        """Check every variant's size reference in order, stopping at the first bad one."""
        if not size_variants:
            raise InvariantViolationError("At least one size is required", field="sizes")

        size_ids: list[int] = []
        for index, variant in enumerate(size_variants):
            value = _size_ref(variant)
            size_id = parse_entity_id(value)
            if size_id is None:
                raise InvalidReferenceError(
                    "Invalid size ID in sizes array",
                    field="sizes.size",
                    reason=InvalidReferenceError.MALFORMED,
                    value=value,
                    index=index,
                )
            if not self.sizes.exists(size_id):
                raise InvalidReferenceError(
                    f"Size with ID {value} not found",
                    field="sizes.size",
                    reason=InvalidReferenceError.NOT_FOUND,
                    value=value,
                    index=index,
                )
            size_ids.append(size_id)
        return size_ids

    def validate_product(
        self, category: Any, size_variants: Sequence[Any] | None
    ) -> tuple[int, list[int]]:
        """Full create-time check: category first, then sizes."""
        category_id = self.validate_category(category)
        size_ids = self.validate_sizes(size_variants)
        logger.debug(
            f"Resolved category {category_id} and {len(size_ids)} size reference(s)"
        )
        return category_id, size_ids
