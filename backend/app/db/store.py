"""Generic persistence helpers shared by the catalog services.

The store is the only place that talks to the session directly. Uniqueness
is enforced by database indexes; an ``IntegrityError`` from a write is rolled
back and re-raised as ``DuplicateNameError`` so that callers never see a raw
driver error, and every other ``SQLAlchemyError`` becomes ``StoreError``.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from typing import Any, Generic, TypeVar

from sqlalchemy import ColumnElement, func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.exceptions import DuplicateNameError, StoreError

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT")


class SqlAlchemyStore(Generic[ModelT]):
    """CRUD access to one mapped model through a request-scoped session."""

    def __init__(self, db: Session, model: type[ModelT], label: str | None = None):
        self.db = db
        self.model = model
        self.label = label or model.__name__

    def find_many(
        self,
        conditions: Iterable[ColumnElement[bool]] = (),
        order_by: Sequence[Any] = (),
        skip: int = 0,
        limit: int | None = None,
    ) -> tuple[list[ModelT], int]:
        """Return one page of matching rows and the total match count."""
        conditions = list(conditions)
        try:
            query = select(self.model).where(*conditions)
            count_query = (
                select(func.count()).select_from(self.model).where(*conditions)
            )
            total = self.db.scalar(count_query) or 0

            query = query.order_by(*order_by).offset(skip)
            if limit is not None:
                query = query.limit(limit)
            items = list(self.db.scalars(query).all())
            return items, total
        except SQLAlchemyError as e:
            logger.error(f"Database error listing {self.label}: {e}", exc_info=True)
            raise StoreError(f"Failed to retrieve {self.label} records") from e

    def find_one(self, *conditions: ColumnElement[bool]) -> ModelT | None:
        try:
            return self.db.scalars(select(self.model).where(*conditions).limit(1)).first()
        except SQLAlchemyError as e:
            logger.error(f"Database error looking up {self.label}: {e}", exc_info=True)
            raise StoreError(f"Failed to retrieve {self.label}") from e

    def get(self, entity_id: int) -> ModelT | None:
        try:
            return self.db.get(self.model, entity_id)
        except SQLAlchemyError as e:
            logger.error(
                f"Database error loading {self.label} {entity_id}: {e}", exc_info=True
            )
            raise StoreError(f"Failed to retrieve {self.label}") from e

    def exists(self, entity_id: int) -> bool:
        try:
            found = self.db.scalar(
                select(self.model.id).where(self.model.id == entity_id)
            )
        except SQLAlchemyError as e:
            logger.error(
                f"Database error checking {self.label} {entity_id}: {e}", exc_info=True
            )
            raise StoreError(f"Failed to retrieve {self.label}") from e
        return found is not None

    def insert(self, entity: ModelT) -> ModelT:
        """Persist a new entity and return it with its assigned id."""
        self.db.add(entity)
        self.commit()
        self.db.refresh(entity)
        return entity

    def save(self, entity: ModelT) -> ModelT:
        """Flush pending changes on an already-loaded entity."""
        self.commit()
        self.db.refresh(entity)
        return entity

    def delete_by_id(self, entity_id: int) -> bool:
        entity = self.get(entity_id)
        if entity is None:
            return False
        self.db.delete(entity)
        self.commit()
        return True

    def commit(self) -> None:
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            logger.warning(f"Uniqueness conflict writing {self.label}: {e.orig}")
            field = _conflicting_field(e)
            raise DuplicateNameError(
                f"{self.label} with this {field or 'name'} already exists",
                field=field,
            ) from e
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Database error writing {self.label}: {e}", exc_info=True)
            raise StoreError(f"Failed to save {self.label}") from e


def _conflicting_field(error: IntegrityError) -> str | None:
    """Best-effort guess of which unique column was hit, from the driver text."""
    text = str(error.orig).lower()
    for field in ("sku", "slug", "code", "name"):
        if field in text:
            return field
    return None
