"""Create/read/update/delete flows for categories and sizes.

Both entity types share one shape: a case-insensitively unique name plus a
code and slug derived from it. Uniqueness is pre-checked for a friendly
error, but the check is not atomic with the insert; the unique indexes
decide races and the store turns the loser into ``DuplicateNameError``.
"""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.core.config import get_settings
from app.core.exceptions import DuplicateNameError, InvalidReferenceError, NotFoundError
from app.db.models import Category, Size
from app.db.store import SqlAlchemyStore
from app.services.pagination import Page, PageMeta, PageWindow
from app.utils.identifiers import parse_entity_id
from app.utils.slugify import generate_code, generate_slug

logger = logging.getLogger(__name__)


class CatalogEntityService:
    """Shared service for named catalog entities (categories, sizes)."""

    def __init__(self, db: Session, model: type[Category] | type[Size], label: str):
        self.model = model
        self.label = label
        self.store = SqlAlchemyStore(db, model, label)
        self.settings = get_settings()

    def resolve_id(self, raw_id: Any) -> int:
        entity_id = parse_entity_id(raw_id)
        if entity_id is None:
            raise InvalidReferenceError(
                f"Invalid {self.label.lower()} ID",
                field="id",
                reason=InvalidReferenceError.MALFORMED,
                value=raw_id,
            )
        return entity_id

    def get(self, raw_id: Any):
        entity_id = self.resolve_id(raw_id)
        entity = self.store.get(entity_id)
        if entity is None:
            raise NotFoundError(self.label, entity_id)
        return entity

    def get_by_slug(self, slug: str):
        entity = self.store.find_one(self.model.slug == slug.strip().lower())
        if entity is None:
            raise NotFoundError(self.label, slug)
        return entity

    def list(
        self,
        search: str | None = None,
        page: Any = None,
        limit: Any = None,
        *,
        order_by_name: bool = False,
    ) -> Page:
        """Paginated listing, newest first unless ``order_by_name`` is set."""
        window = PageWindow.parse(
            page,
            limit,
            default_limit=self.settings.default_page_limit,
            max_limit=self.settings.max_page_limit,
        )
        conditions = []
        if search and search.strip():
            conditions.append(
                self.model.name.icontains(search.strip(), autoescape=True)
            )
        if order_by_name:
            order_by = [self.model.name.asc(), self.model.id.asc()]
        else:
            order_by = [self.model.created_at.desc(), self.model.id.asc()]

        items, total = self.store.find_many(
            conditions, order_by=order_by, skip=window.skip, limit=window.limit
        )
        return Page(items=items, meta=PageMeta.build(window, total))

    def create(self, name: str, admin_id: str):
        name = name.strip()
        self._ensure_unique(name)
        entity = self.model(name=name, created_by=admin_id)
        entity = self.store.insert(entity)
        logger.info(f"Created {self.label.lower()} {entity.id} ({entity.name!r}) by {admin_id}")
        return entity

    def update(self, raw_id: Any, name: str | None, admin_id: str):
        entity = self.get(raw_id)
        if name is not None and name.strip() and name.strip() != entity.name:
            name = name.strip()
            self._ensure_unique(name, exclude_id=entity.id)
            entity.name = name
        entity.updated_by = admin_id
        entity = self.store.save(entity)
        logger.info(f"Updated {self.label.lower()} {entity.id} by {admin_id}")
        return entity

    def delete(self, raw_id: Any) -> None:
        """Delete without touching products that still reference the entity."""
        entity_id = self.resolve_id(raw_id)
        if not self.store.delete_by_id(entity_id):
            raise NotFoundError(self.label, entity_id)
        logger.info(f"Deleted {self.label.lower()} {entity_id}")

    def _ensure_unique(self, name: str, exclude_id: int | None = None) -> None:
        """Reject a name whose own value, code or slug is already taken."""
        candidates = [
            ("name", func.lower(self.model.name) == name.lower()),
        ]
        code = generate_code(name, self.model.code_length)
        if code is not None:
            candidates.append(("code", self.model.code == code))
        slug = generate_slug(name)
        if slug is not None:
            candidates.append(("slug", self.model.slug == slug))

        for field, condition in candidates:
            conditions = [condition]
            if exclude_id is not None:
                conditions.append(self.model.id != exclude_id)
            if self.store.find_one(*conditions) is not None:
                raise DuplicateNameError(
                    f"{self.label} with this {field} already exists", field=field
                )


def category_service(db: Session) -> CatalogEntityService:
    return CatalogEntityService(db, Category, "Category")


def size_service(db: Session) -> CatalogEntityService:
    return CatalogEntityService(db, Size, "Size")
