"""Admin category management endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from app.api.dependencies.auth import get_admin_id
from app.api.dependencies.db import get_session
from app.api.errors import translate_errors
from app.api.schemas.catalog import (
    CatalogEntityListResponse,
    CatalogEntityRead,
    CategoryCreate,
    CategoryUpdate,
)
from app.api.schemas.common import PaginationRead
from app.services.catalog_entities import category_service

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get(
    "/",
    summary="List categories",
    response_model=CatalogEntityListResponse,
)
async def list_categories(
    search: str | None = Query(None, description="Case-insensitive name filter"),
    page: str | None = Query(None),
    limit: str | None = Query(None),
    admin_id: str = Depends(get_admin_id),
    db: Session = Depends(get_session),
) -> CatalogEntityListResponse:
    """Newest categories first."""
    with translate_errors("retrieve categories"):
        result = category_service(db).list(search, page, limit)
        return CatalogEntityListResponse(
            items=[CatalogEntityRead.model_validate(c) for c in result.items],
            pagination=PaginationRead.from_meta(result.meta),
        )


@router.get(
    "/{category_id}",
    summary="Fetch a category by id",
    response_model=CatalogEntityRead,
)
async def get_category(
    category_id: str,
    admin_id: str = Depends(get_admin_id),
    db: Session = Depends(get_session),
) -> CatalogEntityRead:
    with translate_errors("retrieve category"):
        return CatalogEntityRead.model_validate(category_service(db).get(category_id))


@router.post(
    "/",
    summary="Create a category",
    status_code=status.HTTP_201_CREATED,
    response_model=CatalogEntityRead,
)
async def create_category(
    payload: CategoryCreate,
    admin_id: str = Depends(get_admin_id),
    db: Session = Depends(get_session),
) -> CatalogEntityRead:
    """Create a category; code and slug are derived from the name."""
    with translate_errors("create category"):
        category = category_service(db).create(payload.name, admin_id)
        return CatalogEntityRead.model_validate(category)


@router.put(
    "/{category_id}",
    summary="Rename a category",
    response_model=CatalogEntityRead,
)
async def update_category(
    category_id: str,
    payload: CategoryUpdate,
    admin_id: str = Depends(get_admin_id),
    db: Session = Depends(get_session),
) -> CatalogEntityRead:
    with translate_errors(f"update category {category_id}"):
        category = category_service(db).update(category_id, payload.name, admin_id)
        return CatalogEntityRead.model_validate(category)


@router.delete(
    "/{category_id}",
    summary="Delete a category",
    status_code=status.HTTP_204_NO_CONTENT,
)
async def delete_category(
    category_id: str,
    admin_id: str = Depends(get_admin_id),
    db: Session = Depends(get_session),
) -> Response:
    """Products pointing at the category are left untouched."""
    with translate_errors(f"delete category {category_id}"):
        category_service(db).delete(category_id)
        logger.info(f"Category {category_id} deleted by {admin_id}")
        return Response(status_code=status.HTTP_204_NO_CONTENT)
