"""Admin size management endpoints."""

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
    SizeCreate,
    SizeUpdate,
)
from app.api.schemas.common import PaginationRead
from app.services.catalog_entities import size_service

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get(
    "/",
    summary="List sizes",
    response_model=CatalogEntityListResponse,
)
async def list_sizes(
    search: str | None = Query(None, description="Case-insensitive name filter"),
    page: str | None = Query(None),
    limit: str | None = Query(None),
    admin_id: str = Depends(get_admin_id),
    db: Session = Depends(get_session),
) -> CatalogEntityListResponse:
    with translate_errors("retrieve sizes"):
        result = size_service(db).list(search, page, limit)
        return CatalogEntityListResponse(
            items=[CatalogEntityRead.model_validate(s) for s in result.items],
            pagination=PaginationRead.from_meta(result.meta),
        )


@router.get(
    "/{size_id}",
    summary="Fetch a size by id",
    response_model=CatalogEntityRead,
)
async def get_size(
    size_id: str,
    admin_id: str = Depends(get_admin_id),
    db: Session = Depends(get_session),
) -> CatalogEntityRead:
    with translate_errors("retrieve size"):
        return CatalogEntityRead.model_validate(size_service(db).get(size_id))


@router.post(
    "/",
    summary="Create a size",
    status_code=status.HTTP_201_CREATED,
    response_model=CatalogEntityRead,
)
async def create_size(
    payload: SizeCreate,
    admin_id: str = Depends(get_admin_id),
    db: Session = Depends(get_session),
) -> CatalogEntityRead:
    with translate_errors("create size"):
        return CatalogEntityRead.model_validate(
            size_service(db).create(payload.name, admin_id)
        )


@router.put(
    "/{size_id}",
    summary="Rename a size",
    response_model=CatalogEntityRead,
)
async def update_size(
    size_id: str,
    payload: SizeUpdate,
    admin_id: str = Depends(get_admin_id),
    db: Session = Depends(get_session),
) -> CatalogEntityRead:
    with translate_errors(f"update size {size_id}"):
        return CatalogEntityRead.model_validate(
            size_service(db).update(size_id, payload.name, admin_id)
        )


@router.delete(
    "/{size_id}",
    summary="Delete a size",
    status_code=status.HTTP_204_NO_CONTENT,
)
async def delete_size(
    size_id: str,
    admin_id: str = Depends(get_admin_id),
    db: Session = Depends(get_session),
) -> Response:
    with translate_errors(f"delete size {size_id}"):
        size_service(db).delete(size_id)
        logger.info(f"Size {size_id} deleted by {admin_id}")
        return Response(status_code=status.HTTP_204_NO_CONTENT)
