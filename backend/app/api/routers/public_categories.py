"""Read-only category endpoints for storefront clients."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.api.dependencies.db import get_session
from app.api.errors import translate_errors
from app.api.schemas.catalog import PublicCategoryListResponse, PublicCategoryRead
from app.api.schemas.common import PaginationRead
from app.services.catalog_entities import category_service

router = APIRouter()


@router.get(
    "/",
    summary="List categories alphabetically",
    response_model=PublicCategoryListResponse,
)
async def list_public_categories(
    search: str | None = Query(None),
    page: str | None = Query(None),
    limit: str | None = Query(None),
    db: Session = Depends(get_session),
) -> PublicCategoryListResponse:
    with translate_errors("retrieve categories"):
        result = category_service(db).list(search, page, limit, order_by_name=True)
        return PublicCategoryListResponse(
            items=[PublicCategoryRead.model_validate(c) for c in result.items],
            pagination=PaginationRead.from_meta(result.meta),
        )


@router.get(
    "/slug/{slug}",
    summary="Fetch a category by slug",
    response_model=PublicCategoryRead,
)
async def get_public_category_by_slug(
    slug: str,
    db: Session = Depends(get_session),
) -> PublicCategoryRead:
    with translate_errors("retrieve category"):
        return PublicCategoryRead.model_validate(category_service(db).get_by_slug(slug))


@router.get(
    "/{category_id}",
    summary="Fetch a category by id",
    response_model=PublicCategoryRead,
)
async def get_public_category(
    category_id: str,
    db: Session = Depends(get_session),
) -> PublicCategoryRead:
    with translate_errors("retrieve category"):
        return PublicCategoryRead.model_validate(category_service(db).get(category_id))
