"""Public product queries and admin product management endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from app.api.dependencies.auth import get_admin_id
from app.api.dependencies.db import get_session
from app.api.errors import translate_errors
from app.api.schemas.common import PaginationRead
from app.api.schemas.product import (
    CategoryProductsResponse,
    EntitySummary,
    ProductCreate,
    ProductFeaturedRead,
    ProductListResponse,
    ProductRead,
    ProductStatusRead,
    ProductUpdate,
)
from app.services.pagination import Page
from app.services.products import ProductService

logger = logging.getLogger(__name__)

router = APIRouter()


def _list_response(page: Page) -> ProductListResponse:
    return ProductListResponse(
        items=[ProductRead.model_validate(p) for p in page.items],
        pagination=PaginationRead.from_meta(page.meta),
    )


@router.get(
    "/",
    summary="List products with filters, sorting and pagination",
    response_model=ProductListResponse,
)
async def list_products(
    page: str | None = Query(None, description="Page number (1-indexed)"),
    limit: str | None = Query(None, description="Items per page"),
    search: str | None = Query(
        None, description="Text matched against name, description, brand and tags"
    ),
    category: str | None = Query(None, description="Category id"),
    size: str | None = Query(None, description="Size id offered by a variant"),
    brand: str | None = Query(None, description="Brand (partial match)"),
    is_active: str | None = Query(None, alias="isActive"),
    is_featured: str | None = Query(None, alias="isFeatured"),
    is_on_sale: str | None = Query(None, alias="isOnSale"),
    min_price: str | None = Query(None, alias="minPrice"),
    max_price: str | None = Query(None, alias="maxPrice"),
    sort_by: str | None = Query(None, alias="sortBy"),
    sort_order: str | None = Query(None, alias="sortOrder"),
    db: Session = Depends(get_session),
) -> ProductListResponse:
    """Return one page of products matching every supplied filter.

    Values are passed through untouched; parsing, coercion and rejection of
    malformed ids happen in the query builder.
    """
    params = {
        "page": page,
        "limit": limit,
        "search": search,
        "category": category,
        "size": size,
        "brand": brand,
        "isActive": is_active,
        "isFeatured": is_featured,
        "isOnSale": is_on_sale,
        "minPrice": min_price,
        "maxPrice": max_price,
        "sortBy": sort_by,
        "sortOrder": sort_order,
    }
    with translate_errors("retrieve products"):
        return _list_response(ProductService(db).list_products(params))


@router.get(
    "/featured",
    summary="Active featured products, newest first",
    response_model=list[ProductRead],
)
async def featured_products(
    limit: str | None = Query(None, description="Maximum number of products"),
    db: Session = Depends(get_session),
) -> list[ProductRead]:
    with translate_errors("retrieve featured products"):
        products = ProductService(db).featured(limit)
        return [ProductRead.model_validate(p) for p in products]


@router.get(
    "/category/{category_id}",
    summary="Active products of one category",
    response_model=CategoryProductsResponse,
)
async def products_by_category(
    category_id: str,
    page: str | None = Query(None),
    limit: str | None = Query(None),
    sort_by: str | None = Query(None, alias="sortBy"),
    sort_order: str | None = Query(None, alias="sortOrder"),
    db: Session = Depends(get_session),
) -> CategoryProductsResponse:
    with translate_errors("retrieve products by category"):
        result, category = ProductService(db).by_category(
            category_id, page, limit, sort_by, sort_order
        )
        return CategoryProductsResponse(
            items=[ProductRead.model_validate(p) for p in result.items],
            pagination=PaginationRead.from_meta(result.meta),
            category=EntitySummary.model_validate(category),
        )


@router.get(
    "/slug/{slug}",
    summary="Fetch a product by slug (counts a view)",
    response_model=ProductRead,
)
async def get_product_by_slug(
    slug: str,
    db: Session = Depends(get_session),
) -> ProductRead:
    with translate_errors("retrieve product"):
        return ProductRead.model_validate(ProductService(db).get_by_slug(slug))


@router.get(
    "/{product_id}",
    summary="Fetch a product by id",
    response_model=ProductRead,
)
async def get_product(
    product_id: str,
    db: Session = Depends(get_session),
) -> ProductRead:
    with translate_errors("retrieve product"):
        return ProductRead.model_validate(ProductService(db).get(product_id))


@router.post(
    "/",
    summary="Create a product",
    status_code=status.HTTP_201_CREATED,
    response_model=ProductRead,
)
async def create_product(
    payload: ProductCreate,
    admin_id: str = Depends(get_admin_id),
    db: Session = Depends(get_session),
) -> ProductRead:
    """Validate references and price rules, then persist the product.

    SKU and slug are derived from the name and must be unique.
    """
    with translate_errors("create product"):
        product = ProductService(db).create(payload.model_dump(), admin_id)
        return ProductRead.model_validate(product)


@router.put(
    "/{product_id}",
    summary="Update a product",
    response_model=ProductRead,
)
async def update_product(
    product_id: str,
    payload: ProductUpdate,
    admin_id: str = Depends(get_admin_id),
    db: Session = Depends(get_session),
) -> ProductRead:
    """Partial update: only fields present in the body are changed.

    ``sizes`` and ``images`` replace the existing lists wholesale.
    """
    with translate_errors(f"update product {product_id}"):
        product = ProductService(db).update(
            product_id, payload.model_dump(exclude_unset=True), admin_id
        )
        return ProductRead.model_validate(product)


@router.delete(
    "/{product_id}",
    summary="Delete a product",
    status_code=status.HTTP_204_NO_CONTENT,
)
async def delete_product(
    product_id: str,
    admin_id: str = Depends(get_admin_id),
    db: Session = Depends(get_session),
) -> Response:
    with translate_errors(f"delete product {product_id}"):
        ProductService(db).delete(product_id)
        logger.info(f"Product {product_id} deleted by {admin_id}")
        return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.patch(
    "/{product_id}/toggle-status",
    summary="Activate or deactivate a product",
    response_model=ProductStatusRead,
)
async def toggle_product_status(
    product_id: str,
    admin_id: str = Depends(get_admin_id),
    db: Session = Depends(get_session),
) -> ProductStatusRead:
    with translate_errors(f"toggle status of product {product_id}"):
        product = ProductService(db).toggle_status(product_id, admin_id)
        return ProductStatusRead.model_validate(product)


@router.patch(
    "/{product_id}/toggle-featured",
    summary="Feature or unfeature a product",
    response_model=ProductFeaturedRead,
)
async def toggle_featured_status(
    product_id: str,
    admin_id: str = Depends(get_admin_id),
    db: Session = Depends(get_session),
) -> ProductFeaturedRead:
    with translate_errors(f"toggle featured status of product {product_id}"):
        product = ProductService(db).toggle_featured(product_id, admin_id)
        return ProductFeaturedRead.model_validate(product)
