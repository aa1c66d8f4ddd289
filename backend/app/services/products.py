"""Product read and write flows.

Writes run reference validation, then the price/stock invariants and image
normalization, and only then touch the ORM object, so a rejected payload
never leaves a partially applied change behind. ``sku`` and ``slug`` are
derived by the model whenever ``name`` is assigned.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.config import get_settings
from app.core.exceptions import (
    DuplicateNameError,
    InvalidReferenceError,
    NotFoundError,
    StoreError,
)
from app.db.models import Category, Product, ProductImage, ProductSizeVariant
from app.db.store import SqlAlchemyStore
from app.services.pagination import Page, PageMeta, PageWindow
from app.services.product_invariants import (
    check_physical_attributes,
    check_size_variants,
    normalize_images,
    normalize_terms,
)
from app.services.product_query import (
    BooleanFlag,
    CategoryEq,
    ProductQuery,
    SortSpec,
    build_product_query,
    compile_filters,
    compile_sort,
    parse_sort,
)
from app.services.reference_validator import ReferenceValidator
from app.utils.identifiers import parse_entity_id
from app.utils.slugify import PRODUCT_SKU_LENGTH, generate_code, generate_slug

logger = logging.getLogger(__name__)

# Plain columns copied from the payload as-is
SCALAR_FIELDS = (
    "description",
    "short_description",
    "brand",
    "model",
    "color",
    "material",
    "weight",
    "is_active",
    "is_featured",
    "is_on_sale",
    "meta_title",
    "meta_description",
)
# Fields an update may explicitly clear by sending null
CLEARABLE_FIELDS = {
    "short_description",
    "brand",
    "model",
    "color",
    "material",
    "dimensions",
    "weight",
    "meta_title",
    "meta_description",
}


def _build_variants(sizes: list[Mapping[str, Any]], size_ids: list[int]) -> list[ProductSizeVariant]:
    return [
        ProductSizeVariant(
            position=position,
            size_id=size_id,
            price=variant["price"],
            sale_price=variant.get("sale_price"),
            stock=variant["stock"],
            weight=variant.get("weight"),
            is_active=variant.get("is_active", True),
        )
        for position, (variant, size_id) in enumerate(zip(sizes, size_ids))
    ]


def _build_images(images: list[Mapping[str, Any]]) -> list[ProductImage]:
    return [
        ProductImage(
            position=position,
            url=image["url"],
            alt=image.get("alt"),
            is_primary=image["is_primary"],
            order=image.get("order") or 0,
        )
        for position, image in enumerate(images)
    ]


class ProductService:
    def __init__(self, db: Session):
        self.db = db
        self.store = SqlAlchemyStore(db, Product, "Product")
        self.references = ReferenceValidator(db)
        self.settings = get_settings()

    # Reads

    def list_products(self, params: Mapping[str, Any]) -> Page:
        """Filtered, sorted, paginated listing from raw query parameters."""
        query = build_product_query(
            params,
            default_limit=self.settings.default_page_limit,
            max_limit=self.settings.max_page_limit,
        )
        return self.run_query(query)

    def run_query(self, query: ProductQuery) -> Page:
        items, total = self.store.find_many(
            compile_filters(query.filters),
            order_by=compile_sort(query.sort),
            skip=query.window.skip,
            limit=query.window.limit,
        )
        return Page(items=items, meta=PageMeta.build(query.window, total))

    def featured(self, limit: Any = None) -> list[Product]:
        window = PageWindow.parse(
            1,
            limit,
            default_limit=self.settings.featured_limit,
            max_limit=self.settings.max_page_limit,
        )
        query = ProductQuery(
            filters=[BooleanFlag("isActive", True), BooleanFlag("isFeatured", True)],
            sort=SortSpec(),
            window=window,
        )
        return self.run_query(query).items

    def by_category(
        self,
        raw_category_id: Any,
        page: Any = None,
        limit: Any = None,
        sort_by: Any = None,
        sort_order: Any = None,
    ) -> tuple[Page, Category]:
        """Active products of one category; the category must exist."""
        category_id = parse_entity_id(raw_category_id)
        if category_id is None:
            raise InvalidReferenceError(
                "Invalid category ID",
                field="categoryId",
                reason=InvalidReferenceError.MALFORMED,
                value=raw_category_id,
            )
        category = self.references.categories.get(category_id)
        if category is None:
            raise NotFoundError("Category", category_id)

        query = ProductQuery(
            filters=[CategoryEq(category_id), BooleanFlag("isActive", True)],
            sort=parse_sort(sort_by, sort_order),
            window=PageWindow.parse(
                page,
                limit,
                default_limit=self.settings.default_page_limit,
                max_limit=self.settings.max_page_limit,
            ),
        )
        return self.run_query(query), category

    def resolve_id(self, raw_id: Any) -> int:
        product_id = parse_entity_id(raw_id)
        if product_id is None:
            raise InvalidReferenceError(
                "Invalid product ID",
                field="id",
                reason=InvalidReferenceError.MALFORMED,
                value=raw_id,
            )
        return product_id

    def get(self, raw_id: Any) -> Product:
        product_id = self.resolve_id(raw_id)
        product = self.store.get(product_id)
        if product is None:
            raise NotFoundError("Product", product_id)
        return product

    def get_by_slug(self, slug: str) -> Product:
        """Look a product up by slug and count the view."""
        product = self.store.find_one(Product.slug == slug.strip().lower())
        if product is None:
            raise NotFoundError("Product", slug)
        try:
            self.db.execute(
                update(Product)
                .where(Product.id == product.id)
                .values(view_count=Product.view_count + 1)
                .execution_options(synchronize_session=False)
            )
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to count view for product {product.id}: {e}", exc_info=True)
            raise StoreError("Failed to update product") from e
        self.db.refresh(product)
        return product

    # Writes

    def create(self, payload: Mapping[str, Any], admin_id: str) -> Product:
        sizes = payload.get("sizes")
        category_id, size_ids = self.references.validate_product(
            payload.get("category"), sizes
        )
        check_size_variants(sizes)
        check_physical_attributes(payload.get("weight"), payload.get("dimensions"))
        images = normalize_images(payload.get("images"))

        name = payload["name"].strip()
        self._ensure_unique_identity(name)

        product = Product(
            name=name,
            category_id=category_id,
            created_by=admin_id,
            view_count=0,
            wishlist_count=0,
        )
        for field in SCALAR_FIELDS:
            if payload.get(field) is not None:
                setattr(product, field, payload[field])
        product.dimensions = payload.get("dimensions")
        product.meta_keywords = normalize_terms(payload.get("meta_keywords"))
        product.tags = normalize_terms(payload.get("tags"))
        product.sizes = _build_variants(sizes, size_ids)
        product.images = _build_images(images)

        product = self.store.insert(product)
        logger.info(f"Created product {product.id} (sku={product.sku}) by {admin_id}")
        return product

    def update(self, raw_id: Any, changes: Mapping[str, Any], admin_id: str) -> Product:
        """Partial update; only keys present in ``changes`` are applied."""
        product = self.get(raw_id)
        changes = {
            key: value
            for key, value in changes.items()
            if value is not None or key in CLEARABLE_FIELDS
        }

        category_id = None
        if "category" in changes:
            category_id = self.references.validate_category(changes["category"])
        size_ids = None
        if "sizes" in changes:
            size_ids = self.references.validate_sizes(changes["sizes"])
            check_size_variants(changes["sizes"])
        check_physical_attributes(changes.get("weight"), changes.get("dimensions"))
        images = normalize_images(changes["images"]) if "images" in changes else None

        name = changes["name"].strip() if "name" in changes else None
        if name is not None and name != product.name:
            self._ensure_unique_identity(name, exclude_id=product.id)

        # Everything validated; apply
        if name is not None:
            product.name = name
        if category_id is not None:
            product.category_id = category_id
        if size_ids is not None:
            product.sizes = _build_variants(changes["sizes"], size_ids)
        if images is not None:
            product.images = _build_images(images)
        for field in SCALAR_FIELDS:
            if field in changes:
                setattr(product, field, changes[field])
        if "dimensions" in changes:
            product.dimensions = changes["dimensions"]
        if "tags" in changes:
            product.tags = normalize_terms(changes["tags"])
        if "meta_keywords" in changes:
            product.meta_keywords = normalize_terms(changes["meta_keywords"])
        product.updated_by = admin_id

        product = self.store.save(product)
        logger.info(f"Updated product {product.id} by {admin_id}")
        return product

    def delete(self, raw_id: Any) -> None:
        product_id = self.resolve_id(raw_id)
        if not self.store.delete_by_id(product_id):
            raise NotFoundError("Product", product_id)
        logger.info(f"Deleted product {product_id}")

    def toggle_status(self, raw_id: Any, admin_id: str) -> Product:
        product = self.get(raw_id)
        product.is_active = not product.is_active
        product.updated_by = admin_id
        return self.store.save(product)

    def toggle_featured(self, raw_id: Any, admin_id: str) -> Product:
        product = self.get(raw_id)
        product.is_featured = not product.is_featured
        product.updated_by = admin_id
        return self.store.save(product)

    def _ensure_unique_identity(self, name: str, exclude_id: int | None = None) -> None:
        """Pre-check the SKU and slug a name would derive."""
        sku = generate_code(name, PRODUCT_SKU_LENGTH)
        slug = generate_slug(name)
        for field, column, value in (("sku", Product.sku, sku), ("slug", Product.slug, slug)):
            if value is None:
                continue
            conditions = [column == value]
            if exclude_id is not None:
                conditions.append(Product.id != exclude_id)
            if self.store.find_one(*conditions) is not None:
                raise DuplicateNameError(
                    f"Product with this {field} already exists", field=field
                )
