"""Pydantic models describing Product payloads."""

from datetime import datetime

from pydantic import Field

from app.api.schemas.common import CamelModel, PaginationRead, RequestModel


class SizeVariantIn(RequestModel):
    size: int | str = Field(..., description="Size reference")
    price: float
    sale_price: float | None = None
    stock: int
    weight: float | None = None
    is_active: bool = True


class ImageIn(RequestModel):
    url: str = Field(..., min_length=1)
    alt: str | None = Field(None, max_length=255)
    is_primary: bool = False
    order: int = 0


class Dimensions(CamelModel):
    length: float | None = None
    width: float | None = None
    height: float | None = None


class ProductCreate(RequestModel):
    name: str = Field(..., min_length=2, max_length=200)
    description: str = Field(..., min_length=10, max_length=2000)
    short_description: str | None = Field(None, max_length=500)
    category: int | str = Field(..., description="Category reference")
    sizes: list[SizeVariantIn] = Field(default_factory=list)
    images: list[ImageIn] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
    brand: str | None = Field(None, max_length=100)
    model: str | None = Field(None, max_length=100)
    color: str | None = Field(None, max_length=50)
    material: str | None = Field(None, max_length=100)
    dimensions: Dimensions | None = None
    weight: float | None = None
    is_active: bool = True
    is_featured: bool = False
    is_on_sale: bool = False
    meta_title: str | None = Field(None, max_length=60)
    meta_description: str | None = Field(None, max_length=160)
    meta_keywords: list[str] = Field(default_factory=list)


class ProductUpdate(RequestModel):
    name: str | None = Field(None, min_length=2, max_length=200)
    description: str | None = Field(None, min_length=10, max_length=2000)
    short_description: str | None = Field(None, max_length=500)
    category: int | str | None = None
    sizes: list[SizeVariantIn] | None = None
    images: list[ImageIn] | None = None
    tags: list[str] | None = None
    brand: str | None = Field(None, max_length=100)
    model: str | None = Field(None, max_length=100)
    color: str | None = Field(None, max_length=50)
    material: str | None = Field(None, max_length=100)
    dimensions: Dimensions | None = None
    weight: float | None = None
    is_active: bool | None = None
    is_featured: bool | None = None
    is_on_sale: bool | None = None
    meta_title: str | None = Field(None, max_length=60)
    meta_description: str | None = Field(None, max_length=160)
    meta_keywords: list[str] | None = None


class EntitySummary(CamelModel):
    id: int
    name: str
    code: str | None = None
    slug: str | None = None


class SizeVariantRead(CamelModel):
    size_id: int
    size: EntitySummary | None = None
    price: float
    sale_price: float | None = None
    stock: int
    weight: float | None = None
    is_active: bool


class ImageRead(CamelModel):
    url: str
    alt: str | None = None
    is_primary: bool
    order: int


class ProductRead(CamelModel):
    id: int
    name: str
    description: str
    short_description: str | None = None
    sku: str | None = None
    slug: str | None = None
    category_id: int
    category: EntitySummary | None = None
    sizes: list[SizeVariantRead]
    images: list[ImageRead]
    tags: list[str]
    brand: str | None = None
    model: str | None = None
    color: str | None = None
    material: str | None = None
    dimensions: Dimensions | None = None
    weight: float | None = None
    is_active: bool
    is_featured: bool
    is_on_sale: bool
    meta_title: str | None = None
    meta_description: str | None = None
    meta_keywords: list[str] = Field(default_factory=list)
    view_count: int
    wishlist_count: int
    created_by: str
    updated_by: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    lowest_price: float | None = None
    highest_price: float | None = None
    total_stock: int
    in_stock: bool
    primary_image: ImageRead | None = None


class ProductListResponse(CamelModel):
    items: list[ProductRead]
    pagination: PaginationRead


class CategoryProductsResponse(ProductListResponse):
    category: EntitySummary


class ProductStatusRead(CamelModel):
    id: int
    is_active: bool


class ProductFeaturedRead(CamelModel):
    id: int
    is_featured: bool
