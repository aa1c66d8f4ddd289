"""Database models package."""
from app.db.models.category import Category
from app.db.models.product import (
    Product,
    ProductImage,
    ProductSizeVariant,
    ProductTag,
)
from app.db.models.size import Size

__all__ = [
    "Category",
    "Size",
    "Product",
    "ProductSizeVariant",
    "ProductImage",
    "ProductTag",
]
