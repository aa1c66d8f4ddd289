"""SQLAlchemy models for products and the rows they own."""

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import relationship, validates

from app.db.base import Base
from app.db.models.catalog_entity import TimestampMixin
from app.utils.slugify import PRODUCT_SKU_LENGTH, generate_code, generate_slug


class Product(TimestampMixin, Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True)
    name = Column(String(200), nullable=False)
    description = Column(Text, nullable=False)
    short_description = Column(String(500))
    sku = Column(String(PRODUCT_SKU_LENGTH), unique=True)
    slug = Column(String(255), unique=True)

    # Non-owning reference; categories can be deleted without touching products
    category_id = Column(Integer, nullable=False, index=True)

    brand = Column(String(100), index=True)
    model = Column(String(100))
    color = Column(String(50))
    material = Column(String(100))
    dimension_length = Column(Float)
    dimension_width = Column(Float)
    dimension_height = Column(Float)
    weight = Column(Float)

    is_active = Column(Boolean, nullable=False, default=True, index=True)
    is_featured = Column(Boolean, nullable=False, default=False, index=True)
    is_on_sale = Column(Boolean, nullable=False, default=False, index=True)

    meta_title = Column(String(60))
    meta_description = Column(String(160))
    meta_keywords = Column(JSON, nullable=False, default=list)

    view_count = Column(Integer, nullable=False, default=0)
    wishlist_count = Column(Integer, nullable=False, default=0)

    created_by = Column(String(64), nullable=False)
    updated_by = Column(String(64))

    category = relationship(
        "Category",
        primaryjoin="foreign(Product.category_id) == Category.id",
        viewonly=True,
        lazy="selectin",
    )
    sizes = relationship(
        "ProductSizeVariant",
        back_populates="product",
        cascade="all, delete-orphan",
        order_by="ProductSizeVariant.position",
        lazy="selectin",
    )
    images = relationship(
        "ProductImage",
        back_populates="product",
        cascade="all, delete-orphan",
        order_by="ProductImage.position",
        lazy="selectin",
    )
    tag_entries = relationship(
        "ProductTag",
        back_populates="product",
        cascade="all, delete-orphan",
        order_by="ProductTag.position",
        lazy="selectin",
    )

    __table_args__ = (
        Index("ix_products_category_active", "category_id", "is_active"),
        Index("ix_products_created_at", "created_at"),
    )

    @validates("name")
    def _derive_sku_and_slug(self, key, value):
        value = value.strip() if isinstance(value, str) else value
        self.sku = generate_code(value, PRODUCT_SKU_LENGTH)
        self.slug = generate_slug(value)
        return value

    @property
    def tags(self) -> list[str]:
        return [entry.value for entry in self.tag_entries]

    @tags.setter
    def tags(self, values: list[str]) -> None:
        self.tag_entries = [
            ProductTag(value=value, position=position)
            for position, value in enumerate(values)
        ]

    @property
    def dimensions(self) -> dict | None:
        values = {
            "length": self.dimension_length,
            "width": self.dimension_width,
            "height": self.dimension_height,
        }
        if all(value is None for value in values.values()):
            return None
        return values

    @dimensions.setter
    def dimensions(self, values: dict | None) -> None:
        values = values or {}
        self.dimension_length = values.get("length")
        self.dimension_width = values.get("width")
        self.dimension_height = values.get("height")

    def _active_prices(self) -> list[float]:
        return [variant.effective_price for variant in self.sizes if variant.is_active]

    @property
    def lowest_price(self) -> float | None:
        prices = self._active_prices()
        return min(prices) if prices else None

    @property
    def highest_price(self) -> float | None:
        prices = self._active_prices()
        return max(prices) if prices else None

    @property
    def total_stock(self) -> int:
        return sum(variant.stock for variant in self.sizes if variant.is_active)

    @property
    def in_stock(self) -> bool:
        return self.total_stock > 0

    @property
    def primary_image(self) -> "ProductImage | None":
        if not self.images:
            return None
        for image in self.images:
            if image.is_primary:
                return image
        return self.images[0]

    def __repr__(self):
        return f"<Product(id={self.id}, name='{self.name}', sku='{self.sku}')>"


class ProductSizeVariant(Base):
    """One purchasable (size, price, stock) configuration of a product."""

    __tablename__ = "product_size_variants"

    id = Column(Integer, primary_key=True)
    product_id = Column(
        Integer, ForeignKey("products.id", ondelete="CASCADE"), nullable=False
    )
    position = Column(Integer, nullable=False, default=0)
    size_id = Column(Integer, nullable=False, index=True)
    price = Column(Float, nullable=False)
    sale_price = Column(Float)
    stock = Column(Integer, nullable=False, default=0)
    weight = Column(Float)
    is_active = Column(Boolean, nullable=False, default=True)

    product = relationship("Product", back_populates="sizes")
    size = relationship(
        "Size",
        primaryjoin="foreign(ProductSizeVariant.size_id) == Size.id",
        viewonly=True,
        lazy="selectin",
    )

    __table_args__ = (Index("ix_product_size_variants_product", "product_id"),)

    @property
    def effective_price(self) -> float:
        return self.sale_price if self.sale_price is not None else self.price


class ProductImage(Base):
    __tablename__ = "product_images"

    id = Column(Integer, primary_key=True)
    product_id = Column(
        Integer, ForeignKey("products.id", ondelete="CASCADE"), nullable=False
    )
    position = Column(Integer, nullable=False, default=0)
    url = Column(Text, nullable=False)
    alt = Column(String(255))
    is_primary = Column(Boolean, nullable=False, default=False)
    order = Column("display_order", Integer, nullable=False, default=0)

    product = relationship("Product", back_populates="images")


class ProductTag(Base):
    __tablename__ = "product_tags"

    id = Column(Integer, primary_key=True)
    product_id = Column(
        Integer, ForeignKey("products.id", ondelete="CASCADE"), nullable=False
    )
    position = Column(Integer, nullable=False, default=0)
    value = Column(String(100), nullable=False, index=True)

    product = relationship("Product", back_populates="tag_entries")
