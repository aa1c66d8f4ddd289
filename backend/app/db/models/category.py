"""SQLAlchemy model for product categories."""

from sqlalchemy import Index, func

from app.db.base import Base
from app.db.models.catalog_entity import NamedEntityMixin
from app.utils.slugify import CATEGORY_CODE_LENGTH


class Category(NamedEntityMixin, Base):
    __tablename__ = "categories"

    code_length = CATEGORY_CODE_LENGTH


Index("ix_categories_name_lower", func.lower(Category.name), unique=True)
Index("ix_categories_created_by", Category.created_by)
