"""SQLAlchemy model for sizes offered by product variants."""

from sqlalchemy import Index, func

from app.db.base import Base
from app.db.models.catalog_entity import NamedEntityMixin
from app.utils.slugify import SIZE_CODE_LENGTH


class Size(NamedEntityMixin, Base):
    __tablename__ = "sizes"

    code_length = SIZE_CODE_LENGTH


Index("ix_sizes_name_lower", func.lower(Size.name), unique=True)
Index("ix_sizes_created_by", Size.created_by)
