"""Shared columns and derivation rules for named catalog entities."""

from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import validates
from sqlalchemy.types import DateTime

from app.utils.slugify import generate_code, generate_slug


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TimestampMixin:
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False
    )


class NamedEntityMixin(TimestampMixin):
    """Name plus the code/slug pair derived from it.

    ``code`` and ``slug`` are rewritten every time ``name`` is assigned and
    left alone otherwise. Empty derivations are stored as NULL.
    """

    code_length = 15

    id = Column(Integer, primary_key=True)
    name = Column(String(100), nullable=False)
    code = Column(String(32), unique=True)
    slug = Column(String(255), unique=True)
    created_by = Column(String(64), nullable=False)
    updated_by = Column(String(64))

    @validates("name")
    def _derive_code_and_slug(self, key, value):
        value = value.strip() if isinstance(value, str) else value
        self.code = generate_code(value, self.code_length)
        self.slug = generate_slug(value)
        return value

    def __repr__(self) -> str:
        return f"<{type(self).__name__}(id={self.id}, name='{self.name}')>"
