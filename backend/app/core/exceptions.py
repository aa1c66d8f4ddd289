"""Domain error taxonomy for catalog writes and queries.

Every error here is raised before anything is persisted, except
``DuplicateNameError`` and ``StoreError`` which may also come back from the
store when the database rejects a write.
"""

from __future__ import annotations


class CatalogError(Exception):
    """Base class for catalog domain errors."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(CatalogError, ValueError):
    """A payload broke a business rule that field validation cannot express."""


class InvalidReferenceError(ValidationError):
    """A Category/Size reference is malformed or points at nothing."""

    MALFORMED = "malformed"
    NOT_FOUND = "not_found"

    def __init__(
        self,
        message: str,
        *,
        field: str,
        reason: str,
        value: object = None,
        index: int | None = None,
    ) -> None:
        super().__init__(message)
        self.field = field
        self.reason = reason
        self.value = value
        self.index = index

    @property
    def is_malformed(self) -> bool:
        return self.reason == self.MALFORMED


class InvariantViolationError(ValidationError):
    """Price, stock or size-list rules were violated."""

    def __init__(
        self, message: str, *, field: str | None = None, index: int | None = None
    ) -> None:
        super().__init__(message)
        self.field = field
        self.index = index


class DuplicateNameError(CatalogError):
    """A name, code, slug or SKU collides with an existing record."""

    def __init__(self, message: str, *, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field


class NotFoundError(CatalogError):
    """No live record exists for the requested identifier."""

    def __init__(self, entity: str, identifier: object = None) -> None:
        super().__init__(f"{entity} not found")
        self.entity = entity
        self.identifier = identifier


class StoreError(CatalogError):
    """Unclassified persistence failure; details stay in the logs."""
