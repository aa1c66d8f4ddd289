"""Translate domain errors into HTTP responses."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from fastapi import HTTPException, status

from app.core.exceptions import (
    CatalogError,
    DuplicateNameError,
    NotFoundError,
    StoreError,
    ValidationError,
)

logger = logging.getLogger(__name__)


def status_for(exc: CatalogError) -> int:
    if isinstance(exc, ValidationError):
        return status.HTTP_400_BAD_REQUEST
    if isinstance(exc, DuplicateNameError):
        return status.HTTP_409_CONFLICT
    if isinstance(exc, NotFoundError):
        return status.HTTP_404_NOT_FOUND
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def to_http_exception(exc: CatalogError, action: str) -> HTTPException:
    code = status_for(exc)
    if code >= 500:
        return HTTPException(status_code=code, detail=f"Failed to {action}")
    return HTTPException(status_code=code, detail=exc.message)


@contextmanager
def translate_errors(action: str) -> Iterator[None]:
    """Wrap a route body: domain errors become 4xx, anything else a logged 500."""
    try:
        yield
    except HTTPException:
        raise
    except StoreError as e:
        logger.error(f"Store error while trying to {action}: {e}", exc_info=True)
        raise to_http_exception(e, action) from e
    except CatalogError as e:
        logger.info(f"Rejected request to {action}: {e.message}")
        raise to_http_exception(e, action) from e
    except Exception as e:
        logger.error(f"Unexpected error while trying to {action}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An unexpected error occurred",
        ) from e
