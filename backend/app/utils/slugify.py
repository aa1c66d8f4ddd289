"""Derive short uppercase codes and URL slugs from display names."""

from __future__ import annotations

import re

CATEGORY_CODE_LENGTH = 15
SIZE_CODE_LENGTH = 10
PRODUCT_SKU_LENGTH = 20

_NON_CODE_CHARS = re.compile(r"[^A-Z0-9]")
_NON_SLUG_CHARS = re.compile(r"[^a-z0-9\s-]")
_WHITESPACE = re.compile(r"\s+")
_HYPHENS = re.compile(r"-+")


def generate_code(name: str | None, max_length: int) -> str | None:
    """Uppercase alphanumeric code truncated to ``max_length``.

    Returns None when nothing survives the stripping, so that empty codes
    never collide under a unique index.
    """
    if not name:
        return None
    code = _NON_CODE_CHARS.sub("", name.upper())[:max_length]
    return code or None


def generate_slug(name: str | None) -> str | None:
    """Lowercase, hyphen-separated slug, or None when empty."""
    if not name:
        return None
    slug = _NON_SLUG_CHARS.sub("", name.lower())
    slug = _WHITESPACE.sub("-", slug)
    slug = _HYPHENS.sub("-", slug).strip("-")
    return slug or None
