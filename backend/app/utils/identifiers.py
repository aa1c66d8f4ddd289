"""Parsing of client-supplied entity references."""

from __future__ import annotations

import re

_POSITIVE_INT = re.compile(r"^[0-9]+$")
# Largest value an INTEGER primary key column can hold
MAX_ENTITY_ID = 2**31 - 1


def parse_entity_id(value: object) -> int | None:
    """Return the integer id a reference denotes, or None when malformed.

    Well-formed references are positive integers, either as ints or as
    decimal strings (surrounding whitespace tolerated). Booleans are not ids.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if 0 < value <= MAX_ENTITY_ID else None
    if not isinstance(value, str):
        return None
    text = value.strip()
    if not _POSITIVE_INT.match(text):
        return None
    parsed = int(text)
    return parsed if 0 < parsed <= MAX_ENTITY_ID else None


def is_valid_entity_id(value: object) -> bool:
    return parse_entity_id(value) is not None
