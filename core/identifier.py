"""
core/identifier.py -- Globally unique resource identifiers.

Identifiers are random (version 4) UUIDs. The canonical string form is the
hyphenated lowercase representation produced by str(); parse_id() accepts
anything uuid.UUID accepts and always round-trips: parse_id(str(i)) == i.
"""

from __future__ import annotations

import uuid

from core.errors import InvalidIdentifier

Identifier = uuid.UUID


def new_id() -> Identifier:
    """Return a fresh, collision-resistant identifier."""
    return uuid.uuid4()


def parse_id(value: object) -> Identifier:
    """Parse the string form of an identifier.

    Raises InvalidIdentifier for anything that is not a well-formed UUID
    string, including None and non-string values.
    """
    if isinstance(value, uuid.UUID):
        return value
    if not isinstance(value, str):
        raise InvalidIdentifier(f"Expected identifier string, got {type(value).__name__}.")
    try:
        return uuid.UUID(value.strip())
    except ValueError:
        raise InvalidIdentifier(f"{value!r} is not a valid identifier.") from None
