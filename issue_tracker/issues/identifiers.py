"""Issue identifier generation and validation."""

import uuid
from typing import Any


def new_id() -> str:
    """Generate a fresh issue identifier in canonical form."""
    return str(uuid.uuid4())


def is_valid_id(candidate: Any) -> bool:
    """Return True if ``candidate`` is a canonical issue identifier.

    The string must parse as a UUID and render back to exactly the same
    text. Forms that ``uuid.UUID`` accepts but normalizes (upper case,
    braces, ``urn:uuid:`` prefix, missing hyphens) are rejected.
    """
    if not isinstance(candidate, str):
        return False
    try:
        parsed = uuid.UUID(candidate)
    except ValueError:
        return False
    return str(parsed) == candidate
