from __future__ import annotations

from typing import Optional
from uuid import UUID


def parse_uuid(value: str) -> Optional[UUID]:
    """Return the UUID for value, or None when it is not a UUID."""
    try:
        return UUID(value.strip())
    except (ValueError, AttributeError):
        return None
