"""Optional filter helpers shared by the store queries.

Each helper is a no-op when its value is empty, so filters combine freely.
Works for both ``Query`` and ``Select`` objects.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional, TypeVar

from sqlalchemy import func

Q = TypeVar("Q")


def apply_pattern_filter(query: Q, column, pattern: Optional[str]) -> Q:
    """Case-insensitive substring match; ``%`` and ``_`` in the pattern are literal."""
    if not pattern:
        return query
    return query.filter(func.lower(column).contains(pattern.lower(), autoescape=True))


def apply_exact_filter(query: Q, column, value: Optional[str]) -> Q:
    if not value:
        return query
    return query.filter(column == value)


def apply_datetime_filter(
    query: Q,
    column,
    from_dt: Optional[datetime],
    to_dt: Optional[datetime],
) -> Q:
    """Inclusive on both ends; either bound may be omitted."""
    if from_dt is not None:
        query = query.filter(column >= from_dt)
    if to_dt is not None:
        query = query.filter(column <= to_dt)
    return query
