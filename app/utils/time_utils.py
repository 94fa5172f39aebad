"""Conversions between stored UTC instants and the operators' local zone."""

from __future__ import annotations

from datetime import datetime, timezone
from zoneinfo import ZoneInfo

from app.constants.messages import ZONE_ID_OSLO

LOCAL_ZONE = ZoneInfo(ZONE_ID_OSLO)

# Format accepted for fromDate/toDate query parameters
LOCAL_DATETIME_FORMAT = "%Y-%m-%dT%H:%M"


def ensure_aware(value: datetime) -> datetime:
    """Treat naive datetimes as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def utc_now() -> datetime:
    # Microsecond precision matches what PostgreSQL keeps
    return datetime.now(timezone.utc)


def to_local(value: datetime) -> datetime:
    return ensure_aware(value).astimezone(LOCAL_ZONE)


def format_local(value: datetime | None) -> str | None:
    """Render an instant in the local zone as ISO-8601 with offset."""
    if value is None:
        return None
    return to_local(value).isoformat()


def parse_local_datetime(value: str) -> datetime:
    """
    Parse ``yyyy-MM-ddTHH:mm`` as local wall-clock time.

    Raises:
        ValueError: if the value does not match the format
    """
    naive = datetime.strptime(value.strip(), LOCAL_DATETIME_FORMAT)
    return naive.replace(tzinfo=LOCAL_ZONE)
