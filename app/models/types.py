"""Column types shared by the models."""

from __future__ import annotations

from sqlalchemy import String
from sqlalchemy.types import TypeDecorator

from app.constants.event_status import EventStatus
from app.infra.logging_config import get_logger

logger = get_logger("models.types")


class EventStatusType(TypeDecorator):
    """Stores EventStatus by its label; unknown stored labels read back as None."""

    impl = String(32)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        if isinstance(value, EventStatus):
            return value.value
        status = EventStatus.from_name(str(value))
        if status is None:
            raise ValueError(f"Unknown event status: {value}")
        return status.value

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        status = EventStatus.from_db_value(value)
        if status is None:
            logger.error("Unknown event status stored in database: %s", value)
        return status
