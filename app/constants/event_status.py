"""Coarse processing outcome categories attached to event types."""

from __future__ import annotations

from enum import StrEnum
from typing import Optional


class EventStatus(StrEnum):
    """
    Status categories, valued by their stored (Norwegian) label.

    CREATED, MANUAL_PROCESSING, WARNING and FATAL_ERROR are legacy members;
    nothing assigns them today but stored rows may still carry them.
    """

    CREATED = "Opprettet"
    INFORMATION = "Informasjon"
    MANUAL_PROCESSING = "Manuell behandling"
    WARNING = "Advarsel"
    ERROR = "Feil"
    FATAL_ERROR = "Fatal feil"
    PROCESSING_COMPLETED = "Ferdigbehandlet"

    @classmethod
    def from_db_value(cls, value: Optional[str]) -> Optional["EventStatus"]:
        """Parse a stored label; unknown labels give None instead of raising."""
        for status in cls:
            if status.value == value:
                return status
        return None

    @classmethod
    def from_name(cls, name: str) -> Optional["EventStatus"]:
        """Parse by member name (``ERROR``) or stored label (``Feil``)."""
        member = cls.__members__.get(name.strip().upper())
        return member if member is not None else cls.from_db_value(name)


DEFAULT_CONVERSATION_STATUSES = (
    EventStatus.ERROR,
    EventStatus.INFORMATION,
    EventStatus.PROCESSING_COMPLETED,
)
