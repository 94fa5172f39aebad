from __future__ import annotations

from sqlalchemy import Column, Integer, String

from app.db import Base
from app.models.types import EventStatusType


class EventTypeRecord(Base):
    """Reference row mapping an event type id to its description and status category."""

    __tablename__ = "event_types"

    event_type_id = Column(Integer, primary_key=True, autoincrement=False)
    description = Column(String(255), nullable=False)
    status = Column(EventStatusType(), nullable=False)
