"""
Event model: append-only log of typed events per request id.

No foreign key to ebms_message_details; events may arrive before their detail.
"""

from __future__ import annotations

import uuid

from sqlalchemy import BigInteger, Column, DateTime, ForeignKey, Identity, Index, Integer, String
from sqlalchemy.dialects.postgresql import JSONB, UUID

from app.db import Base


class Event(Base):
    __tablename__ = "events"

    __table_args__ = (
        Index("ix_events_request_id_created_at", "request_id", "created_at"),
        Index("ix_events_created_at_seq", "created_at", "seq"),
    )

    event_id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    seq = Column(BigInteger, Identity(always=False), nullable=False, unique=True)
    event_type_id = Column(
        Integer, ForeignKey("event_types.event_type_id"), nullable=False
    )
    request_id = Column(UUID(as_uuid=True), nullable=False)
    content_id = Column(String(255), nullable=True)
    message_id = Column(String(255), nullable=False)
    event_data = Column(JSONB, nullable=False, default=dict)
    created_at = Column(DateTime(timezone=True), nullable=False)
