"""
ConversationStatus model: latest observed status per conversation id.

created_at is written once; latest_status and status_at follow the most
recent status-bearing event, whatever its severity.
"""

from __future__ import annotations

from sqlalchemy import Column, DateTime, Index, String

from app.db import Base
from app.models.types import EventStatusType


class ConversationStatus(Base):
    __tablename__ = "conversation_status"

    __table_args__ = (
        Index("ix_conversation_status_created_at", "created_at"),
    )

    conversation_id = Column(String(255), primary_key=True)
    created_at = Column(DateTime(timezone=True), nullable=False)
    latest_status = Column(EventStatusType(), nullable=False)
    status_at = Column(DateTime(timezone=True), nullable=False)
