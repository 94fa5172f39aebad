"""
MessageDetail model: one row per EBMS message instance (one request id).

The readable id is computed by the service on every write and stored so it
can be searched with plain LIKE filters.
"""

from __future__ import annotations

from sqlalchemy import BigInteger, Column, DateTime, Identity, Index, String
from sqlalchemy.dialects.postgresql import UUID

from app.db import Base


class MessageDetail(Base):
    __tablename__ = "ebms_message_details"

    __table_args__ = (
        Index("ix_ebms_message_details_saved_at_seq", "saved_at", "seq"),
        Index("ix_ebms_message_details_conversation_id", "conversation_id"),
        Index(
            "ix_ebms_message_details_duplicate_key",
            "message_id",
            "conversation_id",
            "cpa_id",
        ),
    )

    request_id = Column(UUID(as_uuid=True), primary_key=True)
    # Insertion order; stable tie-breaker for paging and grouping
    seq = Column(BigInteger, Identity(always=False), nullable=False, unique=True)
    readable_id = Column(String(255), nullable=True, index=True)
    cpa_id = Column(String(255), nullable=False)
    conversation_id = Column(String(255), nullable=False)
    message_id = Column(String(255), nullable=False)
    ref_to_message_id = Column(String(255), nullable=True)
    from_party_id = Column(String(255), nullable=False)
    from_role = Column(String(255), nullable=True)
    to_party_id = Column(String(255), nullable=False)
    to_role = Column(String(255), nullable=True)
    service = Column(String(255), nullable=False)
    action = Column(String(255), nullable=False)
    ref_param = Column(String(255), nullable=True)
    sender_name = Column(String(255), nullable=True)
    sent_at = Column(DateTime(timezone=True), nullable=True)
    saved_at = Column(DateTime(timezone=True), nullable=False)
