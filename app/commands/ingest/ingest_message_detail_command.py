"""Command to ingest one message detail record from the queue."""

from __future__ import annotations

import logging
from typing import Optional
from uuid import UUID

from sqlalchemy.orm import Session

from app.commands.ingest.decoding import decode_payload
from app.schemas.transport import TransportMessageDetail
from app.services.conversation_status_service import ConversationStatusService
from app.services.duplicate_check_service import DuplicateCheckService
from app.services.message_detail_service import MessageDetailService


class IngestMessageDetailCommand:
    """
    Decode a message detail and write it.

    A first delivery inserts; a delivery for a known request id replaces the
    stored row, so redelivery is safe. The conversation tracker row is
    created idempotently. Each write commits on its own.
    """

    def __init__(
        self,
        db: Session,
        message_detail_service: Optional[MessageDetailService] = None,
        conversation_status_service: Optional[ConversationStatusService] = None,
        duplicate_check_service: Optional[DuplicateCheckService] = None,
    ) -> None:
        self.db = db
        self.logger = logging.getLogger(__name__)
        self.message_detail_service = message_detail_service or MessageDetailService(db)
        self.conversation_status_service = (
            conversation_status_service or ConversationStatusService(db)
        )
        self.duplicate_check_service = duplicate_check_service or DuplicateCheckService(
            db, message_detail_service=self.message_detail_service
        )

    def execute(self, value: bytes) -> Optional[UUID]:
        """
        Args:
            value: Raw payload from the message detail topic

        Returns:
            UUID: The request id written
            None: If the payload could not be decoded (already logged)
        """
        transport = decode_payload(value, TransportMessageDetail)
        if transport is None:
            return None
        return self.apply(transport)

    def apply(self, transport: TransportMessageDetail) -> UUID:
        detail = transport.to_model()

        existing = self.message_detail_service.find_by_request_id(detail.request_id)
        if existing is not None:
            # Event enrichment may have filled these; a redelivery without them keeps them
            if detail.sender_name is None:
                detail.sender_name = existing.sender_name
            if detail.ref_param is None:
                detail.ref_param = existing.ref_param
            self.message_detail_service.update(detail)
            self.logger.info(
                "Message details updated for requestId: %s", detail.request_id
            )
        else:
            if self.duplicate_check_service.is_duplicate(
                detail.message_id, detail.conversation_id, detail.cpa_id
            ):
                self.logger.warning(
                    "Duplicate message: messageId=%s conversationId=%s cpaId=%s (requestId %s)",
                    detail.message_id,
                    detail.conversation_id,
                    detail.cpa_id,
                    detail.request_id,
                )
            self.message_detail_service.insert(detail)
            self.logger.info(
                "Message details stored for requestId: %s, messageId: %s",
                detail.request_id,
                detail.message_id,
            )

        if self.conversation_status_service.insert(detail.conversation_id):
            self.logger.info("Conversation tracked: %s", detail.conversation_id)
        return detail.request_id
