"""Duplicate detection on the (messageId, conversationId, cpaId) business key."""

from __future__ import annotations

from typing import Optional

from sqlalchemy.orm import Session

from app.schemas.duplicate_check import DuplicateCheckRequest, DuplicateCheckResponse
from app.services.message_detail_service import MessageDetailService


class DuplicateCheckService:
    """
    Reports whether a message was seen before.

    An existence check, not a lock: two concurrent check-then-insert calls
    can both report False.
    """

    def __init__(
        self,
        db: Session,
        message_detail_service: Optional[MessageDetailService] = None,
    ) -> None:
        self.db = db
        self.message_detail_service = message_detail_service or MessageDetailService(db)

    def is_duplicate(self, message_id: str, conversation_id: str, cpa_id: str) -> bool:
        matches = self.message_detail_service.find_by_message_id_conversation_id_and_cpa_id(
            message_id, conversation_id, cpa_id
        )
        return len(matches) > 0

    def check(self, request: DuplicateCheckRequest) -> DuplicateCheckResponse:
        return DuplicateCheckResponse(
            request_id=request.request_id,
            is_duplicate=self.is_duplicate(
                request.message_id, request.conversation_id, request.cpa_id
            ),
        )
