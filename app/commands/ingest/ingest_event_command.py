"""Command to ingest one lifecycle event from the queue."""

from __future__ import annotations

import logging
from typing import Optional
from uuid import UUID

from sqlalchemy.orm import Session

from app.commands.ingest.decoding import decode_payload
from app.constants.event_types import EventDataType, EventType
from app.core.status import tracker_status_for_event
from app.models.message_detail import MessageDetail
from app.schemas.transport import TransportEvent
from app.services.conversation_status_service import ConversationStatusService
from app.services.event_service import EventService
from app.services.event_type_service import EventClassifier, get_event_classifier
from app.services.message_detail_service import MessageDetailService

# Event types whose payload enriches the owning message detail
ENRICHING_EVENTS = {
    EventType.MESSAGE_VALIDATED_AGAINST_CPA: (EventDataType.SENDER_NAME, "sender_name"),
    EventType.REFERENCE_RETRIEVED: (EventDataType.REFERENCE_PARAMETER, "ref_param"),
}


class IngestEventCommand:
    """
    Decode an event, append it and apply its side effects.

    Side effects, each committed on its own:
      - sender name / reference parameter copied onto the message detail
      - conversation tracker row created if missing
      - conversation tracker moved when the event carries a status
    """

    def __init__(
        self,
        db: Session,
        event_service: Optional[EventService] = None,
        message_detail_service: Optional[MessageDetailService] = None,
        conversation_status_service: Optional[ConversationStatusService] = None,
        classifier: Optional[EventClassifier] = None,
    ) -> None:
        self.db = db
        self.logger = logging.getLogger(__name__)
        self.event_service = event_service or EventService(db)
        self.message_detail_service = message_detail_service or MessageDetailService(db)
        self.conversation_status_service = (
            conversation_status_service or ConversationStatusService(db)
        )
        self.classifier = classifier or get_event_classifier(db)

    def execute(self, value: bytes) -> Optional[UUID]:
        """
        Args:
            value: Raw payload from the event topic

        Returns:
            UUID: The generated event id
            None: If the payload could not be decoded (already logged)
        """
        transport = decode_payload(value, TransportEvent)
        if transport is None:
            return None
        return self.apply(transport)

    def apply(self, transport: TransportEvent) -> UUID:
        event_id = self.event_service.insert(transport.to_model())
        self.logger.info(
            "Event %s stored for requestId: %s, messageId: %s",
            transport.event_type.name,
            transport.request_id,
            transport.message_id,
        )

        detail: Optional[MessageDetail] = None
        if transport.event_type in ENRICHING_EVENTS or not transport.conversation_id:
            detail = self.message_detail_service.find_by_request_id(transport.request_id)

        if transport.event_type in ENRICHING_EVENTS:
            self._enrich_message_detail(transport, detail)

        conversation_id = transport.conversation_id or (
            detail.conversation_id if detail is not None else None
        )
        if not conversation_id:
            self.logger.warning(
                "No conversation id for event %s on requestId: %s",
                transport.event_type.name,
                transport.request_id,
            )
            return event_id

        self._update_conversation(transport, conversation_id, detail)
        return event_id

    def _enrich_message_detail(
        self, transport: TransportEvent, detail: Optional[MessageDetail]
    ) -> None:
        key, attribute = ENRICHING_EVENTS[transport.event_type]
        value = transport.event_data.get(key.value)
        if not value:
            return
        if detail is None:
            self.logger.warning(
                "Cannot update %s: message details for requestId %s not found",
                attribute,
                transport.request_id,
            )
            return
        setattr(detail, attribute, str(value))
        self.message_detail_service.update(detail)
        self.logger.info(
            "Updated %s for requestId: %s", attribute, transport.request_id
        )

    def _update_conversation(
        self,
        transport: TransportEvent,
        conversation_id: str,
        detail: Optional[MessageDetail],
    ) -> None:
        self.conversation_status_service.insert(conversation_id)

        category = self.classifier.classify(transport.event_type)
        if transport.event_type == EventType.MESSAGE_SENT_VIA_SMTP and detail is None:
            detail = self.message_detail_service.find_by_request_id(transport.request_id)
        status = tracker_status_for_event(transport.event_type, category, detail)
        if status is None:
            return
        if self.conversation_status_service.update(conversation_id, status):
            self.logger.info(
                "Conversation %s status set to %s", conversation_id, status.name
            )
