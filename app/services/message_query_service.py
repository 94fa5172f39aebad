"""
Read-side projections over message details, events and conversation status.

Builds the DTOs served by the API: per-message info with conversation peers
and a derived status, single-message lookups, event listings, per-message
event logs and conversation status rows. All instants are rendered in the
local zone.
"""

from __future__ import annotations

from collections import defaultdict
from datetime import datetime
from typing import Dict, List, Optional, Sequence

from sqlalchemy.orm import Session

from app.constants.event_status import EventStatus
from app.constants.event_types import EventDataType, EventType
from app.constants.messages import NOT_FOUND, UNKNOWN, UNKNOWN_MESSAGE_STATUS
from app.core.status import derive_message_status
from app.infra.logging_config import get_logger
from app.models.event import Event
from app.models.message_detail import MessageDetail
from app.schemas.page import Page, Pageable
from app.schemas.views import (
    ConversationStatusInfo,
    DistinctFacetsRead,
    EventInfo,
    MessageInfo,
    MessageLogInfo,
    ReadableIdInfo,
)
from app.services.conversation_status_service import ConversationStatusService
from app.services.distinct_facets_service import DistinctFacetsService
from app.services.event_service import EventService
from app.services.event_type_service import EventClassifier, get_event_classifier
from app.services.message_detail_service import MessageDetailService
from app.utils.identifiers import parse_uuid
from app.utils.time_utils import format_local

logger = get_logger("message_query")


def _payload_value(
    events: Sequence[Event], event_type: EventType, key: EventDataType
) -> Optional[str]:
    for event in events:
        if event.event_type_id == event_type and event.event_data:
            value = event.event_data.get(key.value)
            if value:
                return str(value)
    return None


class MessageQueryService:
    """Composes the stores and the event classifier into read models."""

    def __init__(
        self,
        db: Session,
        message_detail_service: Optional[MessageDetailService] = None,
        event_service: Optional[EventService] = None,
        conversation_status_service: Optional[ConversationStatusService] = None,
        distinct_facets_service: Optional[DistinctFacetsService] = None,
        classifier: Optional[EventClassifier] = None,
    ) -> None:
        self.db = db
        self.message_detail_service = message_detail_service or MessageDetailService(db)
        self.event_service = event_service or EventService(db)
        self.conversation_status_service = (
            conversation_status_service or ConversationStatusService(db)
        )
        self.distinct_facets_service = distinct_facets_service or DistinctFacetsService(db)
        self._classifier = classifier

    @property
    def classifier(self) -> EventClassifier:
        if self._classifier is None:
            self._classifier = get_event_classifier(self.db)
        return self._classifier

    # -- message level -------------------------------------------------------

    def message_status(self, events: Sequence[Event]) -> Optional[EventStatus]:
        """Priority-wins status over a request's events."""
        return derive_message_status(
            self.classifier.classify(e.event_type_id) for e in events
        )

    def _status_label(self, events: Sequence[Event]) -> str:
        status = self.message_status(events)
        return status.value if status is not None else UNKNOWN_MESSAGE_STATUS

    @staticmethod
    def _sender(detail: MessageDetail, events: Sequence[Event]) -> str:
        return (
            detail.sender_name
            or _payload_value(
                events, EventType.MESSAGE_VALIDATED_AGAINST_CPA, EventDataType.SENDER_NAME
            )
            or UNKNOWN
        )

    @staticmethod
    def _reference(detail: MessageDetail, events: Sequence[Event]) -> str:
        return (
            detail.ref_param
            or _payload_value(
                events, EventType.REFERENCE_RETRIEVED, EventDataType.REFERENCE_PARAMETER
            )
            or UNKNOWN
        )

    def fetch_message_details(
        self,
        from_dt: Optional[datetime],
        to_dt: Optional[datetime],
        readable_id_pattern: str = "",
        cpa_id_pattern: str = "",
        message_id_pattern: str = "",
        role: str = "",
        service: str = "",
        action: str = "",
        pageable: Optional[Pageable] = None,
    ) -> Page:
        """One MessageInfo per detail saved in the window, paged."""
        page = self.message_detail_service.find_by_time_interval(
            from_dt,
            to_dt,
            readable_id_pattern=readable_id_pattern,
            cpa_id_pattern=cpa_id_pattern,
            message_id_pattern=message_id_pattern,
            role=role,
            service=service,
            action=action,
            pageable=pageable,
        )
        details: List[MessageDetail] = page.content
        request_ids = [d.request_id for d in details]
        related_request_ids = self.message_detail_service.find_related_request_ids(request_ids)
        related_readable_ids = self.message_detail_service.find_related_readable_ids(request_ids)

        events_by_request: Dict = defaultdict(list)
        for event in self.event_service.find_by_request_ids(request_ids):
            events_by_request[event.request_id].append(event)

        content = []
        for detail in details:
            events = events_by_request.get(detail.request_id, [])
            content.append(
                MessageInfo(
                    received_date=format_local(detail.saved_at),
                    request_id=str(detail.request_id),
                    readable_id=detail.readable_id or "",
                    related_request_ids=related_request_ids.get(detail.request_id, NOT_FOUND),
                    related_readable_ids=related_readable_ids.get(detail.request_id, NOT_FOUND),
                    role=detail.from_role,
                    service=detail.service,
                    action=detail.action,
                    reference_parameter=self._reference(detail, events),
                    sender_name=self._sender(detail, events),
                    cpa_id=detail.cpa_id,
                    event_count=len(events),
                    status=self._status_label(events),
                )
            )
        return page.with_content(content)

    def fetch_message_details_by_id(self, id: str) -> List[ReadableIdInfo]:
        """Look up one message by request id (UUID) or by readable id pattern."""
        request_id = parse_uuid(id)
        if request_id is not None:
            logger.info("Fetching message details by request id: %s", id)
            detail = self.message_detail_service.find_by_request_id(request_id)
        else:
            logger.info("Fetching message details by readable id: %s", id)
            detail = self.message_detail_service.find_by_readable_id_pattern(id)

        if detail is None:
            logger.warning("No message details found for id: %s", id)
            return []

        events = self.event_service.find_by_request_id(detail.request_id)
        return [
            ReadableIdInfo(
                received_date=format_local(detail.saved_at),
                request_id=str(detail.request_id),
                readable_id=detail.readable_id or "",
                role=detail.from_role,
                service=detail.service,
                action=detail.action,
                reference_parameter=self._reference(detail, events),
                sender_name=self._sender(detail, events),
                cpa_id=detail.cpa_id,
                status=self._status_label(events),
            )
        ]

    # -- events --------------------------------------------------------------

    def fetch_events(
        self,
        from_dt: Optional[datetime],
        to_dt: Optional[datetime],
        role: str = "",
        service: str = "",
        action: str = "",
        pageable: Optional[Pageable] = None,
    ) -> Page:
        if role or service or action:
            page = self.event_service.find_by_time_interval_join_message_detail(
                from_dt, to_dt, role=role, service=service, action=action, pageable=pageable
            )
        else:
            page = self.event_service.find_by_time_interval(from_dt, to_dt, pageable=pageable)

        events: List[Event] = page.content
        details = self.message_detail_service.find_by_request_ids(
            [e.request_id for e in events]
        )
        content = []
        for event in events:
            detail = details.get(event.request_id)
            content.append(
                EventInfo(
                    event_date=format_local(event.created_at),
                    description=self.classifier.describe(event.event_type_id),
                    event_data=event.event_data or {},
                    readable_id=detail.readable_id if detail is not None else "",
                    role=detail.from_role if detail is not None else None,
                    service=detail.service if detail is not None else None,
                    action=detail.action if detail is not None else None,
                    reference_parameter=detail.ref_param if detail is not None else None,
                    sender_name=detail.sender_name if detail is not None else None,
                )
            )
        return page.with_content(content)

    def fetch_message_log_info(self, id: str) -> List[MessageLogInfo]:
        """Chronological event log for a request id, or for an exact readable id."""
        request_id = parse_uuid(id)
        if request_id is None:
            detail = self.message_detail_service.find_by_readable_id(id)
            if detail is None:
                logger.warning("No message details found for readable id: %s", id)
                return []
            request_id = detail.request_id

        events = self.event_service.find_by_request_id(request_id)
        return [
            MessageLogInfo(
                event_date=format_local(event.created_at),
                event_description=self.classifier.describe(event.event_type_id),
                event_id=str(event.event_type_id),
            )
            for event in events
        ]

    # -- conversations -------------------------------------------------------

    def fetch_conversation_statuses(
        self,
        from_dt: Optional[datetime] = None,
        to_dt: Optional[datetime] = None,
        cpa_id_pattern: str = "",
        service: str = "",
        statuses: Optional[Sequence[EventStatus]] = None,
        pageable: Optional[Pageable] = None,
    ) -> Page:
        page = self.conversation_status_service.find_by_filters(
            from_dt, to_dt, cpa_id_pattern, service, statuses, pageable
        )
        content = [
            ConversationStatusInfo(
                conversation_id=row.conversation_id,
                created_at=format_local(row.created_at),
                readable_id_list=row.readable_id_list or "",
                service=row.service,
                cpa_id=row.cpa_id,
                status_at=format_local(row.status_at),
                latest_status=row.latest_status.value if row.latest_status else UNKNOWN,
            )
            for row in page.content
        ]
        return page.with_content(content)

    def fetch_distinct_facets(self) -> Optional[DistinctFacetsRead]:
        facets = self.distinct_facets_service.get()
        if facets is None:
            return None
        return DistinctFacetsRead(
            roles=facets.roles,
            services=facets.services,
            actions=facets.actions,
            refreshed_at=format_local(facets.refreshed_at),
        )
