"""Payloads read from the gateway's Kafka topics (camelCase JSON)."""

from __future__ import annotations

import json
from datetime import datetime
from typing import Any, Optional
from uuid import UUID

from pydantic import BaseModel, field_validator
from pydantic.alias_generators import to_camel

from app.constants.event_types import EventType
from app.models.event import Event
from app.models.message_detail import MessageDetail
from app.utils.time_utils import ensure_aware


class TransportMessageDetail(BaseModel):
    """Message detail record as published by the gateway."""

    request_id: UUID
    cpa_id: str
    conversation_id: str
    message_id: str
    ref_to_message_id: Optional[str] = None
    from_party_id: str
    from_role: Optional[str] = None
    to_party_id: str
    to_role: Optional[str] = None
    service: str
    action: str
    ref_param: Optional[str] = None
    sender: Optional[str] = None
    sent_at: Optional[datetime] = None
    saved_at: datetime

    model_config = {"alias_generator": to_camel, "populate_by_name": True}

    def to_model(self) -> MessageDetail:
        return MessageDetail(
            request_id=self.request_id,
            cpa_id=self.cpa_id,
            conversation_id=self.conversation_id,
            message_id=self.message_id,
            ref_to_message_id=self.ref_to_message_id,
            from_party_id=self.from_party_id,
            from_role=self.from_role,
            to_party_id=self.to_party_id,
            to_role=self.to_role,
            service=self.service,
            action=self.action,
            ref_param=self.ref_param,
            sender_name=self.sender,
            sent_at=ensure_aware(self.sent_at) if self.sent_at else None,
            saved_at=ensure_aware(self.saved_at),
        )


class TransportEvent(BaseModel):
    """Lifecycle event as published by the gateway."""

    event_type: EventType
    request_id: UUID
    content_id: Optional[str] = None
    message_id: str
    event_data: dict[str, Any] = {}
    created_at: datetime
    conversation_id: Optional[str] = None

    model_config = {"alias_generator": to_camel, "populate_by_name": True}

    @field_validator("event_type", mode="before")
    @classmethod
    def parse_event_type(cls, v: Any) -> Any:
        """Accept the numeric id or the enum name."""
        if isinstance(v, str) and not v.isdigit():
            try:
                return EventType[v]
            except KeyError:
                raise ValueError(f"Unknown event type: {v}")
        return v

    @field_validator("event_data", mode="before")
    @classmethod
    def parse_event_data(cls, v: Any) -> Any:
        """The gateway sends event data as a JSON-encoded string."""
        if v is None or v == "":
            return {}
        if isinstance(v, str):
            return json.loads(v)
        return v

    def to_model(self) -> Event:
        return Event(
            event_type_id=int(self.event_type),
            request_id=self.request_id,
            content_id=self.content_id,
            message_id=self.message_id,
            event_data=self.event_data,
            created_at=ensure_aware(self.created_at),
        )
