"""Read models returned by the query layer (camelCase on the wire)."""

from __future__ import annotations

from typing import Any, List, Optional

from pydantic import BaseModel
from pydantic.alias_generators import to_camel

CAMEL_CONFIG = {"alias_generator": to_camel, "populate_by_name": True}


class MessageInfo(BaseModel):
    """One message in a time window, with its conversation peers and derived status."""

    received_date: str
    request_id: str
    readable_id: str
    related_request_ids: str
    related_readable_ids: str
    role: Optional[str] = None
    service: Optional[str] = None
    action: Optional[str] = None
    reference_parameter: Optional[str] = None
    sender_name: Optional[str] = None
    cpa_id: Optional[str] = None
    event_count: int
    status: str

    model_config = CAMEL_CONFIG


class ReadableIdInfo(BaseModel):
    received_date: str
    request_id: str
    readable_id: str
    role: Optional[str] = None
    service: Optional[str] = None
    action: Optional[str] = None
    reference_parameter: Optional[str] = None
    sender_name: Optional[str] = None
    cpa_id: Optional[str] = None
    status: str

    model_config = CAMEL_CONFIG


class EventInfo(BaseModel):
    event_date: str
    description: str
    event_data: dict[str, Any]
    readable_id: str
    role: Optional[str] = None
    service: Optional[str] = None
    action: Optional[str] = None
    reference_parameter: Optional[str] = None
    sender_name: Optional[str] = None

    model_config = CAMEL_CONFIG


class MessageLogInfo(BaseModel):
    event_date: str
    event_description: str
    event_id: str

    model_config = CAMEL_CONFIG


class ConversationStatusInfo(BaseModel):
    conversation_id: str
    created_at: str
    readable_id_list: str
    service: str
    cpa_id: str
    status_at: str
    latest_status: str

    model_config = CAMEL_CONFIG


class DistinctFacetsRead(BaseModel):
    roles: List[str]
    services: List[str]
    actions: List[str]
    refreshed_at: str

    model_config = CAMEL_CONFIG


class EventTypeRead(BaseModel):
    event_type_id: int
    description: str
    status: Optional[str] = None

    model_config = {"from_attributes": True, **CAMEL_CONFIG}
