"""Message details API: list, lookup by id, event log, duplicate check."""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.db import get_db
from app.routers.utils.dependencies import DateRange, get_pageable, get_required_date_range
from app.schemas.duplicate_check import DuplicateCheckRequest, DuplicateCheckResponse
from app.schemas.page import Page, Pageable
from app.schemas.views import MessageInfo, MessageLogInfo, ReadableIdInfo
from app.services.duplicate_check_service import DuplicateCheckService
from app.services.message_query_service import MessageQueryService

message_details_router = APIRouter(prefix="/message-details", tags=["Message details"])


@message_details_router.get("", response_model=Page[MessageInfo])
def list_message_details(
    date_range: DateRange = Depends(get_required_date_range),
    pageable: Pageable = Depends(get_pageable),
    readable_id: str = Query("", alias="readableId"),
    cpa_id: str = Query("", alias="cpaId"),
    message_id: str = Query("", alias="messageId"),
    role: str = Query(""),
    service: str = Query(""),
    action: str = Query(""),
    db: Session = Depends(get_db),
) -> Page[MessageInfo]:
    """List messages saved in the window, with related ids and derived status."""
    return MessageQueryService(db).fetch_message_details(
        date_range.from_dt,
        date_range.to_dt,
        readable_id_pattern=readable_id,
        cpa_id_pattern=cpa_id,
        message_id_pattern=message_id,
        role=role,
        service=service,
        action=action,
        pageable=pageable,
    )


@message_details_router.post("/duplicate-check", response_model=DuplicateCheckResponse)
def check_duplicate(
    request: DuplicateCheckRequest,
    db: Session = Depends(get_db),
) -> DuplicateCheckResponse:
    """Report whether a message with the same messageId, conversationId and cpaId exists."""
    return DuplicateCheckService(db).check(request)


@message_details_router.get("/{id}", response_model=List[ReadableIdInfo])
def get_message_details(id: str, db: Session = Depends(get_db)) -> List[ReadableIdInfo]:
    """Look up a message by request id or readable id; empty list when not found."""
    return MessageQueryService(db).fetch_message_details_by_id(id)


@message_details_router.get("/{id}/events", response_model=List[MessageLogInfo])
def get_message_events(id: str, db: Session = Depends(get_db)) -> List[MessageLogInfo]:
    """Chronological event log for a message."""
    return MessageQueryService(db).fetch_message_log_info(id)
