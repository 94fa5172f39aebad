from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.constants.event_status import EventStatus
from app.db import get_db
from app.routers.utils.dependencies import (
    DateRange,
    get_optional_date_range,
    get_pageable,
    get_statuses,
)
from app.schemas.page import Page, Pageable
from app.schemas.views import ConversationStatusInfo
from app.services.message_query_service import MessageQueryService

conversation_status_router = APIRouter(
    prefix="/conversation-status", tags=["Conversation status"]
)


@conversation_status_router.get("", response_model=Page[ConversationStatusInfo])
def list_conversation_statuses(
    date_range: DateRange = Depends(get_optional_date_range),
    pageable: Pageable = Depends(get_pageable),
    cpa_id: str = Query("", alias="cpaId"),
    service: str = Query(""),
    statuses: Optional[List[EventStatus]] = Depends(get_statuses),
    db: Session = Depends(get_db),
) -> Page[ConversationStatusInfo]:
    """Conversations by creation window, cpa id, service and latest status."""
    return MessageQueryService(db).fetch_conversation_statuses(
        date_range.from_dt,
        date_range.to_dt,
        cpa_id_pattern=cpa_id,
        service=service,
        statuses=statuses,
        pageable=pageable,
    )
