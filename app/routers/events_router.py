from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.db import get_db
from app.routers.utils.dependencies import DateRange, get_pageable, get_required_date_range
from app.schemas.page import Page, Pageable
from app.schemas.views import EventInfo
from app.services.message_query_service import MessageQueryService

events_router = APIRouter(prefix="/events", tags=["Events"])


@events_router.get("", response_model=Page[EventInfo])
def list_events(
    date_range: DateRange = Depends(get_required_date_range),
    pageable: Pageable = Depends(get_pageable),
    role: str = Query(""),
    service: str = Query(""),
    action: str = Query(""),
    db: Session = Depends(get_db),
) -> Page[EventInfo]:
    """Events created in the window, joined with their message details."""
    return MessageQueryService(db).fetch_events(
        date_range.from_dt,
        date_range.to_dt,
        role=role,
        service=service,
        action=action,
        pageable=pageable,
    )
