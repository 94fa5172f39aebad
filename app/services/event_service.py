"""
Service for the event log.

Events are immutable; only insert. Ordering within a request id is by
created_at, ties broken by insertion order.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional, Sequence
from uuid import UUID

from sqlalchemy.orm import Session

from app.models.event import Event
from app.models.message_detail import MessageDetail
from app.schemas.page import Page, Pageable, SortOrder
from app.services.query_filters import apply_datetime_filter, apply_exact_filter
from app.utils.db.store_guard import store_guard

# Upper bound for unpaged time-window scans
EVENT_SCAN_LIMIT = 1000


class EventService:
    """Append and read events. No update/delete (immutable)."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def insert(self, event: Event) -> UUID:
        """Persist an event and return its generated id."""
        with store_guard(self.db, "event.insert"):
            self.db.add(event)
            self.db.commit()
            self.db.refresh(event)
        return event.event_id

    def find_by_id(self, event_id: UUID) -> Optional[Event]:
        with store_guard(self.db, "event.find_by_id"):
            return self.db.query(Event).filter(Event.event_id == event_id).first()

    def find_by_request_id(self, request_id: UUID) -> List[Event]:
        with store_guard(self.db, "event.find_by_request_id"):
            return (
                self.db.query(Event)
                .filter(Event.request_id == request_id)
                .order_by(Event.created_at.asc(), Event.seq.asc())
                .all()
            )

    def find_by_request_ids(self, request_ids: Sequence[UUID]) -> List[Event]:
        """Flat list for all ids; callers group by request id."""
        if not request_ids:
            return []
        with store_guard(self.db, "event.find_by_request_ids"):
            return (
                self.db.query(Event)
                .filter(Event.request_id.in_(list(set(request_ids))))
                .order_by(Event.created_at.asc(), Event.seq.asc())
                .all()
            )

    def find_by_time_interval(
        self,
        from_dt: Optional[datetime],
        to_dt: Optional[datetime],
        pageable: Optional[Pageable] = None,
    ) -> Page:
        query = apply_datetime_filter(
            self.db.query(Event), Event.created_at, from_dt, to_dt
        )
        return self._page(query, pageable, "event.find_by_time_interval")

    def find_by_time_interval_join_message_detail(
        self,
        from_dt: Optional[datetime],
        to_dt: Optional[datetime],
        role: str = "",
        service: str = "",
        action: str = "",
        pageable: Optional[Pageable] = None,
    ) -> Page:
        """Events in the window whose message detail matches the role/service/action filters."""
        query = self.db.query(Event).join(
            MessageDetail, MessageDetail.request_id == Event.request_id
        )
        query = apply_datetime_filter(query, Event.created_at, from_dt, to_dt)
        query = apply_exact_filter(query, MessageDetail.from_role, role)
        query = apply_exact_filter(query, MessageDetail.service, service)
        query = apply_exact_filter(query, MessageDetail.action, action)
        return self._page(
            query, pageable, "event.find_by_time_interval_join_message_detail"
        )

    def _page(self, query, pageable: Optional[Pageable], operation: str) -> Page:
        if pageable is None:
            pageable = Pageable(page_number=1, page_size=EVENT_SCAN_LIMIT, sort=SortOrder.ASC)
        if pageable.sort == SortOrder.ASC:
            ordering = (Event.created_at.asc(), Event.seq.asc())
        else:
            ordering = (Event.created_at.desc(), Event.seq.desc())
        with store_guard(self.db, operation):
            total = query.order_by(None).count()
            rows = (
                query.order_by(*ordering)
                .offset(pageable.offset)
                .limit(pageable.page_size)
                .all()
            )
        return Page.of(pageable, total, rows)
