"""
Service for message detail records: one row per request id.

Rows are inserted on first delivery and replaced in place when a fuller
record for the same request id arrives. Nothing here deletes.
"""

from __future__ import annotations

from datetime import datetime
from typing import Dict, List, Optional, Sequence
from uuid import UUID

from sqlalchemy import Text, cast, func, literal_column
from sqlalchemy.dialects.postgresql import aggregate_order_by
from sqlalchemy.orm import Session, aliased

from app.core.readable_id import generate_readable_id
from app.models.message_detail import MessageDetail
from app.schemas.page import Page, Pageable, SortOrder
from app.services.query_filters import (
    apply_datetime_filter,
    apply_exact_filter,
    apply_pattern_filter,
)
from app.utils.db.store_guard import store_guard

# Columns replaced by update(); request_id and seq never change
UPDATABLE_COLUMNS = (
    "cpa_id",
    "conversation_id",
    "message_id",
    "ref_to_message_id",
    "from_party_id",
    "from_role",
    "to_party_id",
    "to_role",
    "service",
    "action",
    "ref_param",
    "sender_name",
    "sent_at",
    "saved_at",
)


class MessageDetailService:
    """Persist and query message details."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def insert(self, detail: MessageDetail) -> UUID:
        """Insert a detail, computing its readable id. Returns the request id."""
        detail.readable_id = generate_readable_id(detail)
        with store_guard(self.db, "message_detail.insert"):
            self.db.add(detail)
            self.db.commit()
            self.db.refresh(detail)
        return detail.request_id

    def update(self, detail: MessageDetail) -> bool:
        """
        Replace the stored row for detail.request_id.

        Returns:
            bool: False when no row has that request id
        """
        detail.readable_id = generate_readable_id(detail)
        values = {name: getattr(detail, name) for name in UPDATABLE_COLUMNS}
        values["readable_id"] = detail.readable_id
        with store_guard(self.db, "message_detail.update"):
            rows = (
                self.db.query(MessageDetail)
                .filter(MessageDetail.request_id == detail.request_id)
                .update(values, synchronize_session="fetch")
            )
            self.db.commit()
        return rows == 1

    def find_by_request_id(self, request_id: UUID) -> Optional[MessageDetail]:
        with store_guard(self.db, "message_detail.find_by_request_id"):
            return (
                self.db.query(MessageDetail)
                .filter(MessageDetail.request_id == request_id)
                .first()
            )

    def find_by_request_ids(
        self, request_ids: Sequence[UUID]
    ) -> Dict[UUID, MessageDetail]:
        """Batch lookup; ids without a row are simply absent from the result."""
        if not request_ids:
            return {}
        with store_guard(self.db, "message_detail.find_by_request_ids"):
            rows = (
                self.db.query(MessageDetail)
                .filter(MessageDetail.request_id.in_(list(set(request_ids))))
                .all()
            )
        return {row.request_id: row for row in rows}

    def find_by_readable_id(self, readable_id: str) -> Optional[MessageDetail]:
        with store_guard(self.db, "message_detail.find_by_readable_id"):
            return (
                self.db.query(MessageDetail)
                .filter(MessageDetail.readable_id == readable_id)
                .order_by(MessageDetail.saved_at.asc(), MessageDetail.seq.asc())
                .first()
            )

    def find_by_readable_id_pattern(self, pattern: str) -> Optional[MessageDetail]:
        """First detail whose readable id contains pattern (case-insensitive)."""
        query = apply_pattern_filter(
            self.db.query(MessageDetail), MessageDetail.readable_id, pattern
        )
        with store_guard(self.db, "message_detail.find_by_readable_id_pattern"):
            return query.order_by(
                MessageDetail.saved_at.asc(), MessageDetail.seq.asc()
            ).first()

    def find_by_time_interval(
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
        """
        Details saved within [from_dt, to_dt], optionally filtered, one page at a time.

        Rows with the same saved_at are ordered by insertion so pages never
        overlap or skip. Without a pageable every matching row is returned in
        ascending order.
        """
        query = self.db.query(MessageDetail)
        query = apply_datetime_filter(query, MessageDetail.saved_at, from_dt, to_dt)
        query = apply_pattern_filter(query, MessageDetail.readable_id, readable_id_pattern)
        query = apply_pattern_filter(query, MessageDetail.cpa_id, cpa_id_pattern)
        query = apply_pattern_filter(query, MessageDetail.message_id, message_id_pattern)
        query = apply_exact_filter(query, MessageDetail.from_role, role)
        query = apply_exact_filter(query, MessageDetail.service, service)
        query = apply_exact_filter(query, MessageDetail.action, action)

        with store_guard(self.db, "message_detail.find_by_time_interval"):
            total = query.order_by(None).count()
            if pageable is None:
                rows = query.order_by(
                    MessageDetail.saved_at.asc(), MessageDetail.seq.asc()
                ).all()
                return Page.of(
                    Pageable(page_number=1, page_size=max(total, 1), sort=SortOrder.ASC),
                    total,
                    rows,
                )

            if pageable.sort == SortOrder.ASC:
                ordering = (MessageDetail.saved_at.asc(), MessageDetail.seq.asc())
            else:
                ordering = (MessageDetail.saved_at.desc(), MessageDetail.seq.desc())
            rows = (
                query.order_by(*ordering)
                .offset(pageable.offset)
                .limit(pageable.page_size)
                .all()
            )
        return Page.of(pageable, total, rows)

    def find_related_request_ids(
        self, request_ids: Sequence[UUID]
    ) -> Dict[UUID, str]:
        """Map each request id to the comma-joined request ids of its whole conversation."""
        member = aliased(MessageDetail)
        return self._related(request_ids, cast(member.request_id, Text), member)

    def find_related_readable_ids(
        self, request_ids: Sequence[UUID]
    ) -> Dict[UUID, str]:
        """Like find_related_request_ids, but joins the members' readable ids."""
        member = aliased(MessageDetail)
        return self._related(
            request_ids, func.coalesce(member.readable_id, ""), member
        )

    def _related(self, request_ids: Sequence[UUID], value, member) -> Dict[UUID, str]:
        if not request_ids:
            return {}
        joined = func.string_agg(
            value, aggregate_order_by(literal_column("','"), member.seq.asc())
        )
        with store_guard(self.db, "message_detail.find_related"):
            rows = (
                self.db.query(MessageDetail.request_id, joined)
                .join(member, member.conversation_id == MessageDetail.conversation_id)
                .filter(MessageDetail.request_id.in_(list(set(request_ids))))
                .group_by(MessageDetail.request_id)
                .all()
            )
        return {request_id: ids for request_id, ids in rows}

    def find_by_message_id_conversation_id_and_cpa_id(
        self, message_id: str, conversation_id: str, cpa_id: str
    ) -> List[MessageDetail]:
        """Exact match on the business key; duplicates give more than one row."""
        with store_guard(self.db, "message_detail.find_by_business_key"):
            return (
                self.db.query(MessageDetail)
                .filter(
                    MessageDetail.message_id == message_id,
                    MessageDetail.conversation_id == conversation_id,
                    MessageDetail.cpa_id == cpa_id,
                )
                .order_by(MessageDetail.seq.asc())
                .all()
            )
