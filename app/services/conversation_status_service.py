"""
Service for the per-conversation status tracker.

The tracker records the most recent status observed, not the worst one:
any status may follow any other and there is no terminal state.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from sqlalchemy import func, literal_column, select
from sqlalchemy.dialects.postgresql import aggregate_order_by, distinct_on, insert
from sqlalchemy.orm import Session, aliased

from app.constants.event_status import DEFAULT_CONVERSATION_STATUSES, EventStatus
from app.infra.logging_config import get_logger
from app.models.conversation_status import ConversationStatus
from app.models.message_detail import MessageDetail
from app.schemas.page import Page, Pageable, SortOrder
from app.services.query_filters import (
    apply_datetime_filter,
    apply_exact_filter,
    apply_pattern_filter,
)
from app.utils.db.store_guard import store_guard
from app.utils.time_utils import utc_now

logger = get_logger("conversation_status")


class ConversationStatusService:
    def __init__(self, db: Session) -> None:
        self.db = db

    def insert(self, conversation_id: str, at: Optional[datetime] = None) -> bool:
        """
        Create the tracker row with status INFORMATION.

        Idempotent: returns True only when a new row was created; an existing
        row is left untouched and False is returned.
        """
        at = at or utc_now()
        stmt = (
            insert(ConversationStatus)
            .values(
                conversation_id=conversation_id,
                created_at=at,
                latest_status=EventStatus.INFORMATION,
                status_at=at,
            )
            .on_conflict_do_nothing(index_elements=["conversation_id"])
        )
        with store_guard(self.db, "conversation_status.insert"):
            result = self.db.execute(stmt)
            self.db.commit()
        return result.rowcount == 1

    def update(
        self,
        conversation_id: str,
        status: EventStatus,
        at: Optional[datetime] = None,
    ) -> bool:
        """
        Overwrite latest_status and status_at.

        Returns:
            bool: False when the conversation has not been inserted
        """
        with store_guard(self.db, "conversation_status.update"):
            rows = (
                self.db.query(ConversationStatus)
                .filter(ConversationStatus.conversation_id == conversation_id)
                .update(
                    {"latest_status": status, "status_at": at or utc_now()},
                    synchronize_session="fetch",
                )
            )
            self.db.commit()
        if rows != 1:
            logger.warning(
                "Conversation status not found for update: %s", conversation_id
            )
        return rows == 1

    def get(self, conversation_id: str) -> Optional[ConversationStatus]:
        with store_guard(self.db, "conversation_status.get"):
            return (
                self.db.query(ConversationStatus)
                .filter(ConversationStatus.conversation_id == conversation_id)
                .first()
            )

    def find_by_filters(
        self,
        from_dt: Optional[datetime] = None,
        to_dt: Optional[datetime] = None,
        cpa_id_pattern: str = "",
        service: str = "",
        statuses: Optional[Sequence[EventStatus]] = None,
        pageable: Optional[Pageable] = None,
    ) -> Page:
        """
        Conversations matching the filters, with their messages' readable ids.

        The time window applies to the conversation's created_at. cpa id and
        service come from the conversation's earliest matching message. Each
        content row has conversation_id, created_at, latest_status,
        status_at, cpa_id, service and readable_id_list.
        """
        statuses = list(statuses or DEFAULT_CONVERSATION_STATUSES)

        candidates = (
            select(
                ConversationStatus.conversation_id,
                ConversationStatus.created_at,
                ConversationStatus.latest_status,
                ConversationStatus.status_at,
                MessageDetail.cpa_id,
                MessageDetail.service,
            )
            .join(
                MessageDetail,
                MessageDetail.conversation_id == ConversationStatus.conversation_id,
            )
            .where(ConversationStatus.latest_status.in_(statuses))
            .ext(distinct_on(ConversationStatus.conversation_id))
        )
        candidates = apply_datetime_filter(
            candidates, ConversationStatus.created_at, from_dt, to_dt
        )
        candidates = apply_pattern_filter(candidates, MessageDetail.cpa_id, cpa_id_pattern)
        candidates = apply_exact_filter(candidates, MessageDetail.service, service)
        matching = candidates.order_by(
            ConversationStatus.conversation_id,
            MessageDetail.saved_at.asc(),
            MessageDetail.seq.asc(),
        ).subquery("conversations_matching_filters")

        member = aliased(MessageDetail)
        readable_id_list = func.string_agg(
            func.coalesce(member.readable_id, ""),
            aggregate_order_by(
                literal_column("','"), member.saved_at.asc(), member.seq.asc()
            ),
        ).label("readable_id_list")
        stmt = (
            select(
                matching.c.conversation_id,
                matching.c.created_at,
                matching.c.latest_status,
                matching.c.status_at,
                matching.c.cpa_id,
                matching.c.service,
                readable_id_list,
            )
            .join(member, member.conversation_id == matching.c.conversation_id)
            .group_by(
                matching.c.conversation_id,
                matching.c.created_at,
                matching.c.latest_status,
                matching.c.status_at,
                matching.c.cpa_id,
                matching.c.service,
            )
        )

        with store_guard(self.db, "conversation_status.find_by_filters"):
            total = self.db.scalar(select(func.count()).select_from(matching))
            if pageable is None:
                rows = self.db.execute(
                    stmt.order_by(
                        matching.c.created_at.desc(), matching.c.conversation_id
                    )
                ).all()
                pageable = Pageable(page_number=1, page_size=max(len(rows), 1))
                return Page.of(pageable, total or 0, rows)

            if pageable.sort == SortOrder.ASC:
                ordering = (matching.c.created_at.asc(), matching.c.conversation_id.asc())
            else:
                ordering = (matching.c.created_at.desc(), matching.c.conversation_id.desc())
            rows = self.db.execute(
                stmt.order_by(*ordering)
                .offset(pageable.offset)
                .limit(pageable.page_size)
            ).all()
        return Page.of(pageable, total or 0, rows)
