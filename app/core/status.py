"""
Status derivation rules.

Two different notions live here and must stay separate:

- ``derive_message_status``: priority wins. Used by message-level views to
  summarise every event seen for a request.
- ``tracker_status_for_event``: latest wins. Decides what a single incoming
  event writes to the conversation tracker, if anything.
"""

from __future__ import annotations

from typing import Iterable, Optional

from app.constants.event_status import EventStatus
from app.constants.event_types import EventType
from app.constants.messages import ACKNOWLEDGMENT_ACTION, NOT_APPLICABLE_ROLE
from app.models.message_detail import MessageDetail

MESSAGE_STATUS_PRIORITY = (
    EventStatus.PROCESSING_COMPLETED,
    EventStatus.ERROR,
    EventStatus.INFORMATION,
)


def derive_message_status(
    categories: Iterable[Optional[EventStatus]],
) -> Optional[EventStatus]:
    """Return the highest-priority category present, or None if none classify."""
    seen = set(categories)
    for status in MESSAGE_STATUS_PRIORITY:
        if status in seen:
            return status
    return None


def tracker_status_for_event(
    event_type: EventType,
    category: Optional[EventStatus],
    detail: Optional[MessageDetail] = None,
) -> Optional[EventStatus]:
    """
    Status an event should write to its conversation, or None to leave it alone.

    INFORMATION events do not move the tracker, except a retry, which reopens
    the conversation. Sending over HTTP completes it; sending over SMTP only
    completes it for a partner's acknowledgment.
    """
    if event_type == EventType.RETRY_TRIGGED:
        return EventStatus.INFORMATION
    if event_type == EventType.MESSAGE_SENT_VIA_HTTP:
        return EventStatus.PROCESSING_COMPLETED
    if event_type == EventType.MESSAGE_SENT_VIA_SMTP:
        if (
            detail is not None
            and detail.action == ACKNOWLEDGMENT_ACTION
            and detail.from_role != NOT_APPLICABLE_ROLE
        ):
            return EventStatus.PROCESSING_COMPLETED
        return None
    if category is None or category == EventStatus.INFORMATION:
        return None
    return category
