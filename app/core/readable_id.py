"""Readable id derivation for message details."""

from __future__ import annotations

from typing import Optional

from app.constants.messages import (
    SYSTEM_OPERATOR_CODE,
    SYSTEM_OPERATOR_NAME,
    UNKNOWN_SENDER_CODE,
)
from app.models.message_detail import MessageDetail
from app.utils.time_utils import to_local

DIRECTION_IN = "IN"
DIRECTION_OUT = "OUT"
TIMESTAMP_FORMAT = "%y%m%d%H%M"
SENDER_SEGMENT_LENGTH = 4
REQUEST_ID_TAIL_LENGTH = 6


def resolve_sender_display_name(detail: MessageDetail) -> Optional[str]:
    """Outbound messages are always sent by the operator; inbound use the stored sender."""
    if detail.ref_to_message_id:
        return SYSTEM_OPERATOR_NAME
    return detail.sender_name


def _sender_segment(display_name: Optional[str]) -> str:
    if display_name == SYSTEM_OPERATOR_NAME:
        return SYSTEM_OPERATOR_CODE
    if not display_name:
        return UNKNOWN_SENDER_CODE
    compact = "".join(display_name.split())[:SENDER_SEGMENT_LENGTH].lower()
    return compact or UNKNOWN_SENDER_CODE


def generate_readable_id(detail: MessageDetail) -> str:
    """
    Build the display id ``direction.yyMMddHHmm.sender.tail``.

    direction is OUT when the message refers to another message, IN otherwise.
    The timestamp is savedAt in the local zone at minute precision, so several
    messages can share it. The tail is the last six characters of the request id.
    Missing inputs degrade to placeholder segments; this never raises.
    """
    direction = DIRECTION_OUT if detail.ref_to_message_id else DIRECTION_IN
    if detail.saved_at is not None:
        timestamp = to_local(detail.saved_at).strftime(TIMESTAMP_FORMAT)
    else:
        timestamp = "0" * len("yyMMddHHmm")
    sender = _sender_segment(resolve_sender_display_name(detail))
    tail = str(detail.request_id or "")[-REQUEST_ID_TAIL_LENGTH:]
    return ".".join((direction, timestamp, sender, tail))
