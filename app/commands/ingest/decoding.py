"""Decode raw queue payloads into transport records."""

from __future__ import annotations

import json
from typing import Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError

from app.infra.logging_config import get_logger
from app.infra.metrics import RECORDS_DECODED, RECORDS_UNDECODABLE

logger = get_logger("ingest.decoding")

T = TypeVar("T", bound=BaseModel)

DECODE_ERRORS = (UnicodeDecodeError, json.JSONDecodeError, ValidationError)

PAYLOAD_LABELS = {
    "TransportMessageDetail": "message_detail",
    "TransportEvent": "event",
}


def raw_text(value: bytes) -> str:
    """Payload as text for logging; undecodable bytes are replaced."""
    return value.decode("utf-8", errors="replace")


def decode_payload(value: bytes, model: Type[T]) -> Optional[T]:
    """
    Parse a raw payload into model.

    Returns None and logs the raw payload when it cannot be decoded, so the
    caller can acknowledge the record and move on.
    """
    label = PAYLOAD_LABELS.get(model.__name__, model.__name__)
    try:
        record = model.model_validate_json(value.decode("utf-8"))
    except DECODE_ERRORS as e:
        logger.error(
            "Could not decode %s payload: %s. Raw payload: %s",
            model.__name__,
            e,
            raw_text(value),
        )
        RECORDS_UNDECODABLE.labels(payload=label).inc()
        return None
    RECORDS_DECODED.labels(payload=label).inc()
    return record
