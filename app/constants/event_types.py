"""Upstream event types and the keys used inside their payloads."""

from enum import IntEnum, StrEnum

from app.constants.event_status import EventStatus


class EventType(IntEnum):
    """Event type ids as published by the gateway; ids match the event_types table."""

    MESSAGE_RECEIVED_VIA_SMTP = 1
    MESSAGE_RECEIVED_VIA_HTTP = 2
    MESSAGE_SENT_VIA_SMTP = 3
    MESSAGE_SENT_VIA_HTTP = 4
    MESSAGE_SAVED_IN_JURIDISK_LOGG = 5
    MESSAGE_VALIDATED_AGAINST_CPA = 6
    MESSAGE_VALIDATED_AGAINST_XSD = 7
    REFERENCE_RETRIEVED = 8
    MESSAGE_SENT_TO_FAGSYSTEM = 9
    MESSAGE_ENCRYPTION_FAILED = 10
    MESSAGE_DECRYPTION_FAILED = 11
    SIGNATURE_CHECK_FAILED = 12
    VALIDATION_AGAINST_CPA_FAILED = 13
    VALIDATION_AGAINST_XSD_FAILED = 14
    RETRY_TRIGGED = 15
    UNKNOWN_ERROR_OCCURRED = 16


class EventDataType(StrEnum):
    """Keys read from an event's payload."""

    SENDER_NAME = "sender_name"
    REFERENCE_PARAMETER = "reference_parameter"
    ERROR_MESSAGE = "error_message"


# Reference rows for the event_types table: id -> (description, status)
EVENT_TYPE_SEED: dict[EventType, tuple[str, EventStatus]] = {
    EventType.MESSAGE_RECEIVED_VIA_SMTP: ("Message received via SMTP", EventStatus.INFORMATION),
    EventType.MESSAGE_RECEIVED_VIA_HTTP: ("Message received via HTTP", EventStatus.INFORMATION),
    EventType.MESSAGE_SENT_VIA_SMTP: ("Message sent via SMTP", EventStatus.INFORMATION),
    EventType.MESSAGE_SENT_VIA_HTTP: ("Message sent via HTTP", EventStatus.INFORMATION),
    EventType.MESSAGE_SAVED_IN_JURIDISK_LOGG: ("Message saved in legal log", EventStatus.INFORMATION),
    EventType.MESSAGE_VALIDATED_AGAINST_CPA: ("Message validated against CPA", EventStatus.INFORMATION),
    EventType.MESSAGE_VALIDATED_AGAINST_XSD: ("Message validated against XSD", EventStatus.INFORMATION),
    EventType.REFERENCE_RETRIEVED: ("Reference retrieved", EventStatus.INFORMATION),
    EventType.MESSAGE_SENT_TO_FAGSYSTEM: ("Message sent to case system", EventStatus.PROCESSING_COMPLETED),
    EventType.MESSAGE_ENCRYPTION_FAILED: ("Message encryption failed", EventStatus.ERROR),
    EventType.MESSAGE_DECRYPTION_FAILED: ("Message decryption failed", EventStatus.ERROR),
    EventType.SIGNATURE_CHECK_FAILED: ("Signature check failed", EventStatus.ERROR),
    EventType.VALIDATION_AGAINST_CPA_FAILED: ("Validation against CPA failed", EventStatus.ERROR),
    EventType.VALIDATION_AGAINST_XSD_FAILED: ("Validation against XSD failed", EventStatus.ERROR),
    EventType.RETRY_TRIGGED: ("Retry triggered", EventStatus.INFORMATION),
    EventType.UNKNOWN_ERROR_OCCURRED: ("Unknown error occurred", EventStatus.ERROR),
}
