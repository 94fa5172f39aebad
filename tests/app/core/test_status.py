"""Tests for message status derivation and tracker status rules."""

from itertools import permutations

import pytest

from app.constants.event_status import EventStatus
from app.constants.event_types import EventType
from app.constants.messages import ACKNOWLEDGMENT_ACTION, NOT_APPLICABLE_ROLE
from app.core.status import derive_message_status, tracker_status_for_event
from app.models.message_detail import MessageDetail


@pytest.mark.parametrize(
    "order",
    list(
        permutations(
            [
                EventStatus.INFORMATION,
                EventStatus.ERROR,
                EventStatus.PROCESSING_COMPLETED,
            ]
        )
    ),
)
def test_processing_completed_wins_in_any_order(order):
    assert derive_message_status(order) == EventStatus.PROCESSING_COMPLETED


def test_error_wins_over_information():
    assert (
        derive_message_status([EventStatus.INFORMATION, EventStatus.ERROR, None])
        == EventStatus.ERROR
    )


def test_information_only():
    assert derive_message_status([EventStatus.INFORMATION]) == EventStatus.INFORMATION


def test_no_classified_events_is_unknown():
    assert derive_message_status([]) is None
    assert derive_message_status([None, EventStatus.WARNING]) is None


def test_information_event_leaves_tracker_alone():
    assert (
        tracker_status_for_event(
            EventType.MESSAGE_VALIDATED_AGAINST_XSD, EventStatus.INFORMATION
        )
        is None
    )


def test_error_event_sets_error():
    assert (
        tracker_status_for_event(EventType.MESSAGE_ENCRYPTION_FAILED, EventStatus.ERROR)
        == EventStatus.ERROR
    )


def test_retry_reopens_conversation():
    assert (
        tracker_status_for_event(EventType.RETRY_TRIGGED, EventStatus.INFORMATION)
        == EventStatus.INFORMATION
    )


def test_sent_via_http_completes_conversation():
    assert (
        tracker_status_for_event(EventType.MESSAGE_SENT_VIA_HTTP, EventStatus.INFORMATION)
        == EventStatus.PROCESSING_COMPLETED
    )


def test_sent_via_smtp_completes_partner_acknowledgment():
    detail = MessageDetail(action=ACKNOWLEDGMENT_ACTION, from_role="Ytelsesutbetaler")
    assert (
        tracker_status_for_event(
            EventType.MESSAGE_SENT_VIA_SMTP, EventStatus.INFORMATION, detail
        )
        == EventStatus.PROCESSING_COMPLETED
    )


def test_sent_via_smtp_ignores_operator_acknowledgment():
    detail = MessageDetail(action=ACKNOWLEDGMENT_ACTION, from_role=NOT_APPLICABLE_ROLE)
    assert (
        tracker_status_for_event(
            EventType.MESSAGE_SENT_VIA_SMTP, EventStatus.INFORMATION, detail
        )
        is None
    )


def test_sent_via_smtp_without_detail_is_ignored():
    assert (
        tracker_status_for_event(EventType.MESSAGE_SENT_VIA_SMTP, EventStatus.INFORMATION)
        is None
    )


def test_event_status_parsing_never_raises():
    assert EventStatus.from_db_value("Ferdigbehandlet") == EventStatus.PROCESSING_COMPLETED
    assert EventStatus.from_db_value("bogus") is None
    assert EventStatus.from_name("error") == EventStatus.ERROR
    assert EventStatus.from_name("Feil") == EventStatus.ERROR
    assert EventStatus.from_name("nope") is None


def test_legacy_statuses_remain_members():
    for name in ("CREATED", "MANUAL_PROCESSING", "WARNING", "FATAL_ERROR"):
        assert EventStatus[name].value
