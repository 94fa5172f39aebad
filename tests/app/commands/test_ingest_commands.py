"""Tests for the ingestion commands, end to end against the database."""

import json
import uuid
from itertools import permutations

import pytest
from prometheus_client import REGISTRY
from sqlalchemy.orm import Session

from app.commands.ingest.ingest_event_command import IngestEventCommand
from app.commands.ingest.ingest_message_detail_command import IngestMessageDetailCommand
from app.constants.event_status import EventStatus
from app.constants.event_types import EventType
from app.constants.messages import ACKNOWLEDGMENT_ACTION, NOT_APPLICABLE_ROLE
from app.models.event import Event
from app.models.message_detail import MessageDetail
from app.services.conversation_status_service import ConversationStatusService
from app.services.event_service import EventService
from app.services.message_detail_service import MessageDetailService
from app.services.message_query_service import MessageQueryService


def test_message_detail_is_stored_and_tracked(db: Session, message_detail_payload):
    payload = message_detail_payload()
    request_id = IngestMessageDetailCommand(db).execute(payload)

    detail = MessageDetailService(db).find_by_request_id(request_id)
    assert detail is not None
    assert detail.readable_id.startswith("IN.")
    status = ConversationStatusService(db).get(detail.conversation_id)
    assert status.latest_status == EventStatus.INFORMATION


def test_message_detail_redelivery_updates_in_place(db: Session, message_detail_payload):
    request_id = str(uuid.uuid4())
    command = IngestMessageDetailCommand(db)
    command.execute(message_detail_payload(requestId=request_id, refParam=None))
    command.execute(message_detail_payload(requestId=request_id, refParam="ref-9"))

    assert db.query(MessageDetail).count() == 1
    assert MessageDetailService(db).find_by_request_id(uuid.UUID(request_id)).ref_param == "ref-9"


def test_duplicate_message_is_stored_and_logged(db: Session, message_detail_payload, caplog):
    command = IngestMessageDetailCommand(db)
    command.execute(message_detail_payload(messageId="m-1", conversationId="c-1", cpaId="cpa-1"))
    second = command.execute(
        message_detail_payload(messageId="m-1", conversationId="c-1", cpaId="cpa-1")
    )

    assert MessageDetailService(db).find_by_request_id(second) is not None
    assert "Duplicate message" in caplog.text


@pytest.mark.parametrize("payload", [b"{broken", b"\xff\xff", b'{"requestId": "x"}'])
def test_undecodable_payloads_are_dropped(db: Session, payload, caplog):
    assert IngestMessageDetailCommand(db).execute(payload) is None
    assert IngestEventCommand(db).execute(payload) is None
    assert db.query(Event).count() == 0
    assert "Raw payload" in caplog.text


def test_cpa_validation_event_sets_sender(db: Session, message_detail_payload, event_payload):
    request_id = IngestMessageDetailCommand(db).execute(message_detail_payload(sender=None))
    IngestEventCommand(db).execute(
        event_payload(
            request_id,
            EventType.MESSAGE_VALIDATED_AGAINST_CPA,
            eventData=json.dumps({"sender_name": "Test EPJ AS"}),
        )
    )

    detail = MessageDetailService(db).find_by_request_id(request_id)
    assert detail.sender_name == "Test EPJ AS"
    assert detail.readable_id.split(".")[2] == "test"


def test_reference_event_sets_ref_param(db: Session, message_detail_payload, event_payload):
    request_id = IngestMessageDetailCommand(db).execute(message_detail_payload())
    IngestEventCommand(db).execute(
        event_payload(
            request_id,
            EventType.REFERENCE_RETRIEVED,
            eventData=json.dumps({"reference_parameter": "ref-1"}),
        )
    )
    assert MessageDetailService(db).find_by_request_id(request_id).ref_param == "ref-1"


def test_enriching_event_before_detail_is_still_stored(db: Session, event_payload):
    request_id = uuid.uuid4()
    event_id = IngestEventCommand(db).execute(
        event_payload(
            request_id,
            EventType.MESSAGE_VALIDATED_AGAINST_CPA,
            eventData=json.dumps({"sender_name": "Test EPJ AS"}),
        )
    )
    assert EventService(db).find_by_id(event_id) is not None


def test_error_event_updates_conversation(db: Session, message_detail_payload, event_payload):
    conversation_id = str(uuid.uuid4())
    request_id = IngestMessageDetailCommand(db).execute(
        message_detail_payload(conversationId=conversation_id)
    )
    IngestEventCommand(db).execute(
        event_payload(request_id, EventType.MESSAGE_ENCRYPTION_FAILED, conversationId=conversation_id)
    )
    assert ConversationStatusService(db).get(conversation_id).latest_status == EventStatus.ERROR


def test_information_event_leaves_tracker_untouched(db: Session, message_detail_payload, event_payload):
    conversation_id = str(uuid.uuid4())
    request_id = IngestMessageDetailCommand(db).execute(
        message_detail_payload(conversationId=conversation_id)
    )
    IngestEventCommand(db).execute(
        event_payload(request_id, EventType.MESSAGE_VALIDATED_AGAINST_XSD, conversationId=conversation_id)
    )
    status = ConversationStatusService(db).get(conversation_id)
    assert status.latest_status == EventStatus.INFORMATION
    assert status.status_at == status.created_at


def test_conversation_id_is_resolved_from_detail(db: Session, message_detail_payload, event_payload):
    conversation_id = str(uuid.uuid4())
    request_id = IngestMessageDetailCommand(db).execute(
        message_detail_payload(
            conversationId=conversation_id,
            action=ACKNOWLEDGMENT_ACTION,
            fromRole="Ytelsesutbetaler",
        )
    )
    IngestEventCommand(db).execute(event_payload(request_id, EventType.MESSAGE_SENT_VIA_SMTP))
    status = ConversationStatusService(db).get(conversation_id)
    assert status.latest_status == EventStatus.PROCESSING_COMPLETED


def test_operator_acknowledgment_over_smtp_does_not_complete(
    db: Session, message_detail_payload, event_payload
):
    conversation_id = str(uuid.uuid4())
    request_id = IngestMessageDetailCommand(db).execute(
        message_detail_payload(
            conversationId=conversation_id,
            action=ACKNOWLEDGMENT_ACTION,
            fromRole=NOT_APPLICABLE_ROLE,
        )
    )
    IngestEventCommand(db).execute(event_payload(request_id, EventType.MESSAGE_SENT_VIA_SMTP))
    status = ConversationStatusService(db).get(conversation_id)
    assert status.latest_status == EventStatus.INFORMATION


def test_event_before_detail_creates_conversation(db: Session, message_detail_payload, event_payload):
    conversation_id = str(uuid.uuid4())
    request_id = uuid.uuid4()
    IngestEventCommand(db).execute(
        event_payload(request_id, EventType.UNKNOWN_ERROR_OCCURRED, conversationId=conversation_id)
    )
    IngestMessageDetailCommand(db).execute(
        message_detail_payload(requestId=str(request_id), conversationId=conversation_id)
    )
    # The later detail delivery must not reset the tracker
    assert ConversationStatusService(db).get(conversation_id).latest_status == EventStatus.ERROR


@pytest.mark.parametrize(
    "order",
    list(
        permutations(
            [
                EventType.MESSAGE_RECEIVED_VIA_HTTP,
                EventType.UNKNOWN_ERROR_OCCURRED,
                EventType.MESSAGE_SENT_TO_FAGSYSTEM,
            ]
        )
    ),
)
def test_message_status_resolves_to_completed_in_any_order(
    db: Session, message_detail_payload, event_payload, order
):
    request_id = uuid.uuid4()
    events = IngestEventCommand(db)
    events.execute(event_payload(request_id, order[0]))
    IngestMessageDetailCommand(db).execute(message_detail_payload(requestId=str(request_id)))
    for event_type in order[1:]:
        events.execute(event_payload(request_id, event_type))

    infos = MessageQueryService(db).fetch_message_details_by_id(str(request_id))
    assert infos[0].status == EventStatus.PROCESSING_COMPLETED.value


def test_replayed_event_is_appended_again(db: Session, event_payload):
    request_id = uuid.uuid4()
    payload = event_payload(request_id, EventType.MESSAGE_RECEIVED_VIA_HTTP)
    command = IngestEventCommand(db)
    command.execute(payload)
    command.execute(payload)
    assert len(EventService(db).find_by_request_id(request_id)) == 2


def test_redelivered_detail_keeps_enriched_sender_and_reference(
    db: Session, message_detail_payload, event_payload
):
    request_id = str(uuid.uuid4())
    payload = message_detail_payload(requestId=request_id, sender=None, refParam=None)
    details = IngestMessageDetailCommand(db)
    events = IngestEventCommand(db)

    details.execute(payload)
    events.execute(
        event_payload(
            request_id,
            EventType.MESSAGE_VALIDATED_AGAINST_CPA,
            eventData=json.dumps({"sender_name": "Test EPJ AS"}),
        )
    )
    events.execute(
        event_payload(
            request_id,
            EventType.REFERENCE_RETRIEVED,
            eventData=json.dumps({"reference_parameter": "ref-1"}),
        )
    )
    service = MessageDetailService(db)
    before = service.find_by_request_id(uuid.UUID(request_id))
    readable_id = before.readable_id
    assert readable_id.split(".")[2] == "test"

    details.execute(payload)

    after = service.find_by_request_id(uuid.UUID(request_id))
    assert after.sender_name == "Test EPJ AS"
    assert after.ref_param == "ref-1"
    assert after.readable_id == readable_id
    assert service.find_by_readable_id(readable_id) is not None


def test_decode_outcomes_are_counted(db: Session, event_payload):
    def count(name):
        return REGISTRY.get_sample_value(name, {"payload": "event"}) or 0.0

    decoded, undecodable = count("ebms_records_decoded_total"), count("ebms_records_undecodable_total")
    command = IngestEventCommand(db)
    command.execute(event_payload(uuid.uuid4(), EventType.MESSAGE_RECEIVED_VIA_HTTP))
    command.execute(b"{broken")

    assert count("ebms_records_decoded_total") == decoded + 1
    assert count("ebms_records_undecodable_total") == undecodable + 1
