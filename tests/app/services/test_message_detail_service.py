"""Tests for MessageDetailService."""

import uuid
from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy.orm import Session

from app.core.readable_id import generate_readable_id
from app.schemas.page import Pageable, SortOrder
from app.services.message_detail_service import MessageDetailService

WINDOW_START = datetime(2025, 3, 10, 8, 0, tzinfo=timezone.utc)
WINDOW_END = WINDOW_START + timedelta(hours=1)


def test_insert_computes_readable_id(db: Session, message_detail_factory):
    service = MessageDetailService(db)
    detail = message_detail_factory()
    request_id = service.insert(detail)

    stored = service.find_by_request_id(request_id)
    assert stored is not None
    assert stored.readable_id == generate_readable_id(detail)
    assert stored.seq is not None


def test_find_by_request_id_unknown_returns_none(db: Session):
    assert MessageDetailService(db).find_by_request_id(uuid.uuid4()) is None


def test_update_replaces_row(db: Session, setup_message_detail, message_detail_factory):
    service = MessageDetailService(db)
    replacement = message_detail_factory(
        request_id=setup_message_detail.request_id,
        conversation_id=setup_message_detail.conversation_id,
        sender_name="Another Sender",
        ref_param="ref-1",
        saved_at=setup_message_detail.saved_at,
    )
    assert service.update(replacement) is True

    stored = service.find_by_request_id(setup_message_detail.request_id)
    assert stored.sender_name == "Another Sender"
    assert stored.ref_param == "ref-1"
    assert stored.readable_id.split(".")[2] == "anot"


def test_update_unknown_request_id_returns_false(db: Session, message_detail_factory):
    assert MessageDetailService(db).update(message_detail_factory()) is False


def test_find_by_request_ids_omits_missing(db: Session, setup_conversation_details):
    first, lone = setup_conversation_details
    missing = uuid.uuid4()
    result = MessageDetailService(db).find_by_request_ids(
        [first[0].request_id, lone.request_id, missing]
    )
    assert set(result) == {first[0].request_id, lone.request_id}
    assert missing not in result


def test_find_by_readable_id(db: Session, setup_message_detail):
    service = MessageDetailService(db)
    found = service.find_by_readable_id(setup_message_detail.readable_id)
    assert found.request_id == setup_message_detail.request_id
    assert service.find_by_readable_id("IN.0000000000.none.000000") is None


@pytest.mark.parametrize("part", ["prefix", "suffix", "interior", "upper"])
def test_readable_id_pattern_search(db: Session, setup_message_detail, part):
    readable_id = setup_message_detail.readable_id
    pattern = {
        "prefix": readable_id[:8],
        "suffix": readable_id[-6:],
        "interior": readable_id[3:12],
        "upper": readable_id.upper(),
    }[part]

    service = MessageDetailService(db)
    assert service.find_by_readable_id_pattern(pattern).request_id == (
        setup_message_detail.request_id
    )
    page = service.find_by_time_interval(None, None, readable_id_pattern=pattern)
    assert [d.request_id for d in page.content] == [setup_message_detail.request_id]


@pytest.fixture
def nine_details_same_instant(db, message_detail_factory):
    service = MessageDetailService(db)
    saved_at = WINDOW_START + timedelta(minutes=5)
    details = [message_detail_factory(saved_at=saved_at) for _ in range(9)]
    for detail in details:
        service.insert(detail)
    return details


@pytest.mark.parametrize("sort", [SortOrder.ASC, SortOrder.DESC])
def test_pagination_is_complete_and_stable(db: Session, nine_details_same_instant, sort):
    service = MessageDetailService(db)
    seen = []
    sizes = []
    for page_number in (1, 2, 3):
        page = service.find_by_time_interval(
            WINDOW_START,
            WINDOW_END,
            pageable=Pageable(page_number=page_number, page_size=4, sort=sort),
        )
        assert page.total_elements == 9
        assert page.total_pages == 3
        assert page.page == page_number
        sizes.append(len(page.content))
        seen.extend(d.request_id for d in page.content)

    assert sizes == [4, 4, 1]
    assert len(seen) == len(set(seen)) == 9
    inserted = [d.request_id for d in nine_details_same_instant]
    expected = inserted if sort == SortOrder.ASC else list(reversed(inserted))
    assert seen == expected


def test_page_beyond_last_is_empty(db: Session, nine_details_same_instant):
    page = MessageDetailService(db).find_by_time_interval(
        WINDOW_START, WINDOW_END, pageable=Pageable(page_number=4, page_size=4)
    )
    assert page.content == []
    assert page.total_elements == 9


def test_time_interval_is_inclusive(db: Session, message_detail_factory):
    service = MessageDetailService(db)
    at_start = message_detail_factory(saved_at=WINDOW_START)
    at_end = message_detail_factory(saved_at=WINDOW_END)
    before = message_detail_factory(saved_at=WINDOW_START - timedelta(seconds=1))
    after = message_detail_factory(saved_at=WINDOW_END + timedelta(seconds=1))
    for detail in (at_start, at_end, before, after):
        service.insert(detail)

    page = service.find_by_time_interval(WINDOW_START, WINDOW_END)
    assert {d.request_id for d in page.content} == {at_start.request_id, at_end.request_id}
    # Unpaged results come back in ascending order
    assert [d.request_id for d in page.content] == [at_start.request_id, at_end.request_id]


def test_filters_combine(db: Session, message_detail_factory):
    service = MessageDetailService(db)
    saved_at = WINDOW_START + timedelta(minutes=1)
    match = message_detail_factory(
        saved_at=saved_at, cpa_id="nav:qass:12345", from_role="Utleverer", action="Svar"
    )
    other_role = message_detail_factory(
        saved_at=saved_at, cpa_id="nav:qass:12345", from_role="Behandler", action="Svar"
    )
    other_cpa = message_detail_factory(
        saved_at=saved_at, cpa_id="nav:other:1", from_role="Utleverer", action="Svar"
    )
    for detail in (match, other_role, other_cpa):
        service.insert(detail)

    page = service.find_by_time_interval(
        WINDOW_START,
        WINDOW_END,
        cpa_id_pattern="QASS:123",
        role="Utleverer",
        action="Svar",
    )
    assert [d.request_id for d in page.content] == [match.request_id]

    by_message_id = service.find_by_time_interval(
        WINDOW_START, WINDOW_END, message_id_pattern=match.message_id[2:10].upper()
    )
    assert [d.request_id for d in by_message_id.content] == [match.request_id]


def test_exact_filters_do_not_match_substrings(db: Session, message_detail_factory):
    service = MessageDetailService(db)
    service.insert(
        message_detail_factory(saved_at=WINDOW_START, service="HarBorgerFrikort")
    )
    page = service.find_by_time_interval(WINDOW_START, WINDOW_END, service="HarBorger")
    assert page.content == []


def test_pattern_wildcards_are_literal(db: Session, message_detail_factory):
    service = MessageDetailService(db)
    service.insert(message_detail_factory(saved_at=WINDOW_START, cpa_id="nav:qass:1"))
    page = service.find_by_time_interval(WINDOW_START, WINDOW_END, cpa_id_pattern="%")
    assert page.content == []


def test_find_related_request_ids(db: Session, setup_conversation_details):
    first, lone = setup_conversation_details
    service = MessageDetailService(db)
    ids = [d.request_id for d in first] + [lone.request_id]

    related = service.find_related_request_ids(ids)

    expected = ",".join(str(d.request_id) for d in first)
    for detail in first:
        assert related[detail.request_id] == expected
    assert related[lone.request_id] == str(lone.request_id)


def test_find_related_readable_ids(db: Session, setup_conversation_details):
    first, lone = setup_conversation_details
    related = MessageDetailService(db).find_related_readable_ids(
        [first[1].request_id, lone.request_id]
    )
    assert related[first[1].request_id] == ",".join(d.readable_id for d in first)
    assert related[lone.request_id] == lone.readable_id
    assert related[first[1].request_id].split(",")[1].startswith("OUT.")


def test_find_related_with_no_ids(db: Session):
    assert MessageDetailService(db).find_related_request_ids([]) == {}


def test_find_by_business_key_returns_all_duplicates(db: Session, message_detail_factory):
    service = MessageDetailService(db)
    first = message_detail_factory()
    second = message_detail_factory(
        message_id=first.message_id,
        conversation_id=first.conversation_id,
        cpa_id=first.cpa_id,
    )
    service.insert(first)
    service.insert(second)

    found = service.find_by_message_id_conversation_id_and_cpa_id(
        first.message_id, first.conversation_id, first.cpa_id
    )
    assert [d.request_id for d in found] == [first.request_id, second.request_id]
    assert (
        service.find_by_message_id_conversation_id_and_cpa_id(
            first.message_id, first.conversation_id, "other-cpa"
        )
        == []
    )
