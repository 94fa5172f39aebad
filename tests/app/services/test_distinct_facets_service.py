"""Tests for DistinctFacetsService."""

from sqlalchemy.orm import Session

from app.services.distinct_facets_service import DistinctFacetsService
from app.services.message_detail_service import MessageDetailService


def test_get_before_refresh_returns_none(db: Session):
    assert DistinctFacetsService(db).get() is None


def test_refresh_collects_sorted_distinct_values(db: Session, message_detail_factory):
    details = MessageDetailService(db)
    details.insert(message_detail_factory(from_role="Utleverer", service="B-service", action="Svar"))
    details.insert(message_detail_factory(from_role="Behandler", service="A-service", action="Svar"))
    details.insert(message_detail_factory(from_role="Utleverer", service="A-service", action="Foresporsel"))

    facets_service = DistinctFacetsService(db)
    facets_service.refresh()
    facets = facets_service.get()

    assert facets.roles == ["Behandler", "Utleverer"]
    assert facets.services == ["A-service", "B-service"]
    assert facets.actions == ["Foresporsel", "Svar"]
    assert facets.refreshed_at is not None


def test_refresh_grows_without_duplicates(db: Session, message_detail_factory):
    details = MessageDetailService(db)
    facets_service = DistinctFacetsService(db)
    details.insert(message_detail_factory(from_role="Utleverer"))
    details.insert(message_detail_factory(from_role="Behandler"))
    facets_service.refresh()
    assert facets_service.get().roles == ["Behandler", "Utleverer"]

    details.insert(message_detail_factory(from_role="Apotek"))
    details.insert(message_detail_factory(from_role="Behandler"))
    facets_service.refresh()

    assert facets_service.get().roles == ["Apotek", "Behandler", "Utleverer"]


def test_null_roles_are_ignored(db: Session, message_detail_factory):
    MessageDetailService(db).insert(message_detail_factory(from_role=None))
    facets = DistinctFacetsService(db).refresh()
    assert facets.roles == []
    assert facets.services == ["HarBorgerFrikort"]


def test_values_containing_commas_stay_whole(db: Session, message_detail_factory):
    MessageDetailService(db).insert(
        message_detail_factory(service="Frikort, egenandel", action="Svar,Ny")
    )
    facets = DistinctFacetsService(db).refresh()
    assert facets.services == ["Frikort, egenandel"]
    assert facets.actions == ["Svar,Ny"]
