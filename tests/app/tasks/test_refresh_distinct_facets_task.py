"""Tests for the distinct facets refresh task."""

from contextlib import contextmanager
from unittest.mock import patch

from app.services.distinct_facets_service import DistinctFacetsService
from app.tasks.refresh_distinct_facets_task import refresh_distinct_facets_task


def test_refresh_task_updates_facets(db, setup_message_detail):
    @contextmanager
    def test_session():
        yield db

    with patch("app.tasks.refresh_distinct_facets_task.db_session", test_session):
        refreshed_at = refresh_distinct_facets_task()

    assert refreshed_at is not None
    facets = DistinctFacetsService(db).get()
    assert facets.actions == [setup_message_detail.action]
    assert facets.refreshed_at.isoformat() == refreshed_at
