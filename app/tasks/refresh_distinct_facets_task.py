"""Celery task refreshing the cached distinct roles/services/actions."""

from __future__ import annotations

from typing import Optional

from app.infra.celery_app import celery_app
from app.infra.logging_config import get_logger
from app.services.distinct_facets_service import DistinctFacetsService
from app.utils.db.db_session_helper import db_session

logger = get_logger("distinct_facets_task")


@celery_app.task(
    name="app.tasks.refresh_distinct_facets_task.refresh_distinct_facets_task"
)
def refresh_distinct_facets_task() -> Optional[str]:
    """
    Recompute the distinct facets from all message details.

    Runs on the beat schedule; never on the ingestion or request path.

    Returns:
        Optional[str]: refreshed_at as ISO-8601, or None if nothing was stored
    """
    with db_session() as db:
        facets = DistinctFacetsService(db).refresh()
    if facets is None:
        logger.warning("Distinct facets refresh produced no row")
        return None
    return facets.refreshed_at.isoformat()
