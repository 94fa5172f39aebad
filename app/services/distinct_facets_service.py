"""
Service for the cached distinct roles, services and actions.

The underlying scan is expensive, so the cache is refreshed out-of-band
(see app.tasks.refresh_distinct_facets_task) and read as-is; refreshed_at
tells callers how stale it is.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional

from sqlalchemy import Text, cast, distinct, func, literal, select
from sqlalchemy.dialects.postgresql import ARRAY, insert
from sqlalchemy.orm import Session

from app.infra.logging_config import get_logger
from app.models.distinct_facets import FACETS_ROW_ID, DistinctFacets
from app.models.message_detail import MessageDetail
from app.utils.db.store_guard import store_guard

logger = get_logger("distinct_facets")


@dataclass(frozen=True)
class Facets:
    roles: List[str]
    services: List[str]
    actions: List[str]
    refreshed_at: datetime


def _sorted(values: Optional[List[str]]) -> List[str]:
    return sorted(set(values or []))


def _distinct_values(column):
    return func.array_agg(
        distinct(cast(column, Text)), type_=ARRAY(Text)
    ).filter(column.isnot(None))


class DistinctFacetsService:
    def __init__(self, db: Session) -> None:
        self.db = db

    def get(self) -> Optional[Facets]:
        """Cached facets, or None before the first refresh."""
        with store_guard(self.db, "distinct_facets.get"):
            row = (
                self.db.query(DistinctFacets)
                .filter(DistinctFacets.id == FACETS_ROW_ID)
                .populate_existing()
                .first()
            )
        if row is None:
            return None
        return Facets(
            roles=_sorted(row.roles),
            services=_sorted(row.services),
            actions=_sorted(row.actions),
            refreshed_at=row.refreshed_at,
        )

    def refresh(self) -> Optional[Facets]:
        """Recompute the distinct sets from all message details and upsert the cache row."""
        aggregate = select(
            literal(FACETS_ROW_ID),
            _distinct_values(MessageDetail.from_role),
            _distinct_values(MessageDetail.service),
            _distinct_values(MessageDetail.action),
            func.now(),
        )
        stmt = insert(DistinctFacets).from_select(
            ["id", "roles", "services", "actions", "refreshed_at"], aggregate
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=["id"],
            set_={
                "roles": stmt.excluded.roles,
                "services": stmt.excluded.services,
                "actions": stmt.excluded.actions,
                "refreshed_at": stmt.excluded.refreshed_at,
            },
        )
        with store_guard(self.db, "distinct_facets.refresh"):
            self.db.execute(stmt)
            self.db.commit()
        facets = self.get()
        if facets is not None:
            logger.info(
                "Refreshed distinct facets: %d roles, %d services, %d actions",
                len(facets.roles),
                len(facets.services),
                len(facets.actions),
            )
        return facets
