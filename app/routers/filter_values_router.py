from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.db import get_db
from app.schemas.views import DistinctFacetsRead
from app.services.message_query_service import MessageQueryService

filter_values_router = APIRouter(prefix="/filter-values", tags=["Filter values"])


@filter_values_router.get("", response_model=Optional[DistinctFacetsRead])
def get_filter_values(db: Session = Depends(get_db)) -> Optional[DistinctFacetsRead]:
    """Cached distinct roles, services and actions; null before the first refresh."""
    return MessageQueryService(db).fetch_distinct_facets()
