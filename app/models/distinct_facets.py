from __future__ import annotations

from sqlalchemy import Column, DateTime, Integer, Text
from sqlalchemy.dialects.postgresql import ARRAY

from app.db import Base

FACETS_ROW_ID = 1


class DistinctFacets(Base):
    """Single-row cache of distinct roles, services and actions."""

    __tablename__ = "distinct_roles_services_actions"

    id = Column(Integer, primary_key=True, autoincrement=False)
    roles = Column(ARRAY(Text), nullable=True)
    services = Column(ARRAY(Text), nullable=True)
    actions = Column(ARRAY(Text), nullable=True)
    refreshed_at = Column(DateTime(timezone=True), nullable=False)
