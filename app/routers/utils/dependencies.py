"""Shared request-parameter dependencies for the query routers."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional

from fastapi import Depends, HTTPException, Query
from fastapi_pagination import Params

from app.constants.event_status import EventStatus
from app.schemas.page import Pageable, SortOrder
from app.utils.time_utils import parse_local_datetime


@dataclass(frozen=True)
class DateRange:
    from_dt: Optional[datetime]
    to_dt: Optional[datetime]


def _parse_date(name: str, value: Optional[str]) -> Optional[datetime]:
    if value is None or value == "":
        return None
    try:
        return parse_local_datetime(value)
    except ValueError:
        raise HTTPException(
            status_code=400,
            detail=f"Invalid {name} '{value}': expected yyyy-MM-ddTHH:mm",
        )


def _date_range(from_date: Optional[str], to_date: Optional[str], required: bool) -> DateRange:
    if required and not from_date:
        raise HTTPException(status_code=400, detail="Missing required parameter fromDate")
    if required and not to_date:
        raise HTTPException(status_code=400, detail="Missing required parameter toDate")
    from_dt = _parse_date("fromDate", from_date)
    to_dt = _parse_date("toDate", to_date)
    if from_dt is not None and to_dt is not None and from_dt > to_dt:
        raise HTTPException(status_code=400, detail="fromDate must not be after toDate")
    return DateRange(from_dt, to_dt)


def get_required_date_range(
    from_date: Optional[str] = Query(None, alias="fromDate"),
    to_date: Optional[str] = Query(None, alias="toDate"),
) -> DateRange:
    """FastAPI dependency for a mandatory fromDate/toDate window."""
    return _date_range(from_date, to_date, required=True)


def get_optional_date_range(
    from_date: Optional[str] = Query(None, alias="fromDate"),
    to_date: Optional[str] = Query(None, alias="toDate"),
) -> DateRange:
    return _date_range(from_date, to_date, required=False)


def get_pageable(
    params: Params = Depends(),
    sort: Optional[str] = Query(None),
) -> Pageable:
    """fastapi-pagination page/size plus an ASC/DESC sort (DESC by default)."""
    return Pageable.from_params(params, sort, default=SortOrder.DESC)


def get_statuses(
    statuses: Optional[List[str]] = Query(None),
) -> Optional[List[EventStatus]]:
    """Parse status filters given by name (ERROR) or label (Feil); repeatable or comma-separated."""
    if not statuses:
        return None
    parsed: List[EventStatus] = []
    for raw in statuses:
        for item in raw.split(","):
            if not item.strip():
                continue
            status = EventStatus.from_name(item)
            if status is None:
                raise HTTPException(status_code=400, detail=f"Unknown status '{item}'")
            parsed.append(status)
    return parsed or None
