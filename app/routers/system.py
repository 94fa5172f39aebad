from fastapi import APIRouter, HTTPException, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from sqlalchemy.exc import SQLAlchemyError

from app.config import get_settings
from app.db import healthcheck
import app.infra.metrics  # noqa: F401  (registers the ingestion counters)

router = APIRouter(tags=["system"])


@router.get("/health")
def health() -> dict:
    """Liveness plus a database round trip."""
    try:
        healthcheck()
    except SQLAlchemyError:
        raise HTTPException(status_code=503, detail="Database unavailable")
    return {"status": "ok", "app": get_settings().app_name}


@router.get("/internal/prometheus")
def metrics() -> Response:
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
