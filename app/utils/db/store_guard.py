"""Translate SQLAlchemy failures into the application's store errors."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

from sqlalchemy.exc import DataError, IntegrityError, InterfaceError, OperationalError
from sqlalchemy.orm import Session

from app.exceptions import StoreUnavailableError, StoreWriteRejectedError
from app.infra.logging_config import get_logger

logger = get_logger("store")


@contextmanager
def store_guard(db: Session, operation: str) -> Iterator[None]:
    """
    Run one store operation, rolling back and re-raising as a StoreError on failure.

    No retries here; redelivery or the HTTP caller decides what happens next.
    """
    try:
        yield
    except (OperationalError, InterfaceError) as e:
        db.rollback()
        logger.error("Store unavailable during %s: %s", operation, e)
        raise StoreUnavailableError(operation) from e
    except (IntegrityError, DataError) as e:
        db.rollback()
        logger.error("Store rejected write during %s: %s", operation, e)
        raise StoreWriteRejectedError(operation) from e
