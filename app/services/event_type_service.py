"""
Event type reference data and the classifier built on it.

The reference table is static between deploys, so the classifier is loaded
once per process and shared read-only.
"""

from __future__ import annotations

import threading
from typing import Dict, List, Mapping, Optional, Sequence

from sqlalchemy.orm import Session

from app.constants.event_status import EventStatus
from app.constants.messages import UNKNOWN
from app.infra.logging_config import get_logger
from app.models.event_type import EventTypeRecord
from app.utils.db.store_guard import store_guard

logger = get_logger("event_types")


class EventTypeService:
    def __init__(self, db: Session) -> None:
        self.db = db

    def find_by_id(self, event_type_id: int) -> Optional[EventTypeRecord]:
        with store_guard(self.db, "event_type.find_by_id"):
            return (
                self.db.query(EventTypeRecord)
                .filter(EventTypeRecord.event_type_id == event_type_id)
                .first()
            )

    def find_by_ids(self, event_type_ids: Sequence[int]) -> List[EventTypeRecord]:
        if not event_type_ids:
            return []
        with store_guard(self.db, "event_type.find_by_ids"):
            return (
                self.db.query(EventTypeRecord)
                .filter(EventTypeRecord.event_type_id.in_(list(set(event_type_ids))))
                .order_by(EventTypeRecord.event_type_id.asc())
                .all()
            )

    def find_all(self) -> List[EventTypeRecord]:
        with store_guard(self.db, "event_type.find_all"):
            return (
                self.db.query(EventTypeRecord)
                .order_by(EventTypeRecord.event_type_id.asc())
                .all()
            )


class EventClassifier:
    """Maps event type ids to status categories and descriptions."""

    def __init__(
        self,
        statuses: Mapping[int, Optional[EventStatus]],
        descriptions: Optional[Mapping[int, str]] = None,
    ) -> None:
        self._statuses: Dict[int, Optional[EventStatus]] = dict(statuses)
        self._descriptions: Dict[int, str] = dict(descriptions or {})

    @classmethod
    def load(cls, db: Session) -> "EventClassifier":
        records = EventTypeService(db).find_all()
        logger.info("Loaded %d event types", len(records))
        return cls(
            {r.event_type_id: r.status for r in records},
            {r.event_type_id: r.description for r in records},
        )

    def classify(self, event_type_id: int) -> Optional[EventStatus]:
        """Status category of an event type, or None when unknown."""
        return self._statuses.get(int(event_type_id))

    def describe(self, event_type_id: int) -> str:
        return self._descriptions.get(int(event_type_id), UNKNOWN)

    def __len__(self) -> int:
        return len(self._statuses)


_classifier: Optional[EventClassifier] = None
_classifier_lock = threading.Lock()


def get_event_classifier(db: Session) -> EventClassifier:
    """Process-wide classifier, loaded on first use."""
    global _classifier
    if _classifier is None:
        with _classifier_lock:
            if _classifier is None:
                _classifier = EventClassifier.load(db)
    return _classifier


def reset_event_classifier() -> None:
    """Drop the cached classifier (after migrations, and in tests)."""
    global _classifier
    with _classifier_lock:
        _classifier = None
