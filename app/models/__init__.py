from app.models.conversation_status import ConversationStatus
from app.models.distinct_facets import DistinctFacets
from app.models.event import Event
from app.models.event_type import EventTypeRecord
from app.models.message_detail import MessageDetail

__all__ = [
    "ConversationStatus",
    "DistinctFacets",
    "Event",
    "EventTypeRecord",
    "MessageDetail",
]
