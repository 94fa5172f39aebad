from app.services.conversation_status_service import ConversationStatusService
from app.services.distinct_facets_service import DistinctFacetsService
from app.services.duplicate_check_service import DuplicateCheckService
from app.services.event_service import EventService
from app.services.event_type_service import EventTypeService
from app.services.message_detail_service import MessageDetailService
from app.services.message_query_service import MessageQueryService

__all__ = [
    "ConversationStatusService",
    "DistinctFacetsService",
    "DuplicateCheckService",
    "EventService",
    "EventTypeService",
    "MessageDetailService",
    "MessageQueryService",
]
