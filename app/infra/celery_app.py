from celery import Celery

from app.config import get_settings

settings = get_settings()

celery_app = Celery(
    "ebms_event_manager",
    broker=settings.redis_url,
    backend=settings.redis_url,
    include=[
        "app.tasks.refresh_distinct_facets_task",
    ],
)

celery_app.conf.update(
    task_serializer="json",
    result_serializer="json",
    accept_content=["json"],
    timezone="UTC",
    enable_utc=True,
)

# Periodic tasks (beat). Requires worker with -B or separate beat service.
celery_app.conf.beat_schedule = {
    "refresh-distinct-facets": {
        "task": "app.tasks.refresh_distinct_facets_task.refresh_distinct_facets_task",
        "schedule": settings.facets_refresh_minutes * 60.0,
    },
}
