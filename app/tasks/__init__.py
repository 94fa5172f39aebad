# Import celery app first
from app.infra.celery_app import celery_app

# Initialize logging configuration for Celery workers
from app.infra.logging_config import LoggingConfig
from app.tasks.refresh_distinct_facets_task import refresh_distinct_facets_task

LoggingConfig()  # Initialize logging

__all__ = [
    "celery_app",
    "refresh_distinct_facets_task",
]
