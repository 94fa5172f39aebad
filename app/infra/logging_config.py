"""Logging setup shared by the API, the Kafka consumers and Celery workers."""

from __future__ import annotations

import logging
import sys
from typing import Optional

from app.config import get_settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

# Third-party loggers that are too chatty at INFO
NOISY_LOGGERS = ("aiokafka", "kafka", "sqlalchemy.engine", "celery.redirected")


class LoggingConfig:
    """Configure the root logger once per process."""

    _configured = False

    def __init__(self, level: Optional[str] = None) -> None:
        if LoggingConfig._configured:
            return
        level_name = (level or get_settings().log_level).upper()

        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))

        root = logging.getLogger()
        root.addHandler(handler)
        root.setLevel(level_name)

        for name in NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)

        LoggingConfig._configured = True


def get_logger(name: str) -> logging.Logger:
    """Return a logger namespaced under the application."""
    return logging.getLogger(f"ebms_event_manager.{name}")
