"""FastAPI application factory."""

from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from app.config import get_settings
from app.exceptions import StoreError
from app.infra.logging_config import LoggingConfig, get_logger
from app.routers.conversation_status_router import conversation_status_router
from app.routers.events_router import events_router
from app.routers.filter_values_router import filter_values_router
from app.routers.message_details_router import message_details_router
from app.routers.system import router as system_router

logger = get_logger("api")


async def store_error_handler(request: Request, exc: StoreError) -> JSONResponse:
    logger.error("Store error on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=500, content={"detail": "Store unavailable"})


async def validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Bad parameters are a 400, not FastAPI's default 422."""
    return JSONResponse(status_code=400, content={"detail": jsonable_encoder(exc.errors())})


def create_app(testing: bool = False) -> FastAPI:
    settings = get_settings()
    if not testing:
        LoggingConfig()

    app = FastAPI(title=settings.app_name)
    app.add_exception_handler(StoreError, store_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)

    app.include_router(system_router)
    app.include_router(message_details_router)
    app.include_router(events_router)
    app.include_router(conversation_status_router)
    app.include_router(filter_values_router)
    return app


app = create_app()
