"""
FastAPI application exposing task submission.

The host application owns the collaborators (cache layer, notification
delivery, extensions) and hands in a ready ``TaskDispatcher``.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from campaign_tasks.config import Settings, get_settings
from campaign_tasks.shared.exceptions import UnknownTaskError
from campaign_tasks.shared.logging import get_logger, setup_logging
from campaign_tasks.tasks.dispatcher import (
    TaskDispatcher,
    build_task_context,
    build_task_dispatcher,
)
from campaign_tasks.tasks.interfaces import CacheLayer
from campaign_tasks.tasks.router import router as tasks_router

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    setup_logging()
    settings = get_settings()

    logger.info("Application starting", extra={"env": settings.app_env})

    yield

    dispatcher: TaskDispatcher = app.state.task_dispatcher
    if dispatcher.pending:
        logger.info("Waiting for background tasks", extra={"pending": dispatcher.pending})
        await dispatcher.drain()
    logger.info("Application shutdown complete")


def create_app(dispatcher: TaskDispatcher) -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title="Campaign Tasks API",
        description="Fire-and-forget background tasks for campaigns",
        version="0.1.0",
        lifespan=lifespan,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
    )
    app.state.task_dispatcher = dispatcher

    @app.exception_handler(UnknownTaskError)
    async def _unknown_task(_: Request, exc: UnknownTaskError) -> JSONResponse:
        return JSONResponse(
            status_code=404,
            content={"detail": {"code": "UNKNOWN_TASK", "message": str(exc)}},
        )

    app.include_router(tasks_router)

    @app.get("/health")
    async def health_check() -> dict[str, str]:
        return {"status": "healthy"}

    return app


def create_app_for_cache(cache: CacheLayer, settings: Settings | None = None) -> FastAPI:
    """Create the application wired from settings around the host's cache layer.

    Extensions come from the configured paths, campaign writes go to the SQL
    store and notifications to the log.
    """
    settings = settings or get_settings()
    context = build_task_context(cache, settings)
    return create_app(build_task_dispatcher(context, settings))
