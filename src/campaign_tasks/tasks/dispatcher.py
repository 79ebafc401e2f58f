"""
Task dispatcher.

Tasks are lightweight fire-and-forget functions run in the background. Unlike
jobs they are not tracked anywhere: no persistence, no retry.
"""

from __future__ import annotations

import asyncio
from collections.abc import Mapping
from typing import Any
from uuid import uuid4

from campaign_tasks.campaigns.store import SqlCampaignStore
from campaign_tasks.config import Settings, get_settings
from campaign_tasks.extensions import (
    action_handler_registry_from_settings,
    message_service_registry_from_settings,
    service_manager_pipeline_from_settings,
)
from campaign_tasks.notifications.sender import LoggingNotificationSender, NotificationSender
from campaign_tasks.shared.database import DatabaseManager
from campaign_tasks.shared.exceptions import UnknownTaskError
from campaign_tasks.shared.logging import correlation_scope, get_logger
from campaign_tasks.tasks.interfaces import CacheLayer, CampaignStore, TaskContext
from campaign_tasks.tasks.registry import TaskHandler, build_handler_registry
from campaign_tasks.tasks.schemas import Tasks, parse_payload

logger = get_logger(__name__)


class TaskDispatcher:
    """Single entry point for running a named task."""

    def __init__(self, handlers: Mapping[Tasks, TaskHandler]) -> None:
        self._handlers = handlers
        self._background: set[asyncio.Task[Any]] = set()

    @property
    def pending(self) -> int:
        """Number of submitted tasks still running."""
        return len(self._background)

    def _resolve(self, task_name: str | Tasks) -> Tasks:
        try:
            return Tasks.parse(task_name)
        except UnknownTaskError:
            logger.error("Unknown task", extra={"task_name": str(task_name)})
            raise

    async def dispatch(self, task_name: str | Tasks, payload: Any) -> Any:
        """Run the handler registered for ``task_name`` with ``payload``.

        Args:
            task_name: Task identifier.
            payload: Payload model for that identifier.

        Returns:
            Whatever the handler returns.

        Raises:
            UnknownTaskError: If the identifier is not a known task.
            Exception: Any handler failure, unchanged.
        """
        task = self._resolve(task_name)
        handler = self._handlers[task]

        with correlation_scope(f"{task.value}:{uuid4().hex[:12]}"):
            logger.debug("Task started", extra={"task_name": task.value})
            try:
                result = await handler(payload)
            except Exception:
                logger.exception("Task failed", extra={"task_name": task.value})
                raise
            logger.info("Task completed", extra={"task_name": task.value})
            return result

    async def dispatch_raw(self, task_name: str | Tasks, raw_payload: Mapping[str, Any]) -> Any:
        """Validate a JSON-style payload for ``task_name`` and dispatch it."""
        task = self._resolve(task_name)
        return await self.dispatch(task, parse_payload(task, raw_payload))

    def submit(self, task_name: str | Tasks, payload: Any) -> asyncio.Task[Any]:
        """Schedule a task on the running loop without waiting for it.

        The identifier is checked before scheduling. Failures of the scheduled
        task are logged; await the returned task to observe them.
        """
        task = self._resolve(task_name)
        background = asyncio.get_running_loop().create_task(
            self.dispatch(task, payload),
            name=f"task:{task.value}",
        )
        self._background.add(background)
        background.add_done_callback(self._on_background_done)
        return background

    def _on_background_done(self, background: asyncio.Task[Any]) -> None:
        self._background.discard(background)
        if background.cancelled():
            logger.warning("Background task cancelled", extra={"task": background.get_name()})
            return
        exc = background.exception()
        if exc is not None:
            logger.error(
                "Background task failed",
                extra={"task": background.get_name(), "error": str(exc)},
            )

    async def drain(self) -> None:
        """Wait for every submitted task to settle."""
        while self._background:
            await asyncio.gather(*list(self._background), return_exceptions=True)


def build_task_dispatcher(
    context: TaskContext,
    settings: Settings | None = None,
) -> TaskDispatcher:
    """Create a dispatcher with the full handler table for ``context``."""
    settings = settings or get_settings()
    handlers = build_handler_registry(
        context,
        warm_cache_on_campaign_start=settings.warm_cache_on_campaign_start,
    )
    logger.info(
        "Task dispatcher ready",
        extra={
            "tasks": [task.value for task in handlers],
            "warm_cache_on_campaign_start": settings.warm_cache_on_campaign_start,
        },
    )
    return TaskDispatcher(handlers)


def build_task_context(
    cache: CacheLayer,
    settings: Settings | None = None,
    *,
    store: CampaignStore | None = None,
    notifications: NotificationSender | None = None,
) -> TaskContext:
    """Assemble task collaborators from settings.

    The cache layer belongs to the host application. Extensions are loaded from
    the configured ``module:attribute`` paths; the store defaults to the SQL
    database at ``settings.database_url`` and notifications go to the log.
    """
    settings = settings or get_settings()
    context = TaskContext(
        cache=cache,
        store=store or SqlCampaignStore(DatabaseManager(settings.database_url)),
        notifications=notifications or LoggingNotificationSender(),
        service_managers=service_manager_pipeline_from_settings(settings),
        action_handlers=action_handler_registry_from_settings(settings),
        message_services=message_service_registry_from_settings(settings),
    )
    logger.info(
        "Task context ready",
        extra={
            "action_handlers": context.action_handlers.names,
            "service_managers": context.service_managers.names,
            "message_services": context.message_services.names,
        },
    )
    return context
