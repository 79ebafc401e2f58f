"""
Task handler table.

Built once per process; the returned mapping is read-only.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Mapping
from types import MappingProxyType
from typing import Any

from campaign_tasks.tasks.action_handlers import ActionHandlerDispatch
from campaign_tasks.tasks.cache_warmer import CacheWarmer
from campaign_tasks.tasks.interfaces import TaskContext
from campaign_tasks.tasks.message_dispatch import MessageDispatch
from campaign_tasks.tasks.schemas import Tasks
from campaign_tasks.tasks.service_manager_trigger import ServiceManagerTrigger

TaskHandler = Callable[[Any], Awaitable[Any]]


def build_handler_registry(
    context: TaskContext,
    *,
    warm_cache_on_campaign_start: bool = False,
) -> Mapping[Tasks, TaskHandler]:
    """Bind every task identifier to its handler.

    Args:
        context: Collaborators shared by the handlers.
        warm_cache_on_campaign_start: Warm the campaign cache after the
            campaign start cascade.

    Returns:
        Immutable mapping covering every member of ``Tasks``.
    """
    cache_warmer = CacheWarmer(context.cache)
    trigger = ServiceManagerTrigger(
        context,
        cache_warmer=cache_warmer if warm_cache_on_campaign_start else None,
    )
    action_handlers = ActionHandlerDispatch(context.action_handlers)
    messages = MessageDispatch(context)

    handlers: dict[Tasks, TaskHandler] = {
        Tasks.SEND_MESSAGE: messages.send,
        Tasks.ACTION_HANDLER_QUESTION_RESPONSE: action_handlers.question_response,
        Tasks.ACTION_HANDLER_TAG_UPDATE: action_handlers.tag_update,
        Tasks.CAMPAIGN_START_CACHE: cache_warmer.warm,
        Tasks.SERVICE_MANAGER_TRIGGER: trigger.trigger,
    }

    missing = set(Tasks) - set(handlers)
    if missing:
        raise RuntimeError(f"No handler bound for tasks: {sorted(t.value for t in missing)}")

    return MappingProxyType(handlers)
