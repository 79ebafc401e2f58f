"""
Named background tasks and their dispatcher.
"""

from campaign_tasks.tasks.cache_warmer import CacheWarmer, CacheWarmResult
from campaign_tasks.tasks.dispatcher import (
    TaskDispatcher,
    build_task_context,
    build_task_dispatcher,
)
from campaign_tasks.tasks.interfaces import CacheLayer, CampaignStore, TaskContext
from campaign_tasks.tasks.registry import build_handler_registry
from campaign_tasks.tasks.schemas import (
    CacheRefreshRequest,
    MessageSendRequest,
    QuestionResponseEvent,
    ServiceManagerEvent,
    TagUpdateEvent,
    Tasks,
    parse_payload,
)

__all__ = [
    "CacheLayer",
    "CacheRefreshRequest",
    "CacheWarmResult",
    "CacheWarmer",
    "CampaignStore",
    "MessageSendRequest",
    "QuestionResponseEvent",
    "ServiceManagerEvent",
    "TagUpdateEvent",
    "TaskContext",
    "TaskDispatcher",
    "Tasks",
    "build_handler_registry",
    "build_task_context",
    "build_task_dispatcher",
    "parse_payload",
]
