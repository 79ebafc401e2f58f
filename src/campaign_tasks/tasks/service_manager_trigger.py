"""
Service manager trigger task.

Runs the service manager pipeline for a lifecycle event. For ``onCampaignStart``
it then marks the campaign started, reloads its cache entry and notifies users,
unless a service manager blocked the start.
"""

from __future__ import annotations

from typing import Any

from campaign_tasks.extensions.service_managers import ServiceManagerResult
from campaign_tasks.notifications.models import NotificationType, UserNotification
from campaign_tasks.shared.logging import get_logger
from campaign_tasks.tasks.cache_warmer import CacheWarmer
from campaign_tasks.tasks.interfaces import TaskContext
from campaign_tasks.tasks.schemas import (
    CacheRefreshRequest,
    CampaignRef,
    EntityRef,
    OrganizationRef,
    ServiceManagerEvent,
)

logger = get_logger(__name__)

CAMPAIGN_START_EVENT = "onCampaignStart"


def should_start_campaign(event: ServiceManagerEvent, result: ServiceManagerResult) -> bool:
    """Whether the campaign start cascade runs for this event."""
    return (
        event.function_name == CAMPAIGN_START_EVENT
        and event.campaign_id is not None
        and not result.block_campaign_start
    )


class ServiceManagerTrigger:
    def __init__(
        self,
        context: TaskContext,
        cache_warmer: CacheWarmer | None = None,
    ) -> None:
        """Initialize the trigger.

        Args:
            context: Task collaborators.
            cache_warmer: When given, the campaign cache is warmed after a
                campaign start. Runs in this task, not through the dispatcher.
        """
        self._context = context
        self._cache_warmer = cache_warmer

    async def trigger(self, event: ServiceManagerEvent) -> ServiceManagerResult:
        organization = None
        if event.organization_id is not None:
            organization = await self._context.cache.load_organization(event.organization_id)

        result = await self._context.service_managers.process(
            event.function_name,
            organization,
            event.data,
        )

        if should_start_campaign(event, result):
            await self._start_campaign(event.campaign_id, organization)
        elif event.function_name == CAMPAIGN_START_EVENT:
            logger.info(
                "Campaign start skipped",
                extra={
                    "campaign_id": str(event.campaign_id),
                    "blocked": result.block_campaign_start,
                },
            )

        return result

    async def _start_campaign(self, campaign_id: Any, organization: Any) -> None:
        # No transaction spans these steps; a failure leaves earlier ones applied.
        await self._context.store.mark_campaign_started(campaign_id)
        campaign = await self._context.cache.load_campaign(campaign_id, force_load=True)
        await self._context.notifications.send(
            UserNotification(
                type=NotificationType.CAMPAIGN_STARTED,
                campaign_id=campaign_id,
            )
        )
        logger.info("Campaign started", extra={"campaign_id": str(campaign_id)})

        if self._cache_warmer is not None and organization is not None:
            await self._cache_warmer.warm(
                CacheRefreshRequest(
                    campaign=_as_ref(CampaignRef, campaign, campaign_id),
                    organization=_as_ref(OrganizationRef, organization, None),
                )
            )


def _as_ref(model: type[EntityRef], entity: Any, fallback_id: Any) -> Any:
    if isinstance(entity, model):
        return entity
    if isinstance(entity, dict):
        return model.model_validate(entity)
    entity_id = getattr(entity, "id", fallback_id)
    return model(id=entity_id)
