"""
Collaborator interfaces consumed by task handlers.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Protocol

from campaign_tasks.extensions.action_handlers import ActionHandlerRegistry
from campaign_tasks.extensions.message_services import MessageServiceRegistry
from campaign_tasks.extensions.service_managers import ServiceManagerPipeline
from campaign_tasks.notifications.sender import NotificationSender


class CacheLayer(Protocol):
    """Cache/load layer for organizations, campaigns, contacts and opt-outs."""

    async def load_organization(self, organization_id: Any) -> Any:
        """Load an organization, from cache when possible."""
        ...

    async def load_campaign(self, campaign_id: Any, *, force_load: bool = False) -> Any:
        """Load a campaign; ``force_load`` refreshes the cache entry from the store."""
        ...

    async def update_campaign_assignment_cache(self, campaign_id: Any) -> Any:
        """Rebuild the texter assignment cache of a campaign."""
        ...

    async def load_contacts_many(
        self,
        campaign: Any,
        organization: Any,
        context_vars: Mapping[str, Any],
    ) -> Any:
        """Bulk load the campaign's contacts into cache."""
        ...

    async def load_opt_outs_many(self, organization_id: Any) -> Any:
        """Reload the organization's opt-out set."""
        ...


class CampaignStore(Protocol):
    """Writes to the authoritative campaign store."""

    async def mark_campaign_started(self, campaign_id: Any) -> None:
        ...


@dataclass(frozen=True)
class TaskContext:
    """Collaborators shared by all task handlers."""

    cache: CacheLayer
    store: CampaignStore
    notifications: NotificationSender
    service_managers: ServiceManagerPipeline
    action_handlers: ActionHandlerRegistry
    message_services: MessageServiceRegistry
