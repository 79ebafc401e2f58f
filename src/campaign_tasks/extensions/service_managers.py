"""
Service manager pipeline.

Service managers hook named lifecycle events (``onMessageSend``,
``onCampaignStart``, ...). The pipeline runs every manager that hooks the event,
in registration order, and merges what they return into one
``ServiceManagerResult``.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, ClassVar, Iterable

from pydantic import BaseModel, ConfigDict, Field, field_validator

from campaign_tasks.shared.logging import get_logger

logger = get_logger(__name__)


class ServiceManagerResult(BaseModel):
    """Merged pipeline outcome.

    ``block_campaign_start`` is the only signal read by tasks; any other key a
    manager returns is kept in ``model_extra``.
    """

    model_config = ConfigDict(frozen=True, extra="allow", populate_by_name=True)

    block_campaign_start: bool = Field(default=False, alias="blockCampaignStart")

    @field_validator("block_campaign_start", mode="before")
    @classmethod
    def coerce_block_signal(cls, value: Any) -> bool:
        # Managers may return any value here; only truthiness blocks.
        return bool(value)


class ServiceManager:
    """Base class for service managers."""

    name: ClassVar[str]
    hooks: ClassVar[frozenset[str]] = frozenset()

    def handles(self, event_name: str) -> bool:
        return event_name in self.hooks

    async def process(
        self,
        event_name: str,
        organization: Any,
        data: Mapping[str, Any],
    ) -> Mapping[str, Any] | None:
        """Run the hook for ``event_name``; return signals or None."""
        return None


class ServiceManagerPipeline:
    """Ordered chain of service managers."""

    def __init__(self, managers: Iterable[ServiceManager] = ()) -> None:
        self._managers: list[ServiceManager] = list(managers)

    def register(self, manager: ServiceManager) -> None:
        self._managers.append(manager)

    @property
    def names(self) -> list[str]:
        return [manager.name for manager in self._managers]

    async def process(
        self,
        event_name: str,
        organization: Any,
        data: Mapping[str, Any],
    ) -> ServiceManagerResult:
        merged: dict[str, Any] = {}
        for manager in self._managers:
            if not manager.handles(event_name):
                continue
            result = await manager.process(event_name, organization, data)
            if result:
                merged.update(result)

        if merged:
            logger.debug(
                "Service manager signals",
                extra={"event_name": event_name, "signals": sorted(merged)},
            )
        return ServiceManagerResult.model_validate(merged)
