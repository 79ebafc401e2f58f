"""
Outbound message service interface and registry.
"""

from __future__ import annotations

import itertools
from abc import ABC
from dataclasses import dataclass, field
from typing import Any, ClassVar, Iterable

import anyio

from campaign_tasks.shared.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class OutboundMessage:
    """Everything a message service needs to deliver one message."""

    message: Any
    contact: Any
    trx: Any
    organization: Any
    campaign: Any
    service_manager_data: Any = None


@dataclass(frozen=True)
class SendResult:
    """Delivery receipt returned by a message service."""

    service_id: str
    status: str
    raw_response: dict[str, Any] = field(default_factory=dict)


class MessageService(ABC):
    """Abstract interface for outbound message services.

    ``send_message`` is the entry point used by tasks. Services that talk to
    blocking SDKs implement ``send_message_sync`` and inherit the default, which
    runs it in a worker thread.
    """

    name: ClassVar[str]

    async def send_message(self, outbound: OutboundMessage) -> Any:
        return await anyio.to_thread.run_sync(self.send_message_sync, outbound)

    def send_message_sync(self, outbound: OutboundMessage) -> Any:
        raise NotImplementedError(
            f"Message service {self.name} implements neither send_message nor send_message_sync"
        )


class FakeMessageService(MessageService):
    """Message service for development: records sends, delivers nothing."""

    name = "fakeservice"

    def __init__(self) -> None:
        self.sent: list[OutboundMessage] = []
        self._counter = itertools.count(1)

    def send_message_sync(self, outbound: OutboundMessage) -> SendResult:
        self.sent.append(outbound)
        service_id = f"FAKE_MSG_{next(self._counter):06d}"
        logger.info(
            "Fake message send",
            extra={
                "service_id": service_id,
                "contact_id": str(getattr(outbound.contact, "id", "")),
            },
        )
        return SendResult(service_id=service_id, status="SENT", raw_response={"fake": True})


class MessageServiceRegistry:
    """Name-keyed outbound service registry."""

    def __init__(self, services: Iterable[MessageService] = ()) -> None:
        self._services: dict[str, MessageService] = {}
        for service in services:
            self.register(service)

    def register(self, service: MessageService) -> None:
        self._services[service.name] = service

    def get(self, name: str | None) -> MessageService | None:
        if name is None:
            return None
        return self._services.get(name)

    @property
    def names(self) -> list[str]:
        return sorted(self._services)
