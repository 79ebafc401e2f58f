"""
Message send task: route a message to its outbound service.
"""

from __future__ import annotations

from typing import Any

from campaign_tasks.extensions.message_services import OutboundMessage
from campaign_tasks.shared.exceptions import ServiceNotFoundError
from campaign_tasks.shared.logging import get_logger
from campaign_tasks.tasks.interfaces import TaskContext
from campaign_tasks.tasks.schemas import MessageSendRequest

logger = get_logger(__name__)

MESSAGE_SEND_EVENT = "onMessageSend"


class MessageDispatch:
    def __init__(self, context: TaskContext) -> None:
        self._context = context

    async def send(self, request: MessageSendRequest) -> Any:
        """Send a message through the service named on it.

        Raises:
            ServiceNotFoundError: If no service is registered under
                ``message.service``. Nothing is sent.
        """
        message = request.message
        service = self._context.message_services.get(message.service)
        if service is None:
            raise ServiceNotFoundError(message, message.service)

        service_manager_data = await self._context.service_managers.process(
            MESSAGE_SEND_EVENT,
            request.organization,
            {
                "message": message,
                "contact": request.contact,
                "campaign": request.campaign,
            },
        )

        logger.debug(
            "Forwarding message to service",
            extra={"service": service.name, "contact_id": str(request.contact.id)},
        )
        return await service.send_message(
            OutboundMessage(
                message=message,
                contact=request.contact,
                trx=request.trx,
                organization=request.organization,
                campaign=request.campaign,
                service_manager_data=service_manager_data,
            )
        )
