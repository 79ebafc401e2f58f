"""
Action handler tasks: question responses and tag updates.
"""

from __future__ import annotations

from typing import Any

from campaign_tasks.extensions.action_handlers import (
    ActionHandlerCapability,
    ActionHandlerRegistry,
    QuestionResponseAction,
)
from campaign_tasks.shared.logging import get_logger
from campaign_tasks.tasks.schemas import QuestionResponseEvent, TagUpdateEvent

logger = get_logger(__name__)


class ActionHandlerDispatch:
    """Routes domain events to the named action handler."""

    def __init__(self, registry: ActionHandlerRegistry) -> None:
        self._registry = registry

    async def question_response(self, event: QuestionResponseEvent) -> Any:
        """Run the handler for a recorded or deleted question response.

        A deleted response is dropped silently when the handler has no
        deletion capability.
        """
        handler = self._registry.resolve(event.name)
        action = QuestionResponseAction(
            question_response=event.question_response,
            interaction_step=event.interaction_step,
            campaign_contact_id=event.contact.id,
            contact=event.contact,
            campaign=event.campaign,
            organization=event.organization,
            previous_value=event.previous_value,
        )

        if not event.was_deleted:
            return await handler.process_action(action)

        if handler.has_capability(ActionHandlerCapability.DELETED_QUESTION_RESPONSE):
            return await handler.process_deleted_question_response(action)

        logger.debug(
            "Action handler ignores deleted responses",
            extra={"action_handler": event.name, "contact_id": str(event.contact.id)},
        )
        return None

    async def tag_update(self, event: TagUpdateEvent) -> Any:
        handler = self._registry.resolve(event.name)
        return await handler.on_tag_update(
            event.tags,
            event.contact,
            event.campaign,
            event.organization,
            event.texter,
        )
