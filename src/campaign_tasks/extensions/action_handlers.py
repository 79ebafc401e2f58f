"""
Action handler interface and registry.

Action handlers react to question responses and tag updates. Deletion handling
is an optional capability; callers check ``has_capability`` before using it.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar, Iterable

from campaign_tasks.shared.exceptions import ActionHandlerNotFoundError
from campaign_tasks.shared.logging import get_logger

logger = get_logger(__name__)


class ActionHandlerCapability(str, Enum):
    """Capabilities an action handler may declare."""

    PROCESS_ACTION = "process_action"
    DELETED_QUESTION_RESPONSE = "process_deleted_question_response"
    TAG_UPDATE = "on_tag_update"


@dataclass(frozen=True)
class QuestionResponseAction:
    """Context handed to an action handler for a question response."""

    question_response: dict[str, Any]
    interaction_step: dict[str, Any]
    campaign_contact_id: Any
    contact: Any
    campaign: Any
    organization: Any
    previous_value: Any = None


class ActionHandler(ABC):
    """Abstract interface for action handlers."""

    name: ClassVar[str]
    capabilities: ClassVar[frozenset[ActionHandlerCapability]] = frozenset(
        {ActionHandlerCapability.PROCESS_ACTION, ActionHandlerCapability.TAG_UPDATE}
    )

    def has_capability(self, capability: ActionHandlerCapability) -> bool:
        return capability in self.capabilities

    @abstractmethod
    async def process_action(self, action: QuestionResponseAction) -> Any:
        """Handle a recorded question response."""
        ...

    async def process_deleted_question_response(
        self,
        action: QuestionResponseAction,
    ) -> Any:
        """Handle a deleted question response.

        Only called when ``DELETED_QUESTION_RESPONSE`` is in ``capabilities``.
        """
        raise NotImplementedError(
            f"Action handler {self.name} does not handle deleted responses"
        )

    @abstractmethod
    async def on_tag_update(
        self,
        tags: list[Any],
        contact: Any,
        campaign: Any,
        organization: Any,
        texter: Any,
    ) -> Any:
        """Handle a tag update on a contact."""
        ...


class ActionHandlerRegistry:
    """Name-keyed action handler registry."""

    def __init__(self, handlers: Iterable[ActionHandler] = ()) -> None:
        self._handlers: dict[str, ActionHandler] = {}
        for handler in handlers:
            self.register(handler)

    def register(self, handler: ActionHandler) -> None:
        if handler.name in self._handlers:
            logger.warning(
                "Replacing registered action handler",
                extra={"action_handler": handler.name},
            )
        self._handlers[handler.name] = handler

    def resolve(self, name: str) -> ActionHandler:
        """Return the handler registered under ``name``.

        Raises:
            ActionHandlerNotFoundError: If no handler has that name.
        """
        handler = self._handlers.get(name)
        if handler is None:
            raise ActionHandlerNotFoundError(name)
        return handler

    @property
    def names(self) -> list[str]:
        return sorted(self._handlers)
