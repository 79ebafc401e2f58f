"""
Task identifiers and payload schemas.

Each task identifier owns exactly one payload model; the dispatcher routes on
the identifier alone.
"""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from campaign_tasks.shared.exceptions import UnknownTaskError


class Tasks(str, Enum):
    """Closed set of task identifiers (wire values are stable)."""

    SEND_MESSAGE = "send_message"
    ACTION_HANDLER_QUESTION_RESPONSE = "action_handler:question_response"
    ACTION_HANDLER_TAG_UPDATE = "action_handler:tag_update"
    CAMPAIGN_START_CACHE = "campaign_start_cache"
    SERVICE_MANAGER_TRIGGER = "service_manager_trigger"

    @classmethod
    def parse(cls, value: str | Tasks) -> Tasks:
        """Resolve a task identifier.

        Raises:
            UnknownTaskError: If the value is not a known identifier.
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            raise UnknownTaskError(str(value)) from None


class EntityRef(BaseModel):
    """Reference to an entity owned by the host application."""

    model_config = ConfigDict(frozen=True, extra="allow")

    id: int | str


class OrganizationRef(EntityRef):
    pass


class CampaignRef(EntityRef):
    pass


class ContactRef(EntityRef):
    pass


class TexterRef(EntityRef):
    pass


class MessageRecord(BaseModel):
    """Outbound message; ``service`` names the delivery channel."""

    model_config = ConfigDict(frozen=True, extra="allow")

    service: str | None = None
    text: str = ""


class TaskPayload(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)


class CacheRefreshRequest(TaskPayload):
    """Payload of ``campaign_start_cache``."""

    campaign: CampaignRef
    organization: OrganizationRef
    context_vars: dict[str, Any] = Field(default_factory=dict, alias="contextVars")


class ServiceManagerEvent(TaskPayload):
    """Payload of ``service_manager_trigger``."""

    function_name: str = Field(alias="functionName")
    organization_id: int | str | None = Field(default=None, alias="organizationId")
    data: dict[str, Any] = Field(default_factory=dict)

    @property
    def campaign_id(self) -> Any | None:
        """Id of the campaign carried in ``data``, if any."""
        campaign = self.data.get("campaign")
        if campaign is None:
            return None
        if isinstance(campaign, Mapping):
            return campaign.get("id")
        return getattr(campaign, "id", None)


class QuestionResponseEvent(TaskPayload):
    """Payload of ``action_handler:question_response``."""

    name: str
    organization: OrganizationRef
    question_response: dict[str, Any] = Field(alias="questionResponse")
    interaction_step: dict[str, Any] = Field(alias="interactionStep")
    campaign: CampaignRef
    contact: ContactRef
    was_deleted: bool = Field(default=False, alias="wasDeleted")
    previous_value: Any = Field(default=None, alias="previousValue")


class TagUpdateEvent(TaskPayload):
    """Payload of ``action_handler:tag_update``."""

    name: str
    tags: list[Any] = Field(default_factory=list)
    contact: ContactRef
    campaign: CampaignRef
    organization: OrganizationRef
    texter: TexterRef | None = None


class MessageSendRequest(TaskPayload):
    """Payload of ``send_message``.

    ``trx`` is the caller's transaction/scope handle; it is forwarded to the
    message service and never serialized.
    """

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        arbitrary_types_allowed=True,
    )

    message: MessageRecord
    contact: ContactRef
    campaign: CampaignRef
    organization: OrganizationRef
    trx: Any = Field(default=None, exclude=True)


PAYLOAD_MODELS: Mapping[Tasks, type[TaskPayload]] = {
    Tasks.SEND_MESSAGE: MessageSendRequest,
    Tasks.ACTION_HANDLER_QUESTION_RESPONSE: QuestionResponseEvent,
    Tasks.ACTION_HANDLER_TAG_UPDATE: TagUpdateEvent,
    Tasks.CAMPAIGN_START_CACHE: CacheRefreshRequest,
    Tasks.SERVICE_MANAGER_TRIGGER: ServiceManagerEvent,
}


def parse_payload(task: str | Tasks, raw: Mapping[str, Any]) -> TaskPayload:
    """Build the payload model registered for a task identifier.

    Raises:
        UnknownTaskError: If the identifier is not known.
        pydantic.ValidationError: If the payload does not match the model.
    """
    return PAYLOAD_MODELS[Tasks.parse(task)].model_validate(raw)
