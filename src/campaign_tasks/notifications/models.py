"""
User notification models.
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict


class NotificationType(str, Enum):
    """Notification kinds emitted by tasks."""

    CAMPAIGN_STARTED = "campaign_started"


class UserNotification(BaseModel):
    """Notification handed to the delivery subsystem."""

    model_config = ConfigDict(frozen=True)

    type: NotificationType
    campaign_id: Any
