"""
Notification sender interface and local implementations.

Delivery (email, in-app) lives in the host application; tasks only hand a
``UserNotification`` to a ``NotificationSender``.
"""

from __future__ import annotations

from typing import Protocol

from campaign_tasks.notifications.models import UserNotification
from campaign_tasks.shared.logging import get_logger

logger = get_logger(__name__)


class NotificationSender(Protocol):
    """Interface for user notification delivery."""

    async def send(self, notification: UserNotification) -> None:
        """Deliver a notification."""
        ...


class LoggingNotificationSender:
    """Sender that only records notifications in the log."""

    async def send(self, notification: UserNotification) -> None:
        logger.info(
            "User notification",
            extra={
                "notification_type": notification.type.value,
                "campaign_id": str(notification.campaign_id),
            },
        )


class InMemoryNotificationSender:
    """
    In-memory notification sender for testing.

    Stores sent notifications in a list for verification.
    """

    def __init__(self) -> None:
        self.notifications: list[UserNotification] = []
        self.should_fail: bool = False

    async def send(self, notification: UserNotification) -> None:
        if self.should_fail:
            raise RuntimeError("Simulated notification failure")
        self.notifications.append(notification)

    def clear(self) -> None:
        self.notifications.clear()
