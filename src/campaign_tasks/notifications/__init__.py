"""
User notifications emitted by tasks.
"""

from campaign_tasks.notifications.models import NotificationType, UserNotification
from campaign_tasks.notifications.sender import (
    InMemoryNotificationSender,
    LoggingNotificationSender,
    NotificationSender,
)

__all__ = [
    "InMemoryNotificationSender",
    "LoggingNotificationSender",
    "NotificationSender",
    "NotificationType",
    "UserNotification",
]
