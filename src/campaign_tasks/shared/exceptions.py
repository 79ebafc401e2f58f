"""
Shared exceptions for task dispatch.

Only ``SuppressedWarmupError`` is ever caught by this package; every other
failure reaches the caller of ``TaskDispatcher.dispatch`` unchanged.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional


@dataclass(eq=False)
class AppError(Exception):
    message: str = "Application error"
    details: Optional[dict[str, Any]] = None

    def __str__(self) -> str:
        return self.message


class UnknownTaskError(AppError):
    """Task identifier outside the closed task enumeration."""

    def __init__(self, task_name: str) -> None:
        super().__init__(
            message=f"Task of type {task_name} not found",
            details={"task_name": task_name},
        )
        self.task_name = task_name


class ServiceNotFoundError(AppError):
    """Message references an outbound service with no registered implementation."""

    def __init__(self, message: Any, service_name: str | None) -> None:
        super().__init__(
            message=f"Failed to find service for message {message}",
            details={"service": service_name},
        )
        self.service_name = service_name


class ActionHandlerNotFoundError(AppError):
    def __init__(self, name: str) -> None:
        super().__init__(
            message=f"Action handler {name} not found",
            details={"name": name},
        )
        self.name = name


class HandlerInvocationError(AppError):
    """Base class for failures raised by extension capabilities.

    Extensions may raise this (or anything else); the dispatcher never wraps it.
    """


class SuppressedWarmupError(AppError):
    """Contact cache load failure during warm-up, logged and not raised."""

    def __init__(self, campaign_id: Any, cause: BaseException) -> None:
        super().__init__(
            message=f"Contact cache load failed for campaign {campaign_id}: {cause}",
            details={"campaign_id": campaign_id},
        )
        self.campaign_id = campaign_id
        self.__cause__ = cause
