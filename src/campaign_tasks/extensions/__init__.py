"""
Pluggable extensions: action handlers, service managers and message services.

Extensions are configured as ``module:attribute`` paths. The attribute may be
an instance or a zero-argument class.
"""

from __future__ import annotations

import importlib
from typing import Any, Iterable

from campaign_tasks.config import Settings
from campaign_tasks.extensions.action_handlers import (
    ActionHandler,
    ActionHandlerCapability,
    ActionHandlerRegistry,
    QuestionResponseAction,
)
from campaign_tasks.extensions.message_services import (
    FakeMessageService,
    MessageService,
    MessageServiceRegistry,
    OutboundMessage,
    SendResult,
)
from campaign_tasks.extensions.service_managers import (
    ServiceManager,
    ServiceManagerPipeline,
    ServiceManagerResult,
)
from campaign_tasks.shared.logging import get_logger

logger = get_logger(__name__)


def load_extension(path: str) -> Any:
    """Import ``module:attribute`` and instantiate it if it is a class."""
    module_name, sep, attribute = path.partition(":")
    if not sep or not module_name or not attribute:
        raise ValueError(f"Extension path must look like 'module:attribute': {path!r}")

    target: Any = importlib.import_module(module_name)
    for part in attribute.split("."):
        target = getattr(target, part)

    if isinstance(target, type):
        target = target()
    return target


def load_extensions(paths: Iterable[str]) -> list[Any]:
    extensions = [load_extension(path) for path in paths]
    if extensions:
        logger.info(
            "Loaded extensions",
            extra={"extensions": [getattr(ext, "name", repr(ext)) for ext in extensions]},
        )
    return extensions


def action_handler_registry_from_settings(settings: Settings) -> ActionHandlerRegistry:
    return ActionHandlerRegistry(load_extensions(settings.action_handler_paths))


def service_manager_pipeline_from_settings(settings: Settings) -> ServiceManagerPipeline:
    return ServiceManagerPipeline(load_extensions(settings.service_manager_paths))


def message_service_registry_from_settings(settings: Settings) -> MessageServiceRegistry:
    registry = MessageServiceRegistry()
    if settings.default_message_services:
        registry.register(FakeMessageService())
    for service in load_extensions(settings.message_service_paths):
        registry.register(service)
    return registry


__all__ = [
    "ActionHandler",
    "ActionHandlerCapability",
    "ActionHandlerRegistry",
    "FakeMessageService",
    "MessageService",
    "MessageServiceRegistry",
    "OutboundMessage",
    "QuestionResponseAction",
    "SendResult",
    "ServiceManager",
    "ServiceManagerPipeline",
    "ServiceManagerResult",
    "action_handler_registry_from_settings",
    "load_extension",
    "load_extensions",
    "message_service_registry_from_settings",
    "service_manager_pipeline_from_settings",
]
