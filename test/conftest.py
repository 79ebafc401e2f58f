"""
Pytest configuration and fixtures for task tests.
"""

from __future__ import annotations

from typing import Any

import pytest

from campaign_tasks.config import Settings
from campaign_tasks.extensions import (
    ActionHandlerRegistry,
    FakeMessageService,
    MessageServiceRegistry,
    ServiceManagerPipeline,
)
from campaign_tasks.tasks import TaskContext, TaskDispatcher, build_task_dispatcher
from campaign_tasks.tasks.schemas import (
    CampaignRef,
    ContactRef,
    OrganizationRef,
    TexterRef,
)

from fakes import (
    DeletionAwareActionHandler,
    FakeCache,
    FakeStore,
    RecordingActionHandler,
    TimelineNotificationSender,
)


@pytest.fixture
def timeline() -> list[tuple[str, Any]]:
    return []


@pytest.fixture
def cache(timeline: list[tuple[str, Any]]) -> FakeCache:
    return FakeCache(timeline)


@pytest.fixture
def store(timeline: list[tuple[str, Any]]) -> FakeStore:
    return FakeStore(timeline)


@pytest.fixture
def notifications(timeline: list[tuple[str, Any]]) -> TimelineNotificationSender:
    return TimelineNotificationSender(timeline)


@pytest.fixture
def pipeline() -> ServiceManagerPipeline:
    return ServiceManagerPipeline()


@pytest.fixture
def recording_handler() -> RecordingActionHandler:
    return RecordingActionHandler()


@pytest.fixture
def deletion_aware_handler() -> DeletionAwareActionHandler:
    return DeletionAwareActionHandler()


@pytest.fixture
def action_registry(
    recording_handler: RecordingActionHandler,
    deletion_aware_handler: DeletionAwareActionHandler,
) -> ActionHandlerRegistry:
    return ActionHandlerRegistry([recording_handler, deletion_aware_handler])


@pytest.fixture
def fake_service() -> FakeMessageService:
    return FakeMessageService()


@pytest.fixture
def message_services(fake_service: FakeMessageService) -> MessageServiceRegistry:
    return MessageServiceRegistry([fake_service])


@pytest.fixture
def context(
    cache: FakeCache,
    store: FakeStore,
    notifications: TimelineNotificationSender,
    pipeline: ServiceManagerPipeline,
    action_registry: ActionHandlerRegistry,
    message_services: MessageServiceRegistry,
) -> TaskContext:
    return TaskContext(
        cache=cache,
        store=store,
        notifications=notifications,
        service_managers=pipeline,
        action_handlers=action_registry,
        message_services=message_services,
    )


@pytest.fixture
def dispatcher(context: TaskContext) -> TaskDispatcher:
    return build_task_dispatcher(context, Settings(warm_cache_on_campaign_start=False))


@pytest.fixture
def organization() -> OrganizationRef:
    return OrganizationRef(id=1, name="Acme Org")


@pytest.fixture
def campaign() -> CampaignRef:
    return CampaignRef(id=10, title="Spring outreach", organization_id=1)


@pytest.fixture
def contact() -> ContactRef:
    return ContactRef(id=100, first_name="Ada", cell="+14155550100")


@pytest.fixture
def texter() -> TexterRef:
    return TexterRef(id=7)
