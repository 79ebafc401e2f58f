"""
Tests for the service manager trigger task and the campaign start cascade.
"""

from __future__ import annotations

from typing import Any

import pytest

from campaign_tasks.config import Settings
from campaign_tasks.extensions import ServiceManagerPipeline, ServiceManagerResult
from campaign_tasks.notifications import NotificationType
from campaign_tasks.tasks import ServiceManagerEvent, TaskContext, build_task_dispatcher
from campaign_tasks.tasks.service_manager_trigger import should_start_campaign

from fakes import StaticServiceManager

CASCADE = ["mark_campaign_started", "load_campaign", "notify"]


def _start_event(**overrides: Any) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "functionName": "onCampaignStart",
        "organizationId": 1,
        "data": {"campaign": {"id": 10, "title": "Spring outreach"}},
    }
    payload.update(overrides)
    return payload


def _cascade_steps(timeline: list[tuple[str, Any]]) -> list[str]:
    return [name for name, _ in timeline if name in CASCADE]


class TestShouldStartCampaign:
    def test_start_event_with_campaign(self) -> None:
        event = ServiceManagerEvent.model_validate(_start_event())
        assert should_start_campaign(event, ServiceManagerResult())

    def test_blocked(self) -> None:
        event = ServiceManagerEvent.model_validate(_start_event())
        assert not should_start_campaign(event, ServiceManagerResult(blockCampaignStart=True))

    def test_other_event(self) -> None:
        event = ServiceManagerEvent.model_validate(_start_event(functionName="onCampaignUpdateSignal"))
        assert not should_start_campaign(event, ServiceManagerResult())

    def test_missing_campaign(self) -> None:
        event = ServiceManagerEvent.model_validate(_start_event(data={}))
        assert not should_start_campaign(event, ServiceManagerResult())


class TestCampaignStartCascade:
    @pytest.mark.asyncio
    async def test_unblocked_start_runs_cascade_in_order(
        self,
        dispatcher: Any,
        store: Any,
        cache: Any,
        notifications: Any,
        timeline: list[tuple[str, Any]],
    ) -> None:
        await dispatcher.dispatch_raw("service_manager_trigger", _start_event())

        assert store.started == [10]
        assert cache.calls("load_campaign") == [(10, True)]
        assert len(notifications.notifications) == 1
        notification = notifications.notifications[0]
        assert notification.type == NotificationType.CAMPAIGN_STARTED
        assert notification.type.value == "campaign_started"
        assert notification.campaign_id == 10
        assert _cascade_steps(timeline) == CASCADE

    @pytest.mark.asyncio
    async def test_blocked_start_skips_cascade(
        self,
        dispatcher: Any,
        pipeline: ServiceManagerPipeline,
        store: Any,
        cache: Any,
        notifications: Any,
    ) -> None:
        pipeline.register(
            StaticServiceManager("gate", {"onCampaignStart"}, {"blockCampaignStart": True})
        )

        result = await dispatcher.dispatch_raw("service_manager_trigger", _start_event())

        assert result.block_campaign_start is True
        assert store.started == []
        assert cache.calls("load_campaign") == []
        assert notifications.notifications == []

    @pytest.mark.asyncio
    async def test_other_event_only_runs_pipeline(
        self,
        dispatcher: Any,
        pipeline: ServiceManagerPipeline,
        store: Any,
        notifications: Any,
    ) -> None:
        manager = StaticServiceManager("sync", {"onOrganizationUpdateSignal"}, {"synced": True})
        pipeline.register(manager)

        result = await dispatcher.dispatch_raw(
            "service_manager_trigger",
            _start_event(functionName="onOrganizationUpdateSignal"),
        )

        assert result.model_extra == {"synced": True}
        assert len(manager.calls) == 1
        assert store.started == []
        assert notifications.notifications == []

    @pytest.mark.asyncio
    async def test_missing_campaign_is_noop(self, dispatcher: Any, store: Any) -> None:
        await dispatcher.dispatch_raw("service_manager_trigger", _start_event(data={}))

        assert store.started == []


class TestOrganizationResolution:
    @pytest.mark.asyncio
    async def test_organization_loaded_and_passed_to_pipeline(
        self,
        dispatcher: Any,
        pipeline: ServiceManagerPipeline,
        cache: Any,
    ) -> None:
        manager = StaticServiceManager("observer", {"onCampaignStart"})
        pipeline.register(manager)

        await dispatcher.dispatch_raw("service_manager_trigger", _start_event())

        assert cache.calls("load_organization") == [1]
        event_name, organization, data = manager.calls[0]
        assert event_name == "onCampaignStart"
        assert organization.id == 1
        assert data["campaign"]["id"] == 10

    @pytest.mark.asyncio
    async def test_organization_is_optional(
        self,
        dispatcher: Any,
        pipeline: ServiceManagerPipeline,
        cache: Any,
    ) -> None:
        manager = StaticServiceManager("observer", {"onCampaignStart"})
        pipeline.register(manager)

        await dispatcher.dispatch_raw(
            "service_manager_trigger",
            {"functionName": "onCampaignStart", "data": {"campaign": {"id": 10}}},
        )

        assert cache.calls("load_organization") == []
        assert manager.calls[0][1] is None


class TestFailures:
    @pytest.mark.asyncio
    async def test_organization_failure_aborts_before_cascade(
        self,
        dispatcher: Any,
        cache: Any,
        store: Any,
    ) -> None:
        cache.failures["load_organization"] = LookupError("no such organization")

        with pytest.raises(LookupError):
            await dispatcher.dispatch_raw("service_manager_trigger", _start_event())

        assert store.started == []

    @pytest.mark.asyncio
    async def test_cascade_failure_propagates_after_store_write(
        self,
        dispatcher: Any,
        cache: Any,
        store: Any,
        notifications: Any,
    ) -> None:
        cache.failures["load_campaign"] = RuntimeError("cache reload failed")

        with pytest.raises(RuntimeError, match="cache reload failed"):
            await dispatcher.dispatch_raw("service_manager_trigger", _start_event())

        assert store.started == [10]
        assert notifications.notifications == []


class TestWarmupOnStart:
    @pytest.mark.asyncio
    async def test_warmup_disabled_by_default(
        self,
        dispatcher: Any,
        cache: Any,
    ) -> None:
        await dispatcher.dispatch_raw("service_manager_trigger", _start_event())

        assert cache.calls("update_campaign_assignment_cache") == []

    @pytest.mark.asyncio
    async def test_warmup_runs_after_notification_when_enabled(
        self,
        context: TaskContext,
        cache: Any,
        timeline: list[tuple[str, Any]],
    ) -> None:
        dispatcher = build_task_dispatcher(context, Settings(warm_cache_on_campaign_start=True))

        await dispatcher.dispatch_raw("service_manager_trigger", _start_event())

        names = [name for name, _ in timeline]
        assert cache.calls("update_campaign_assignment_cache") == [10]
        assert cache.calls("load_opt_outs_many") == [1]
        assert names.index("notify") < names.index("update_campaign_assignment_cache")
