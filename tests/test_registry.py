"""FlowRegistry bookkeeping and input-event checks."""

import asyncio

import pytest

from helpers.fakes import GatedPersister
from intake_flow.completion import CompletionHandler
from intake_flow.errors import FlowLockedError
from intake_flow.flow import FlowStatus
from intake_server.events import FieldEvent, ToggleEvent, apply_event
from intake_server.registry import FlowRegistry



class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now

@pytest.fixture
def registry(small_catalog, persister):
    return FlowRegistry(
        small_catalog, CompletionHandler(persister), next_stage="subscription", max_active=2,
    )


async def _complete(flow):
    await flow.advance()
    flow.toggle_option("selectedGoals", "A")
    await flow.advance()
    await flow.advance()
    await flow.advance()
    assert flow.status == FlowStatus.COMPLETED


class TestFlowRegistry:
    def test_create_and_get(self, registry):
        flow = registry.create(user_id="u1", flow_id="f1")
        assert registry.get(user_id="u1", flow_id="f1") is flow
        assert len(registry) == 1

    def test_duplicate_rejected(self, registry):
        registry.create(user_id="u1", flow_id="f1")
        with pytest.raises(ValueError, match="already exists"):
            registry.create(user_id="u1", flow_id="f1")

    def test_same_flow_id_for_different_users(self, registry):
        registry.create(user_id="u1", flow_id="f1")
        registry.create(user_id="u2", flow_id="f1")
        assert len(registry.list_for_user("u1")) == 1

    def test_missing_flow(self, registry):
        with pytest.raises(ValueError, match="not found"):
            registry.get(user_id="u1", flow_id="nope")

    def test_discard(self, registry):
        registry.create(user_id="u1", flow_id="f1")
        registry.discard(user_id="u1", flow_id="f1")
        assert len(registry) == 0

    def test_full_registry_evicts_least_recent(self, small_catalog, persister):
        clock = FakeClock()
        registry = FlowRegistry(
            small_catalog, CompletionHandler(persister),
            next_stage="subscription", max_active=2, clock=clock,
        )
        registry.create(user_id="u1", flow_id="f1")
        clock.now += 1
        registry.create(user_id="u2", flow_id="f2")
        clock.now += 1
        registry.get(user_id="u1", flow_id="f1")
        clock.now += 1
        flow = registry.create(user_id="u3", flow_id="f3")
        assert registry.get(user_id="u3", flow_id="f3") is flow
        assert registry.get(user_id="u1", flow_id="f1") is not None
        with pytest.raises(ValueError, match="not found"):
            registry.get(user_id="u2", flow_id="f2")
        assert len(registry) == 2

    def test_abandoned_flows_do_not_lock_out_new_users(self, small_catalog, persister):
        registry = FlowRegistry(
            small_catalog, CompletionHandler(persister), next_stage="subscription", max_active=3,
        )
        for i in range(3):
            registry.create(user_id=f"idle{i}", flow_id="f")
        flow = registry.create(user_id="newcomer", flow_id="f")
        assert flow.user_id == "newcomer"
        assert len(registry) == 3

    @pytest.mark.asyncio
    async def test_completed_flows_evicted_first(self, registry):
        done = registry.create(user_id="u1", flow_id="f1")
        registry.create(user_id="u1", flow_id="f2")
        await _complete(done)
        registry.create(user_id="u1", flow_id="f3")
        with pytest.raises(ValueError):
            registry.get(user_id="u1", flow_id="f1")
        assert len(registry) == 2


class TestApplyEvent:
    @pytest.mark.asyncio
    async def test_toggle_defaults_to_screen_collection(self, registry):
        flow = registry.create(user_id="u1", flow_id="f1")
        await flow.advance()
        apply_event(flow, ToggleEvent(option="B"))
        assert flow.answers == {"selectedGoals": frozenset({"B"})}

    @pytest.mark.asyncio
    async def test_toggle_unknown_collection_rejected(self, registry):
        flow = registry.create(user_id="u1", flow_id="f1")
        await flow.advance()
        with pytest.raises(ValueError):
            apply_event(flow, ToggleEvent(option="B", collection="other"))

    def test_field_on_passive_screen_rejected(self, registry):
        flow = registry.create(user_id="u1", flow_id="f1")
        with pytest.raises(ValueError, match="not on screen 1"):
            apply_event(flow, FieldEvent(name="fullName", value="Ada"))
        assert flow.answers == {}


class TestExpiry:
    def test_idle_flows_purged_on_create(self, small_catalog, persister):
        clock = FakeClock()
        registry = FlowRegistry(
            small_catalog, CompletionHandler(persister),
            next_stage="subscription", ttl_seconds=60, clock=clock,
        )
        registry.create(user_id="u1", flow_id="old")
        clock.now += 30
        registry.create(user_id="u1", flow_id="recent")
        clock.now += 45
        registry.create(user_id="u2", flow_id="f")
        with pytest.raises(ValueError, match="not found"):
            registry.get(user_id="u1", flow_id="old")
        assert [f.flow_id for f in registry.list_for_user("u1")] == ["recent"]

    def test_get_refreshes_idle_time(self, small_catalog, persister):
        clock = FakeClock()
        registry = FlowRegistry(
            small_catalog, CompletionHandler(persister),
            next_stage="subscription", ttl_seconds=60, clock=clock,
        )
        registry.create(user_id="u1", flow_id="f1")
        clock.now += 50
        registry.get(user_id="u1", flow_id="f1")
        clock.now += 50
        assert registry.purge_expired() == 0
        clock.now += 11
        assert registry.purge_expired() == 1
        assert len(registry) == 0

    def test_no_ttl_keeps_flows(self, small_catalog, persister):
        clock = FakeClock()
        registry = FlowRegistry(
            small_catalog, CompletionHandler(persister),
            next_stage="subscription", ttl_seconds=None, clock=clock,
        )
        registry.create(user_id="u1", flow_id="f1")
        clock.now += 10 ** 6
        assert registry.purge_expired() == 0
        assert len(registry) == 1


class TestCompletingFlows:
    @staticmethod
    async def _start_completion(flow, gated):
        await flow.advance()
        flow.toggle_option("selectedGoals", "A")
        await flow.advance()
        await flow.advance()
        task = asyncio.create_task(flow.advance())
        await gated.started.wait()
        assert flow.status == FlowStatus.COMPLETING
        return task

    @pytest.mark.asyncio
    async def test_discard_while_completing_is_locked(self, small_catalog):
        gated = GatedPersister()
        registry = FlowRegistry(
            small_catalog, CompletionHandler(gated), next_stage="subscription",
        )
        flow = registry.create(user_id="u1", flow_id="f1")
        task = await self._start_completion(flow, gated)

        with pytest.raises(FlowLockedError):
            registry.discard(user_id="u1", flow_id="f1")
        assert registry.get(user_id="u1", flow_id="f1") is flow

        gated.release.set()
        await task
        assert flow.status == FlowStatus.COMPLETED
        registry.discard(user_id="u1", flow_id="f1")
        assert len(registry) == 0

    @pytest.mark.asyncio
    async def test_completing_flow_survives_expiry_and_cap(self, small_catalog):
        gated = GatedPersister()
        clock = FakeClock()
        registry = FlowRegistry(
            small_catalog, CompletionHandler(gated), next_stage="subscription",
            max_active=1, ttl_seconds=60, clock=clock,
        )
        flow = registry.create(user_id="u1", flow_id="f1")
        task = await self._start_completion(flow, gated)

        clock.now += 3600
        assert registry.purge_expired() == 0
        with pytest.raises(ValueError, match="limit"):
            registry.create(user_id="u2", flow_id="f2")

        gated.release.set()
        await task
        assert gated.completed == ["f1"]
