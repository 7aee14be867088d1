# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Unit tests for tier extraction rules and PolicySynchronizer."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

from botgate_reporter.models import ModelPolicyState
from botgate_reporter.services.service_policy_sync import (
    PolicySynchronizer,
    TierInfo,
    extract_data_root_tier,
    extract_nested_data_tier,
    extract_nested_tier,
    extract_root_tier,
    extract_tier_info,
)

INITIAL_SECONDS = 1800.0


class TestExtractionRules:
    """Each rule in isolation, then rule precedence."""

    def test_nested_data_tier_object(self) -> None:
        payload = {"data": {"tier": {"name": "pro", "updateIntervalMinutes": 15}}}
        assert extract_nested_data_tier(payload) == TierInfo("pro", 15.0)

    def test_data_root_tier_fields(self) -> None:
        payload = {"data": {"tier": "business", "updateIntervalMinutes": 5}}
        assert extract_data_root_tier(payload) == TierInfo("business", 5.0)

    def test_root_tier_object(self) -> None:
        payload = {"tier": {"id": "free", "update_interval_minutes": 30}}
        assert extract_nested_tier(payload) == TierInfo("free", 30.0)

    def test_root_tier_fields(self) -> None:
        payload = {"success": True, "tier": "pro", "updateInterval": 10}
        assert extract_root_tier(payload) == TierInfo("pro", 10.0)

    def test_tier_object_falls_back_to_container_interval(self) -> None:
        payload = {"tier": {"name": "pro"}, "updateIntervalMinutes": 20}
        assert extract_nested_tier(payload) == TierInfo("pro", 20.0)

    def test_tier_without_interval(self) -> None:
        assert extract_root_tier({"tier": "pro"}) == TierInfo("pro", None)

    def test_tier_name_lowercased(self) -> None:
        assert extract_root_tier({"tier": " Business "}) == TierInfo("business", None)
        payload = {"tier": {"id": "PRO", "updateInterval": 15}}
        assert extract_nested_tier(payload) == TierInfo("pro", 15.0)

    def test_non_positive_interval_ignored(self) -> None:
        assert extract_root_tier({"tier": "pro", "updateIntervalMinutes": 0}) == (
            TierInfo("pro", None)
        )

    @pytest.mark.parametrize(
        "payload",
        [
            None,
            "pro",
            [],
            {},
            {"success": True},
            {"tier": ""},
            {"tier": 3},
            {"data": "pro"},
            {"tier": {"level": 2}},
        ],
    )
    def test_no_tier(self, payload: object) -> None:
        assert extract_tier_info(payload) is None

    def test_first_matching_rule_wins(self) -> None:
        payload = {
            "tier": "free",
            "data": {"tier": {"name": "business", "updateIntervalMinutes": 5}},
        }
        assert extract_tier_info(payload) == TierInfo("business", 5.0)

    def test_custom_rule_order(self) -> None:
        payload = {"tier": "free", "data": {"tier": "pro"}}
        rules = (extract_root_tier, extract_data_root_tier)
        assert extract_tier_info(payload, rules) == TierInfo("free", None)


class TestPolicySynchronizer:
    """State transitions and listener notifications."""

    @pytest.fixture
    def listeners(self) -> dict[str, AsyncMock]:
        return {
            "on_interval_changed": AsyncMock(),
            "on_heartbeat_changed": AsyncMock(),
            "on_tier_changed": AsyncMock(),
        }

    @pytest.fixture
    def sync(self, listeners: dict[str, AsyncMock]) -> PolicySynchronizer:
        return PolicySynchronizer(INITIAL_SECONDS, **listeners)

    def test_initial_state(self, sync: PolicySynchronizer) -> None:
        assert sync.state == ModelPolicyState(update_interval_seconds=INITIAL_SECONDS)
        assert sync.state.tier is None
        assert sync.state.heartbeat_enabled is False

    @pytest.mark.asyncio
    async def test_payload_without_tier_is_noop(
        self, sync: PolicySynchronizer, listeners: dict[str, AsyncMock]
    ) -> None:
        assert await sync.sync_from_response({"success": True}) is False
        for listener in listeners.values():
            listener.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_tier_change_with_interval(
        self, sync: PolicySynchronizer, listeners: dict[str, AsyncMock]
    ) -> None:
        changed = await sync.sync_from_response(
            {"tier": "pro", "updateIntervalMinutes": 15}
        )

        assert changed is True
        assert sync.state.tier == "pro"
        assert sync.state.update_interval_seconds == 900.0
        assert sync.state.heartbeat_enabled is False
        listeners["on_interval_changed"].assert_awaited_once_with(900.0)
        listeners["on_heartbeat_changed"].assert_not_awaited()
        listeners["on_tier_changed"].assert_awaited_once_with(sync.state)

    @pytest.mark.asyncio
    async def test_same_tier_is_noop_even_with_new_interval(
        self, sync: PolicySynchronizer, listeners: dict[str, AsyncMock]
    ) -> None:
        await sync.sync_from_response({"tier": "pro", "updateIntervalMinutes": 15})
        for listener in listeners.values():
            listener.reset_mock()

        changed = await sync.sync_from_response(
            {"tier": "pro", "updateIntervalMinutes": 1}
        )

        assert changed is False
        assert sync.state.update_interval_seconds == 900.0
        for listener in listeners.values():
            listener.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_tier_case_change_is_noop(
        self, sync: PolicySynchronizer, listeners: dict[str, AsyncMock]
    ) -> None:
        await sync.sync_from_response({"tier": "business"})
        assert sync.state.heartbeat_enabled is True
        for listener in listeners.values():
            listener.reset_mock()

        changed = await sync.sync_from_response({"tier": "Business"})

        assert changed is False
        assert sync.state.tier == "business"
        assert sync.state.heartbeat_enabled is True
        for listener in listeners.values():
            listener.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_tier_change_without_interval_keeps_interval(
        self, sync: PolicySynchronizer, listeners: dict[str, AsyncMock]
    ) -> None:
        await sync.sync_from_response({"tier": "pro"})

        assert sync.state.update_interval_seconds == INITIAL_SECONDS
        listeners["on_interval_changed"].assert_not_awaited()
        listeners["on_tier_changed"].assert_awaited_once()

    @pytest.mark.asyncio
    async def test_equal_interval_not_renotified(
        self, sync: PolicySynchronizer, listeners: dict[str, AsyncMock]
    ) -> None:
        await sync.sync_from_response({"tier": "free", "updateIntervalMinutes": 30})

        listeners["on_interval_changed"].assert_not_awaited()
        listeners["on_tier_changed"].assert_awaited_once()

    @pytest.mark.asyncio
    async def test_business_enables_heartbeat(
        self, sync: PolicySynchronizer, listeners: dict[str, AsyncMock]
    ) -> None:
        await sync.sync_from_response(
            {"data": {"tier": {"name": "business", "updateIntervalMinutes": 5}}}
        )

        assert sync.state.heartbeat_enabled is True
        listeners["on_heartbeat_changed"].assert_awaited_once_with(True)

    @pytest.mark.asyncio
    async def test_downgrade_disables_heartbeat(
        self, sync: PolicySynchronizer, listeners: dict[str, AsyncMock]
    ) -> None:
        await sync.sync_from_response({"tier": "business"})
        listeners["on_heartbeat_changed"].reset_mock()

        await sync.sync_from_response({"tier": "pro"})

        assert sync.state.heartbeat_enabled is False
        listeners["on_heartbeat_changed"].assert_awaited_once_with(False)

    @pytest.mark.asyncio
    async def test_notification_order(self) -> None:
        calls: list[str] = []
        sync = PolicySynchronizer(
            INITIAL_SECONDS,
            on_interval_changed=lambda seconds: calls.append("interval"),
            on_heartbeat_changed=lambda enabled: calls.append("heartbeat"),
            on_tier_changed=lambda state: calls.append("tier"),
        )

        await sync.sync_from_response({"tier": "business", "updateIntervalMinutes": 5})

        assert calls == ["interval", "heartbeat", "tier"]

    @pytest.mark.asyncio
    async def test_set_listeners_replaces_listeners(self) -> None:
        sync = PolicySynchronizer(INITIAL_SECONDS)
        on_tier = MagicMock()
        sync.set_listeners(on_tier_changed=on_tier)

        await sync.sync_from_response({"tier": "pro"})

        on_tier.assert_called_once_with(sync.state)
