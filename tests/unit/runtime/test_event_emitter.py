# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Unit tests for ReporterEventEmitter."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

from botgate_reporter.enums import EnumReporterEvent
from botgate_reporter.runtime.event_emitter import ReporterEventEmitter


class TestReporterEventEmitter:
    @pytest.mark.asyncio
    async def test_sync_and_async_handlers_receive_payload(self) -> None:
        emitter = ReporterEventEmitter()
        sync_handler = MagicMock()
        async_handler = AsyncMock()
        emitter.subscribe(EnumReporterEvent.VOTE, sync_handler)
        emitter.subscribe("vote", async_handler)

        delivered = await emitter.emit(EnumReporterEvent.VOTE, {"user": "1"})

        assert delivered == 2
        sync_handler.assert_called_once_with({"user": "1"})
        async_handler.assert_awaited_once_with({"user": "1"})

    @pytest.mark.asyncio
    async def test_events_are_isolated(self) -> None:
        emitter = ReporterEventEmitter()
        handler = MagicMock()
        emitter.subscribe(EnumReporterEvent.TIER_CHANGED, handler)

        await emitter.emit(EnumReporterEvent.VOTE, {})

        handler.assert_not_called()

    @pytest.mark.asyncio
    async def test_failing_handler_does_not_block_others(self) -> None:
        emitter = ReporterEventEmitter()
        emitter.subscribe(EnumReporterEvent.VOTE, MagicMock(side_effect=RuntimeError))
        survivor = MagicMock()
        emitter.subscribe(EnumReporterEvent.VOTE, survivor)

        delivered = await emitter.emit(EnumReporterEvent.VOTE, 1)

        assert delivered == 1
        survivor.assert_called_once_with(1)

    @pytest.mark.asyncio
    async def test_unsubscribe(self) -> None:
        emitter = ReporterEventEmitter()
        handler = MagicMock()
        unsubscribe = emitter.subscribe(EnumReporterEvent.VOTE, handler)
        assert emitter.subscriber_count(EnumReporterEvent.VOTE) == 1

        unsubscribe()
        unsubscribe()
        await emitter.emit(EnumReporterEvent.VOTE, {})

        handler.assert_not_called()
        assert emitter.subscriber_count("vote") == 0

    def test_unknown_event_rejected(self) -> None:
        emitter = ReporterEventEmitter()
        with pytest.raises(ValueError):
            emitter.subscribe("ready", MagicMock())
