# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Unit tests for the vote WebhookServer."""

from __future__ import annotations

import socket
from unittest.mock import MagicMock

import pytest
from aiohttp.test_utils import TestClient, TestServer

from botgate_reporter.enums import EnumReporterEvent
from botgate_reporter.errors import ReporterError
from botgate_reporter.runtime.event_emitter import ReporterEventEmitter
from botgate_reporter.runtime.webhook_server import WebhookServer, extract_vote_payload

WEBHOOK_PATH = "/botgate/webhook"


@pytest.fixture
def emitter() -> ReporterEventEmitter:
    return ReporterEventEmitter()


@pytest.fixture
def votes(emitter: ReporterEventEmitter) -> MagicMock:
    handler = MagicMock()
    emitter.subscribe(EnumReporterEvent.VOTE, handler)
    return handler


@pytest.fixture
def server(emitter: ReporterEventEmitter) -> WebhookServer:
    return WebhookServer(emitter=emitter, port=0, host="127.0.0.1", path=WEBHOOK_PATH)


class TestExtractVotePayload:
    def test_details_preferred(self) -> None:
        assert extract_vote_payload({"type": "vote", "details": {"user": "1"}}) == {
            "user": "1"
        }

    def test_whole_body_without_details(self) -> None:
        body = {"user": "1", "bot": "2"}
        assert extract_vote_payload(body) is body

    def test_null_details_falls_back_to_body(self) -> None:
        body = {"details": None, "user": "1"}
        assert extract_vote_payload(body) is body


class TestWebhookRoutes:
    @pytest.mark.asyncio
    async def test_vote_with_details_emitted(
        self, server: WebhookServer, votes: MagicMock
    ) -> None:
        async with TestClient(TestServer(server.build_app())) as client:
            response = await client.post(
                WEBHOOK_PATH, json={"type": "upvote", "details": {"userId": "42"}}
            )
            assert response.status == 200
            assert await response.json() == {"success": True}

        votes.assert_called_once_with({"userId": "42"})

    @pytest.mark.asyncio
    async def test_vote_without_details_emits_body(
        self, server: WebhookServer, votes: MagicMock
    ) -> None:
        async with TestClient(TestServer(server.build_app())) as client:
            response = await client.post(WEBHOOK_PATH, json={"userId": "42"})
            assert response.status == 200

        votes.assert_called_once_with({"userId": "42"})

    @pytest.mark.asyncio
    async def test_invalid_json_rejected(
        self, server: WebhookServer, votes: MagicMock
    ) -> None:
        async with TestClient(TestServer(server.build_app())) as client:
            response = await client.post(WEBHOOK_PATH, data="{not json")
            assert response.status == 400
            assert "error" in await response.json()

        votes.assert_not_called()

    @pytest.mark.asyncio
    async def test_invalid_utf8_rejected(
        self, server: WebhookServer, votes: MagicMock
    ) -> None:
        async with TestClient(TestServer(server.build_app())) as client:
            response = await client.post(
                WEBHOOK_PATH,
                data=b'{"details": "\xff\xfe"}',
                headers={"Content-Type": "application/json"},
            )
            assert response.status == 400
            assert "error" in await response.json()

        votes.assert_not_called()

    @pytest.mark.asyncio
    async def test_non_object_json_rejected(
        self, server: WebhookServer, votes: MagicMock
    ) -> None:
        async with TestClient(TestServer(server.build_app())) as client:
            response = await client.post(WEBHOOK_PATH, json=[1, 2])
            assert response.status == 400

        votes.assert_not_called()

    @pytest.mark.asyncio
    async def test_get_on_webhook_path_is_404(
        self, server: WebhookServer, votes: MagicMock
    ) -> None:
        async with TestClient(TestServer(server.build_app())) as client:
            response = await client.get(WEBHOOK_PATH)
            assert response.status == 404

        votes.assert_not_called()

    @pytest.mark.asyncio
    async def test_other_paths_are_404(
        self, server: WebhookServer, votes: MagicMock
    ) -> None:
        async with TestClient(TestServer(server.build_app())) as client:
            response = await client.post("/other", json={"userId": "1"})
            assert response.status == 404

        votes.assert_not_called()


class TestWebhookLifecycle:
    @pytest.mark.asyncio
    async def test_start_and_stop_idempotent(self, server: WebhookServer) -> None:
        await server.start()
        await server.start()
        assert server.is_running is True

        await server.stop()
        await server.stop()
        assert server.is_running is False

    @pytest.mark.asyncio
    async def test_port_in_use_raises(self, emitter: ReporterEventEmitter) -> None:
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as blocker:
            blocker.bind(("127.0.0.1", 0))
            blocker.listen(1)
            port = blocker.getsockname()[1]
            server = WebhookServer(emitter=emitter, port=port, host="127.0.0.1")

            with pytest.raises(ReporterError, match="Failed to start webhook server"):
                await server.start()

        assert server.is_running is False
