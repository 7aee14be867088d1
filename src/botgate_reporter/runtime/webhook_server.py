# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Vote Webhook Server.

Minimal aiohttp listener receiving votes pushed by BotGate.

Routes:
    - POST {path}: JSON body. The ``details`` field is republished as a
      ``vote`` event when present, otherwise the whole body is. Responds
      200 ``{"success": true}``.
    - Anything else: 404.

Invalid JSON, or JSON that is not an object, gets a 400 and publishes
nothing.

Example:
    >>> emitter = ReporterEventEmitter()
    >>> server = WebhookServer(emitter=emitter, port=8080)
    >>> # await server.start()
    >>> # curl -X POST localhost:8080/botgate/webhook -d '{"details": {"user": "1"}}'
    >>> # await server.stop()
"""

from __future__ import annotations

import json
import logging
from typing import Any

from aiohttp import web

from botgate_reporter.enums import EnumReporterEvent
from botgate_reporter.errors import ModelReporterErrorContext, ReporterError
from botgate_reporter.models.model_reporter_config import (
    DEFAULT_WEBHOOK_HOST,
    DEFAULT_WEBHOOK_PATH,
    DEFAULT_WEBHOOK_PORT,
)
from botgate_reporter.runtime.event_emitter import ReporterEventEmitter
from botgate_reporter.utils import get_message

logger = logging.getLogger(__name__)


def extract_vote_payload(body: dict[str, Any]) -> object:
    """Return ``body["details"]`` when present, else ``body``."""
    if "details" in body and body["details"] is not None:
        return body["details"]
    return body


class WebhookServer:
    """HTTP listener republishing pushed votes to local subscribers.

    Attributes:
        emitter: Event emitter receiving ``vote`` events
        port: Port to listen on
        host: Host to bind to
        path: The single path accepting POSTs
    """

    def __init__(
        self,
        emitter: ReporterEventEmitter,
        port: int = DEFAULT_WEBHOOK_PORT,
        host: str = DEFAULT_WEBHOOK_HOST,
        path: str = DEFAULT_WEBHOOK_PATH,
        locale: str = "en",
    ) -> None:
        self._emitter = emitter
        self._port = port
        self._host = host
        self._path = path
        self._locale = locale

        self._app: web.Application | None = None
        self._runner: web.AppRunner | None = None
        self._site: web.TCPSite | None = None
        self._is_running = False

    @property
    def is_running(self) -> bool:
        return self._is_running

    @property
    def port(self) -> int:
        return self._port

    @property
    def path(self) -> str:
        return self._path

    def build_app(self) -> web.Application:
        """Create the aiohttp application serving the webhook route."""
        app = web.Application()
        app.router.add_route("*", self._path, self._handle_webhook)
        app.router.add_route("*", "/{tail:.*}", self._handle_not_found)
        return app

    async def start(self) -> None:
        """Bind the listener. Idempotent.

        Raises:
            ReporterError: If the port cannot be bound.
        """
        if self._is_running:
            logger.debug("WebhookServer already started, skipping")
            return

        context = ModelReporterErrorContext(
            operation="start_webhook_server",
            target_name=f"{self._host}:{self._port}",
        )
        try:
            self._app = self.build_app()
            self._runner = web.AppRunner(self._app)
            await self._runner.setup()
            self._site = web.TCPSite(self._runner, self._host, self._port)
            await self._site.start()
        except OSError as e:
            await self._cleanup()
            error_msg = (
                f"Failed to start webhook server on {self._host}:{self._port}: {e}"
            )
            logger.exception(
                error_msg,
                extra={"error_type": type(e).__name__, "errno": e.errno},
            )
            raise ReporterError(error_msg, context=context) from e

        self._is_running = True
        logger.info(
            "WebhookServer started",
            extra={"host": self._host, "port": self._port, "path": self._path},
        )

    async def stop(self) -> None:
        """Stop the listener. Safe to call when already stopped."""
        if not self._is_running:
            logger.debug("WebhookServer already stopped, skipping")
            return
        await self._cleanup()
        logger.info("WebhookServer stopped")

    async def _cleanup(self) -> None:
        if self._site is not None:
            try:
                await self._site.stop()
            except Exception as e:
                logger.warning(
                    "Error stopping TCPSite during shutdown",
                    extra={"error_type": type(e).__name__, "error": str(e)},
                )
            self._site = None

        if self._runner is not None:
            try:
                await self._runner.cleanup()
            except Exception as e:
                logger.warning(
                    "Error cleaning up AppRunner during shutdown",
                    extra={"error_type": type(e).__name__, "error": str(e)},
                )
            self._runner = None

        self._app = None
        self._is_running = False

    async def _handle_webhook(self, request: web.Request) -> web.Response:
        """Handle the vote route."""
        if request.method != "POST":
            return _not_found()

        raw = await request.read()
        try:
            # Undecodable bytes raise UnicodeDecodeError, a ValueError like
            # json.JSONDecodeError.
            body = json.loads(raw)
        except ValueError:
            logger.warning(
                "Rejected webhook with invalid JSON",
                extra={"remote": request.remote, "length": len(raw)},
            )
            return web.json_response({"error": "Invalid JSON body"}, status=400)

        if not isinstance(body, dict):
            logger.warning(
                "Rejected webhook with non-object body",
                extra={"remote": request.remote, "body_type": type(body).__name__},
            )
            return web.json_response(
                {"error": "Body must be a JSON object"}, status=400
            )

        vote = extract_vote_payload(body)
        logger.info(get_message("vote_received", self._locale))
        await self._emitter.emit(EnumReporterEvent.VOTE, vote)
        return web.json_response({"success": True})

    async def _handle_not_found(self, request: web.Request) -> web.Response:
        return _not_found()


def _not_found() -> web.Response:
    return web.json_response({"error": "Not found"}, status=404)


__all__: list[str] = ["WebhookServer", "extract_vote_payload"]
