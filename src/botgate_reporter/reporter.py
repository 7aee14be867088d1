# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""BotGate Stats Reporter.

Reports a Discord bot's server, user and shard counts to BotGate on a
schedule and keeps that schedule in line with the policy the platform
declares for the bot's tier.

Wiring:
    - The transport awaits policy sync on every 2xx response and a policy
      re-verification after every 429/403.
    - Policy sync re-arms the scheduler's stats timer when the interval
      changes, toggles the heartbeat when eligibility changes and emits
      ``tier_changed``.
    - Only the leader process (shard 0, or an unsharded bot) runs the
      scheduler or sends stats.
    - The optional webhook listener and auto-registration form a separate
      inbound path that republishes votes as ``vote`` events.

Example:
    ```python
    import discord
    from botgate_reporter import BotGateReporter, EnumReporterEvent

    client = discord.Client(intents=discord.Intents.default())
    reporter = BotGateReporter(
        bot_id="123456789012345678",
        api_key="bg_live_xxx",
        debug=True,
    )

    @client.event
    async def setup_hook() -> None:
        await reporter.start(client)

    reporter.on(EnumReporterEvent.VOTE, lambda vote: print("vote", vote))
    ```
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Mapping
from typing import Any
from uuid import uuid4

import aiohttp
from pydantic import ValidationError

from botgate_reporter.enums import EnumReporterEvent
from botgate_reporter.errors import (
    ClientNotReadyError,
    ModelReporterErrorContext,
    ReporterConfigurationError,
    ReporterError,
)
from botgate_reporter.handlers.handler_botgate_transport import (
    HandlerBotGateTransport,
)
from botgate_reporter.models import (
    ModelBotInfo,
    ModelPolicyState,
    ModelReporterConfig,
    ModelRetryOutcome,
    ModelWebhookRegistrationResult,
)
from botgate_reporter.protocols import ProtocolBotClient
from botgate_reporter.runtime.event_emitter import EventHandler, ReporterEventEmitter
from botgate_reporter.runtime.webhook_auto_registration import WebhookAutoRegistrar
from botgate_reporter.runtime.webhook_server import WebhookServer
from botgate_reporter.services.service_leadership import (
    is_leader_shard,
    resolve_leadership,
)
from botgate_reporter.services.service_metrics_collector import MetricsCollector
from botgate_reporter.services.service_policy_sync import PolicySynchronizer
from botgate_reporter.services.service_report_scheduler import ReportScheduler
from botgate_reporter.utils import enable_debug_logging, get_message

logger = logging.getLogger(__name__)

STATS_PATH = "/api/v1/bots/stats"
HEARTBEAT_PATH = "/api/v1/heartbeat"
VERIFY_PATH = "/api/v1/verify"
USAGE_PATH = "/api/v1/usage"

WORKER_VOTE_MESSAGE_TYPE = "BOTGATE_VOTE"


class BotGateReporter:
    """Main entry point of the BotGate stats reporter.

    Construct with a ModelReporterConfig or with its fields as keyword
    arguments (``bot_id`` and ``api_key`` are mandatory). Only configuration
    errors are raised from the constructor; everything else it starts is
    best effort.
    """

    def __init__(
        self,
        config: ModelReporterConfig | None = None,
        *,
        http_session: aiohttp.ClientSession | None = None,
        environ: Mapping[str, str] | None = None,
        **options: Any,
    ) -> None:
        """Create a reporter.

        Args:
            config: Complete configuration. Mutually exclusive with ``options``.
            http_session: Optional shared aiohttp session for API calls.
            environ: Environment used by webhook auto-registration
                (``os.environ`` by default).
            **options: ModelReporterConfig fields (bot_id, api_key, debug, ...).

        Raises:
            ReporterConfigurationError: If bot_id or api_key is missing or any
                option is invalid.
        """
        self._config = self._build_config(config, options)
        locale = self._config.locale

        if self._config.debug:
            enable_debug_logging()

        self._emitter = ReporterEventEmitter()
        self._policy = PolicySynchronizer(
            self._config.update_interval_seconds, locale=locale
        )
        self._transport = HandlerBotGateTransport(
            base_url=self._config.api_url,
            api_key=self._config.api_key,
            bot_id=self._config.bot_id,
            retry_attempts=self._config.retry_attempts,
            retry_delay_seconds=self._config.retry_delay_seconds,
            retry_backoff_multiplier=self._config.retry_backoff_multiplier,
            timeout=self._config.request_timeout_seconds,
            http_session=http_session,
            response_hook=self._policy.sync_from_response,
            rejection_hook=self._reverify_policy,
            locale=locale,
        )
        self._collector = MetricsCollector(
            self._config.bot_id,
            broadcast_timeout_seconds=self._config.broadcast_timeout_seconds,
        )
        self._scheduler = ReportScheduler(
            report=self._scheduled_report,
            heartbeat=self.send_heartbeat,
            policy=lambda: self._policy.state,
            locale=locale,
        )
        self._policy.set_listeners(
            on_interval_changed=self._scheduler.rearm_stats,
            on_heartbeat_changed=self._scheduler.set_heartbeat,
            on_tier_changed=self._on_tier_changed,
        )

        self._webhook_server: WebhookServer | None = None
        if self._config.webhook_enabled:
            self._webhook_server = WebhookServer(
                emitter=self._emitter,
                port=self._config.webhook_port,
                host=self._config.webhook_host,
                path=self._config.webhook_path,
                locale=locale,
            )
        self._registrar: WebhookAutoRegistrar | None = None
        if self._config.auto_register_webhook:
            self._registrar = WebhookAutoRegistrar(
                self._config, self._transport, environ=environ
            )
        self._registration_result: ModelWebhookRegistrationResult | None = None

        self._client: ProtocolBotClient | None = None
        self._is_running = False
        self._is_leader: bool | None = None
        self._ready_task: asyncio.Task[None] | None = None
        self._inbound_task: asyncio.Task[None] | None = None

        logger.info(
            get_message("initialized", locale),
            extra={
                "bot_id": self._config.bot_id,
                "api_url": self._config.api_url,
                "update_interval_minutes": self._config.update_interval_minutes,
            },
        )

        # Inbound setup needs a loop; without one it is deferred to start().
        if self._webhook_server is not None or self._registrar is not None:
            try:
                loop = asyncio.get_running_loop()
            except RuntimeError:
                loop = None
            if loop is not None:
                self._inbound_task = loop.create_task(
                    self._start_inbound(), name="botgate-inbound-setup"
                )

    @staticmethod
    def _build_config(
        config: ModelReporterConfig | None, options: dict[str, Any]
    ) -> ModelReporterConfig:
        if config is not None:
            if options:
                raise ReporterConfigurationError(
                    "[BotGate Reporter] pass either a config or keyword options, not both",
                    options=sorted(options),
                )
            return config

        if not options.get("bot_id"):
            raise ReporterConfigurationError(
                "[BotGate Reporter] botId is required", field="bot_id"
            )
        if not options.get("api_key"):
            raise ReporterConfigurationError(
                "[BotGate Reporter] apiKey is required", field="api_key"
            )
        try:
            return ModelReporterConfig(**options)
        except ValidationError as e:
            fields = sorted({".".join(str(p) for p in err["loc"]) for err in e.errors()})
            raise ReporterConfigurationError(
                f"[BotGate Reporter] invalid configuration: {', '.join(fields)}",
                context=ModelReporterErrorContext(operation="validate_config"),
                fields=fields,
            ) from e

    def __repr__(self) -> str:
        """Mask credentials to prevent accidental exposure in logs/tracebacks."""
        return (
            f"<{type(self).__name__} bot_id={self._config.bot_id} "
            f"running={self._is_running}>"
        )

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def start(self, client: ProtocolBotClient) -> None:
        """Start reporting for ``client``.

        Returns immediately; the first report is sent once the client is
        ready, and only if this process is the reporting leader. Calling start
        on a running reporter logs a warning and does nothing.
        """
        if self._is_running:
            logger.warning(get_message("already_running", self._config.locale))
            return

        self._client = client
        self._is_running = True

        if self._inbound_task is None and (
            self._webhook_server is not None or self._registrar is not None
        ):
            self._inbound_task = asyncio.create_task(
                self._start_inbound(), name="botgate-inbound-setup"
            )

        self._ready_task = asyncio.create_task(
            self._run_when_ready(client), name="botgate-ready"
        )
        logger.info(get_message("started", self._config.locale))

    async def stop(self) -> None:
        """Stop automatic updates and the webhook listener.

        Timers are cancelled unconditionally; sends already in flight
        complete on their own. Safe to call at any time.
        """
        # A running scheduler means the ready task is past readiness and at
        # most finishing the initial report, which must not be interrupted.
        reporting = self._scheduler.is_running
        self._scheduler.stop()

        if (
            self._ready_task is not None
            and not self._ready_task.done()
            and not reporting
        ):
            self._ready_task.cancel()

        if self._webhook_server is not None:
            await self._webhook_server.stop()

        self._is_running = False
        logger.info(get_message("stopped", self._config.locale))

    async def close(self) -> None:
        """Stop, wait for in-flight sends and release the HTTP session."""
        await self.stop()
        for task in (self._inbound_task, self._ready_task):
            if task is None or task.done():
                continue
            if task is self._inbound_task:
                task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass
        self._inbound_task = None
        self._ready_task = None
        await self._scheduler.drain()
        await self._transport.close()

    async def _run_when_ready(self, client: ProtocolBotClient) -> None:
        if not client.is_ready():
            await client.wait_until_ready()
        await self._on_ready(client)

    async def _on_ready(self, client: ProtocolBotClient) -> None:
        """Leader election, then hand over to the scheduler."""
        user = getattr(client, "user", None)
        logger.info(get_message("client_ready", self._config.locale, tag=user))

        self._is_leader = resolve_leadership(client.shard)
        if not self._is_leader:
            logger.info(get_message("follower", self._config.locale))
            return

        logger.info(get_message("leader", self._config.locale))
        await self._scheduler.start()

    async def _start_inbound(self) -> None:
        if self._webhook_server is not None:
            try:
                await self._webhook_server.start()
            except ReporterError as e:
                logger.error(
                    "Webhook listener unavailable, skipping auto-registration",
                    extra={"error": str(e)},
                )
                return
        if self._registrar is not None:
            self._registration_result = await self._registrar.register()

    # ------------------------------------------------------------------
    # Reporting
    # ------------------------------------------------------------------

    async def send_stats(self) -> ModelRetryOutcome:
        """Collect and send stats now, without waiting for the timer.

        Returns:
            The send outcome. Followers get a NOT_LEADER outcome and send
            nothing.

        Raises:
            ClientNotReadyError: If ``start`` was not called or the client is
                not ready yet.
        """
        client = self._client
        if client is None or not client.is_ready():
            raise ClientNotReadyError(
                "[BotGate Reporter] Discord client is not ready",
                context=ModelReporterErrorContext(
                    operation="send_stats", correlation_id=uuid4()
                ),
            )

        shard = client.shard
        if not is_leader_shard(list(shard.ids) if shard is not None else None):
            logger.debug("Skipping stats send on follower process")
            return ModelRetryOutcome.not_leader()

        snapshot = await self._collector.collect(client)
        outcome = await self._transport.send("POST", STATS_PATH, snapshot.to_payload())
        if outcome.success:
            logger.info(
                get_message("stats_sent", self._config.locale, attempt=outcome.attempts),
                extra={
                    "servers": snapshot.server_count,
                    "users": snapshot.user_count,
                    "shards": snapshot.shard_count,
                },
            )
        return outcome

    async def _scheduled_report(self) -> ModelRetryOutcome:
        outcome = await self.send_stats()
        if outcome.success:
            logger.info(get_message("stats_updated", self._config.locale))
        else:
            logger.warning(
                get_message("stats_update_failed", self._config.locale),
                extra={
                    "failure_class": outcome.failure_class.value
                    if outcome.failure_class
                    else None,
                    "error": outcome.error,
                    "failed_attempts": self.failed_attempts,
                },
            )
        return outcome

    async def send_heartbeat(self) -> ModelRetryOutcome:
        """Send one heartbeat (business tier)."""
        return await self._transport.send("POST", HEARTBEAT_PATH)

    # ------------------------------------------------------------------
    # Verification and queries
    # ------------------------------------------------------------------

    async def verify_api_key(self) -> bool:
        """Check the API key and refresh the policy from the verify response."""
        outcome = await self._transport.send(
            "GET", VERIFY_PATH, retry=False, reverify_on_rejection=False
        )
        data = outcome.data if isinstance(outcome.data, dict) else {}
        valid = outcome.success and data.get("success") is True
        if valid:
            logger.info(get_message("api_key_verified", self._config.locale))
        else:
            logger.warning(
                get_message("api_key_invalid", self._config.locale),
                extra={"status_code": outcome.status_code, "error": outcome.error},
            )
        return valid

    async def _reverify_policy(self) -> None:
        await self.verify_api_key()

    async def get_bot_info(self) -> ModelRetryOutcome:
        """Fetch this bot's listing; ``data`` is a ModelBotInfo when parseable."""
        outcome = await self._transport.send(
            "GET", f"/api/v1/bots/{self._config.bot_id}"
        )
        if not outcome.success or not isinstance(outcome.data, dict):
            return outcome
        raw = outcome.data.get("data", outcome.data)
        try:
            info = ModelBotInfo.model_validate(raw)
        except ValidationError as e:
            logger.warning(
                "Bot info payload did not match the expected shape",
                extra={"error_count": e.error_count()},
            )
            return outcome
        return outcome.model_copy(update={"data": info})

    async def get_votes(self, limit: int = 10) -> ModelRetryOutcome:
        """Fetch the most recent votes."""
        return await self._transport.send(
            "GET",
            f"/api/v1/bots/{self._config.bot_id}/votes",
            params={"limit": limit},
        )

    async def get_analytics(self) -> ModelRetryOutcome:
        """Fetch analytics for this bot."""
        return await self._transport.send(
            "GET", f"/api/v1/bots/{self._config.bot_id}/analytics"
        )

    async def get_stats_history(self, period: str = "7d") -> ModelRetryOutcome:
        """Fetch reported stats history for ``period`` (e.g. "24h", "7d", "30d")."""
        return await self._transport.send(
            "GET",
            f"/api/v1/bots/{self._config.bot_id}/stats/history",
            params={"period": period},
        )

    async def get_usage(self) -> ModelRetryOutcome:
        """Fetch API usage and limits for this key."""
        return await self._transport.send("GET", USAGE_PATH)

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------

    def on(self, event: EnumReporterEvent | str, handler: EventHandler) -> Callable[[], None]:
        """Subscribe ``handler`` to ``event``; returns an unsubscribe callable."""
        return self._emitter.subscribe(event, handler)

    async def handle_worker_message(self, message: object) -> bool:
        """Republish a vote forwarded by the process owning the listener.

        Accepts ``{"type": "BOTGATE_VOTE", "data": {...}}``; anything else is
        ignored.

        Returns:
            True if the message was a vote and was republished.
        """
        if not isinstance(message, Mapping):
            return False
        if message.get("type") != WORKER_VOTE_MESSAGE_TYPE:
            return False
        await self._emitter.emit(EnumReporterEvent.VOTE, message.get("data"))
        return True

    async def _on_tier_changed(self, state: ModelPolicyState) -> None:
        await self._emitter.emit(EnumReporterEvent.TIER_CHANGED, state)

    async def register_webhook(self) -> ModelWebhookRegistrationResult:
        """Run webhook auto-registration now, regardless of the config flag."""
        registrar = self._registrar or WebhookAutoRegistrar(
            self._config, self._transport
        )
        self._registration_result = await registrar.register()
        return self._registration_result

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    def get_config(self) -> ModelReporterConfig:
        """Current configuration (immutable)."""
        return self._config

    @property
    def is_active(self) -> bool:
        return self._is_running

    @property
    def is_leader(self) -> bool | None:
        """Leadership from the last readiness event, None before readiness."""
        return self._is_leader

    @property
    def failed_attempts(self) -> int:
        """Consecutive sends that exhausted their retries."""
        return self._transport.failed_attempts

    @property
    def policy(self) -> ModelPolicyState:
        return self._policy.state

    @property
    def scheduler(self) -> ReportScheduler:
        return self._scheduler

    @property
    def webhook_registration(self) -> ModelWebhookRegistrationResult | None:
        return self._registration_result


def create_reporter(
    config: ModelReporterConfig | None = None, **options: Any
) -> BotGateReporter:
    """Factory for BotGateReporter.

    Example:
        >>> reporter = create_reporter(bot_id="123456789012345678", api_key="bg_xxx")
    """
    return BotGateReporter(config, **options)


__all__: list[str] = [
    "BotGateReporter",
    "HEARTBEAT_PATH",
    "STATS_PATH",
    "USAGE_PATH",
    "VERIFY_PATH",
    "WORKER_VOTE_MESSAGE_TYPE",
    "create_reporter",
]
