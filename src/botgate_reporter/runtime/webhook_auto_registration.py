# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Webhook auto-registration.

Works out the URL at which this process's vote webhook is reachable and
registers it with BotGate together with a freshly generated secret.

Environment Strategies (first match wins):
    1. CLOUD_RUN: ``K_SERVICE`` is set. The project number and region come
       from the GCE metadata server; the URL is the deterministic Cloud Run
       service URL ``https://{service}-{project_number}.{region}.run.app``.
       An unreachable metadata server fails this attempt (no retry).
    2. LOCALHOST: the configured API URL points at a loopback host, i.e. the
       platform runs on the same machine: ``http://localhost:{port}``.
    3. PUBLIC_IP: the public address is looked up through an IP echo
       service: ``http://{ip}:{port}``.

Each strategy is a small class with ``detect`` and ``resolve_url`` so new
environments can be added without touching the others.

Error Handling:
    ``WebhookAutoRegistrar.register`` never raises. Detection, resolution
    and registration failures are logged and returned as a failed
    ModelWebhookRegistrationResult.
"""

from __future__ import annotations

import logging
import os
import secrets
from collections.abc import Mapping, Sequence
from typing import Protocol
from urllib.parse import urlparse
from uuid import UUID, uuid4

import aiohttp

from botgate_reporter.enums import EnumDeploymentEnvironment
from botgate_reporter.errors import AutoConfigurationError, ModelReporterErrorContext
from botgate_reporter.handlers.handler_botgate_transport import (
    HandlerBotGateTransport,
)
from botgate_reporter.models import ModelReporterConfig, ModelWebhookRegistrationResult
from botgate_reporter.utils import get_message, sanitize_error_message

logger = logging.getLogger(__name__)

WEBHOOK_SETTINGS_PATH = "/api/v1/settings/webhook"

CLOUD_RUN_SERVICE_ENV = "K_SERVICE"
METADATA_BASE_URL = "http://metadata.google.internal/computeMetadata/v1"
METADATA_HEADERS = {"Metadata-Flavor": "Google"}
PUBLIC_IP_URL = "https://api.ipify.org?format=json"

LOOPBACK_HOSTS = frozenset({"localhost", "127.0.0.1", "::1", "0.0.0.0"})  # noqa: S104

_LOOKUP_TIMEOUT_SECONDS = 5.0
_SECRET_BYTES = 32


class ProtocolEnvironmentStrategy(Protocol):
    """Detection and URL synthesis for one deployment environment."""

    environment: EnumDeploymentEnvironment

    def detect(self, config: ModelReporterConfig, environ: Mapping[str, str]) -> bool:
        ...

    async def resolve_url(
        self,
        config: ModelReporterConfig,
        environ: Mapping[str, str],
        session: aiohttp.ClientSession,
    ) -> str:
        ...


class CloudRunStrategy:
    """Managed Cloud Run container."""

    environment = EnumDeploymentEnvironment.CLOUD_RUN

    def detect(self, config: ModelReporterConfig, environ: Mapping[str, str]) -> bool:
        return bool(environ.get(CLOUD_RUN_SERVICE_ENV))

    async def resolve_url(
        self,
        config: ModelReporterConfig,
        environ: Mapping[str, str],
        session: aiohttp.ClientSession,
    ) -> str:
        service = environ[CLOUD_RUN_SERVICE_ENV]
        project_number = await self._metadata(session, "project/numeric-project-id")
        # instance/region answers "projects/<number>/regions/<region>"
        region = (await self._metadata(session, "instance/region")).rsplit("/", 1)[-1]
        if not project_number or not region:
            raise AutoConfigurationError(
                "Metadata server returned an empty project number or region",
                context=ModelReporterErrorContext(
                    operation="resolve_cloud_run_url", target_name="metadata-server"
                ),
            )
        return f"https://{service}-{project_number}.{region}.run.app{config.webhook_path}"

    @staticmethod
    async def _metadata(session: aiohttp.ClientSession, path: str) -> str:
        context = ModelReporterErrorContext(
            operation="query_metadata_server", target_name=path
        )
        try:
            async with session.get(
                f"{METADATA_BASE_URL}/{path}",
                headers=METADATA_HEADERS,
                timeout=aiohttp.ClientTimeout(total=_LOOKUP_TIMEOUT_SECONDS),
            ) as response:
                if response.status != 200:
                    raise AutoConfigurationError(
                        f"Metadata server answered HTTP {response.status}",
                        context=context,
                    )
                return (await response.text()).strip()
        except (TimeoutError, aiohttp.ClientError) as e:
            raise AutoConfigurationError(
                f"Metadata server unreachable: {sanitize_error_message(e)}",
                context=context,
            ) from e


class LocalhostStrategy:
    """Platform running on this machine (local development)."""

    environment = EnumDeploymentEnvironment.LOCALHOST

    def detect(self, config: ModelReporterConfig, environ: Mapping[str, str]) -> bool:
        host = urlparse(config.api_url).hostname or ""
        return host.lower() in LOOPBACK_HOSTS

    async def resolve_url(
        self,
        config: ModelReporterConfig,
        environ: Mapping[str, str],
        session: aiohttp.ClientSession,
    ) -> str:
        return f"http://localhost:{config.webhook_port}{config.webhook_path}"


class PublicIpStrategy:
    """Anything else: a host reachable on its public address."""

    environment = EnumDeploymentEnvironment.PUBLIC_IP

    def detect(self, config: ModelReporterConfig, environ: Mapping[str, str]) -> bool:
        return True

    async def resolve_url(
        self,
        config: ModelReporterConfig,
        environ: Mapping[str, str],
        session: aiohttp.ClientSession,
    ) -> str:
        context = ModelReporterErrorContext(
            operation="resolve_public_ip", target_name="api.ipify.org"
        )
        try:
            async with session.get(
                PUBLIC_IP_URL,
                timeout=aiohttp.ClientTimeout(total=_LOOKUP_TIMEOUT_SECONDS),
            ) as response:
                if response.status != 200:
                    raise AutoConfigurationError(
                        f"IP lookup answered HTTP {response.status}", context=context
                    )
                body = await response.json(content_type=None)
        except (TimeoutError, aiohttp.ClientError, ValueError) as e:
            raise AutoConfigurationError(
                f"IP lookup failed: {sanitize_error_message(e)}", context=context
            ) from e

        ip = body.get("ip") if isinstance(body, dict) else None
        if not isinstance(ip, str) or not ip:
            raise AutoConfigurationError(
                "IP lookup returned no address", context=context
            )
        host = f"[{ip}]" if ":" in ip else ip
        return f"http://{host}:{config.webhook_port}{config.webhook_path}"


DEFAULT_STRATEGIES: tuple[ProtocolEnvironmentStrategy, ...] = (
    CloudRunStrategy(),
    LocalhostStrategy(),
    PublicIpStrategy(),
)


def detect_environment(
    config: ModelReporterConfig,
    environ: Mapping[str, str],
    strategies: Sequence[ProtocolEnvironmentStrategy] = DEFAULT_STRATEGIES,
) -> ProtocolEnvironmentStrategy:
    """Return the first strategy whose ``detect`` matches.

    Raises:
        AutoConfigurationError: If no strategy matches.
    """
    for strategy in strategies:
        if strategy.detect(config, environ):
            return strategy
    raise AutoConfigurationError(
        "No deployment environment matched",
        context=ModelReporterErrorContext(operation="detect_environment"),
    )


def generate_webhook_secret() -> str:
    """Random opaque secret for one registration."""
    return secrets.token_urlsafe(_SECRET_BYTES)


class WebhookAutoRegistrar:
    """Resolves and registers this process's webhook URL. Best effort.

    Example:
        >>> registrar = WebhookAutoRegistrar(config, transport)
        >>> # result = await registrar.register()
        >>> # result.success, result.environment, result.url
    """

    def __init__(
        self,
        config: ModelReporterConfig,
        transport: HandlerBotGateTransport,
        *,
        environ: Mapping[str, str] | None = None,
        strategies: Sequence[ProtocolEnvironmentStrategy] = DEFAULT_STRATEGIES,
        http_session: aiohttp.ClientSession | None = None,
    ) -> None:
        self._config = config
        self._transport = transport
        self._environ = environ
        self._strategies = tuple(strategies)
        self._http_session = http_session

    def __repr__(self) -> str:
        return f"<{type(self).__name__} port={self._config.webhook_port}>"

    async def register(self) -> ModelWebhookRegistrationResult:
        """Detect, resolve and register the webhook URL. Never raises."""
        correlation_id = uuid4()
        environ = os.environ if self._environ is None else self._environ
        environment: EnumDeploymentEnvironment | None = None
        url: str | None = None

        try:
            strategy = detect_environment(self._config, environ, self._strategies)
            environment = strategy.environment
            url = await self._resolve(strategy, environ)
        except AutoConfigurationError as e:
            return self._failed(
                correlation_id, environment, url, e.message, "AUTO_CONFIG_FAILED"
            )
        except Exception as e:
            return self._failed(
                correlation_id,
                environment,
                url,
                sanitize_error_message(e),
                "AUTO_CONFIG_FAILED",
            )

        secret = generate_webhook_secret()
        try:
            outcome = await self._transport.send(
                "POST",
                WEBHOOK_SETTINGS_PATH,
                {"url": url, "secret": secret, "isReporter": True},
                retry=False,
            )
        except Exception as e:
            return self._failed(
                correlation_id,
                environment,
                url,
                sanitize_error_message(e),
                "REGISTRATION_FAILED",
            )

        if not outcome.success:
            return self._failed(
                correlation_id,
                environment,
                url,
                outcome.error or "Registration rejected",
                "REGISTRATION_FAILED",
            )

        logger.info(
            get_message("webhook_registered", self._config.locale, url=url),
            extra={
                "correlation_id": str(correlation_id),
                "environment": environment.value,
            },
        )
        return ModelWebhookRegistrationResult(
            success=True,
            environment=environment,
            url=url,
            correlation_id=correlation_id,
        )

    async def _resolve(
        self, strategy: ProtocolEnvironmentStrategy, environ: Mapping[str, str]
    ) -> str:
        if self._http_session is not None:
            return await strategy.resolve_url(self._config, environ, self._http_session)
        async with aiohttp.ClientSession() as session:
            return await strategy.resolve_url(self._config, environ, session)

    def _failed(
        self,
        correlation_id: UUID,
        environment: EnumDeploymentEnvironment | None,
        url: str | None,
        error: str,
        error_code: str,
    ) -> ModelWebhookRegistrationResult:
        logger.warning(
            get_message("webhook_registration_failed", self._config.locale),
            extra={
                "correlation_id": str(correlation_id),
                "environment": environment.value if environment else None,
                "error": error,
                "error_code": error_code,
            },
        )
        return ModelWebhookRegistrationResult(
            success=False,
            environment=environment,
            url=url,
            error=error,
            error_code=error_code,
            correlation_id=correlation_id,
        )


__all__: list[str] = [
    "CloudRunStrategy",
    "DEFAULT_STRATEGIES",
    "LocalhostStrategy",
    "ProtocolEnvironmentStrategy",
    "PublicIpStrategy",
    "WEBHOOK_SETTINGS_PATH",
    "WebhookAutoRegistrar",
    "detect_environment",
    "generate_webhook_secret",
]
