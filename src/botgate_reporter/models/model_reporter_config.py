# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Reporter Configuration Model.

Security Note:
    The API key uses SecretStr so it never shows up in reprs, logs or
    ``model_dump()`` output. Pass it from the environment
    (``BOTGATE_API_KEY``), never from committed configuration files.
"""

from __future__ import annotations

import os
from typing import Any
from urllib.parse import urlparse

from pydantic import BaseModel, ConfigDict, Field, SecretStr, field_validator

DEFAULT_API_URL = "https://api.botgate.com"
DEFAULT_UPDATE_INTERVAL_SECONDS = 30 * 60.0
DEFAULT_WEBHOOK_PORT = 8080
DEFAULT_WEBHOOK_HOST = "0.0.0.0"  # noqa: S104 - Required for container networking
DEFAULT_WEBHOOK_PATH = "/botgate/webhook"

# Environment variable -> field name
_ENV_FIELDS: dict[str, str] = {
    "BOTGATE_BOT_ID": "bot_id",
    "BOTGATE_API_KEY": "api_key",
    "BOTGATE_API_URL": "api_url",
    "BOTGATE_UPDATE_INTERVAL_SECONDS": "update_interval_seconds",
    "BOTGATE_RETRY_ATTEMPTS": "retry_attempts",
    "BOTGATE_RETRY_DELAY_SECONDS": "retry_delay_seconds",
    "BOTGATE_DEBUG": "debug",
    "BOTGATE_WEBHOOK_ENABLED": "webhook_enabled",
    "BOTGATE_WEBHOOK_PORT": "webhook_port",
    "BOTGATE_AUTO_REGISTER_WEBHOOK": "auto_register_webhook",
    "BOTGATE_LOCALE": "locale",
}


class ModelReporterConfig(BaseModel):
    """Configuration for the BotGate stats reporter.

    Attributes:
        bot_id: Discord bot id (required)
        api_key: BotGate API key (required, SecretStr)
        api_url: BotGate API base URL
        update_interval_seconds: Initial stats interval, replaced at runtime by
            the interval the platform declares for the bot's tier
        retry_attempts: Total attempts per send for transient failures
        retry_delay_seconds: Delay before the second attempt
        retry_backoff_multiplier: Delay multiplier per further attempt
            (1.0 = fixed delay)
        request_timeout_seconds: Per-request aiohttp timeout
        debug: Lower the package logger to DEBUG
        webhook_enabled: Start the inbound vote webhook listener
        webhook_host: Listener bind address
        webhook_port: Listener port
        webhook_path: Fixed path accepting vote POSTs
        auto_register_webhook: Detect the public webhook URL and register it
        locale: Locale selector for log messages ("en", "pt", "pt-BR", ...)
        broadcast_timeout_seconds: Bound on the cross-shard metrics fan-out

    Example:
        >>> config = ModelReporterConfig(
        ...     bot_id="123456789012345678",
        ...     api_key=SecretStr("bg_live_xxx"),
        ...     debug=True,
        ... )
        >>> config.api_key
        SecretStr('**********')
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
    )

    bot_id: str = Field(
        min_length=1,
        description="Discord bot id",
    )
    api_key: SecretStr = Field(
        description="BotGate API key",
    )
    api_url: str = Field(
        default=DEFAULT_API_URL,
        description="BotGate API base URL",
    )
    update_interval_seconds: float = Field(
        default=DEFAULT_UPDATE_INTERVAL_SECONDS,
        gt=0.0,
        description="Initial interval between automatic stats updates",
    )
    retry_attempts: int = Field(
        default=3,
        ge=1,
        le=20,
        description="Total attempts per send for transient failures",
    )
    retry_delay_seconds: float = Field(
        default=5.0,
        ge=0.0,
        description="Delay between attempts",
    )
    retry_backoff_multiplier: float = Field(
        default=1.0,
        ge=1.0,
        le=10.0,
        description="Multiplier applied to the delay after each failed attempt",
    )
    request_timeout_seconds: float = Field(
        default=10.0,
        gt=0.0,
        le=300.0,
        description="Per-request timeout",
    )
    debug: bool = Field(
        default=False,
        description="Enable detailed logging",
    )
    webhook_enabled: bool = Field(
        default=False,
        description="Start the inbound vote webhook listener",
    )
    webhook_host: str = Field(
        default=DEFAULT_WEBHOOK_HOST,
        description="Webhook listener bind address",
    )
    webhook_port: int = Field(
        default=DEFAULT_WEBHOOK_PORT,
        ge=0,
        le=65535,
        description="Webhook listener port",
    )
    webhook_path: str = Field(
        default=DEFAULT_WEBHOOK_PATH,
        description="Path accepting vote POSTs",
    )
    auto_register_webhook: bool = Field(
        default=False,
        description="Detect the public webhook URL and register it with BotGate",
    )
    locale: str = Field(
        default="en",
        description="Locale selector for log messages",
    )
    broadcast_timeout_seconds: float = Field(
        default=10.0,
        gt=0.0,
        description="Timeout for the cross-shard metrics broadcast",
    )

    @field_validator("bot_id")
    @classmethod
    def _strip_bot_id(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("bot_id must not be blank")
        return value

    @field_validator("api_key")
    @classmethod
    def _require_api_key(cls, value: SecretStr) -> SecretStr:
        if not value.get_secret_value().strip():
            raise ValueError("api_key must not be blank")
        return value

    @field_validator("api_url")
    @classmethod
    def _normalize_api_url(cls, value: str) -> str:
        parsed = urlparse(value)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ValueError(f"api_url must be an http(s) URL, got {value!r}")
        return value.rstrip("/")

    @field_validator("webhook_path")
    @classmethod
    def _normalize_webhook_path(cls, value: str) -> str:
        return value if value.startswith("/") else f"/{value}"

    @property
    def update_interval_minutes(self) -> float:
        """Initial update interval in minutes."""
        return self.update_interval_seconds / 60

    @classmethod
    def from_env(
        cls,
        environ: dict[str, str] | None = None,
        **overrides: Any,
    ) -> ModelReporterConfig:
        """Build a config from ``BOTGATE_*`` environment variables.

        Explicit keyword overrides win over environment values. Values are
        passed as strings and coerced by pydantic.

        Raises:
            pydantic.ValidationError: If required fields are missing or invalid.
        """
        env = os.environ if environ is None else environ
        values: dict[str, Any] = {
            field: env[name] for name, field in _ENV_FIELDS.items() if env.get(name)
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)


__all__: list[str] = [
    "DEFAULT_API_URL",
    "DEFAULT_UPDATE_INTERVAL_SECONDS",
    "DEFAULT_WEBHOOK_HOST",
    "DEFAULT_WEBHOOK_PATH",
    "DEFAULT_WEBHOOK_PORT",
    "ModelReporterConfig",
]
