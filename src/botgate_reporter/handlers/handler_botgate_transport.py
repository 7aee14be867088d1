# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""BotGate API Transport - bounded retry with rate-limit aware short circuit.

Every outbound call to the BotGate API goes through this handler. It adds
the bearer credential, bounds each attempt with a timeout, retries
transient failures and turns every failure into a ModelRetryOutcome
instead of an exception.

Failure Classes:
    - **Policy rejection** (HTTP 429 and 403): never retried inline. The
      rejection hook (a policy re-verification against ``/api/v1/verify``)
      is awaited, then a RATE_LIMITED / FORBIDDEN outcome is returned. The
      next scheduled send runs under the re-synced policy.
    - **Transient** (network errors, timeouts, any other non-2xx status):
      retried up to ``retry_attempts`` total attempts with
      ``retry_delay_seconds * retry_backoff_multiplier ** (n - 1)`` between
      attempt n and n+1, always with the same payload. On exhaustion the
      consecutive failure counter grows by one and a TRANSIENT outcome is
      returned.

Success:
    A 2xx response resets the consecutive failure counter and the response
    hook (policy synchronization) is awaited before the outcome is returned,
    so callers never observe a stale policy right after a send.

Coroutine Safety:
    Concurrent sends are allowed. The failure counter is only touched
    between suspension points.
"""

from __future__ import annotations

import asyncio
import json
import logging
import time
from collections.abc import Awaitable, Callable, Mapping
from typing import Any
from uuid import UUID, uuid4

import aiohttp
from pydantic import SecretStr

from botgate_reporter.enums import EnumFailureClass
from botgate_reporter.models import ModelRetryOutcome
from botgate_reporter.utils import (
    get_message,
    sanitize_error_message,
    sanitize_error_string,
)

logger = logging.getLogger(__name__)

REPORTER_VERSION = "1.0.0"

_DEFAULT_RETRY_ATTEMPTS: int = 3
_DEFAULT_RETRY_DELAY_SECONDS: float = 5.0
_DEFAULT_TIMEOUT_SECONDS: float = 10.0

_POLICY_REJECTION_STATUSES: dict[int, EnumFailureClass] = {
    429: EnumFailureClass.RATE_LIMITED,
    403: EnumFailureClass.FORBIDDEN,
}

ResponseHook = Callable[[Any], Awaitable[object]]
RejectionHook = Callable[[], Awaitable[object]]


class HandlerBotGateTransport:
    """Retrying HTTP transport for the BotGate API.

    Attributes:
        _base_url: API base URL without trailing slash
        _api_key: Bearer credential (SecretStr, never logged)
        _http_session: Optional shared aiohttp session
        _retry_attempts: Total attempts per retrying send
        _retry_delay: Delay before the second attempt, in seconds
        _backoff_multiplier: Delay multiplier per further attempt
        _timeout: Per-attempt timeout in seconds
        _failed_attempts: Consecutive exhausted sends

    Example:
        >>> transport = HandlerBotGateTransport(
        ...     base_url="https://api.botgate.com",
        ...     api_key=SecretStr("bg_live_xxx"),
        ...     bot_id="123456789012345678",
        ... )
        >>> # outcome = await transport.send("POST", "/api/v1/bots/stats", payload)
        >>> # outcome.success, outcome.attempts
    """

    def __init__(
        self,
        base_url: str,
        api_key: SecretStr | str,
        bot_id: str,
        *,
        retry_attempts: int = _DEFAULT_RETRY_ATTEMPTS,
        retry_delay_seconds: float = _DEFAULT_RETRY_DELAY_SECONDS,
        retry_backoff_multiplier: float = 1.0,
        timeout: float = _DEFAULT_TIMEOUT_SECONDS,
        http_session: aiohttp.ClientSession | None = None,
        response_hook: ResponseHook | None = None,
        rejection_hook: RejectionHook | None = None,
        locale: str = "en",
        sleep: Callable[[float], Awaitable[None]] | None = None,
    ) -> None:
        """Initialize the transport.

        Args:
            base_url: BotGate API base URL.
            api_key: BotGate API key sent as a bearer token.
            bot_id: Bot id, used in the User-Agent header.
            retry_attempts: Total attempts for transient failures (>= 1).
            retry_delay_seconds: Delay between the first and second attempt.
            retry_backoff_multiplier: 1.0 keeps the delay fixed; larger values
                grow it exponentially.
            timeout: Per-attempt timeout in seconds.
            http_session: Optional shared aiohttp ClientSession. When absent a
                session is created lazily and closed by ``close()``.
            response_hook: Awaited with the body of every 2xx response.
            rejection_hook: Awaited after a 429/403 rejection.
            locale: Locale for log messages.
            sleep: Delay function, ``asyncio.sleep`` by default.

        Raises:
            ValueError: If retry_attempts < 1 or a delay is negative.
        """
        if retry_attempts < 1:
            raise ValueError(f"retry_attempts must be >= 1, got {retry_attempts}")
        if retry_delay_seconds < 0:
            raise ValueError(
                f"retry_delay_seconds must be >= 0, got {retry_delay_seconds}"
            )

        self._base_url = base_url.rstrip("/")
        self._api_key = api_key if isinstance(api_key, SecretStr) else SecretStr(api_key)
        self._bot_id = bot_id
        self._retry_attempts = retry_attempts
        self._retry_delay = retry_delay_seconds
        self._backoff_multiplier = retry_backoff_multiplier
        self._timeout = timeout
        self._http_session = http_session
        self._owned_session: aiohttp.ClientSession | None = None
        self._response_hook = response_hook
        self._rejection_hook = rejection_hook
        self._locale = locale
        self._sleep = sleep or asyncio.sleep
        self._failed_attempts = 0

    def __repr__(self) -> str:
        """Mask credentials to prevent accidental exposure in logs/tracebacks."""
        return f"<{type(self).__name__} base_url={self._base_url}>"

    @property
    def failed_attempts(self) -> int:
        """Consecutive sends that exhausted their retries."""
        return self._failed_attempts

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def headers(self) -> dict[str, str]:
        """Headers sent with every request."""
        return {
            "Authorization": f"Bearer {self._api_key.get_secret_value()}",
            "Content-Type": "application/json",
            "User-Agent": (
                f"BotGate-Stats-Reporter/{REPORTER_VERSION} (Bot: {self._bot_id})"
            ),
        }

    def set_response_hook(self, hook: ResponseHook | None) -> None:
        self._response_hook = hook

    def set_rejection_hook(self, hook: RejectionHook | None) -> None:
        self._rejection_hook = hook

    def retry_delay_for(self, attempt: int) -> float:
        """Delay to wait after failed attempt number ``attempt`` (1-based)."""
        return self._retry_delay * self._backoff_multiplier ** (attempt - 1)

    async def send(
        self,
        method: str,
        path: str,
        payload: Mapping[str, object] | None = None,
        *,
        params: Mapping[str, str | int] | None = None,
        retry: bool = True,
        reverify_on_rejection: bool = True,
    ) -> ModelRetryOutcome:
        """Send one API request with retry and policy-aware short circuit.

        Args:
            method: HTTP method.
            path: API path below the base URL (e.g. "/api/v1/bots/stats").
            payload: JSON body, None for an empty body.
            params: Query string parameters.
            retry: False makes a single attempt that never touches the
                failure counter (used by policy verification).
            reverify_on_rejection: Await the rejection hook on 429/403.

        Returns:
            ModelRetryOutcome. This method does not raise for HTTP or network
            failures.
        """
        start_time = time.perf_counter()
        correlation_id = uuid4()
        max_attempts = self._retry_attempts if retry else 1
        url = f"{self._base_url}{path}"
        session = self._get_session()

        last_status: int | None = None
        last_error: str | None = None
        last_body: Any = None

        for attempt in range(1, max_attempts + 1):
            try:
                async with session.request(
                    method,
                    url,
                    json=dict(payload) if payload is not None else None,
                    params=dict(params) if params is not None else None,
                    headers=self.headers,
                    timeout=aiohttp.ClientTimeout(total=self._timeout),
                ) as response:
                    status = response.status
                    body = await self._read_body(response)

            except TimeoutError:
                last_status = None
                last_body = None
                last_error = "Request timeout"
                logger.warning(
                    "BotGate request timeout",
                    extra={
                        "correlation_id": str(correlation_id),
                        "path": path,
                        "timeout_seconds": self._timeout,
                        "attempt": attempt,
                    },
                )

            except aiohttp.ClientError as e:
                last_status = None
                last_body = None
                last_error = sanitize_error_message(e)
                logger.warning(
                    "BotGate request client error",
                    extra={
                        "correlation_id": str(correlation_id),
                        "path": path,
                        "attempt": attempt,
                        "error_type": type(e).__name__,
                    },
                )

            else:
                if 200 <= status < 300:
                    return await self._on_success(
                        path, status, body, attempt, start_time, correlation_id
                    )

                failure_class = _POLICY_REJECTION_STATUSES.get(status)
                if failure_class is not None:
                    return await self._on_policy_rejection(
                        path,
                        status,
                        body,
                        failure_class,
                        attempt,
                        start_time,
                        correlation_id,
                        reverify=reverify_on_rejection,
                    )

                last_status = status
                last_body = body
                last_error = _describe_http_error(status, body)
                logger.warning(
                    "BotGate request failed (retryable)",
                    extra={
                        "correlation_id": str(correlation_id),
                        "path": path,
                        "status_code": status,
                        "attempt": attempt,
                    },
                )

            if attempt < max_attempts:
                delay = self.retry_delay_for(attempt)
                logger.info(
                    get_message(
                        "send_retry",
                        self._locale,
                        attempt=attempt,
                        max_attempts=max_attempts,
                        delay=round(delay, 2),
                    ),
                    extra={"correlation_id": str(correlation_id), "path": path},
                )
                await self._sleep(delay)

        if retry:
            self._failed_attempts += 1

        duration_ms = (time.perf_counter() - start_time) * 1000
        logger.error(
            get_message("send_exhausted", self._locale, max_attempts=max_attempts),
            extra={
                "correlation_id": str(correlation_id),
                "path": path,
                "status_code": last_status,
                "error": last_error,
                "failed_attempts": self._failed_attempts,
            },
        )
        return ModelRetryOutcome(
            success=False,
            data=last_body,
            status_code=last_status,
            failure_class=EnumFailureClass.TRANSIENT,
            error=last_error,
            attempts=max_attempts,
            duration_ms=duration_ms,
            correlation_id=correlation_id,
        )

    async def _on_success(
        self,
        path: str,
        status: int,
        body: Any,
        attempt: int,
        start_time: float,
        correlation_id: UUID,
    ) -> ModelRetryOutcome:
        self._failed_attempts = 0
        logger.debug(
            "BotGate request succeeded",
            extra={
                "correlation_id": str(correlation_id),
                "path": path,
                "status_code": status,
                "attempt": attempt,
            },
        )

        if self._response_hook is not None:
            try:
                await self._response_hook(body)
            except Exception as e:
                logger.error(  # noqa: G201
                    "Response hook failed",
                    extra={
                        "correlation_id": str(correlation_id),
                        "error_type": type(e).__name__,
                        "error_message": sanitize_error_message(e),
                    },
                    exc_info=True,
                )

        return ModelRetryOutcome(
            success=True,
            data=body,
            status_code=status,
            attempts=attempt,
            duration_ms=(time.perf_counter() - start_time) * 1000,
            correlation_id=correlation_id,
        )

    async def _on_policy_rejection(
        self,
        path: str,
        status: int,
        body: Any,
        failure_class: EnumFailureClass,
        attempt: int,
        start_time: float,
        correlation_id: UUID,
        *,
        reverify: bool,
    ) -> ModelRetryOutcome:
        logger.warning(
            get_message("policy_rejected", self._locale, status=status),
            extra={
                "correlation_id": str(correlation_id),
                "path": path,
                "failure_class": failure_class.value,
            },
        )

        if reverify and self._rejection_hook is not None:
            try:
                await self._rejection_hook()
            except Exception as e:
                logger.error(  # noqa: G201
                    "Policy re-verification hook failed",
                    extra={
                        "correlation_id": str(correlation_id),
                        "error_type": type(e).__name__,
                        "error_message": sanitize_error_message(e),
                    },
                    exc_info=True,
                )

        return ModelRetryOutcome(
            success=False,
            data=body,
            status_code=status,
            failure_class=failure_class,
            error=_describe_http_error(status, body),
            attempts=attempt,
            duration_ms=(time.perf_counter() - start_time) * 1000,
            correlation_id=correlation_id,
        )

    def _get_session(self) -> aiohttp.ClientSession:
        if self._http_session is not None:
            return self._http_session
        if self._owned_session is None or self._owned_session.closed:
            self._owned_session = aiohttp.ClientSession()
        return self._owned_session

    @staticmethod
    async def _read_body(response: aiohttp.ClientResponse) -> Any:
        """Parse a JSON body, falling back to text with undecodable bytes replaced."""
        try:
            return await response.json(content_type=None)
        except (json.JSONDecodeError, aiohttp.ContentTypeError, ValueError):
            return await response.text(errors="replace")

    async def close(self) -> None:
        """Close the session created by this transport, if any."""
        if self._owned_session is not None and not self._owned_session.closed:
            await self._owned_session.close()
        self._owned_session = None


def _describe_http_error(status: int, body: Any) -> str:
    """Build a sanitized error string from an error response body."""
    detail: object = None
    if isinstance(body, dict):
        detail = body.get("message") or body.get("error")
    elif isinstance(body, str) and body:
        detail = body[:100]
    if detail:
        return f"HTTP {status}: {sanitize_error_string(str(detail), max_length=200)}"
    return f"HTTP {status}"


__all__: list[str] = [
    "REPORTER_VERSION",
    "HandlerBotGateTransport",
    "RejectionHook",
    "ResponseHook",
]
