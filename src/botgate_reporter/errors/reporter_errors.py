# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Reporter Error Classes.

Error Hierarchy:
    ReporterError (base)
    ├── ReporterConfigurationError
    ├── ClientNotReadyError
    └── AutoConfigurationError

Only configuration and not-ready errors ever reach callers. Transport,
policy-rejection and auto-registration failures are returned as result
models; AutoConfigurationError is raised and caught inside the
auto-registration boundary.
"""

from typing import Optional
from uuid import UUID

from botgate_reporter.errors.model_reporter_error_context import (
    ModelReporterErrorContext,
)


class ReporterError(Exception):
    """Base error class for the BotGate reporter.

    Structured Fields (via ModelReporterErrorContext):
        operation: Operation being performed
        target_name: Target resource/endpoint name
        correlation_id: Correlation ID for tracking

    Example:
        >>> context = ModelReporterErrorContext(operation="send_stats")
        >>> raise ReporterError("Operation failed", context=context)
    """

    def __init__(
        self,
        message: str,
        context: Optional[ModelReporterErrorContext] = None,
        **extra_context: object,
    ) -> None:
        """Initialize ReporterError with structured fields.

        Args:
            message: Human-readable error message
            context: Bundled error context (operation, target, correlation id)
            **extra_context: Additional context information
        """
        super().__init__(message)
        self.message = message
        self.context: dict[str, object] = dict(extra_context)
        self.correlation_id: Optional[UUID] = None
        if context is not None:
            if context.operation is not None:
                self.context["operation"] = context.operation
            if context.target_name is not None:
                self.context["target_name"] = context.target_name
            self.correlation_id = context.correlation_id

    def __str__(self) -> str:
        if self.correlation_id is not None:
            return f"{self.message} (correlation_id={self.correlation_id})"
        return self.message


class ReporterConfigurationError(ReporterError):
    """Raised at construction when configuration is missing or invalid.

    Used for a missing bot id or API key and for values that fail
    validation (negative intervals, zero retry attempts, bad URLs).

    Example:
        >>> raise ReporterConfigurationError(
        ...     "[BotGate Reporter] botId is required",
        ...     field="bot_id",
        ... )
    """


class ClientNotReadyError(ReporterError):
    """Raised when reporting is attempted before the bot client is ready."""


class AutoConfigurationError(ReporterError):
    """Raised when the webhook URL cannot be determined for an environment.

    Never propagates past the auto-registration boundary.
    """


__all__ = [
    "ReporterError",
    "ReporterConfigurationError",
    "ClientNotReadyError",
    "AutoConfigurationError",
]
