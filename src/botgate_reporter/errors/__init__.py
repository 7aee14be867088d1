# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""BotGate Reporter Errors Module.

Exports:
    ModelReporterErrorContext: Configuration model for bundled error context
    ReporterError: Base reporter error class
    ReporterConfigurationError: Missing/invalid configuration (fatal, constructor)
    ClientNotReadyError: Reporting attempted before client readiness
    AutoConfigurationError: Webhook URL detection failure (never escapes)

Error Sanitization Guidelines:
    NEVER include in error messages or context:
        - The BotGate API key or bearer header
        - Webhook secrets generated during auto-registration
        - Discord bot tokens

    SAFE to include:
        - Bot ids, endpoint paths, HTTP status codes
        - Correlation IDs, retry counts and timeout values
"""

from botgate_reporter.errors.model_reporter_error_context import (
    ModelReporterErrorContext,
)
from botgate_reporter.errors.reporter_errors import (
    AutoConfigurationError,
    ClientNotReadyError,
    ReporterConfigurationError,
    ReporterError,
)

__all__: list[str] = [
    "ModelReporterErrorContext",
    "ReporterError",
    "ReporterConfigurationError",
    "ClientNotReadyError",
    "AutoConfigurationError",
]
