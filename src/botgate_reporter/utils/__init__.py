# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Utility modules for the BotGate reporter.

    - util_error_sanitization: Redaction of credentials from error strings
    - util_logging: Logging setup for applications and the debug flag
    - util_messages: Localized log message catalog
"""

from botgate_reporter.utils.util_error_sanitization import (
    SENSITIVE_PATTERNS,
    sanitize_error_message,
    sanitize_error_string,
)
from botgate_reporter.utils.util_logging import (
    configure_logging,
    enable_debug_logging,
)
from botgate_reporter.utils.util_messages import get_message, resolve_locale

__all__: list[str] = [
    "SENSITIVE_PATTERNS",
    "sanitize_error_message",
    "sanitize_error_string",
    "configure_logging",
    "enable_debug_logging",
    "get_message",
    "resolve_locale",
]
