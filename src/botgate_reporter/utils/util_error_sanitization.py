# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Error message sanitization utilities.

Error strings from aiohttp can echo request headers or URLs. Before such a
string is logged or placed in a result model it is passed through these
helpers so the BotGate API key, bearer headers and webhook secrets never
leave the process.

Example:
    >>> from botgate_reporter.utils import sanitize_error_message
    >>> try:
    ...     raise ValueError("Rejected header Authorization: Bearer abc123")
    ... except Exception as e:
    ...     safe_msg = sanitize_error_message(e)
    >>> "abc123" not in safe_msg
    True
"""

from __future__ import annotations

# Checked case-insensitively; any match redacts the whole message.
SENSITIVE_PATTERNS: tuple[str, ...] = (
    "authorization",
    "bearer",
    "api_key",
    "apikey",
    "api-key",
    "token",
    "secret",
    "password",
    "credential",
)

_REDACTED = "[REDACTED - potentially sensitive data]"


def sanitize_error_string(error_str: str, max_length: int = 500) -> str:
    """Sanitize a raw error string for logs and result models.

    Args:
        error_str: The error string to sanitize
        max_length: Maximum length of the sanitized message (default 500)

    Returns:
        The original string, a truncated copy, or a redaction marker when a
        sensitive pattern is present.
    """
    if not error_str:
        return ""

    error_lower = error_str.lower()
    for pattern in SENSITIVE_PATTERNS:
        if pattern in error_lower:
            return _REDACTED

    if len(error_str) > max_length:
        return error_str[:max_length] + "... [truncated]"

    return error_str


def sanitize_error_message(exception: BaseException, max_length: int = 500) -> str:
    """Sanitize an exception for logs and result models.

    Args:
        exception: The exception to sanitize
        max_length: Maximum length of the message part (default 500)

    Returns:
        ``"{ExceptionType}: {sanitized_message}"``, or just the type name when
        the exception carries no message.
    """
    exception_type = type(exception).__name__
    message = sanitize_error_string(str(exception), max_length=max_length)
    if not message:
        return exception_type
    return f"{exception_type}: {message}"


__all__: list[str] = [
    "SENSITIVE_PATTERNS",
    "sanitize_error_message",
    "sanitize_error_string",
]
