# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Unit tests for error sanitization."""

from __future__ import annotations

import pytest

from botgate_reporter.utils import sanitize_error_message, sanitize_error_string


class TestSanitizeErrorString:
    @pytest.mark.parametrize(
        "raw",
        [
            "Authorization: Bearer bg_live_xxx",
            "invalid api_key",
            "token expired",
            "bad password for user",
        ],
    )
    def test_sensitive_strings_redacted(self, raw: str) -> None:
        sanitized = sanitize_error_string(raw)
        assert "REDACTED" in sanitized
        assert raw not in sanitized

    def test_plain_string_kept(self) -> None:
        assert sanitize_error_string("connection reset") == "connection reset"

    def test_long_string_truncated(self) -> None:
        sanitized = sanitize_error_string("x" * 50, max_length=10)
        assert sanitized == "x" * 10 + "... [truncated]"

    def test_empty(self) -> None:
        assert sanitize_error_string("") == ""


class TestSanitizeErrorMessage:
    def test_includes_type(self) -> None:
        assert sanitize_error_message(ValueError("bad port")) == "ValueError: bad port"

    def test_type_only_without_message(self) -> None:
        assert sanitize_error_message(TimeoutError()) == "TimeoutError"

    def test_secret_in_exception_redacted(self) -> None:
        message = sanitize_error_message(RuntimeError("secret=abc"))
        assert message.startswith("RuntimeError: ")
        assert "abc" not in message
