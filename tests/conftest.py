# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Pytest configuration and shared fixtures for botgate_reporter tests."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest
from pydantic import SecretStr

from botgate_reporter.models import ModelReporterConfig

TEST_BOT_ID = "123456789012345678"
TEST_API_KEY = "bg_test_key_0123456789"


@pytest.fixture
def reporter_config() -> ModelReporterConfig:
    """Minimal valid reporter configuration."""
    return ModelReporterConfig(
        bot_id=TEST_BOT_ID,
        api_key=SecretStr(TEST_API_KEY),
        retry_delay_seconds=0.0,
    )


@pytest.fixture
def no_sleep() -> AsyncMock:
    """Replacement for asyncio.sleep in retry loops."""
    return AsyncMock(return_value=None)
