# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Test helpers for botgate_reporter tests."""

from tests.helpers.fake_bot_client import FakeBotClient, FakeGuild, FakeShardTopology
from tests.helpers.mock_http import make_response, make_session

__all__ = [
    "FakeBotClient",
    "FakeGuild",
    "FakeShardTopology",
    "make_response",
    "make_session",
]
