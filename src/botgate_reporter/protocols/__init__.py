# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Protocols for the external collaborators of the reporter."""

from botgate_reporter.protocols.protocol_bot_client import (
    ProtocolBotClient,
    ProtocolGuild,
    ProtocolShardTopology,
)

__all__: list[str] = [
    "ProtocolBotClient",
    "ProtocolGuild",
    "ProtocolShardTopology",
]
