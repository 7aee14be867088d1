# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""BotGate Reporter Handlers.

Exports:
    HandlerBotGateTransport: Retrying HTTP transport for the BotGate API
"""

from botgate_reporter.handlers.handler_botgate_transport import (
    REPORTER_VERSION,
    HandlerBotGateTransport,
)

__all__: list[str] = ["REPORTER_VERSION", "HandlerBotGateTransport"]
