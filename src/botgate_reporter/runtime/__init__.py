# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""BotGate Reporter Runtime.

Inbound side of the reporter: the event emitter, the vote webhook listener
and webhook auto-registration.
"""

from botgate_reporter.runtime.event_emitter import EventHandler, ReporterEventEmitter
from botgate_reporter.runtime.webhook_auto_registration import (
    WebhookAutoRegistrar,
    detect_environment,
)
from botgate_reporter.runtime.webhook_server import WebhookServer

__all__: list[str] = [
    "EventHandler",
    "ReporterEventEmitter",
    "WebhookAutoRegistrar",
    "WebhookServer",
    "detect_environment",
]
