# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""BotGate Stats Reporter.

Automatic server, user and shard count reporting for Discord bots listed on
BotGate, with tier-aware update intervals, business-tier heartbeats and an
optional vote webhook listener.
"""

from botgate_reporter.enums import EnumFailureClass, EnumReporterEvent, EnumServiceTier
from botgate_reporter.errors import (
    AutoConfigurationError,
    ClientNotReadyError,
    ReporterConfigurationError,
    ReporterError,
)
from botgate_reporter.handlers import REPORTER_VERSION
from botgate_reporter.models import (
    ModelPolicyState,
    ModelReporterConfig,
    ModelRetryOutcome,
    ModelWebhookRegistrationResult,
)
from botgate_reporter.reporter import BotGateReporter, create_reporter

__version__ = REPORTER_VERSION

__all__: list[str] = [
    "AutoConfigurationError",
    "BotGateReporter",
    "ClientNotReadyError",
    "EnumFailureClass",
    "EnumReporterEvent",
    "EnumServiceTier",
    "ModelPolicyState",
    "ModelReporterConfig",
    "ModelRetryOutcome",
    "ModelWebhookRegistrationResult",
    "ReporterConfigurationError",
    "ReporterError",
    "__version__",
    "create_reporter",
]
