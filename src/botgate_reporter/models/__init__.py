# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""BotGate Reporter Models.

Exports:
    ModelBotInfo: Typed bot listing returned by the platform
    ModelBotStats: Stats block of a bot listing
    ModelMetricsSnapshot: Metrics sent to the stats endpoint
    ModelPolicyState: Server-declared tier, interval and heartbeat eligibility
    ModelReporterConfig: Reporter configuration
    ModelRetryOutcome: Result of one outbound send
    ModelWebhookRegistrationResult: Result of webhook auto-registration
"""

from botgate_reporter.models.model_bot_info import ModelBotInfo, ModelBotStats
from botgate_reporter.models.model_metrics_snapshot import ModelMetricsSnapshot
from botgate_reporter.models.model_policy_state import (
    ModelPolicyState,
    is_heartbeat_tier,
)
from botgate_reporter.models.model_reporter_config import ModelReporterConfig
from botgate_reporter.models.model_retry_outcome import ModelRetryOutcome
from botgate_reporter.models.model_webhook_registration_result import (
    ModelWebhookRegistrationResult,
)

__all__: list[str] = [
    "ModelBotInfo",
    "ModelBotStats",
    "ModelMetricsSnapshot",
    "ModelPolicyState",
    "ModelReporterConfig",
    "ModelRetryOutcome",
    "ModelWebhookRegistrationResult",
    "is_heartbeat_tier",
]
