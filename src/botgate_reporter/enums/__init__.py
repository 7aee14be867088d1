# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""BotGate Reporter Enumerations Module.

Exports:
    EnumDeploymentEnvironment: Environments recognised by webhook auto-registration
    EnumFailureClass: Classification of failed API sends
    EnumLocale: Locales with a log message catalog
    EnumReporterEvent: Event names published to subscribers (vote, tier_changed)
    EnumSchedulerState: Report scheduler lifecycle states
    EnumServiceTier: Known BotGate service tiers
"""

from botgate_reporter.enums.enum_deployment_environment import (
    EnumDeploymentEnvironment,
)
from botgate_reporter.enums.enum_failure_class import EnumFailureClass
from botgate_reporter.enums.enum_locale import EnumLocale
from botgate_reporter.enums.enum_reporter_event import EnumReporterEvent
from botgate_reporter.enums.enum_scheduler_state import EnumSchedulerState
from botgate_reporter.enums.enum_service_tier import EnumServiceTier

__all__: list[str] = [
    "EnumDeploymentEnvironment",
    "EnumFailureClass",
    "EnumLocale",
    "EnumReporterEvent",
    "EnumSchedulerState",
    "EnumServiceTier",
]
