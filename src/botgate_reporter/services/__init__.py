# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""BotGate Reporter Services.

Exports:
    MetricsCollector: Collects server/user/shard counts across shards
    PolicySynchronizer: Keeps the policy state in line with API responses
    ReportScheduler: Owns the stats and heartbeat timers
    is_leader_shard: Leadership rule over hosted shard ids
    resolve_leadership: Leadership decision for a client topology
"""

from botgate_reporter.services.service_leadership import (
    is_leader_shard,
    resolve_leadership,
)
from botgate_reporter.services.service_metrics_collector import MetricsCollector
from botgate_reporter.services.service_policy_sync import (
    PolicySynchronizer,
    TierInfo,
    extract_tier_info,
)
from botgate_reporter.services.service_report_scheduler import ReportScheduler

__all__: list[str] = [
    "MetricsCollector",
    "PolicySynchronizer",
    "ReportScheduler",
    "TierInfo",
    "extract_tier_info",
    "is_leader_shard",
    "resolve_leadership",
]
