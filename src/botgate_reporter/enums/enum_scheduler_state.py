# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Report scheduler lifecycle states."""

from enum import Enum


class EnumSchedulerState(str, Enum):
    """Scheduler lifecycle: IDLE -> RUNNING -> IDLE."""

    IDLE = "idle"
    RUNNING = "running"


__all__ = ["EnumSchedulerState"]
