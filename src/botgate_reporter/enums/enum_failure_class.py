# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Failure classification for outbound BotGate API calls."""

from enum import Enum


class EnumFailureClass(str, Enum):
    """Classification of a non-successful send.

    Attributes:
        RATE_LIMITED: HTTP 429, never retried inline, triggers policy re-sync
        FORBIDDEN: HTTP 403 (policy mismatch), handled like RATE_LIMITED
        TRANSIENT: Network errors, timeouts and every other status, retried
        NOT_LEADER: Send suppressed because this worker is not the leader
    """

    RATE_LIMITED = "rate_limited"
    FORBIDDEN = "forbidden"
    TRANSIENT = "transient"
    NOT_LEADER = "not_leader"

    @property
    def is_policy_rejection(self) -> bool:
        """Whether this class re-syncs policy instead of retrying."""
        return self in (EnumFailureClass.RATE_LIMITED, EnumFailureClass.FORBIDDEN)


__all__ = ["EnumFailureClass"]
