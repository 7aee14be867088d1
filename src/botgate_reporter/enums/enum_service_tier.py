# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Service tier enumeration for BotGate policy handling."""

from __future__ import annotations

from enum import Enum


class EnumServiceTier(str, Enum):
    """Service tiers declared by the BotGate platform.

    The platform may introduce tiers this client does not know about, so
    policy state stores the raw tier name. Only ``BUSINESS`` has behavioural
    meaning on the client side: it is the top tier and the only one allowed
    to send heartbeats.

    Attributes:
        FREE: Default tier for new bots
        PRO: Paid tier with shorter update intervals
        BUSINESS: Top tier, heartbeat eligible
    """

    FREE = "free"
    PRO = "pro"
    BUSINESS = "business"

    @classmethod
    def top_tier(cls) -> EnumServiceTier:
        """Return the tier that enables heartbeats."""
        return cls.BUSINESS


__all__ = ["EnumServiceTier"]
