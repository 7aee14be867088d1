# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Policy state model: the server-declared tier and what it permits."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from botgate_reporter.enums import EnumServiceTier


def is_heartbeat_tier(tier: str | None) -> bool:
    """Return True when ``tier`` is the heartbeat-eligible top tier."""
    return tier is not None and tier.strip().lower() == EnumServiceTier.top_tier().value


class ModelPolicyState(BaseModel):
    """Currently known policy.

    Instances are immutable; the policy synchronizer replaces the stored
    instance whenever the tier changes.

    Attributes:
        tier: Tier name as declared by the server, None until first seen
        update_interval_seconds: Interval between automatic stats updates
        heartbeat_enabled: True iff ``tier`` is the top tier
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
    )

    tier: str | None = Field(default=None)
    update_interval_seconds: float = Field(gt=0.0)
    heartbeat_enabled: bool = Field(default=False)

    @property
    def update_interval_minutes(self) -> float:
        return self.update_interval_seconds / 60

    @classmethod
    def initial(cls, update_interval_seconds: float) -> ModelPolicyState:
        """Empty policy used before any server response has been seen."""
        return cls(update_interval_seconds=update_interval_seconds)

    def with_tier(
        self, tier: str, update_interval_seconds: float | None = None
    ) -> ModelPolicyState:
        """Return the policy derived from a newly declared tier."""
        return ModelPolicyState(
            tier=tier,
            update_interval_seconds=(
                update_interval_seconds
                if update_interval_seconds is not None
                else self.update_interval_seconds
            ),
            heartbeat_enabled=is_heartbeat_tier(tier),
        )


__all__: list[str] = ["ModelPolicyState", "is_heartbeat_tier"]
