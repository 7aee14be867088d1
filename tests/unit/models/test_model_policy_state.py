# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Unit tests for ModelPolicyState and ModelRetryOutcome helpers."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from botgate_reporter.enums import EnumFailureClass
from botgate_reporter.models import ModelPolicyState, ModelRetryOutcome
from botgate_reporter.models.model_policy_state import is_heartbeat_tier


class TestModelPolicyState:
    @pytest.mark.parametrize(
        ("tier", "expected"),
        [
            ("business", True),
            ("Business", True),
            ("pro", False),
            ("free", False),
            ("enterprise", False),
            (None, False),
        ],
    )
    def test_heartbeat_only_for_top_tier(self, tier: str | None, expected: bool) -> None:
        assert is_heartbeat_tier(tier) is expected

    def test_with_tier_derives_heartbeat(self) -> None:
        state = ModelPolicyState.initial(1800.0).with_tier("business", 300.0)

        assert state.tier == "business"
        assert state.update_interval_seconds == 300.0
        assert state.update_interval_minutes == 5.0
        assert state.heartbeat_enabled is True

    def test_with_tier_keeps_interval(self) -> None:
        state = ModelPolicyState.initial(1800.0).with_tier("pro")
        assert state.update_interval_seconds == 1800.0

    def test_interval_must_be_positive(self) -> None:
        with pytest.raises(ValidationError):
            ModelPolicyState(update_interval_seconds=0)


class TestModelRetryOutcome:
    @pytest.mark.parametrize(
        ("failure_class", "expected"),
        [
            (EnumFailureClass.RATE_LIMITED, True),
            (EnumFailureClass.FORBIDDEN, True),
            (EnumFailureClass.TRANSIENT, False),
            (EnumFailureClass.NOT_LEADER, False),
            (None, False),
        ],
    )
    def test_is_policy_rejection(
        self, failure_class: EnumFailureClass | None, expected: bool
    ) -> None:
        outcome = ModelRetryOutcome(success=False, failure_class=failure_class)
        assert outcome.is_policy_rejection is expected

    def test_not_leader(self) -> None:
        outcome = ModelRetryOutcome.not_leader()
        assert outcome.success is False
        assert outcome.failure_class == EnumFailureClass.NOT_LEADER
        assert outcome.attempts == 0
