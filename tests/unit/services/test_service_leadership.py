# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Unit tests for reporting leadership resolution."""

from __future__ import annotations

import pytest

from botgate_reporter.services.service_leadership import (
    is_leader_shard,
    resolve_leadership,
)
from tests.helpers import FakeShardTopology


class TestIsLeaderShard:
    @pytest.mark.parametrize(
        ("shard_ids", "expected"),
        [
            (None, True),
            ([], True),
            ([0], True),
            ([3, 0, 1], True),
            ([1], False),
            ([4, 5, 6], False),
        ],
    )
    def test_lowest_id_zero_leads(
        self, shard_ids: list[int] | None, expected: bool
    ) -> None:
        assert is_leader_shard(shard_ids) is expected


class TestResolveLeadership:
    def test_unsharded_client_leads(self) -> None:
        assert resolve_leadership(None) is True

    def test_shard_zero_leads(self) -> None:
        assert resolve_leadership(FakeShardTopology(ids=[0, 1], count=4)) is True

    def test_other_shards_follow(self) -> None:
        assert resolve_leadership(FakeShardTopology(ids=[2, 3], count=4)) is False
