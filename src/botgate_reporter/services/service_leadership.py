# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Reporting leadership resolution.

Every shard process of a bot runs its own reporter, but the platform must
receive one report per bot. The process hosting shard 0 is the leader; an
unsharded client is always the leader. Leadership is derived from the
topology on every readiness event and never stored.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from botgate_reporter.protocols import ProtocolShardTopology

logger = logging.getLogger(__name__)

LEADER_SHARD_ID = 0


def is_leader_shard(shard_ids: Sequence[int] | None) -> bool:
    """Return True when the lowest hosted shard id is 0 or there is no sharding."""
    if not shard_ids:
        return True
    return min(shard_ids) == LEADER_SHARD_ID


def resolve_leadership(shard: ProtocolShardTopology | None) -> bool:
    """Decide whether this process drives the report schedule.

    Args:
        shard: The client's shard topology, or None when unsharded.

    Returns:
        True for the leader, False for followers.
    """
    if shard is None:
        logger.debug("No shard topology, process is leader")
        return True

    shard_ids = list(shard.ids)
    leader = is_leader_shard(shard_ids)
    logger.info(
        "Resolved reporting leadership: %s",
        "leader" if leader else "follower",
        extra={"shard_ids": shard_ids, "shard_count": shard.count},
    )
    return leader


__all__: list[str] = ["LEADER_SHARD_ID", "is_leader_shard", "resolve_leadership"]
