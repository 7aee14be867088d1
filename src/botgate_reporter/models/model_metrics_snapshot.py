# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Metrics snapshot model sent to ``POST /api/v1/bots/stats``."""

from __future__ import annotations

import time

from pydantic import BaseModel, ConfigDict, Field


def _now_ms() -> int:
    return int(time.time() * 1000)


class ModelMetricsSnapshot(BaseModel):
    """Point-in-time bot size metrics.

    A snapshot is built fresh for every send and never cached. Serialize with
    ``model_dump(by_alias=True)`` to get the wire shape
    ``{botId, serverCount, userCount, shardCount, timestamp}``.

    Attributes:
        bot_id: Discord bot id
        server_count: Guilds across every shard
        user_count: Sum of guild member counts across every shard
        shard_count: Total shards reported by the topology (1 when unsharded)
        timestamp: Capture time in epoch milliseconds
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        populate_by_name=True,
    )

    bot_id: str = Field(alias="botId", min_length=1)
    server_count: int = Field(alias="serverCount", ge=0)
    user_count: int = Field(alias="userCount", ge=0)
    shard_count: int = Field(default=1, alias="shardCount", ge=1)
    timestamp: int = Field(default_factory=_now_ms)

    def to_payload(self) -> dict[str, object]:
        """Return the JSON body for the stats endpoint."""
        return self.model_dump(by_alias=True)


__all__: list[str] = ["ModelMetricsSnapshot"]
