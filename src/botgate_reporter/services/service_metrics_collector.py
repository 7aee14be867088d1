# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Metrics collection for single-process and sharded bots.

Single process:
    Counts come straight from the client's guild cache.

Sharded:
    ``count_local_guilds`` is broadcast to every shard process through the
    topology's ``broadcast_eval`` and the ``(servers, users)`` pairs are
    summed. The fan-out is bounded by ``broadcast_timeout_seconds``. Results
    are per process, not per shard, so ``shard.count`` is never compared with
    the number of results: a process that does not answer contributes zero,
    and a result that is not a pair of non-negative integers is skipped and
    logged. If the broadcast as a whole fails or times out, this process's
    own counts are reported with a warning rather than blocking the schedule.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from uuid import uuid4

from botgate_reporter.errors import ClientNotReadyError, ModelReporterErrorContext
from botgate_reporter.models import ModelMetricsSnapshot
from botgate_reporter.protocols import ProtocolBotClient, ProtocolShardTopology
from botgate_reporter.utils import sanitize_error_message

logger = logging.getLogger(__name__)

DEFAULT_BROADCAST_TIMEOUT_SECONDS = 10.0


def count_local_guilds(client: ProtocolBotClient) -> tuple[int, int]:
    """Return ``(server_count, user_count)`` for the guilds cached by ``client``.

    Module level so sharding managers can ship it to other processes.
    """
    guilds = list(client.guilds)
    return len(guilds), sum(guild.member_count or 0 for guild in guilds)


def _coerce_counts(result: object) -> tuple[int, int] | None:
    """Validate one shard's broadcast result, None when unusable."""
    if isinstance(result, (str, bytes)) or not isinstance(result, Sequence):
        return None
    if len(result) != 2:
        return None
    servers, users = result
    if isinstance(servers, bool) or isinstance(users, bool):
        return None
    if not isinstance(servers, int) or not isinstance(users, int):
        return None
    if servers < 0 or users < 0:
        return None
    return servers, users


class MetricsCollector:
    """Builds a fresh ModelMetricsSnapshot for every send.

    Attributes:
        bot_id: Bot id stamped on every snapshot
        broadcast_timeout_seconds: Bound on the cross-shard fan-out
    """

    def __init__(
        self,
        bot_id: str,
        broadcast_timeout_seconds: float = DEFAULT_BROADCAST_TIMEOUT_SECONDS,
    ) -> None:
        self.bot_id = bot_id
        self.broadcast_timeout_seconds = broadcast_timeout_seconds

    async def collect(self, client: ProtocolBotClient | None) -> ModelMetricsSnapshot:
        """Collect current metrics from ``client``.

        Raises:
            ClientNotReadyError: If there is no client or it is not ready yet.
        """
        if client is None or not client.is_ready():
            raise ClientNotReadyError(
                "[BotGate Reporter] Discord client is not ready",
                context=ModelReporterErrorContext(
                    operation="collect_metrics",
                    target_name="bot-client",
                    correlation_id=uuid4(),
                ),
            )

        shard = client.shard
        if shard is None:
            server_count, user_count = count_local_guilds(client)
            shard_count = 1
        else:
            server_count, user_count = await self._aggregate(client, shard)
            shard_count = max(shard.count, 1)

        snapshot = ModelMetricsSnapshot(
            bot_id=self.bot_id,
            server_count=server_count,
            user_count=user_count,
            shard_count=shard_count,
        )
        logger.debug(
            "Collected metrics snapshot",
            extra={
                "servers": snapshot.server_count,
                "users": snapshot.user_count,
                "shards": snapshot.shard_count,
            },
        )
        return snapshot

    async def _aggregate(
        self, client: ProtocolBotClient, shard: ProtocolShardTopology
    ) -> tuple[int, int]:
        """Sum ``(servers, users)`` across every shard process."""
        try:
            results = await asyncio.wait_for(
                shard.broadcast_eval(count_local_guilds),
                timeout=self.broadcast_timeout_seconds,
            )
        except TimeoutError:
            logger.warning(
                "Shard broadcast timed out, reporting local counts only",
                extra={"timeout_seconds": self.broadcast_timeout_seconds},
            )
            return count_local_guilds(client)
        except Exception as e:
            logger.warning(
                "Shard broadcast failed, reporting local counts only",
                extra={
                    "error_type": type(e).__name__,
                    "error": sanitize_error_message(e),
                },
            )
            return count_local_guilds(client)

        server_total = 0
        user_total = 0
        answered = 0
        for index, result in enumerate(results):
            counts = _coerce_counts(result)
            if counts is None:
                logger.warning(
                    "Ignoring malformed shard broadcast result",
                    extra={"result_index": index, "result_type": type(result).__name__},
                )
                continue
            server_total += counts[0]
            user_total += counts[1]
            answered += 1

        if results and answered == 0:
            logger.warning(
                "No shard broadcast result was usable, reporting zero counts",
                extra={"received": len(results)},
            )

        logger.debug(
            "Aggregated shard metrics",
            extra={
                "answered": answered,
                "received": len(results),
                "shard_count": shard.count,
            },
        )
        return server_total, user_total


__all__: list[str] = [
    "DEFAULT_BROADCAST_TIMEOUT_SECONDS",
    "MetricsCollector",
    "count_local_guilds",
]
