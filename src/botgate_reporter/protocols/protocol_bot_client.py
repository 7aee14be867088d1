# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Bot Client Protocols.

Minimal view of the host bot library (discord.py or a compatible client)
needed to collect metrics and resolve leadership. Adapters only need the
members below; no inheritance is required.

Sharding Model:
    A client running under a cross-process sharding manager exposes a
    ``shard`` topology: the shard ids hosted by this process, the total
    shard count and a broadcast primitive evaluating a function on every
    shard process's client. Unsharded clients expose ``shard = None``.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Sequence
from typing import Protocol, TypeVar, runtime_checkable

T = TypeVar("T")


@runtime_checkable
class ProtocolGuild(Protocol):
    """A guild (server) in the client cache."""

    @property
    def member_count(self) -> int | None:
        """Member count, None when the library has not received it yet."""
        ...


@runtime_checkable
class ProtocolShardTopology(Protocol):
    """Cross-process shard topology of the host client."""

    @property
    def ids(self) -> Sequence[int]:
        """Shard ids hosted by this process."""
        ...

    @property
    def count(self) -> int:
        """Total shard count across every process."""
        ...

    def broadcast_eval(
        self, func: Callable[[ProtocolBotClient], T]
    ) -> Awaitable[Sequence[T]]:
        """Evaluate ``func`` on every shard process's client.

        Returns one result per shard process. Implementations may return
        fewer results than processes when a process does not answer. The
        number of results is unrelated to ``count``, since a process may host
        several shards.
        """
        ...


@runtime_checkable
class ProtocolBotClient(Protocol):
    """Host bot client as seen by the reporter."""

    @property
    def guilds(self) -> Sequence[ProtocolGuild]:
        """Guilds cached by this process."""
        ...

    @property
    def shard(self) -> ProtocolShardTopology | None:
        """Shard topology, None when the bot is not sharded."""
        ...

    def is_ready(self) -> bool:
        """Whether the client finished its initial connection."""
        ...

    async def wait_until_ready(self) -> None:
        """Suspend until the client is ready."""
        ...


__all__: list[str] = [
    "ProtocolBotClient",
    "ProtocolGuild",
    "ProtocolShardTopology",
]
