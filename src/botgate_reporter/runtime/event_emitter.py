# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Typed in-process event emitter for reporter subscribers.

Subscribers register a handler for one of the names in EnumReporterEvent
and receive every payload published under that name. Handlers may be plain
callables or coroutine functions. A failing handler is logged and does not
stop delivery to the remaining handlers.

Usage:
    ```python
    emitter = ReporterEventEmitter()

    async def on_vote(vote: dict[str, object]) -> None:
        print(f"Vote from {vote.get('user')}")

    unsubscribe = emitter.subscribe(EnumReporterEvent.VOTE, on_vote)
    await emitter.emit(EnumReporterEvent.VOTE, {"user": "123"})
    unsubscribe()
    ```
"""

from __future__ import annotations

import inspect
import logging
from collections import defaultdict
from collections.abc import Awaitable, Callable

from botgate_reporter.enums import EnumReporterEvent

logger = logging.getLogger(__name__)

EventHandler = Callable[[object], Awaitable[None] | None]


class ReporterEventEmitter:
    """Observer registry keyed by EnumReporterEvent."""

    def __init__(self) -> None:
        self._handlers: dict[EnumReporterEvent, list[EventHandler]] = defaultdict(list)

    def subscribe(
        self, event: EnumReporterEvent | str, handler: EventHandler
    ) -> Callable[[], None]:
        """Register ``handler`` for ``event`` and return an unsubscribe callable.

        Raises:
            ValueError: If ``event`` is not a known event name.
        """
        event_name = EnumReporterEvent(event)
        self._handlers[event_name].append(handler)
        logger.debug(
            "Subscribed handler",
            extra={"event": event_name.value, "handler": getattr(handler, "__name__", repr(handler))},
        )

        def unsubscribe() -> None:
            handlers = self._handlers.get(event_name, [])
            if handler in handlers:
                handlers.remove(handler)

        return unsubscribe

    def subscriber_count(self, event: EnumReporterEvent | str) -> int:
        """Number of handlers registered for ``event``."""
        return len(self._handlers.get(EnumReporterEvent(event), []))

    async def emit(self, event: EnumReporterEvent, payload: object) -> int:
        """Deliver ``payload`` to every handler of ``event``.

        Returns:
            The number of handlers that completed without raising.
        """
        delivered = 0
        for handler in list(self._handlers.get(event, [])):
            try:
                result = handler(payload)
                if inspect.isawaitable(result):
                    await result
                delivered += 1
            except Exception as e:
                logger.error(  # noqa: G201
                    "Event handler raised",
                    extra={
                        "event": event.value,
                        "error_type": type(e).__name__,
                        "error_message": str(e),
                    },
                    exc_info=True,
                )
        return delivered


__all__: list[str] = ["EventHandler", "ReporterEventEmitter"]
