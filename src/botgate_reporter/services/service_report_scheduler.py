# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Report scheduler owning the stats and heartbeat timers.

The scheduler is the only owner of the two repeating timers:

    - **stats timer**: fires every ``update_interval_seconds`` of the current
      policy and triggers a stats report.
    - **heartbeat timer**: fires one heartbeat immediately, then every
      ``heartbeat_interval_seconds`` (5 minutes), independent of the stats
      interval. Armed only while the policy allows heartbeats.

Each timer is an asyncio task running a sleep loop. Interval changes go
through ``rearm_stats``, which cancels the old task and creates the new one
without a suspension point in between, so two stats loops never coexist.
Each tick runs its callback in a detached task: cancelling a timer (re-arm
or ``stop``) never interrupts a send that is already in flight.

Lifecycle:
    IDLE --start()--> RUNNING --stop()--> IDLE

    ``start`` performs one report before arming the timers. ``stop`` cancels
    both timers unconditionally and is safe to call while idle.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable

from botgate_reporter.enums import EnumSchedulerState
from botgate_reporter.models import ModelPolicyState
from botgate_reporter.utils import get_message, sanitize_error_message

logger = logging.getLogger(__name__)

HEARTBEAT_INTERVAL_SECONDS = 5 * 60.0

ReportCallback = Callable[[], Awaitable[object]]


class ReportScheduler:
    """Drives periodic stats reports and heartbeats for the leader process.

    Attributes:
        heartbeat_interval_seconds: Fixed heartbeat cadence
    """

    def __init__(
        self,
        report: ReportCallback,
        heartbeat: ReportCallback,
        policy: Callable[[], ModelPolicyState],
        *,
        heartbeat_interval_seconds: float = HEARTBEAT_INTERVAL_SECONDS,
        locale: str = "en",
    ) -> None:
        """Initialize the scheduler.

        Args:
            report: Coroutine function sending one stats report.
            heartbeat: Coroutine function sending one heartbeat.
            policy: Returns the current policy; read when arming timers.
            heartbeat_interval_seconds: Heartbeat cadence.
            locale: Locale for log messages.
        """
        self._report = report
        self._heartbeat = heartbeat
        self._policy = policy
        self.heartbeat_interval_seconds = heartbeat_interval_seconds
        self._locale = locale

        self._state = EnumSchedulerState.IDLE
        self._stats_task: asyncio.Task[None] | None = None
        self._heartbeat_task: asyncio.Task[None] | None = None
        self._stats_interval: float | None = None
        self._inflight: set[asyncio.Task[object]] = set()

    @property
    def state(self) -> EnumSchedulerState:
        return self._state

    @property
    def is_running(self) -> bool:
        return self._state == EnumSchedulerState.RUNNING

    @property
    def stats_interval_seconds(self) -> float | None:
        """Period of the armed stats timer, None when disarmed."""
        return self._stats_interval if self._stats_task is not None else None

    @property
    def stats_timer_armed(self) -> bool:
        return self._stats_task is not None and not self._stats_task.done()

    @property
    def heartbeat_running(self) -> bool:
        return self._heartbeat_task is not None and not self._heartbeat_task.done()

    async def start(self) -> None:
        """Enter RUNNING: report once, then arm the timers from current policy.

        Calling start while already running is a no-op.
        """
        if self.is_running:
            logger.debug("ReportScheduler already running, skipping")
            return

        self._state = EnumSchedulerState.RUNNING
        await self._run_callback(self._report, "initial_report")

        # Policy may have changed during the initial report, and stop() may
        # have been called meanwhile.
        if not self.is_running:
            return
        policy = self._policy()
        self.rearm_stats(policy.update_interval_seconds)
        logger.info(
            get_message(
                "auto_update_enabled",
                self._locale,
                minutes=round(policy.update_interval_minutes, 2),
            )
        )
        self.set_heartbeat(policy.heartbeat_enabled)

    def rearm_stats(self, interval_seconds: float) -> None:
        """Replace the stats timer with one firing every ``interval_seconds``.

        The previous timer is cancelled before the new one is installed.
        Ignored while idle, since followers and stopped reporters must not
        run timers.

        Raises:
            ValueError: If ``interval_seconds`` is not positive.
        """
        if interval_seconds <= 0:
            raise ValueError(f"interval_seconds must be > 0, got {interval_seconds}")
        if not self.is_running:
            logger.debug(
                "ReportScheduler idle, not arming stats timer",
                extra={"interval_seconds": interval_seconds},
            )
            return

        self._cancel_stats_timer()
        self._stats_interval = interval_seconds
        self._stats_task = asyncio.create_task(
            self._timer_loop(interval_seconds, self._report, "stats"),
            name="botgate-stats-timer",
        )
        logger.debug(
            "Stats timer armed",
            extra={"interval_seconds": interval_seconds},
        )

    def set_heartbeat(self, enabled: bool) -> None:
        """Arm or disarm the heartbeat timer.

        Arming sends one heartbeat immediately, then one per
        ``heartbeat_interval_seconds``. Arming an already running heartbeat
        and disarming a stopped one are no-ops.
        """
        if enabled:
            if not self.is_running or self.heartbeat_running:
                return
            self._spawn(self._heartbeat, "heartbeat")
            self._heartbeat_task = asyncio.create_task(
                self._timer_loop(
                    self.heartbeat_interval_seconds, self._heartbeat, "heartbeat"
                ),
                name="botgate-heartbeat-timer",
            )
            logger.info(
                get_message(
                    "heartbeat_enabled",
                    self._locale,
                    minutes=round(self.heartbeat_interval_seconds / 60, 2),
                )
            )
            return

        if self._heartbeat_task is not None:
            self._heartbeat_task.cancel()
            self._heartbeat_task = None
            logger.info(get_message("heartbeat_disabled", self._locale))

    def stop(self) -> None:
        """Cancel both timers and return to IDLE. Always safe to call.

        Sends already in flight are left to complete.
        """
        self._cancel_stats_timer()
        if self._heartbeat_task is not None:
            self._heartbeat_task.cancel()
            self._heartbeat_task = None
        self._state = EnumSchedulerState.IDLE

    def _cancel_stats_timer(self) -> None:
        if self._stats_task is not None:
            self._stats_task.cancel()
            self._stats_task = None
        self._stats_interval = None

    async def _timer_loop(
        self, interval_seconds: float, callback: ReportCallback, name: str
    ) -> None:
        """Fire ``callback`` every ``interval_seconds`` until cancelled."""
        while True:
            await asyncio.sleep(interval_seconds)
            self._spawn(callback, name)

    def _spawn(self, callback: ReportCallback, name: str) -> None:
        task: asyncio.Task[object] = asyncio.create_task(
            self._run_callback(callback, name), name=f"botgate-{name}"
        )
        self._inflight.add(task)
        task.add_done_callback(self._inflight.discard)

    async def _run_callback(self, callback: ReportCallback, name: str) -> object:
        """Run one tick; failures are logged and never stop the schedule."""
        try:
            return await callback()
        except Exception as e:
            logger.error(  # noqa: G201
                f"Scheduled {name} failed",
                extra={
                    "error_type": type(e).__name__,
                    "error_message": sanitize_error_message(e),
                },
                exc_info=True,
            )
            return None

    async def drain(self) -> None:
        """Wait for detached in-flight callbacks to finish."""
        if self._inflight:
            await asyncio.gather(*list(self._inflight), return_exceptions=True)


__all__: list[str] = ["HEARTBEAT_INTERVAL_SECONDS", "ReportScheduler"]
