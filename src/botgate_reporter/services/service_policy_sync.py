# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Policy state synchronization from BotGate API responses.

Any API response may tell the client which tier the bot is on and, with it,
how often the bot may report. Responses do not share one shape, so tier
extraction is an ordered tuple of rules, each a small function over one
container of the response:

    1. ``data.tier`` holds a tier object       {"data": {"tier": {"name": "pro", ...}}}
    2. ``data`` holds the tier fields          {"data": {"tier": "pro", "updateIntervalMinutes": 15}}
    3. ``tier`` holds a tier object            {"tier": {"name": "pro", ...}}
    4. the response root holds the tier fields {"tier": "pro", "updateIntervalMinutes": 15}

The first rule producing a tier wins. Tier names are lowercased on
extraction. A tier equal to the stored one makes the whole sync a no-op,
whatever interval fields the response carries, so repeated identical
responses never churn timers.

On a tier change the synchronizer stores the new ModelPolicyState, then
notifies its listeners in order: interval listener (only if the interval
changed), heartbeat listener (only if eligibility changed), tier listener.
The reporter wires these to the scheduler and the event emitter.
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Awaitable, Callable, Mapping
from typing import Any, NamedTuple

from botgate_reporter.models import ModelPolicyState
from botgate_reporter.utils import get_message

logger = logging.getLogger(__name__)

SECONDS_PER_MINUTE = 60.0

_TIER_NAME_KEYS: tuple[str, ...] = ("name", "tier", "id")
_INTERVAL_KEYS: tuple[str, ...] = (
    "updateIntervalMinutes",
    "update_interval_minutes",
    "updateInterval",
)


class TierInfo(NamedTuple):
    """Tier information extracted from a response."""

    tier: str
    interval_minutes: float | None


ExtractionRule = Callable[[Any], TierInfo | None]
Listener = Callable[..., Awaitable[None] | None]


def _interval_from(container: Mapping[str, Any]) -> float | None:
    for key in _INTERVAL_KEYS:
        value = container.get(key)
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            continue
        if value > 0:
            return float(value)
    return None


def _normalize_tier(name: str) -> str:
    """Tier names compare case-insensitively; store them lowercased."""
    return name.strip().lower()


def _tier_fields(container: Any) -> TierInfo | None:
    """Tier given as a string field next to its interval fields."""
    if not isinstance(container, Mapping):
        return None
    tier = container.get("tier")
    if not isinstance(tier, str) or not tier.strip():
        return None
    return TierInfo(_normalize_tier(tier), _interval_from(container))


def _tier_object(container: Any) -> TierInfo | None:
    """Tier given as an object under a ``tier`` key."""
    if not isinstance(container, Mapping):
        return None
    tier_obj = container.get("tier")
    if not isinstance(tier_obj, Mapping):
        return None
    for key in _TIER_NAME_KEYS:
        name = tier_obj.get(key)
        if isinstance(name, str) and name.strip():
            interval = _interval_from(tier_obj)
            if interval is None:
                interval = _interval_from(container)
            return TierInfo(_normalize_tier(name), interval)
    return None


def _data_envelope(payload: Any) -> Any:
    return payload.get("data") if isinstance(payload, Mapping) else None


def extract_nested_data_tier(payload: Any) -> TierInfo | None:
    """Rule 1: tier object under ``data.tier``."""
    return _tier_object(_data_envelope(payload))


def extract_data_root_tier(payload: Any) -> TierInfo | None:
    """Rule 2: tier fields at the ``data`` root."""
    return _tier_fields(_data_envelope(payload))


def extract_nested_tier(payload: Any) -> TierInfo | None:
    """Rule 3: tier object under the root ``tier`` field."""
    return _tier_object(payload)


def extract_root_tier(payload: Any) -> TierInfo | None:
    """Rule 4: tier fields at the response root."""
    return _tier_fields(payload)


EXTRACTION_RULES: tuple[ExtractionRule, ...] = (
    extract_nested_data_tier,
    extract_data_root_tier,
    extract_nested_tier,
    extract_root_tier,
)


def extract_tier_info(
    payload: Any, rules: tuple[ExtractionRule, ...] = EXTRACTION_RULES
) -> TierInfo | None:
    """Apply ``rules`` in order and return the first tier found."""
    for rule in rules:
        info = rule(payload)
        if info is not None:
            return info
    return None


async def _notify(listener: Listener | None, *args: object) -> None:
    if listener is None:
        return
    result = listener(*args)
    if inspect.isawaitable(result):
        await result


class PolicySynchronizer:
    """Owns the current ModelPolicyState; the only place it is mutated.

    Example:
        >>> sync = PolicySynchronizer(initial_interval_seconds=1800.0)
        >>> # changed = await sync.sync_from_response({"tier": "business"})
        >>> # sync.state.heartbeat_enabled -> True
    """

    def __init__(
        self,
        initial_interval_seconds: float,
        *,
        on_interval_changed: Listener | None = None,
        on_heartbeat_changed: Listener | None = None,
        on_tier_changed: Listener | None = None,
        rules: tuple[ExtractionRule, ...] = EXTRACTION_RULES,
        locale: str = "en",
    ) -> None:
        self._state = ModelPolicyState.initial(initial_interval_seconds)
        self._on_interval_changed = on_interval_changed
        self._on_heartbeat_changed = on_heartbeat_changed
        self._on_tier_changed = on_tier_changed
        self._rules = rules
        self._locale = locale

    @property
    def state(self) -> ModelPolicyState:
        """Current policy (immutable snapshot)."""
        return self._state

    def set_listeners(
        self,
        *,
        on_interval_changed: Listener | None = None,
        on_heartbeat_changed: Listener | None = None,
        on_tier_changed: Listener | None = None,
    ) -> None:
        self._on_interval_changed = on_interval_changed
        self._on_heartbeat_changed = on_heartbeat_changed
        self._on_tier_changed = on_tier_changed

    async def sync_from_response(self, payload: Any) -> bool:
        """Apply the tier information carried by ``payload``, if any.

        Returns:
            True if the tier changed, False for a no-op.
        """
        info = extract_tier_info(payload, self._rules)
        if info is None:
            return False

        previous = self._state
        if info.tier == previous.tier:
            return False

        new_interval: float | None = None
        if info.interval_minutes is not None:
            candidate = info.interval_minutes * SECONDS_PER_MINUTE
            if candidate != previous.update_interval_seconds:
                new_interval = candidate

        self._state = previous.with_tier(info.tier, new_interval)
        logger.info(
            get_message(
                "tier_changed", self._locale, old=previous.tier or "-", new=info.tier
            ),
            extra={
                "old_tier": previous.tier,
                "new_tier": info.tier,
                "update_interval_seconds": self._state.update_interval_seconds,
                "heartbeat_enabled": self._state.heartbeat_enabled,
            },
        )

        if new_interval is not None:
            logger.info(
                get_message(
                    "interval_changed",
                    self._locale,
                    minutes=round(self._state.update_interval_minutes, 2),
                )
            )
            await _notify(self._on_interval_changed, new_interval)

        if self._state.heartbeat_enabled != previous.heartbeat_enabled:
            await _notify(self._on_heartbeat_changed, self._state.heartbeat_enabled)

        await _notify(self._on_tier_changed, self._state)
        return True


__all__: list[str] = [
    "EXTRACTION_RULES",
    "PolicySynchronizer",
    "SECONDS_PER_MINUTE",
    "TierInfo",
    "extract_data_root_tier",
    "extract_nested_data_tier",
    "extract_nested_tier",
    "extract_root_tier",
    "extract_tier_info",
]
