# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Event names published to reporter subscribers."""

from enum import Enum


class EnumReporterEvent(str, Enum):
    """Events a reporter can publish to local subscribers.

    Attributes:
        VOTE: A vote pushed by the platform (webhook or worker message).
            Payload is the vote object as a dict.
        TIER_CHANGED: The server-declared tier changed. Payload is the new
            ModelPolicyState.
    """

    VOTE = "vote"
    TIER_CHANGED = "tier_changed"


__all__ = ["EnumReporterEvent"]
