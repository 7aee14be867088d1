# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Outcome of one outbound BotGate API operation."""

from __future__ import annotations

from typing import Any
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field

from botgate_reporter.enums import EnumFailureClass


class ModelRetryOutcome(BaseModel):
    """Discriminated result of a send, including its retries.

    Failures are returned, never raised: ``success`` tells the two paths
    apart and ``failure_class`` says why a send failed.

    Attributes:
        success: True if a 2xx response was received
        data: Parsed JSON body of the successful response (or error body)
        status_code: HTTP status of the last attempt, None for network errors
        failure_class: Why the send failed (None on success)
        error: Sanitized error message of the last attempt
        attempts: Attempts consumed by this send
        duration_ms: Wall time of the whole send including retry delays
        correlation_id: Correlation ID of this send
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
    )

    success: bool
    data: Any = None
    status_code: int | None = None
    failure_class: EnumFailureClass | None = None
    error: str | None = None
    attempts: int = Field(default=0, ge=0)
    duration_ms: float = Field(default=0.0, ge=0.0)
    correlation_id: UUID = Field(default_factory=uuid4)

    @property
    def is_policy_rejection(self) -> bool:
        """Whether the send was rejected as rate-limited or forbidden."""
        return self.failure_class is not None and self.failure_class.is_policy_rejection

    @classmethod
    def not_leader(cls) -> ModelRetryOutcome:
        """Outcome for a send suppressed on a non-leader worker."""
        return cls(
            success=False,
            failure_class=EnumFailureClass.NOT_LEADER,
            error="This worker is not the reporting leader",
        )


__all__: list[str] = ["ModelRetryOutcome"]
