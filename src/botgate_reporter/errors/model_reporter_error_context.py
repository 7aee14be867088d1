# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Reporter Error Context Model.

Bundles the structured fields attached to reporter errors so error
constructors stay small while keeping strong typing.
"""

from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class ModelReporterErrorContext(BaseModel):
    """Structured context for reporter errors.

    Attributes:
        operation: Operation being performed (send_stats, collect, register_webhook)
        target_name: Target resource or endpoint (e.g. "/api/v1/bots/stats")
        correlation_id: Correlation ID of the failing operation

    Example:
        >>> context = ModelReporterErrorContext(
        ...     operation="collect_metrics",
        ...     target_name="discord-client",
        ...     correlation_id=uuid4(),
        ... )
        >>> raise ClientNotReadyError("Discord client is not ready", context=context)
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
    )

    operation: Optional[str] = Field(
        default=None,
        description="Operation being performed",
    )
    target_name: Optional[str] = Field(
        default=None,
        description="Target resource or endpoint name",
    )
    correlation_id: Optional[UUID] = Field(
        default=None,
        description="Correlation ID for tracing the failing operation",
    )


__all__ = ["ModelReporterErrorContext"]
