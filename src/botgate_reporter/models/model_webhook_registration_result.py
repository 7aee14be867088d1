# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Result of a webhook auto-registration attempt."""

from __future__ import annotations

from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field

from botgate_reporter.enums import EnumDeploymentEnvironment


class ModelWebhookRegistrationResult(BaseModel):
    """Outcome of auto-registration. Never carries the generated secret.

    Attributes:
        success: True if the platform accepted the registration
        environment: Detected deployment environment, None if detection failed
        url: Resolved webhook URL, None if resolution failed
        error: Sanitized error message (only on failure)
        error_code: Error code for programmatic handling
        correlation_id: Correlation ID of the attempt
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
    )

    success: bool
    environment: EnumDeploymentEnvironment | None = None
    url: str | None = None
    error: str | None = None
    error_code: str | None = None
    correlation_id: UUID = Field(default_factory=uuid4)


__all__: list[str] = ["ModelWebhookRegistrationResult"]
