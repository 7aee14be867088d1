# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Deployment environment enumeration for webhook auto-registration."""

from enum import Enum


class EnumDeploymentEnvironment(str, Enum):
    """Deployment environments recognised when resolving the webhook URL.

    Detection order matches declaration order; the first match wins.
    """

    CLOUD_RUN = "cloud_run"
    LOCALHOST = "localhost"
    PUBLIC_IP = "public_ip"


__all__ = ["EnumDeploymentEnvironment"]
