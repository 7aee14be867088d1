# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""BotGate Reporter command line interface."""

from botgate_reporter.cli.commands import cli

__all__: list[str] = ["cli"]
