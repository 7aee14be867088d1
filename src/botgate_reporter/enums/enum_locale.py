# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Supported locales for reporter log messages."""

from enum import Enum


class EnumLocale(str, Enum):
    """Locales with a message catalog. Unknown locales fall back to EN."""

    EN = "en"
    PT = "pt"


__all__ = ["EnumLocale"]
