# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Unit tests for the localized message catalog."""

from __future__ import annotations

import pytest

from botgate_reporter.enums import EnumLocale
from botgate_reporter.utils import get_message, resolve_locale


class TestResolveLocale:
    @pytest.mark.parametrize(
        ("selector", "expected"),
        [
            ("en", EnumLocale.EN),
            ("pt", EnumLocale.PT),
            ("pt-BR", EnumLocale.PT),
            ("pt_br", EnumLocale.PT),
            ("de", EnumLocale.EN),
            ("", EnumLocale.EN),
            (None, EnumLocale.EN),
            (EnumLocale.PT, EnumLocale.PT),
        ],
    )
    def test_resolution(self, selector: str | None, expected: EnumLocale) -> None:
        assert resolve_locale(selector) == expected


class TestGetMessage:
    def test_formats_english(self) -> None:
        assert get_message("stats_sent", "en", attempt=2) == (
            "Stats sent successfully (attempt 2)"
        )

    def test_formats_portuguese(self) -> None:
        assert get_message("tier_changed", "pt-BR", old="free", new="pro") == (
            "Plano alterado: free -> pro"
        )

    def test_unknown_locale_falls_back(self) -> None:
        assert get_message("stopped", "ja") == "Reporter stopped"

    def test_unknown_key_raises(self) -> None:
        with pytest.raises(KeyError):
            get_message("no_such_message")
