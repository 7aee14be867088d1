# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Unit tests for the botgate-reporter CLI."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest
from click.testing import CliRunner

from botgate_reporter.cli.commands import cli
from botgate_reporter.models import ModelBotInfo, ModelRetryOutcome
from botgate_reporter.reporter import BotGateReporter


@pytest.fixture
def runner(monkeypatch: pytest.MonkeyPatch) -> CliRunner:
    monkeypatch.setenv("BOTGATE_BOT_ID", "123456789012345678")
    monkeypatch.setenv("BOTGATE_API_KEY", "bg_cli_key")
    return CliRunner()


class TestVerifyCommand:
    def test_valid_key(self, runner: CliRunner, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(
            BotGateReporter, "verify_api_key", AsyncMock(return_value=True)
        )

        result = runner.invoke(cli, ["verify"])

        assert result.exit_code == 0, result.output
        assert "API key is valid" in result.output
        assert "30 minutes" in result.output

    def test_invalid_key_exits_nonzero(
        self, runner: CliRunner, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setattr(
            BotGateReporter, "verify_api_key", AsyncMock(return_value=False)
        )

        result = runner.invoke(cli, ["verify"])

        assert result.exit_code == 1
        assert "invalid" in result.output

    def test_missing_configuration(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("BOTGATE_BOT_ID", raising=False)
        monkeypatch.delenv("BOTGATE_API_KEY", raising=False)

        result = CliRunner().invoke(cli, ["verify"])

        assert result.exit_code == 1
        assert "Invalid configuration" in result.output


class TestQueryCommands:
    def test_info_renders_table(
        self, runner: CliRunner, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        info = ModelBotInfo(id="1", name="Gatekeeper", stats={"servers": 42})
        monkeypatch.setattr(
            BotGateReporter,
            "get_bot_info",
            AsyncMock(return_value=ModelRetryOutcome(success=True, data=info)),
        )

        result = runner.invoke(cli, ["info"])

        assert result.exit_code == 0, result.output
        assert "Gatekeeper" in result.output
        assert "42" in result.output

    def test_votes_lists_users(
        self, runner: CliRunner, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        get_votes = AsyncMock(
            return_value=ModelRetryOutcome(
                success=True,
                data={"data": {"votes": [{"username": "alice", "createdAt": "today"}]}},
            )
        )
        monkeypatch.setattr(BotGateReporter, "get_votes", get_votes)

        result = runner.invoke(cli, ["votes", "--limit", "3"])

        assert result.exit_code == 0, result.output
        assert "alice" in result.output
        get_votes.assert_awaited_once_with(3)

    def test_failed_query_exits_nonzero(
        self, runner: CliRunner, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setattr(
            BotGateReporter,
            "get_usage",
            AsyncMock(
                return_value=ModelRetryOutcome(
                    success=False, status_code=500, error="HTTP 500"
                )
            ),
        )

        result = runner.invoke(cli, ["usage"])

        assert result.exit_code == 1
        assert "Request failed" in result.output
