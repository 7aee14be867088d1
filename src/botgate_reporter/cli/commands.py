# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""
BotGate Reporter CLI Commands.

Operator commands for checking a bot's BotGate credentials and querying
the platform without running the bot. Configuration comes from the
``BOTGATE_*`` environment variables; ``--bot-id`` and ``--api-key`` override
them.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import TypeVar

import click
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from botgate_reporter.errors import ReporterConfigurationError
from botgate_reporter.models import (
    ModelBotInfo,
    ModelPolicyState,
    ModelReporterConfig,
    ModelRetryOutcome,
)
from botgate_reporter.reporter import BotGateReporter
from botgate_reporter.utils import configure_logging

console = Console()

T = TypeVar("T")


@click.group()
@click.option("--bot-id", default=None, help="Bot id (default: BOTGATE_BOT_ID)")
@click.option("--api-key", default=None, help="API key (default: BOTGATE_API_KEY)")
@click.option("--api-url", default=None, help="API base URL (default: BOTGATE_API_URL)")
@click.option("--debug/--no-debug", default=False, help="Enable debug logging")
@click.pass_context
def cli(
    ctx: click.Context,
    bot_id: str | None,
    api_key: str | None,
    api_url: str | None,
    debug: bool,
) -> None:
    """BotGate Stats Reporter CLI."""
    configure_logging("DEBUG" if debug else None)
    ctx.obj = {"bot_id": bot_id, "api_key": api_key, "api_url": api_url}


def _load_config(ctx: click.Context) -> ModelReporterConfig:
    overrides = dict(ctx.obj or {})
    # The CLI never serves or registers webhooks.
    overrides.update(webhook_enabled=False, auto_register_webhook=False)
    try:
        return ModelReporterConfig.from_env(**overrides)
    except ValidationError as e:
        fields = ", ".join(
            sorted({".".join(str(p) for p in err["loc"]) for err in e.errors()})
        )
        console.print(f"[red]Invalid configuration: {fields}[/red]")
        raise SystemExit(1) from e


def _run(
    ctx: click.Context, operation: Callable[[BotGateReporter], Awaitable[T]]
) -> T:
    """Run ``operation`` against a short-lived reporter."""
    config = _load_config(ctx)

    async def _main() -> T:
        try:
            reporter = BotGateReporter(config)
        except ReporterConfigurationError as e:
            console.print(f"[red]{e.message}[/red]")
            raise SystemExit(1) from e
        try:
            return await operation(reporter)
        finally:
            await reporter.close()

    return asyncio.run(_main())


def _fail(outcome: ModelRetryOutcome) -> None:
    console.print(
        f"[red]Request failed[/red] "
        f"(status={outcome.status_code}, error={outcome.error or 'unknown'})"
    )
    raise SystemExit(1)


@cli.command("verify")
@click.pass_context
def verify_cmd(ctx: click.Context) -> None:
    """Verify the API key and show the bot's tier."""
    valid, policy = _run(ctx, lambda r: _with_policy(r, r.verify_api_key()))
    if not valid:
        console.print("[red]API key is invalid[/red]")
        raise SystemExit(1)

    console.print("[green]API key is valid[/green]")
    console.print(f"  Tier: {policy.tier or 'unknown'}")
    console.print(f"  Update interval: {policy.update_interval_minutes:g} minutes")
    console.print(f"  Heartbeat: {'enabled' if policy.heartbeat_enabled else 'disabled'}")


async def _with_policy(
    reporter: BotGateReporter, pending: Awaitable[T]
) -> tuple[T, ModelPolicyState]:
    result = await pending
    return result, reporter.policy


@cli.command("info")
@click.pass_context
def info_cmd(ctx: click.Context) -> None:
    """Show the bot's listing."""
    outcome = _run(ctx, lambda r: r.get_bot_info())
    if not outcome.success:
        _fail(outcome)

    info = outcome.data
    if not isinstance(info, ModelBotInfo):
        console.print(info)
        return

    table = Table(title=f"{info.name} ({info.id})")
    table.add_column("Field", style="cyan")
    table.add_column("Value")
    table.add_row("Status", info.status or "-")
    table.add_row("Verified", str(info.verified))
    table.add_row("Servers", str(info.stats.servers))
    table.add_row("Users", str(info.stats.users))
    table.add_row("Shards", str(info.stats.shards))
    table.add_row("Votes", str(info.stats.votes))
    table.add_row("Monthly votes", str(info.stats.monthly_votes))
    console.print(table)


@cli.command("usage")
@click.pass_context
def usage_cmd(ctx: click.Context) -> None:
    """Show API usage and limits for the key."""
    outcome = _run(ctx, lambda r: r.get_usage())
    if not outcome.success:
        _fail(outcome)

    data = outcome.data.get("data", outcome.data) if isinstance(outcome.data, dict) else outcome.data
    if not isinstance(data, dict):
        console.print(data)
        return

    table = Table(title="API Usage")
    table.add_column("Key", style="cyan")
    table.add_column("Value")
    for key, value in data.items():
        table.add_row(str(key), str(value))
    console.print(table)


@cli.command("votes")
@click.option("--limit", default=10, show_default=True, type=click.IntRange(1, 100))
@click.pass_context
def votes_cmd(ctx: click.Context, limit: int) -> None:
    """List the most recent votes."""
    outcome = _run(ctx, lambda r: r.get_votes(limit))
    if not outcome.success:
        _fail(outcome)

    data = outcome.data.get("data", outcome.data) if isinstance(outcome.data, dict) else outcome.data
    votes = data.get("votes", []) if isinstance(data, dict) else data
    if not votes:
        console.print("[yellow]No votes yet[/yellow]")
        return

    table = Table(title=f"Last {limit} votes")
    table.add_column("User", style="cyan")
    table.add_column("Voted at")
    for vote in votes:
        if isinstance(vote, dict):
            user = vote.get("username") or vote.get("userId") or vote.get("user") or "-"
            table.add_row(str(user), str(vote.get("createdAt") or vote.get("timestamp") or "-"))
    console.print(table)


if __name__ == "__main__":
    cli()
