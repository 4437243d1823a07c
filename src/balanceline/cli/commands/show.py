"""Statusline command for balanceline."""

from __future__ import annotations

import logging
import sys
import tomllib

import msgspec
import typer

from balanceline.cli.app import app
from balanceline.config.cache import CacheStore
from balanceline.config.credentials import discover_credentials
from balanceline.config.settings import Config
from balanceline.config.settings import get_config
from balanceline.core.resolver import BalanceResolver
from balanceline.display.json import outcome_to_dict
from balanceline.display.json import output_json
from balanceline.display.statusline import render_segment
from balanceline.display.statusline import segment_to_ansi
from balanceline.strategies.base import ResolveOutcome

logger = logging.getLogger(__name__)


def read_statusline_input() -> dict | None:
    """Drain the statusline JSON that Claude Code pipes on stdin.

    The balance does not depend on it; it is read so the writer never
    blocks and logged when malformed.
    """
    stream = sys.stdin
    if stream is None or stream.isatty():
        return None

    try:
        raw = stream.read()
    except (OSError, UnicodeDecodeError) as e:
        logger.debug("Could not read statusline input: %s", e)
        return None

    if not raw.strip():
        return None

    try:
        data = msgspec.json.decode(raw)
    except msgspec.DecodeError as e:
        logger.debug("Statusline input is not valid JSON: %s", e)
        return None
    return data if isinstance(data, dict) else None


def load_statusline_config() -> Config:
    """Load the configuration, falling back to defaults when it is unreadable.

    A broken config.toml only disables the account quota query; the
    statusline still renders from the billing query or the cache.
    """
    try:
        return get_config()
    except (tomllib.TOMLDecodeError, msgspec.ValidationError, OSError) as e:
        logger.warning("Ignoring unreadable config file: %s", e)
        return Config()


def log_attempts(outcome: ResolveOutcome) -> None:
    """Log every failed tier of a resolution at debug level."""
    for attempt in outcome.attempts:
        logger.debug(
            "%s: %s (%s, %dms)",
            attempt.strategy,
            attempt.error,
            attempt.category,
            attempt.duration_ms,
        )
    if outcome.success:
        logger.debug("Balance resolved from %s", outcome.source)
    else:
        logger.debug("Balance unavailable: %s", outcome.error)


async def run_statusline(
    ctx: typer.Context,
    json_output: bool = False,
    cache: CacheStore | None = None,
) -> ResolveOutcome:
    """Resolve the balance and print the statusline segment.

    Prints nothing when the balance is unavailable.
    """
    read_statusline_input()

    config = load_statusline_config()
    resolver = BalanceResolver(
        cache or CacheStore(),
        credentials=discover_credentials(),
        account=config.account,
        timeout=config.fetch.timeout,
    )
    outcome = await resolver.resolve()
    log_attempts(outcome)

    if json_output or ctx.meta.get("json", False):
        output_json(outcome_to_dict(outcome, config.display.currency_symbol))
        return outcome

    color = config.display.color and not ctx.meta.get("no_color", False)
    text = segment_to_ansi(render_segment(outcome, config.display), color=color)
    if text:
        sys.stdout.write(text + "\n")
        sys.stdout.flush()
    return outcome


@app.command("show")
async def show_command(
    ctx: typer.Context,
    json_output: bool = typer.Option(
        False,
        "--json",
        "-j",
        help="Output the resolution outcome as JSON",
    ),
) -> None:
    """Print the balance segment (the default command)."""
    await run_statusline(ctx, json_output=json_output)
