"""JSON output utilities for balanceline."""

from __future__ import annotations

import sys

import msgspec

from balanceline.models import DEFAULT_CURRENCY_SYMBOL
from balanceline.models import format_display
from balanceline.strategies.base import ResolveOutcome

__all__ = [
    "outcome_to_dict",
    "output_json",
    "output_json_pretty",
]


def outcome_to_dict(
    outcome: ResolveOutcome,
    symbol: str = DEFAULT_CURRENCY_SYMBOL,
) -> dict:
    """Convert a resolve outcome to a JSON-friendly dict with a short key."""
    data = msgspec.to_builtins(outcome)
    if outcome.key:
        data["key"] = outcome.key[:12]
    if outcome.balance is not None:
        data["display"] = format_display(outcome.balance, symbol)
    return data


def output_json(data: object) -> None:
    """Output data as JSON to stdout.

    Args:
        data: Any msgspec-serializable object (Struct, dict, list, etc.)
    """
    json_bytes = msgspec.json.encode(data)
    sys.stdout.buffer.write(json_bytes)
    sys.stdout.buffer.write(b"\n")
    sys.stdout.buffer.flush()


def output_json_pretty(data: object, indent: int = 2) -> None:
    """Output data as pretty-printed JSON to stdout.

    Args:
        data: Any msgspec-serializable object
        indent: Number of spaces for indentation
    """
    json_bytes = msgspec.json.format(msgspec.json.encode(data), indent=indent)
    sys.stdout.write(json_bytes.decode())
    sys.stdout.write("\n")
