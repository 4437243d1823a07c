"""Statusline segment rendering for balanceline."""

from __future__ import annotations

from rich.console import Console
from rich.text import Text

from balanceline.config.settings import DisplayConfig
from balanceline.models import BalanceData
from balanceline.models import format_display
from balanceline.strategies.base import ResolveOutcome


def balance_color(data: BalanceData) -> str:
    """Pick a color from the share of the grant already used."""
    utilization = data.utilization()
    if utilization is None:
        return "green"
    if utilization < 50:
        return "green"
    elif utilization < 80:
        return "yellow"
    else:
        return "red"


def render_segment(
    outcome: ResolveOutcome,
    config: DisplayConfig | None = None,
) -> Text:
    """Render the balance segment.

    An unavailable outcome renders as empty text, never as a zero amount.
    """
    config = config or DisplayConfig()
    text = Text()

    if not outcome.success or outcome.balance is None:
        return text

    data = outcome.balance
    style = balance_color(data) if config.color else ""
    if outcome.stale and config.dim_stale:
        style = f"{style} dim".strip()

    text.append(
        format_display(data, config.currency_symbol, config.unlimited_glyph),
        style=style or None,
    )

    if config.show_used and not data.is_unlimited:
        used = f" ({config.currency_symbol}{data.used:.2f} used)"
        text.append(used, style="dim" if config.color else None)

    return text


def segment_to_ansi(segment: Text, color: bool = True) -> str:
    """Convert a rendered segment to a string for the statusline.

    Plain text when color is off; ANSI escape codes otherwise.
    """
    if not segment.plain:
        return ""
    if not color:
        return segment.plain

    console = Console(
        force_terminal=True,
        color_system="standard",
        width=max(len(segment.plain), 1) + 1,
        legacy_windows=False,
    )
    with console.capture() as capture:
        console.print(segment, end="", soft_wrap=True)
    return capture.get()
