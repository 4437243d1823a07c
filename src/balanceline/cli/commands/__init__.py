"""CLI commands for balanceline."""

# Top-level commands
from balanceline.cli.commands.show import run_statusline
from balanceline.cli.commands.show import show_command

# Command groups (registered with the main app in balanceline.cli.app)
from balanceline.cli.commands import (
    cache,
    config,
)

__all__ = [
    # Top-level commands
    "show_command",
    "run_statusline",
    # Command groups
    "cache",
    "config",
]
