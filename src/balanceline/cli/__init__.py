"""CLI framework for balanceline."""
from __future__ import annotations

from balanceline.cli.app import ExitCode
from balanceline.cli.app import app
from balanceline.cli.app import run_app

__all__ = ["app", "run_app", "ExitCode"]
