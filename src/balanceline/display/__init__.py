"""Display utilities for balanceline.

This module provides rendering for the statusline segment and the JSON
output mode.
"""
from __future__ import annotations

from balanceline.display.json import outcome_to_dict
from balanceline.display.json import output_json
from balanceline.display.json import output_json_pretty
from balanceline.display.statusline import balance_color
from balanceline.display.statusline import render_segment
from balanceline.display.statusline import segment_to_ansi

__all__ = [
    # Statusline rendering
    "render_segment",
    "segment_to_ansi",
    "balance_color",
    # JSON output
    "outcome_to_dict",
    "output_json",
    "output_json_pretty",
]
