"""Display helpers for run estimates."""

from __future__ import annotations

import math

from .models import RunEstimate

INFINITY_TEXT = "∞"
UNDEFINED_TEXT = "N/A"


def _fmt(value: float, decimals: int) -> str:
    if math.isnan(value) or value == -math.inf:
        return UNDEFINED_TEXT
    if value == math.inf:
        return INFINITY_TEXT
    return f"{value:.{decimals}f}"


def format_seconds(value: float) -> str:
    return _fmt(value, 0)


def format_hours(value: float) -> str:
    return _fmt(value, 2)


def format_days(value: float) -> str:
    return _fmt(value, 2)


def format_estimate(estimate: RunEstimate) -> str:
    """Return e.g. ``"69000 s | 19.17 h | 0.80 d"``."""
    return (
        f"{format_seconds(estimate.time_seconds)} s | "
        f"{format_hours(estimate.time_hours)} h | "
        f"{format_days(estimate.time_days)} d"
    )
