"""Display formatting for countdowns and timestamps."""

from __future__ import annotations

import math
from typing import Any

from preptimer.core.snapshot import as_float, parse_timestamp, resolve_now

_ZERO = "00:00"


def format_time(total_seconds: Any) -> str:
    """Format *total_seconds* as ``MM:SS``.

    Minutes are zero-padded to two digits but not capped, so long windows
    render as e.g. ``125:07``.  Anything other than a non-negative finite
    number yields ``"00:00"``.
    """
    seconds = as_float(total_seconds)
    if seconds is None or not math.isfinite(seconds) or seconds < 0:
        return _ZERO
    minutes, seconds = divmod(int(seconds), 60)
    return f"{minutes:02d}:{seconds:02d}"


def get_time_ago(value: Any, now: Any = None) -> str:
    """Return a short relative label such as ``"5m ago"`` for *value*."""
    moment = parse_timestamp(value)
    if moment is None:
        return ""
    minutes = math.floor((resolve_now(now) - moment).total_seconds() / 60)
    if minutes < 1:
        return "Just now"
    if minutes < 60:
        return f"{minutes}m ago"
    hours = minutes // 60
    if hours < 24:
        return f"{hours}h ago"
    return f"{hours // 24}d ago"
