"""Countdown calculator — live remaining/overtime/progress for one order.

Every function here is pure: the result depends only on the snapshot and
the injected instant, so any number of order timers can be recomputed
independently, in any order, and again after a restart.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any

from preptimer.core.snapshot import OrderSnapshot, is_preparing_status, resolve_now

logger = logging.getLogger(__name__)

WARNING_THRESHOLD_SECONDS = 300


@dataclass(frozen=True)
class TimerState:
    """Countdown state of one order at one instant.

    While counting down ``remaining_seconds`` is the time left; once the
    window has elapsed it holds the overtime elapsed instead.
    """

    remaining_seconds: int = 0
    is_overtime: bool = False
    progress_percent: float = 0.0
    start_time: datetime | None = None
    end_time: datetime | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "remainingSeconds": self.remaining_seconds,
            "isOvertime": self.is_overtime,
            "progressPercent": self.progress_percent,
            "startTime": self.start_time.isoformat() if self.start_time else None,
            "endTime": self.end_time.isoformat() if self.end_time else None,
        }


ZERO_STATE = TimerState()


def _preparation_window(snapshot: Any) -> tuple[datetime, datetime, float] | None:
    """Return ``(start, end, total_seconds)`` or ``None`` for unusable input."""
    snapshot = OrderSnapshot.coerce(snapshot)
    if snapshot is None:
        return None
    minutes = snapshot.estimated_minutes
    start = snapshot.started_at
    if minutes is None or minutes <= 0 or start is None:
        logger.debug("No usable preparation window in %r", snapshot)
        return None
    try:
        end = start + timedelta(minutes=minutes)
    except OverflowError:
        logger.debug("Preparation window out of range in %r", snapshot)
        return None
    return start, end, minutes * 60


def calculate_timer_state(snapshot: Any, now: Any = None) -> TimerState:
    """Compute the countdown for *snapshot* at *now* (default: UTC wall clock).

    Returns the zero state when the snapshot is missing, partial, has an
    unparsable start or a non-positive estimate.  A start in the future
    (clock skew) still yields a consistent state with progress clamped to 0.
    """
    window = _preparation_window(snapshot)
    if window is None:
        return ZERO_STATE
    start, end, total_seconds = window
    now = resolve_now(now)

    to_deadline = (end - now).total_seconds()
    if to_deadline > 0:
        remaining = math.floor(to_deadline)
        is_overtime = False
    else:
        remaining = math.floor(-to_deadline)
        is_overtime = True

    elapsed = math.floor((now - start).total_seconds())
    progress = min(100.0, max(0.0, elapsed / total_seconds * 100))

    return TimerState(
        remaining_seconds=remaining,
        is_overtime=is_overtime,
        progress_percent=progress,
        start_time=start,
        end_time=end,
    )


def get_estimated_completion_time(snapshot: Any) -> datetime | None:
    """Return the instant the preparation window closes, or ``None``."""
    window = _preparation_window(snapshot)
    if window is None:
        return None
    return window[1]


def get_progress_percentage(timer_state: Any) -> float:
    """Progress for a circular indicator: saturates at 100 once overtime."""
    if not isinstance(timer_state, TimerState) or timer_state.is_overtime:
        return 100.0
    return min(100.0, max(0.0, timer_state.progress_percent))


def get_timer_color(timer_state: Any) -> str:
    """Display tone for a countdown: slate, orange, yellow or blue."""
    if not isinstance(timer_state, TimerState):
        return "slate"
    if timer_state.is_overtime:
        return "orange"
    if timer_state.remaining_seconds < WARNING_THRESHOLD_SECONDS:
        return "yellow"
    return "blue"


def _present(value: Any) -> bool:
    if isinstance(value, float) and math.isnan(value):
        return False
    return value is not None and value is not False and value != "" and value != 0


def is_order_preparing(snapshot: Any) -> bool:
    """True when the order is in the preparing phase with timing data set.

    Gates whether a poller should compute the countdown at all.
    """
    snapshot = OrderSnapshot.coerce(snapshot)
    if snapshot is None:
        return False
    return (
        is_preparing_status(snapshot.status)
        and _present(snapshot.preparation_time)
        and _present(snapshot.preparing_at)
    )
