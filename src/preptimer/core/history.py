"""Historical analyzer — estimated vs. actual preparation time for finished orders."""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Any

from preptimer.core.snapshot import OrderSnapshot


class TimingOutcome(Enum):
    """Classification of a finished order's preparation timing."""

    NO_DATA = "no-data"
    ON_TIME = "on-time"
    OVERTIME = "overtime"


@dataclass(frozen=True)
class TimingSummary:
    estimated_minutes: float | None = None
    actual_minutes: int | None = None
    overtime_minutes: float | None = None
    has_timing_data: bool = False
    was_on_time: bool = False
    was_overtime: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "estimatedMinutes": self.estimated_minutes,
            "actualMinutes": self.actual_minutes,
            "overtimeMinutes": self.overtime_minutes,
            "hasTimingData": self.has_timing_data,
            "wasOnTime": self.was_on_time,
            "wasOvertime": self.was_overtime,
        }


@dataclass(frozen=True)
class TimingStatus:
    """Visual indicator for a finished order's timing."""

    status: TimingOutcome
    color: str
    icon: str
    label: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.status.value,
            "color": self.color,
            "icon": self.icon,
            "label": self.label,
        }


def _whole(minutes: float) -> int | float:
    """Render integral estimates as ``int`` so messages read ``20`` not ``20.0``."""
    return int(minutes) if float(minutes).is_integer() else minutes


def get_actual_preparation_time(snapshot: Any) -> int | None:
    """Minutes between ``preparingAt`` and ``readyAt``, rounded half up.

    ``None`` when either timestamp is missing or unparsable, or when the
    order was marked ready before it started.
    """
    snapshot = OrderSnapshot.coerce(snapshot)
    if snapshot is None:
        return None
    start, finish = snapshot.started_at, snapshot.finished_at
    if start is None or finish is None:
        return None
    seconds = (finish - start).total_seconds()
    if seconds < 0:
        return None
    return math.floor(seconds / 60 + 0.5)


def _estimate(snapshot: OrderSnapshot | None) -> int | float | None:
    if snapshot is None:
        return None
    minutes = snapshot.estimated_minutes
    if minutes is None or minutes <= 0:
        return None
    return _whole(minutes)


def get_overtime_duration(snapshot: Any) -> int | float | None:
    """Minutes beyond the estimate, or ``None`` when on time, early or unknown."""
    snapshot = OrderSnapshot.coerce(snapshot)
    estimated = _estimate(snapshot)
    if estimated is None:
        return None
    actual = get_actual_preparation_time(snapshot)
    if actual is None:
        return None
    overtime = _whole(round(actual - estimated, 2))
    return overtime if overtime > 0 else None


def get_timing_summary(snapshot: Any) -> TimingSummary:
    snapshot = OrderSnapshot.coerce(snapshot)
    estimated = _estimate(snapshot)
    actual = get_actual_preparation_time(snapshot)
    overtime = get_overtime_duration(snapshot)
    has_timing_data = estimated is not None and actual is not None
    return TimingSummary(
        estimated_minutes=estimated,
        actual_minutes=actual,
        overtime_minutes=overtime,
        has_timing_data=has_timing_data,
        was_on_time=has_timing_data and overtime is None,
        was_overtime=has_timing_data and overtime is not None and overtime > 0,
    )


def format_timing_comparison(snapshot: Any) -> str:
    """One-line description of how the order's timing compared to its estimate."""
    summary = get_timing_summary(snapshot)
    if not summary.has_timing_data:
        return "Preparation time was not tracked for this order"
    if summary.was_on_time:
        return (
            f"Prepared in {summary.actual_minutes} minutes "
            f"(as estimated: {summary.estimated_minutes} minutes)"
        )
    return (
        f"Prepared in {summary.actual_minutes} minutes "
        f"({summary.overtime_minutes} minutes overtime, "
        f"estimated: {summary.estimated_minutes} minutes)"
    )


def get_timing_status(snapshot: Any) -> TimingStatus:
    summary = get_timing_summary(snapshot)
    if not summary.has_timing_data:
        return TimingStatus(TimingOutcome.NO_DATA, "slate", "⏳", "No timing data")
    if summary.was_on_time:
        return TimingStatus(TimingOutcome.ON_TIME, "green", "✅", "On time")
    return TimingStatus(
        TimingOutcome.OVERTIME,
        "orange",
        "⏰",
        f"+{summary.overtime_minutes}min overtime",
    )
