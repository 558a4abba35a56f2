"""Pure timer engine: countdown, formatting, validation and timing history."""

from preptimer.core.countdown import (
    TimerState,
    calculate_timer_state,
    get_estimated_completion_time,
    get_progress_percentage,
    get_timer_color,
    is_order_preparing,
)
from preptimer.core.formatting import format_time, get_time_ago
from preptimer.core.history import (
    TimingOutcome,
    TimingStatus,
    TimingSummary,
    format_timing_comparison,
    get_actual_preparation_time,
    get_overtime_duration,
    get_timing_status,
    get_timing_summary,
)
from preptimer.core.snapshot import OrderSnapshot
from preptimer.core.validation import ValidationResult, validate_preparation_time

__all__ = [
    "OrderSnapshot",
    "TimerState",
    "TimingOutcome",
    "TimingStatus",
    "TimingSummary",
    "ValidationResult",
    "calculate_timer_state",
    "format_time",
    "format_timing_comparison",
    "get_actual_preparation_time",
    "get_estimated_completion_time",
    "get_overtime_duration",
    "get_progress_percentage",
    "get_time_ago",
    "get_timer_color",
    "get_timing_status",
    "get_timing_summary",
    "is_order_preparing",
    "validate_preparation_time",
]
