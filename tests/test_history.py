"""Tests for the historical timing analyzer."""

from datetime import datetime, timedelta, timezone

import pytest

from preptimer.core.history import (
    TimingOutcome,
    TimingSummary,
    format_timing_comparison,
    get_actual_preparation_time,
    get_overtime_duration,
    get_timing_status,
    get_timing_summary,
)

T0 = datetime(2026, 3, 14, 12, 0, 0, tzinfo=timezone.utc)


def _finished(estimated, duration, status="ready"):
    return {
        "status": status,
        "preparationTime": estimated,
        "preparingAt": T0.isoformat(),
        "readyAt": (T0 + duration).isoformat(),
    }


# ---------------------------------------------------------------------------
# get_actual_preparation_time()
# ---------------------------------------------------------------------------


class TestActualPreparationTime:
    def test_whole_minutes(self) -> None:
        assert get_actual_preparation_time(_finished(20, timedelta(minutes=37))) == 37

    def test_rounds_half_up(self) -> None:
        assert get_actual_preparation_time(_finished(20, timedelta(minutes=12, seconds=30))) == 13
        assert get_actual_preparation_time(_finished(20, timedelta(minutes=12, seconds=29))) == 12

    def test_zero_duration(self) -> None:
        assert get_actual_preparation_time(_finished(20, timedelta(0))) == 0

    def test_ready_before_start(self) -> None:
        assert get_actual_preparation_time(_finished(20, timedelta(minutes=-3))) is None

    @pytest.mark.parametrize(
        "snapshot",
        [
            None,
            "order",
            {"preparingAt": T0.isoformat()},
            {"readyAt": T0.isoformat()},
            {"preparingAt": "garbage", "readyAt": T0.isoformat()},
            {"preparingAt": T0.isoformat(), "readyAt": "garbage"},
        ],
    )
    def test_missing_data(self, snapshot) -> None:
        assert get_actual_preparation_time(snapshot) is None


# ---------------------------------------------------------------------------
# get_overtime_duration()
# ---------------------------------------------------------------------------


class TestOvertimeDuration:
    def test_overtime(self) -> None:
        assert get_overtime_duration(_finished(20, timedelta(minutes=37))) == 17

    def test_on_time(self) -> None:
        assert get_overtime_duration(_finished(20, timedelta(minutes=20))) is None

    def test_early(self) -> None:
        assert get_overtime_duration(_finished(20, timedelta(minutes=12))) is None

    @pytest.mark.parametrize("estimated", [None, 0, "n/a", -5])
    def test_no_estimate(self, estimated) -> None:
        assert get_overtime_duration(_finished(estimated, timedelta(minutes=37))) is None


# ---------------------------------------------------------------------------
# get_timing_summary()
# ---------------------------------------------------------------------------


class TestTimingSummary:
    def test_overtime_summary(self) -> None:
        summary = get_timing_summary(_finished(20, timedelta(minutes=37)))
        assert summary == TimingSummary(
            estimated_minutes=20,
            actual_minutes=37,
            overtime_minutes=17,
            has_timing_data=True,
            was_on_time=False,
            was_overtime=True,
        )

    def test_on_time_summary(self) -> None:
        summary = get_timing_summary(_finished(20, timedelta(minutes=18)))
        assert summary.has_timing_data is True
        assert summary.was_on_time is True
        assert summary.was_overtime is False
        assert summary.overtime_minutes is None

    def test_quick_order_counts_as_timed(self) -> None:
        summary = get_timing_summary(_finished(10, timedelta(seconds=20)))
        assert summary.actual_minutes == 0
        assert summary.has_timing_data is True
        assert summary.was_on_time is True

    def test_no_timing_data(self) -> None:
        summary = get_timing_summary({"status": "ready", "preparationTime": 20})
        assert summary.estimated_minutes == 20
        assert summary.actual_minutes is None
        assert summary.has_timing_data is False
        assert summary.was_on_time is False
        assert summary.was_overtime is False

    @pytest.mark.parametrize("snapshot", [None, 5, "x", []])
    def test_empty_summary(self, snapshot) -> None:
        assert get_timing_summary(snapshot) == TimingSummary()

    def test_numeric_string_estimate(self) -> None:
        summary = get_timing_summary(_finished("20", timedelta(minutes=25)))
        assert summary.estimated_minutes == 20
        assert summary.overtime_minutes == 5

    def test_to_dict(self) -> None:
        payload = get_timing_summary(_finished(20, timedelta(minutes=37))).to_dict()
        assert payload["wasOvertime"] is True
        assert payload["overtimeMinutes"] == 17


# ---------------------------------------------------------------------------
# format_timing_comparison()
# ---------------------------------------------------------------------------


class TestFormatTimingComparison:
    def test_on_time(self) -> None:
        text = format_timing_comparison(_finished(20, timedelta(minutes=18)))
        assert text == "Prepared in 18 minutes (as estimated: 20 minutes)"

    def test_overtime(self) -> None:
        text = format_timing_comparison(_finished(20, timedelta(minutes=37)))
        assert "37" in text
        assert "20" in text
        assert "overtime" in text
        assert "17" in text

    def test_not_tracked(self) -> None:
        assert "was not tracked" in format_timing_comparison({"preparationTime": 20})
        assert "was not tracked" in format_timing_comparison(None)


# ---------------------------------------------------------------------------
# get_timing_status()
# ---------------------------------------------------------------------------


class TestTimingStatus:
    def test_no_data(self) -> None:
        status = get_timing_status(None)
        assert status.status is TimingOutcome.NO_DATA
        assert status.label == "No timing data"

    def test_on_time(self) -> None:
        status = get_timing_status(_finished(20, timedelta(minutes=20)))
        assert status.status is TimingOutcome.ON_TIME
        assert status.color == "green"

    def test_overtime_label_has_minutes(self) -> None:
        status = get_timing_status(_finished(20, timedelta(minutes=25)))
        assert status.status is TimingOutcome.OVERTIME
        assert status.label == "+5min overtime"
        assert status.to_dict()["status"] == "overtime"

    def test_fractional_estimate_label_is_rounded(self) -> None:
        snapshot = _finished(7.1, timedelta(minutes=10))
        assert get_overtime_duration(snapshot) == 2.9
        assert get_timing_status(snapshot).label == "+2.9min overtime"
        assert "2.9 minutes overtime" in format_timing_comparison(snapshot)
