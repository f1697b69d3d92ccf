from datetime import date, time, timedelta

import pytest

from motorph.attendance.calculator import (
    ShiftPolicy,
    evaluate_attendance,
    minutes_early,
    minutes_late,
    summarize_attendance,
)
from motorph.domain import AttendanceRecord
from motorph.errors import ValidationError

DAY = date(2025, 7, 1)


def record(log_in, log_out=None):
    return AttendanceRecord(1, DAY, log_in, log_out)


def test_arrival_within_grace_is_not_late():
    metrics = evaluate_attendance(record(time(8, 14), time(17, 0)))
    assert metrics.minutes_late == 0
    assert not metrics.is_late


def test_arrival_exactly_at_grace_boundary_is_not_late():
    assert minutes_late(time(8, 15)) == 0


def test_lateness_is_measured_from_standard_start():
    metrics = evaluate_attendance(record(time(8, 16), time(17, 0)))
    assert metrics.is_late
    assert metrics.minutes_late == 16


def test_undertime_has_no_grace_period():
    # One minute early already counts, unlike lateness
    assert minutes_early(time(16, 59)) == 1
    metrics = evaluate_attendance(record(time(8, 0), time(16, 30)))
    assert metrics.has_undertime
    assert metrics.minutes_early == 30


def test_late_and_undertime_windows_are_asymmetric():
    metrics = evaluate_attendance(record(time(8, 10), time(16, 50)))
    assert metrics.minutes_late == 0
    assert metrics.minutes_early == 10


def test_full_shift():
    metrics = evaluate_attendance(record(time(8, 0), time(17, 0)))
    assert metrics.worked == timedelta(hours=9)
    assert metrics.is_present
    assert metrics.is_full_day
    assert metrics.overtime_minutes == 0


def test_ongoing_workday_has_no_duration_or_undertime():
    metrics = evaluate_attendance(record(time(8, 30)))
    assert metrics.worked == timedelta(0)
    assert metrics.is_present
    assert metrics.minutes_early == 0
    assert metrics.minutes_late == 30
    assert not metrics.is_full_day


def test_absent_record():
    metrics = evaluate_attendance(AttendanceRecord(1, DAY))
    assert not metrics.is_present
    assert metrics.minutes_late == 0
    assert metrics.worked == timedelta(0)


def test_short_day_is_not_full_day():
    metrics = evaluate_attendance(record(time(8, 0), time(15, 59)))
    assert not metrics.is_full_day


def test_overtime_beyond_meal_break_and_required_hours():
    metrics = evaluate_attendance(record(time(8, 0), time(19, 30)))
    assert metrics.overtime_minutes == 150


def test_part_time_overtime_uses_required_hours():
    metrics = evaluate_attendance(record(time(8, 0), time(14, 0)), required_hours=4)
    assert metrics.overtime_minutes == 60


def test_custom_shift():
    shift = ShiftPolicy(start=time(9, 0), end=time(18, 0), grace_minutes=5)
    assert minutes_late(time(9, 5), shift) == 0
    assert minutes_late(time(9, 6), shift) == 6
    assert minutes_early(time(17, 45), shift) == 15


def test_log_out_before_log_in_is_rejected_at_construction():
    with pytest.raises(ValidationError):
        AttendanceRecord(1, DAY, time(17, 0), time(8, 0))


def test_log_out_without_log_in_is_rejected():
    with pytest.raises(ValidationError):
        AttendanceRecord(1, DAY, None, time(17, 0))


def test_summarize_totals_period():
    records = [
        AttendanceRecord(1, date(2025, 7, 1), time(8, 20), time(17, 0)),
        AttendanceRecord(1, date(2025, 7, 2), time(8, 0), time(16, 0)),
        AttendanceRecord(1, date(2025, 7, 3)),
    ]
    summary = summarize_attendance(records)
    assert summary.days_worked == 2
    assert summary.late_minutes == 20
    assert summary.undertime_minutes == 60
    assert summary.worked == timedelta(hours=8, minutes=40) + timedelta(hours=8)
    assert len(summary.days) == 3


def test_paid_minutes_exclude_meal_break():
    assert evaluate_attendance(record(time(8, 0), time(17, 0))).paid_minutes == 480
    assert evaluate_attendance(record(time(8, 0), time(8, 30))).paid_minutes == 0
    assert evaluate_attendance(record(time(8, 0))).paid_minutes == 0


def test_summary_totals_paid_minutes():
    records = [
        AttendanceRecord(1, date(2025, 7, 1), time(8, 0), time(17, 0)),
        AttendanceRecord(1, date(2025, 7, 2), time(8, 0), time(13, 0)),
    ]
    assert summarize_attendance(records).paid_minutes == 480 + 240
