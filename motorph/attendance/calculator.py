# motorph/attendance/calculator.py

from dataclasses import dataclass
from datetime import datetime, time, timedelta

# --- STANDARD SHIFT ---
STANDARD_START = time(8, 0)
STANDARD_END = time(17, 0)
GRACE_PERIOD_MINUTES = 15
MEAL_BREAK_MINUTES = 60
FULL_DAY_HOURS = 8


@dataclass(frozen=True)
class ShiftPolicy:
    start: time = STANDARD_START
    end: time = STANDARD_END
    grace_minutes: int = GRACE_PERIOD_MINUTES
    meal_break_minutes: int = MEAL_BREAK_MINUTES
    full_day_hours: int = FULL_DAY_HOURS

    @property
    def late_threshold(self):
        return _shift_time(self.start, self.grace_minutes)


DEFAULT_SHIFT = ShiftPolicy()


@dataclass(frozen=True)
class AttendanceMetrics:
    date: object
    worked: timedelta
    is_present: bool
    minutes_late: int
    minutes_early: int
    paid_minutes: int
    overtime_minutes: int
    is_full_day: bool

    @property
    def is_late(self):
        return self.minutes_late > 0

    @property
    def has_undertime(self):
        return self.minutes_early > 0

    @property
    def worked_minutes(self):
        return _whole_minutes(self.worked)


# --- HELPERS ---
def _shift_time(t, minutes):
    return (datetime.combine(datetime.min, t) + timedelta(minutes=minutes)).time()


def _between(earlier, later):
    return datetime.combine(datetime.min, later) - datetime.combine(datetime.min, earlier)


def _whole_minutes(delta):
    return int(delta.total_seconds() // 60)


def minutes_late(log_in, shift=DEFAULT_SHIFT):
    """
    Minutes late for a log-in time.

    The grace period only decides whether lateness counts at all. Once the
    arrival is past start + grace, the penalty runs from the standard start.
    """
    if log_in is None or log_in <= shift.late_threshold:
        return 0
    return _whole_minutes(_between(shift.start, log_in))


def minutes_early(log_out, shift=DEFAULT_SHIFT):
    """Minutes left before the standard end. No grace applies here."""
    if log_out is None or log_out >= shift.end:
        return 0
    return _whole_minutes(_between(log_out, shift.end))


def worked_duration(record):
    if record.log_in is None or record.log_out is None:
        return timedelta(0)
    return _between(record.log_in, record.log_out)


# --- CORE LOGIC: SINGLE RECORD ---
def evaluate_attendance(record, shift=DEFAULT_SHIFT, required_hours=FULL_DAY_HOURS):
    """
    Derives time metrics for one attendance record.

    A record with only a log-in is an ongoing workday: zero worked time and
    no undertime. Paid minutes are worked time less the meal break.
    Overtime minutes are whatever paid time exceeds the employee's required
    hours; eligibility is decided by the payroll calculator.
    """
    worked = worked_duration(record)
    worked_minutes = _whole_minutes(worked)
    paid_minutes = max(0, worked_minutes - shift.meal_break_minutes)
    overtime = max(0, paid_minutes - required_hours * 60)

    return AttendanceMetrics(
        date=record.date,
        worked=worked,
        is_present=record.log_in is not None,
        minutes_late=minutes_late(record.log_in, shift),
        minutes_early=minutes_early(record.log_out, shift),
        paid_minutes=paid_minutes,
        overtime_minutes=overtime,
        is_full_day=worked >= timedelta(hours=shift.full_day_hours),
    )


# --- PERIOD TOTALS ---
@dataclass(frozen=True)
class AttendanceSummary:
    days_worked: int
    worked: timedelta
    late_minutes: int
    undertime_minutes: int
    paid_minutes: int
    overtime_minutes: int
    days: tuple

    @property
    def worked_minutes(self):
        return _whole_minutes(self.worked)


def summarize_attendance(records, shift=DEFAULT_SHIFT, required_hours=FULL_DAY_HOURS):
    """Evaluates every record and totals the period figures."""
    metrics = tuple(evaluate_attendance(r, shift, required_hours) for r in records)
    return AttendanceSummary(
        days_worked=sum(1 for m in metrics if m.is_present),
        worked=sum((m.worked for m in metrics), timedelta(0)),
        late_minutes=sum(m.minutes_late for m in metrics),
        undertime_minutes=sum(m.minutes_early for m in metrics),
        paid_minutes=sum(m.paid_minutes for m in metrics),
        overtime_minutes=sum(m.overtime_minutes for m in metrics),
        days=metrics,
    )
