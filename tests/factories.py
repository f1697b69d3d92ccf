from datetime import date, time, timedelta
from decimal import Decimal

from motorph.domain import AttendanceRecord, EmployeeProfile, EmploymentStatus, PeriodRange


def make_profile(employee_id=1, basic_salary='25000.00', status=EmploymentStatus.REGULAR, **kwargs):
    kwargs.setdefault('rice_subsidy', Decimal('1500.00'))
    kwargs.setdefault('phone_allowance', Decimal('800.00'))
    kwargs.setdefault('clothing_allowance', Decimal('1000.00'))
    return EmployeeProfile(employee_id=employee_id, basic_salary=Decimal(basic_salary), status=status, **kwargs)


def workdays(start, count):
    """The first `count` Monday-Friday dates from `start` onward."""
    days = []
    current = start
    while len(days) < count:
        if current.weekday() < 5:
            days.append(current)
        current += timedelta(days=1)
    return days


def make_records(employee_id, days, log_in=time(8, 0), log_out=time(17, 0)):
    return [AttendanceRecord(employee_id, d, log_in, log_out) for d in days]


# July 2025 starts on a Tuesday and has 23 weekdays
FULL_MONTH = PeriodRange(date(2025, 7, 1), date(2025, 7, 31))
FULL_MONTH_DAYS = workdays(date(2025, 7, 1), 22)
