# motorph/domain.py
"""
Value types the payroll engine computes over.

These are plain immutable records supplied by the caller; the ORM rows in
``motorph.models.records`` are converted into them by the repository.
"""

import enum
from dataclasses import dataclass
from datetime import date, time, timedelta
from decimal import Decimal
from typing import Optional

from motorph.errors import ValidationError


class EmploymentStatus(enum.Enum):
    REGULAR = 'Regular'
    PROBATIONARY = 'Probationary'
    CONTRACTUAL = 'Contractual'
    PART_TIME = 'Part-time'

    @classmethod
    def parse(cls, value):
        if isinstance(value, cls):
            return value
        normalized = str(value or '').strip().lower().replace('_', '-')
        for status in cls:
            if status.value.lower() == normalized or status.name.lower().replace('_', '-') == normalized:
                return status
        raise ValidationError(f"Unknown employment status: {value!r}", field='status', value=value)


class EmploymentCategory(enum.Enum):
    EMPLOYEE = 'Employee'
    MANAGER = 'Manager'
    HR_PERSONNEL = 'HR Personnel'
    CONTRACTOR = 'Contractor'

    @classmethod
    def parse(cls, value):
        if isinstance(value, cls):
            return value
        if value is None:
            return cls.EMPLOYEE
        normalized = str(value).strip().lower().replace('_', ' ')
        for category in cls:
            if category.value.lower() == normalized or category.name.lower().replace('_', ' ') == normalized:
                return category
        raise ValidationError(f"Unknown employment category: {value!r}", field='category', value=value)


def _to_decimal(value, field_name):
    if isinstance(value, float):
        # Go through str so 1500.1 stays 1500.1
        value = str(value)
    try:
        amount = value if isinstance(value, Decimal) else Decimal(value)
    except (TypeError, ArithmeticError):
        raise ValidationError(f"{field_name} must be a number", field=field_name, value=value)
    if not amount.is_finite():
        raise ValidationError(f"{field_name} must be a finite number", field=field_name, value=value)
    return amount


@dataclass(frozen=True)
class EmployeeProfile:
    employee_id: int
    basic_salary: Decimal
    status: EmploymentStatus = EmploymentStatus.REGULAR
    rice_subsidy: Decimal = Decimal('0.00')
    phone_allowance: Decimal = Decimal('0.00')
    clothing_allowance: Decimal = Decimal('0.00')
    category: EmploymentCategory = EmploymentCategory.EMPLOYEE
    name: Optional[str] = None
    # Category-specific inputs; only the matching category policy pays them
    management_allowance: Decimal = Decimal('0.00')
    team_size: int = 0
    certification_count: int = 0
    confidential_data_access: bool = False

    def __post_init__(self):
        if not isinstance(self.employee_id, int) or self.employee_id <= 0:
            raise ValidationError("Employee ID must be positive", field='employee_id', value=self.employee_id)

        object.__setattr__(self, 'status', EmploymentStatus.parse(self.status))
        object.__setattr__(self, 'category', EmploymentCategory.parse(self.category))
        # Salary sign is checked by the calculator so it can be reported per employee
        object.__setattr__(self, 'basic_salary', _to_decimal(self.basic_salary, 'basic_salary'))

        for name in ('rice_subsidy', 'phone_allowance', 'clothing_allowance', 'management_allowance'):
            amount = _to_decimal(getattr(self, name), name)
            if amount < 0:
                raise ValidationError(f"{name} cannot be negative", field=name, value=amount)
            object.__setattr__(self, name, amount)

        for name in ('team_size', 'certification_count'):
            count = getattr(self, name)
            if not isinstance(count, int) or count < 0:
                raise ValidationError(f"{name} must be a non-negative whole number", field=name, value=count)
        object.__setattr__(self, 'confidential_data_access', bool(self.confidential_data_access))

    @property
    def required_hours_per_day(self):
        return 4 if self.status is EmploymentStatus.PART_TIME else 8

    @property
    def display_name(self):
        return self.name or f"Employee #{self.employee_id}"


@dataclass(frozen=True)
class AttendanceRecord:
    employee_id: int
    date: date
    log_in: Optional[time] = None
    log_out: Optional[time] = None

    def __post_init__(self):
        if not isinstance(self.employee_id, int) or self.employee_id <= 0:
            raise ValidationError("Employee ID must be positive", field='employee_id', value=self.employee_id)
        if self.date is None:
            raise ValidationError("Attendance date cannot be empty", field='date')
        if self.log_out is not None:
            if self.log_in is None:
                raise ValidationError(
                    "Log out cannot be recorded before log in",
                    field='log_out', value=self.log_out,
                    error_data={'date': self.date.isoformat()}
                )
            if self.log_out < self.log_in:
                raise ValidationError(
                    "Log out time cannot be before log in time",
                    field='log_out', value=self.log_out,
                    error_data={'date': self.date.isoformat(), 'log_in': self.log_in.isoformat()}
                )

    @property
    def is_present(self):
        return self.log_in is not None


@dataclass(frozen=True)
class PeriodRange:
    start: date
    end: date

    def __post_init__(self):
        if self.start is None or self.end is None:
            raise ValidationError("Period dates cannot be empty", field='period')
        if self.start > self.end:
            raise ValidationError(
                f"Invalid date range: period end ({self.end}) cannot be before period start ({self.start})",
                field='period',
                error_data={'start': self.start.isoformat(), 'end': self.end.isoformat()}
            )

    def contains(self, day):
        return self.start <= day <= self.end

    def days(self):
        current = self.start
        while current <= self.end:
            yield current
            current += timedelta(days=1)

    def weekdays(self):
        return (d for d in self.days() if d.weekday() < 5)

    def to_dict(self):
        return {'start': self.start.isoformat(), 'end': self.end.isoformat()}
