# motorph/payroll/deductions.py
"""
Deduction assembly.

Each deduction kind is its own small record carrying only what it needs;
``deduction_amount`` is the one place that knows how to price them.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal

from motorph.errors import CalculationError

logger = logging.getLogger(__name__)

CENTS = Decimal('0.01')
ZERO = Decimal('0.00')

SSS = 'SSS'
PHILHEALTH = 'PhilHealth'
PAGIBIG = 'PagIBIG'
CONTRIBUTION_KINDS = (SSS, PHILHEALTH, PAGIBIG)


@dataclass(frozen=True)
class LateDeduction:
    minutes: int
    hourly_rate: Decimal


@dataclass(frozen=True)
class UndertimeDeduction:
    minutes: int
    hourly_rate: Decimal


@dataclass(frozen=True)
class UnpaidLeaveDeduction:
    days: int
    daily_rate: Decimal


@dataclass(frozen=True)
class GovernmentContribution:
    kind: str
    amount: Decimal


@dataclass(frozen=True)
class TaxDeduction:
    amount: Decimal


def deduction_amount(item):
    """Prices a single deduction, zero-clamped and rounded to centavos."""
    if isinstance(item, (LateDeduction, UndertimeDeduction)):
        amount = Decimal(max(item.minutes, 0)) / 60 * item.hourly_rate
    elif isinstance(item, UnpaidLeaveDeduction):
        amount = Decimal(max(item.days, 0)) * item.daily_rate
    elif isinstance(item, GovernmentContribution):
        if item.kind not in CONTRIBUTION_KINDS:
            raise CalculationError(f"Unknown contribution kind: {item.kind!r}")
        amount = item.amount
    elif isinstance(item, TaxDeduction):
        amount = item.amount
    else:
        raise CalculationError(f"Unsupported deduction type: {type(item).__name__}")

    amount = Decimal(amount).quantize(CENTS)
    if amount < 0:
        raise CalculationError(
            f"{type(item).__name__} produced a negative amount ({amount})",
            error_data={'deduction': repr(item)}
        )
    return amount


def count_unpaid_leave_days(leave_dates, period):
    """Distinct Monday-Friday leave dates that fall inside the period."""
    return len(set(leave_dates).intersection(period.weekdays()))


@dataclass(frozen=True)
class DeductionSummary:
    late: Decimal
    undertime: Decimal
    unpaid_leave: Decimal
    sss: Decimal
    philhealth: Decimal
    pagibig: Decimal
    tax: Decimal

    @property
    def time_based(self):
        return self.late + self.undertime + self.unpaid_leave

    @property
    def statutory(self):
        return self.sss + self.philhealth + self.pagibig + self.tax

    @property
    def total(self):
        return self.time_based + self.statutory


def assemble_deductions(late_minutes, undertime_minutes, unpaid_leave_days,
                        hourly_rate, daily_rate, contributions, tax):
    """Combines time-based deductions with government contributions and tax."""
    items = {
        'late': LateDeduction(late_minutes, hourly_rate),
        'undertime': UndertimeDeduction(undertime_minutes, hourly_rate),
        'unpaid_leave': UnpaidLeaveDeduction(unpaid_leave_days, daily_rate),
        'sss': GovernmentContribution(SSS, contributions.sss),
        'philhealth': GovernmentContribution(PHILHEALTH, contributions.philhealth),
        'pagibig': GovernmentContribution(PAGIBIG, contributions.pagibig),
        'tax': TaxDeduction(tax),
    }
    summary = DeductionSummary(**{name: deduction_amount(item) for name, item in items.items()})

    logger.debug(
        "Deductions - Late: %s, Undertime: %s, Unpaid Leave: %s, SSS: %s, PhilHealth: %s, Pag-IBIG: %s, Tax: %s",
        summary.late, summary.undertime, summary.unpaid_leave,
        summary.sss, summary.philhealth, summary.pagibig, summary.tax
    )
    return summary
