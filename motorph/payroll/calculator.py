# motorph/payroll/calculator.py

import logging
from collections import namedtuple
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from decimal import Decimal

from motorph.attendance.calculator import summarize_attendance
from motorph.domain import PeriodRange
from motorph.errors import CalculationError, NotFoundError, PayrollError, ValidationError
from motorph.payroll.allowances import (
    PAY_BASIS_HOURLY,
    aggregate_allowances,
    is_overtime_eligible,
    policy_for,
)
from motorph.payroll.contributions import NO_CONTRIBUTIONS, contributions
from motorph.payroll.deductions import assemble_deductions, count_unpaid_leave_days
from motorph.payroll.settings import DEFAULT_SETTINGS
from motorph.payroll.tax import calculate_withholding_tax

logger = logging.getLogger(__name__)

CENTS = Decimal('0.01')
ZERO = Decimal('0.00')


def _money(value):
    return Decimal(value).quantize(CENTS)


@dataclass(frozen=True)
class PayrollResult:
    """
    One employee's itemized pay for one period.

    Totals are derived on access, so net pay is always gross pay minus
    total deductions. Recalculating produces a new instance.
    """
    employee_id: int
    period: PeriodRange
    monthly_rate: Decimal
    daily_rate: Decimal
    hourly_rate: Decimal
    days_worked: int
    overtime_hours: Decimal
    gross_earnings: Decimal
    overtime_pay: Decimal
    rice_subsidy: Decimal
    phone_allowance: Decimal
    clothing_allowance: Decimal
    category_allowance: Decimal
    taxable_income: Decimal
    sss: Decimal
    philhealth: Decimal
    pagibig: Decimal
    tax: Decimal
    late_minutes: int
    undertime_minutes: int
    unpaid_leave_days: int
    late_deduction: Decimal
    undertime_deduction: Decimal
    unpaid_leave_deduction: Decimal

    @property
    def total_allowances(self):
        return self.rice_subsidy + self.phone_allowance + self.clothing_allowance + self.category_allowance

    @property
    def gross_pay(self):
        return self.gross_earnings + self.total_allowances + self.overtime_pay

    @property
    def total_government_contributions(self):
        return self.sss + self.philhealth + self.pagibig

    @property
    def total_deductions(self):
        return (self.late_deduction + self.undertime_deduction + self.unpaid_leave_deduction
                + self.total_government_contributions + self.tax)

    @property
    def net_pay(self):
        return self.gross_pay - self.total_deductions

    def to_dict(self):
        return {
            'employee_id': self.employee_id,
            'period': self.period.to_dict(),
            'monthly_rate': str(self.monthly_rate),
            'daily_rate': str(self.daily_rate),
            'hourly_rate': str(self.hourly_rate),
            'days_worked': self.days_worked,
            'overtime_hours': str(self.overtime_hours),
            'gross_earnings': str(self.gross_earnings),
            'overtime_pay': str(self.overtime_pay),
            'rice_subsidy': str(self.rice_subsidy),
            'phone_allowance': str(self.phone_allowance),
            'clothing_allowance': str(self.clothing_allowance),
            'category_allowance': str(self.category_allowance),
            'total_allowances': str(self.total_allowances),
            'gross_pay': str(self.gross_pay),
            'taxable_income': str(self.taxable_income),
            'sss': str(self.sss),
            'philhealth': str(self.philhealth),
            'pagibig': str(self.pagibig),
            'tax': str(self.tax),
            'late_minutes': self.late_minutes,
            'undertime_minutes': self.undertime_minutes,
            'unpaid_leave_days': self.unpaid_leave_days,
            'late_deduction': str(self.late_deduction),
            'undertime_deduction': str(self.undertime_deduction),
            'unpaid_leave_deduction': str(self.unpaid_leave_deduction),
            'total_deductions': str(self.total_deductions),
            'net_pay': str(self.net_pay),
        }


class PayrollOutcome(namedtuple('PayrollOutcome', ['employee_id', 'result', 'error'])):
    """Either a PayrollResult or the PayrollError that prevented it."""
    __slots__ = ()

    @property
    def ok(self):
        return self.error is None

    def to_dict(self):
        if self.ok:
            return {'employee_id': self.employee_id, 'status': 'ok', 'payroll': self.result.to_dict()}
        return {'employee_id': self.employee_id, 'status': 'error', **self.error.to_dict()}


# --- STAGE 1: VALIDATION ---
def _overtime_input(overtime_hours):
    if overtime_hours is None:
        return None
    try:
        hours = Decimal(str(overtime_hours))
    except ArithmeticError:
        raise ValidationError("Overtime hours must be a number", field='overtime_hours', value=overtime_hours)
    if not hours.is_finite() or hours < 0:
        raise ValidationError("Overtime hours must be a non-negative number", field='overtime_hours', value=hours)
    return hours


def validate_inputs(profile, records, period, overtime_hours=None):
    """Rejects malformed input; returns supplied overtime hours as a Decimal (or None)."""
    if period.start > period.end:
        raise ValidationError("Period start cannot be after period end", field='period')
    if profile.basic_salary < 0:
        raise ValidationError(
            f"Employee {profile.employee_id} has a negative basic salary",
            field='basic_salary', value=profile.basic_salary
        )

    seen_dates = set()
    for record in records:
        if record.employee_id != profile.employee_id:
            raise ValidationError(
                f"Attendance record for employee {record.employee_id} supplied for employee {profile.employee_id}",
                field='employee_id', value=record.employee_id,
                error_data={'date': record.date.isoformat()}
            )
        if record.date in seen_dates:
            raise ValidationError(
                f"Duplicate attendance date {record.date} for employee {profile.employee_id}",
                field='date', value=record.date.isoformat()
            )
        seen_dates.add(record.date)

    return _overtime_input(overtime_hours)


# --- MAIN CALCULATOR ---
def calculate_payroll(profile, records, period, unpaid_leave_dates=(), overtime_hours=None, settings=None):
    """
    Runs all payroll calculations for a single employee and period.

    Args:
        profile (EmployeeProfile): The employee being paid.
        records (iterable of AttendanceRecord): At most one per date.
        period (PeriodRange): Inclusive pay period.
        unpaid_leave_dates (iterable of date): Designated unpaid leave days.
        overtime_hours (Decimal): Approved overtime; derived from attendance when None.
        settings (PayrollSettings): Shift and rate constants.

    Returns:
        A PayrollResult. Raises ValidationError or CalculationError instead
        of returning a partial result.
    """
    settings = settings or DEFAULT_SETTINGS
    records = list(records)
    overtime_hours = validate_inputs(profile, records, period, overtime_hours)

    policy = policy_for(profile)
    required_hours = profile.required_hours_per_day

    # --- 1. Attendance ---
    in_period = [r for r in records if period.contains(r.date)]
    if len(in_period) != len(records):
        logger.debug("Ignoring %d attendance records outside %s to %s for employee %d",
                     len(records) - len(in_period), period.start, period.end, profile.employee_id)
    attendance = summarize_attendance(in_period, settings.shift, required_hours)
    if attendance.days_worked == 0:
        logger.warning("No attendance found for employee %d in period %s to %s",
                       profile.employee_id, period.start, period.end)

    # --- 2. Rates ---
    monthly_rate = profile.basic_salary
    daily_rate = monthly_rate / settings.working_days_per_month
    hourly_rate = daily_rate / required_hours

    if policy.pay_basis == PAY_BASIS_HOURLY:
        gross_earnings = _money(Decimal(attendance.paid_minutes) / 60 * hourly_rate)
    else:
        gross_earnings = _money(monthly_rate * attendance.days_worked / settings.working_days_per_month)

    # --- 3. Overtime ---
    if not is_overtime_eligible(profile, policy):
        ot_hours = ZERO
    elif overtime_hours is not None:
        ot_hours = overtime_hours
    else:
        ot_hours = Decimal(attendance.overtime_minutes) / 60
    ot_hours = _money(ot_hours)
    overtime_pay = _money(ot_hours * hourly_rate * settings.overtime_multiplier)

    # --- 4. Allowances and gross ---
    allowances = aggregate_allowances(profile, policy)
    gross_pay = gross_earnings + allowances.total + overtime_pay

    # --- 5. Deductions ---
    statutory = contributions(monthly_rate) if policy.statutory_contributions else NO_CONTRIBUTIONS
    taxable_income = gross_pay - allowances.non_taxable(settings.non_taxable_allowances)
    tax = calculate_withholding_tax(taxable_income, policy.tax_table or settings.tax_table)
    leave_days = count_unpaid_leave_days(unpaid_leave_dates, period)

    deductions = assemble_deductions(
        late_minutes=attendance.late_minutes,
        undertime_minutes=attendance.undertime_minutes,
        unpaid_leave_days=leave_days,
        hourly_rate=hourly_rate,
        daily_rate=daily_rate,
        contributions=statutory,
        tax=tax,
    )

    result = PayrollResult(
        employee_id=profile.employee_id,
        period=period,
        monthly_rate=_money(monthly_rate),
        daily_rate=_money(daily_rate),
        hourly_rate=_money(hourly_rate),
        days_worked=attendance.days_worked,
        overtime_hours=ot_hours,
        gross_earnings=gross_earnings,
        overtime_pay=overtime_pay,
        rice_subsidy=allowances.rice,
        phone_allowance=allowances.phone,
        clothing_allowance=allowances.clothing,
        category_allowance=allowances.category,
        taxable_income=_money(taxable_income),
        sss=deductions.sss,
        philhealth=deductions.philhealth,
        pagibig=deductions.pagibig,
        tax=deductions.tax,
        late_minutes=attendance.late_minutes,
        undertime_minutes=attendance.undertime_minutes,
        unpaid_leave_days=leave_days,
        late_deduction=deductions.late,
        undertime_deduction=deductions.undertime,
        unpaid_leave_deduction=deductions.unpaid_leave,
    )

    if result.total_deductions != deductions.total:
        raise CalculationError("Deduction total does not match its components",
                               error_data={'employee_id': profile.employee_id})

    if result.net_pay < 0:
        logger.warning("Negative net pay for employee %d: %s (Gross: %s, Deductions: %s)",
                       profile.employee_id, result.net_pay, result.gross_pay, result.total_deductions)

    logger.info("Payroll for %s (ID: %d), %s to %s: %d days, gross %s, deductions %s, net %s",
                profile.display_name, profile.employee_id, period.start, period.end,
                result.days_worked, result.gross_pay, result.total_deductions, result.net_pay)
    return result


def evaluate_payroll(profile, records, period, unpaid_leave_dates=(), overtime_hours=None, settings=None):
    """Same as calculate_payroll, but expected failures come back as an outcome."""
    try:
        result = calculate_payroll(profile, records, period, unpaid_leave_dates, overtime_hours, settings)
    except PayrollError as e:
        logger.info("Payroll not computed for employee %d: %s", profile.employee_id, e.message)
        return PayrollOutcome(profile.employee_id, None, e)
    return PayrollOutcome(profile.employee_id, result, None)


# --- BATCH RUNS ---
def _run_one(employee_id, period, employee_lookup, attendance_lookup, leave_lookup, overtime_lookup, settings):
    try:
        profile = employee_lookup(employee_id)
        if profile is None:
            raise NotFoundError('Employee', employee_id)
        records = attendance_lookup(employee_id, period)
        leave_dates = leave_lookup(employee_id, period) if leave_lookup else ()
        overtime = overtime_lookup(employee_id, period) if overtime_lookup else None
    except PayrollError as e:
        logger.info("Skipping employee %s: %s", employee_id, e.message)
        return PayrollOutcome(employee_id, None, e)

    return evaluate_payroll(profile, records, period, leave_dates, overtime, settings)


def run_payroll_batch(employee_ids, period, employee_lookup, attendance_lookup,
                      leave_lookup=None, overtime_lookup=None, settings=None, max_workers=None):
    """
    Computes payroll for many employees, each independently.

    Lookups are plain callables supplied by the caller. One employee's
    failure is reported in its own outcome and never stops the others.
    Outcomes come back in the order of ``employee_ids``.
    """
    settings = settings or DEFAULT_SETTINGS
    employee_ids = list(employee_ids)
    if not employee_ids:
        return []

    workers = max(1, max_workers or settings.max_workers)
    with ThreadPoolExecutor(max_workers=workers) as executor:
        futures = [
            executor.submit(_run_one, employee_id, period, employee_lookup, attendance_lookup,
                            leave_lookup, overtime_lookup, settings)
            for employee_id in employee_ids
        ]
        outcomes = []
        for employee_id, future in zip(employee_ids, futures):
            try:
                outcomes.append(future.result())
            except Exception as e:
                logger.exception("Unexpected error calculating payroll for employee %s", employee_id)
                error = CalculationError(f"Unexpected error during payroll calculation: {e}",
                                         error_data={'employee_id': employee_id})
                outcomes.append(PayrollOutcome(employee_id, None, error))

    failed = sum(1 for o in outcomes if not o.ok)
    logger.info("Payroll batch %s to %s: %d computed, %d failed",
                period.start, period.end, len(outcomes) - failed, failed)
    return outcomes
