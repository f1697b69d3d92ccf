from decimal import Decimal

from motorph.errors import CalculationError, NotFoundError, ValidationError
from motorph.payroll.calculator import run_payroll_batch

from factories import FULL_MONTH, FULL_MONTH_DAYS, make_profile, make_records

PROFILES = {
    1: make_profile(1),
    2: make_profile(2, basic_salary='-100'),
    3: make_profile(3, basic_salary='30000'),
}


def lookup_employee(employee_id):
    if employee_id not in PROFILES:
        raise NotFoundError('Employee', employee_id)
    return PROFILES[employee_id]


def lookup_attendance(employee_id, period):
    return make_records(employee_id, FULL_MONTH_DAYS)


def test_failures_are_isolated_per_employee():
    outcomes = run_payroll_batch([1, 2, 3, 99], FULL_MONTH, lookup_employee, lookup_attendance)

    assert [o.employee_id for o in outcomes] == [1, 2, 3, 99]
    assert outcomes[0].ok
    assert outcomes[0].result.net_pay == Decimal('25454.95')
    assert isinstance(outcomes[1].error, ValidationError)
    assert outcomes[2].ok
    assert isinstance(outcomes[3].error, NotFoundError)


def test_missing_profile_is_not_found():
    outcomes = run_payroll_batch([5], FULL_MONTH, lambda employee_id: None, lookup_attendance)
    assert isinstance(outcomes[0].error, NotFoundError)
    assert outcomes[0].to_dict()['error_code'] == 'RESOURCE_NOT_FOUND'


def test_unexpected_errors_become_calculation_errors():
    def broken_attendance(employee_id, period):
        if employee_id == 3:
            raise RuntimeError('connection reset')
        return lookup_attendance(employee_id, period)

    outcomes = run_payroll_batch([1, 3], FULL_MONTH, lookup_employee, broken_attendance)
    assert outcomes[0].ok
    assert isinstance(outcomes[1].error, CalculationError)


def test_order_is_preserved_with_many_workers():
    ids = [3, 1] * 10
    outcomes = run_payroll_batch(ids, FULL_MONTH, lookup_employee, lookup_attendance, max_workers=8)
    assert [o.employee_id for o in outcomes] == ids
    assert all(o.ok for o in outcomes)


def test_batch_uses_leave_and_overtime_lookups():
    outcomes = run_payroll_batch([1], FULL_MONTH, lookup_employee, lookup_attendance,
                                 leave_lookup=lambda employee_id, period: [FULL_MONTH_DAYS[0]],
                                 overtime_lookup=lambda employee_id, period: Decimal('1'))
    result = outcomes[0].result
    assert result.unpaid_leave_days == 1
    assert result.overtime_hours == Decimal('1.00')


def test_empty_batch():
    assert run_payroll_batch([], FULL_MONTH, lookup_employee, lookup_attendance) == []
