# motorph/payroll/repository.py
"""
Database-backed collaborators for the payroll engine.

Each lookup turns ORM rows into the engine's value types; ``save_payslip``
is the result sink. Commit and rollback stay with the calling route.
"""

from datetime import timedelta
from decimal import Decimal

from motorph import db
from motorph.domain import AttendanceRecord, EmployeeProfile
from motorph.errors import NotFoundError, PayrollError
from motorph.models.records import AttendanceLog, Employee, LeaveRequest, OvertimeRequest, Payslip

UNPAID_LEAVE_TYPE = 'unpaid'


def to_profile(employee):
    return EmployeeProfile(
        employee_id=employee.id,
        basic_salary=employee.basic_salary,
        status=employee.status,
        rice_subsidy=employee.rice_subsidy or Decimal('0.00'),
        phone_allowance=employee.phone_allowance or Decimal('0.00'),
        clothing_allowance=employee.clothing_allowance or Decimal('0.00'),
        category=employee.category,
        management_allowance=employee.management_allowance or Decimal('0.00'),
        team_size=employee.team_size or 0,
        certification_count=employee.certification_count or 0,
        confidential_data_access=bool(employee.confidential_data_access),
        name=employee.full_name,
    )


def get_employee_profile(employee_id):
    employee = db.session.get(Employee, employee_id)
    if employee is None:
        raise NotFoundError('Employee', employee_id)
    return to_profile(employee)


def get_active_employee_ids():
    rows = db.session.execute(
        db.select(Employee.id).where(Employee.is_active.is_(True)).order_by(Employee.id)
    )
    return [row[0] for row in rows]


def get_attendance_records(employee_id, period):
    logs = db.session.execute(
        db.select(AttendanceLog)
        .where(AttendanceLog.employee_id == employee_id,
               AttendanceLog.date >= period.start,
               AttendanceLog.date <= period.end)
        .order_by(AttendanceLog.date)
    ).scalars()
    return [
        AttendanceRecord(employee_id=log.employee_id, date=log.date, log_in=log.log_in, log_out=log.log_out)
        for log in logs
    ]


def get_unpaid_leave_dates(employee_id, period):
    """Every calendar day covered by an approved unpaid leave, clipped to the period."""
    leaves = db.session.execute(
        db.select(LeaveRequest)
        .where(LeaveRequest.employee_id == employee_id,
               LeaveRequest.status == 'Approved',
               db.func.lower(LeaveRequest.leave_type) == UNPAID_LEAVE_TYPE,
               LeaveRequest.start_date <= period.end,
               LeaveRequest.end_date >= period.start)
    ).scalars()

    dates = set()
    for leave in leaves:
        current = max(leave.start_date, period.start)
        last = min(leave.end_date, period.end)
        while current <= last:
            dates.add(current)
            current += timedelta(days=1)
    return sorted(dates)


def get_approved_overtime_hours(employee_id, period):
    """Approved overtime hours in the period, or None when nothing was filed."""
    requests = db.session.execute(
        db.select(OvertimeRequest)
        .where(OvertimeRequest.employee_id == employee_id,
               OvertimeRequest.date >= period.start,
               OvertimeRequest.date <= period.end)
    ).scalars().all()
    if not requests:
        return None
    return sum((Decimal(r.hours) for r in requests if r.approved), Decimal('0.00'))


class PayrollSnapshot:
    """
    In-memory copy of everything a batch run reads.

    Worker threads have no application context, so the batch runner is
    given these lookups instead of the database-backed ones. Errors raised
    while loading one employee are replayed when that employee is looked up.
    """

    def __init__(self, employee_ids, period):
        self.period = period
        self._profiles = {}
        self._attendance = {}
        self._leave = {}
        self._overtime = {}
        self._errors = {}
        for employee_id in employee_ids:
            try:
                self._profiles[employee_id] = get_employee_profile(employee_id)
                self._attendance[employee_id] = get_attendance_records(employee_id, period)
                self._leave[employee_id] = get_unpaid_leave_dates(employee_id, period)
                self._overtime[employee_id] = get_approved_overtime_hours(employee_id, period)
            except PayrollError as e:
                self._errors[employee_id] = e

    def employee(self, employee_id):
        if employee_id in self._errors:
            raise self._errors[employee_id]
        if employee_id not in self._profiles:
            raise NotFoundError('Employee', employee_id)
        return self._profiles[employee_id]

    def attendance(self, employee_id, period):
        return self._attendance.get(employee_id, [])

    def unpaid_leave(self, employee_id, period):
        return self._leave.get(employee_id, [])

    def overtime(self, employee_id, period):
        return self._overtime.get(employee_id)


def save_payslip(result, payroll_run):
    """Adds a Payslip row for a computed PayrollResult to the session."""
    payslip = Payslip(
        employee_id=result.employee_id,
        payroll_run_id=payroll_run.id,
        monthly_rate=result.monthly_rate,
        daily_rate=result.daily_rate,
        days_worked=result.days_worked,
        overtime_hours=result.overtime_hours,
        gross_earnings=result.gross_earnings,
        overtime_pay=result.overtime_pay,
        rice_subsidy=result.rice_subsidy,
        phone_allowance=result.phone_allowance,
        clothing_allowance=result.clothing_allowance,
        category_allowance=result.category_allowance,
        gross_pay=result.gross_pay,
        sss=result.sss,
        philhealth=result.philhealth,
        pagibig=result.pagibig,
        tax=result.tax,
        late_deduction=result.late_deduction,
        undertime_deduction=result.undertime_deduction,
        unpaid_leave_deduction=result.unpaid_leave_deduction,
        total_deductions=result.total_deductions,
        net_pay=result.net_pay,
    )
    db.session.add(payslip)
    return payslip
