# motorph/models/records.py

from motorph import db
from datetime import datetime
from decimal import Decimal
from sqlalchemy import event, select, func


class Employee(db.Model):
    __tablename__ = 'employee'
    id = db.Column(db.Integer, primary_key=True)
    first_name = db.Column(db.String(64), nullable=False)
    last_name = db.Column(db.String(64), nullable=False)
    position = db.Column(db.String(64))
    basic_salary = db.Column(db.Numeric(10, 2), nullable=False)
    status = db.Column(db.String(20), nullable=False, default='Probationary')
    category = db.Column(db.String(20), nullable=False, default='Employee')
    rice_subsidy = db.Column(db.Numeric(10, 2), nullable=False, default=Decimal('0.00'))
    phone_allowance = db.Column(db.Numeric(10, 2), nullable=False, default=Decimal('0.00'))
    clothing_allowance = db.Column(db.Numeric(10, 2), nullable=False, default=Decimal('0.00'))
    management_allowance = db.Column(db.Numeric(10, 2), nullable=False, default=Decimal('0.00'))
    team_size = db.Column(db.Integer, nullable=False, default=0)
    certification_count = db.Column(db.Integer, nullable=False, default=0)
    confidential_data_access = db.Column(db.Boolean, nullable=False, default=False)
    is_active = db.Column(db.Boolean, nullable=False, default=True)

    payslips = db.relationship('Payslip', back_populates='employee', lazy='dynamic')
    leave_requests = db.relationship('LeaveRequest', back_populates='employee', lazy='dynamic')
    attendance_logs = db.relationship('AttendanceLog', back_populates='employee', lazy='dynamic')
    overtime_requests = db.relationship('OvertimeRequest', back_populates='employee', lazy='dynamic')

    @property
    def full_name(self):
        return f'{self.first_name} {self.last_name}'

    def __repr__(self):
        return f'<Employee {self.id}>'


class AttendanceLog(db.Model):
    __tablename__ = 'attendance_log'

    id = db.Column(db.Integer, primary_key=True)
    employee_id = db.Column(db.Integer, db.ForeignKey('employee.id'), nullable=False)
    date = db.Column(db.Date, nullable=False, index=True)
    log_in = db.Column(db.Time, nullable=True)
    log_out = db.Column(db.Time, nullable=True)

    employee = db.relationship('Employee', back_populates='attendance_logs')

    __table_args__ = (db.UniqueConstraint('employee_id', 'date', name='_employee_attendance_date_uc'),)

    def __repr__(self):
        return f'<AttendanceLog {self.date} for {self.employee_id}>'


class LeaveRequest(db.Model):
    __tablename__ = 'leave_request'

    id = db.Column(db.Integer, primary_key=True)
    employee_id = db.Column(db.Integer, db.ForeignKey('employee.id'), nullable=False)
    leave_type = db.Column(db.String(50), nullable=False)
    start_date = db.Column(db.Date, nullable=False)
    end_date = db.Column(db.Date, nullable=False)
    reason = db.Column(db.Text)
    status = db.Column(db.String(20), nullable=False, default='Pending')
    requested_on = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    employee = db.relationship('Employee', back_populates='leave_requests')

    def __repr__(self):
        return f'<LeaveRequest {self.id} by {self.employee_id}>'


class OvertimeRequest(db.Model):
    __tablename__ = 'overtime_request'

    id = db.Column(db.Integer, primary_key=True)
    employee_id = db.Column(db.Integer, db.ForeignKey('employee.id'), nullable=False)
    date = db.Column(db.Date, nullable=False)
    hours = db.Column(db.Numeric(5, 2), nullable=False)
    approved = db.Column(db.Boolean, nullable=False, default=False)

    employee = db.relationship('Employee', back_populates='overtime_requests')

    def __repr__(self):
        return f'<OvertimeRequest {self.hours}h on {self.date} by {self.employee_id}>'


class PayrollRun(db.Model):
    __tablename__ = 'payroll_run'
    id = db.Column(db.Integer, primary_key=True)
    pay_period_start = db.Column(db.Date, nullable=False)
    pay_period_end = db.Column(db.Date, nullable=False)
    pay_date = db.Column(db.Date, nullable=True)
    total_gross_pay = db.Column(db.Numeric(12, 2), default=0.00)
    total_deductions = db.Column(db.Numeric(12, 2), default=0.00)
    total_net_pay = db.Column(db.Numeric(12, 2), default=0.00)
    status = db.Column(db.String(20), default='Pending')

    payslips = db.relationship('Payslip', back_populates='payroll_run', lazy='dynamic')

    def __repr__(self):
        return f'<PayrollRun {self.pay_period_start}>'


class Payslip(db.Model):
    __tablename__ = 'payslip'
    id = db.Column(db.Integer, primary_key=True)
    employee_id = db.Column(db.Integer, db.ForeignKey('employee.id'), nullable=False)
    payroll_run_id = db.Column(db.Integer, db.ForeignKey('payroll_run.id'), nullable=False)
    employee = db.relationship('Employee', back_populates='payslips')
    payroll_run = db.relationship('PayrollRun', back_populates='payslips')

    monthly_rate = db.Column(db.Numeric(10, 2), nullable=False)
    daily_rate = db.Column(db.Numeric(10, 2), nullable=False)
    days_worked = db.Column(db.Integer, nullable=False, default=0)
    overtime_hours = db.Column(db.Numeric(10, 2), default=0.00)

    gross_earnings = db.Column(db.Numeric(10, 2), nullable=False)
    overtime_pay = db.Column(db.Numeric(10, 2), default=0.00)
    rice_subsidy = db.Column(db.Numeric(10, 2), default=0.00)
    phone_allowance = db.Column(db.Numeric(10, 2), default=0.00)
    clothing_allowance = db.Column(db.Numeric(10, 2), default=0.00)
    category_allowance = db.Column(db.Numeric(10, 2), default=0.00)
    gross_pay = db.Column(db.Numeric(10, 2), nullable=False)

    sss = db.Column(db.Numeric(10, 2), default=0.00)
    philhealth = db.Column(db.Numeric(10, 2), default=0.00)
    pagibig = db.Column(db.Numeric(10, 2), default=0.00)
    tax = db.Column(db.Numeric(10, 2), default=0.00)
    late_deduction = db.Column(db.Numeric(10, 2), default=0.00)
    undertime_deduction = db.Column(db.Numeric(10, 2), default=0.00)
    unpaid_leave_deduction = db.Column(db.Numeric(10, 2), default=0.00)
    total_deductions = db.Column(db.Numeric(10, 2), nullable=False)
    net_pay = db.Column(db.Numeric(10, 2), nullable=False)

    def __repr__(self):
        return f'<Payslip for Employee ID {self.employee_id}>'


# ==========================================
# DATABASE TRIGGERS (ORM EVENTS)
# ==========================================

# Keep payroll run totals in step with its payslips
def update_payroll_run_totals(mapper, connection, target):
    run_id = target.payroll_run_id
    payroll_run_table = PayrollRun.__table__
    payslip_table = Payslip.__table__

    totals = connection.execute(
        select(
            func.sum(payslip_table.c.gross_pay),
            func.sum(payslip_table.c.total_deductions),
            func.sum(payslip_table.c.net_pay)
        ).where(payslip_table.c.payroll_run_id == run_id)
    ).first()

    connection.execute(
        payroll_run_table.update()
        .where(payroll_run_table.c.id == run_id)
        .values(
            total_gross_pay=totals[0] or 0,
            total_deductions=totals[1] or 0,
            total_net_pay=totals[2] or 0
        )
    )


event.listen(Payslip, 'after_insert', update_payroll_run_totals)
event.listen(Payslip, 'after_update', update_payroll_run_totals)
event.listen(Payslip, 'after_delete', update_payroll_run_totals)
