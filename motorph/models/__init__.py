# motorph/models/__init__.py

from .records import Employee, AttendanceLog, LeaveRequest, OvertimeRequest, PayrollRun, Payslip
