# motorph/payroll/routes.py

from flask import current_app, jsonify, request
from motorph.payroll import bp
from motorph.payroll.forms import PayPeriodForm, RunPayrollForm
from motorph.payroll.settings import PayrollSettings
from motorph.payroll import repository
from motorph.models.records import PayrollRun, Payslip
from motorph.domain import PeriodRange
from motorph.errors import NotFoundError
from motorph import db
from . import calculator


def _form_errors(form):
    return jsonify({'error': 'Invalid pay period', 'error_code': 'VALIDATION_ERROR', 'details': form.errors}), 400


def _settings():
    return PayrollSettings.from_config(current_app.config)


def _run_dict(run):
    return {
        'id': run.id,
        'pay_period_start': run.pay_period_start.isoformat(),
        'pay_period_end': run.pay_period_end.isoformat(),
        'pay_date': run.pay_date.isoformat() if run.pay_date else None,
        'status': run.status,
        'total_gross_pay': str(run.total_gross_pay or 0),
        'total_deductions': str(run.total_deductions or 0),
        'total_net_pay': str(run.total_net_pay or 0),
    }


@bp.route('/preview/<int:employee_id>')
def preview_payroll(employee_id):
    """Calculates one employee's payroll without saving it."""
    form = PayPeriodForm(formdata=request.args, meta={'csrf': False})
    if not form.validate():
        return _form_errors(form)

    period = PeriodRange(form.pay_period_start.data, form.pay_period_end.data)
    profile = repository.get_employee_profile(employee_id)
    result = calculator.calculate_payroll(
        profile,
        repository.get_attendance_records(employee_id, period),
        period,
        unpaid_leave_dates=repository.get_unpaid_leave_dates(employee_id, period),
        overtime_hours=repository.get_approved_overtime_hours(employee_id, period),
        settings=_settings(),
    )
    return jsonify(result.to_dict())


@bp.route('/run', methods=['POST'])
def run_payroll():
    form = RunPayrollForm()
    if not form.validate_on_submit():
        return _form_errors(form)

    period = PeriodRange(form.pay_period_start.data, form.pay_period_end.data)
    employee_ids = repository.get_active_employee_ids()
    if not employee_ids:
        return jsonify({'error': 'No active employees found. Payroll run cancelled.',
                        'error_code': 'NO_ACTIVE_EMPLOYEES', 'details': {}}), 400

    settings = _settings()
    snapshot = repository.PayrollSnapshot(employee_ids, period)
    outcomes = calculator.run_payroll_batch(
        employee_ids, period,
        employee_lookup=snapshot.employee,
        attendance_lookup=snapshot.attendance,
        leave_lookup=snapshot.unpaid_leave,
        overtime_lookup=snapshot.overtime,
        settings=settings,
    )

    new_run = PayrollRun(
        pay_period_start=period.start,
        pay_period_end=period.end,
        pay_date=form.pay_date.data,
        status='Processing'
    )
    try:
        db.session.add(new_run)
        db.session.flush()

        for outcome in outcomes:
            if outcome.ok:
                repository.save_payslip(outcome.result, new_run)

        new_run.status = 'Processed'
        db.session.commit()
    except Exception:
        db.session.rollback()
        current_app.logger.exception('Payroll run for %s to %s could not be saved', period.start, period.end)
        raise

    processed = sum(1 for o in outcomes if o.ok)
    current_app.logger.info('Payroll run #%s processed %d of %d employees',
                            new_run.id, processed, len(outcomes))
    return jsonify({
        'run': _run_dict(new_run),
        'processed': processed,
        'failed': len(outcomes) - processed,
        'results': [o.to_dict() for o in outcomes],
    }), 201


@bp.route('/summary/<int:run_id>')
def payroll_summary(run_id):
    run = db.session.get(PayrollRun, run_id)
    if not run:
        raise NotFoundError('Payroll run', run_id)

    payslips = Payslip.query.filter_by(payroll_run_id=run.id).order_by(Payslip.employee_id).all()
    return jsonify({
        'run': _run_dict(run),
        'payslips': [{
            'employee_id': slip.employee_id,
            'days_worked': slip.days_worked,
            'gross_pay': str(slip.gross_pay),
            'total_deductions': str(slip.total_deductions),
            'net_pay': str(slip.net_pay),
        } for slip in payslips],
    })


@bp.route('/history')
def payroll_history():
    all_runs = PayrollRun.query.order_by(PayrollRun.pay_period_start.desc()).all()
    return jsonify([_run_dict(run) for run in all_runs])
