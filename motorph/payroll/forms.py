# motorph/payroll/forms.py

from flask_wtf import FlaskForm
from wtforms import DateField
from wtforms.validators import DataRequired, Optional, ValidationError


class PayPeriodForm(FlaskForm):
    """Pay period bounds, shared by preview and run requests."""
    pay_period_start = DateField('Pay Period Start', format='%Y-%m-%d', validators=[DataRequired()])
    pay_period_end = DateField('Pay Period End', format='%Y-%m-%d', validators=[DataRequired()])

    def validate_pay_period_end(self, field):
        if self.pay_period_start.data and field.data and field.data < self.pay_period_start.data:
            raise ValidationError('Pay period end date must be on or after start date.')


class RunPayrollForm(PayPeriodForm):
    """Form for Admin to define a new payroll run."""
    pay_date = DateField('Payment Date', format='%Y-%m-%d', validators=[Optional()])
