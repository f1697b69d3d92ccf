# motorph/errors.py
"""
Error taxonomy for the payroll engine.

Engine functions raise these; the typed-result wrappers in
``motorph.payroll.calculator`` turn them into per-employee outcomes.
"""


class PayrollError(Exception):
    """Base class for expected payroll failures."""

    error_code = 'PAYROLL_ERROR'

    def __init__(self, message, error_code=None, error_data=None):
        super().__init__(message)
        self.message = message
        if error_code:
            self.error_code = error_code
        self.error_data = error_data or {}

    def to_dict(self):
        return {
            'error': self.message,
            'error_code': self.error_code,
            'details': self.error_data,
        }


class ValidationError(PayrollError):
    """Malformed input, detected before any calculation runs."""

    error_code = 'VALIDATION_ERROR'

    def __init__(self, message, field=None, value=None, error_data=None):
        data = dict(error_data or {})
        if field is not None:
            data['field'] = field
        if value is not None:
            data['value'] = str(value)
        super().__init__(message, error_data=data)


class CalculationError(PayrollError):
    """An internal invariant was violated (schedule or config defect)."""

    error_code = 'CALCULATION_ERROR'


class NotFoundError(PayrollError):
    """A collaborator lookup missed."""

    error_code = 'RESOURCE_NOT_FOUND'

    def __init__(self, resource_type, resource_id=None, error_data=None):
        message = f"{resource_type} not found"
        if resource_id is not None:
            message += f" (ID: {resource_id})"
        super().__init__(
            message,
            error_data={'resource_type': resource_type, 'resource_id': resource_id, **(error_data or {})}
        )
