# motorph/payroll/settings.py

from dataclasses import dataclass
from datetime import datetime, time
from decimal import Decimal

from motorph.attendance.calculator import ShiftPolicy
from motorph.errors import CalculationError
from motorph.payroll.allowances import ALLOWANCE_FIELDS
from motorph.payroll.tax import MONTHLY_TAX_TABLE, TaxBracket, validate_tax_table


def _parse_time(value):
    if isinstance(value, time):
        return value
    return datetime.strptime(value, '%H:%M').time()


@dataclass(frozen=True)
class PayrollSettings:
    """
    Tunable payroll constants, passed explicitly into the engine.

    Settings are checked when built, so a bad configuration fails at
    startup instead of on every employee.
    """

    working_days_per_month: int = 22
    overtime_multiplier: Decimal = Decimal('1.25')
    non_taxable_allowances: tuple = ('rice',)
    shift: ShiftPolicy = ShiftPolicy()
    max_workers: int = 4
    # Withholding schedule for salaried categories
    tax_table: tuple = MONTHLY_TAX_TABLE

    def __post_init__(self):
        names = tuple(self.non_taxable_allowances)
        unknown = [name for name in names if name not in ALLOWANCE_FIELDS]
        if unknown:
            raise CalculationError(
                f"Unknown non-taxable allowance(s): {', '.join(map(str, unknown))}",
                error_data={'allowed': sorted(ALLOWANCE_FIELDS)}
            )
        object.__setattr__(self, 'non_taxable_allowances', names)

        if self.working_days_per_month < 1:
            raise CalculationError("Working days per month must be at least 1")
        if self.max_workers < 1:
            raise CalculationError("Payroll worker count must be at least 1")
        if self.overtime_multiplier < 0:
            raise CalculationError("Overtime multiplier cannot be negative")

        table = tuple(TaxBracket(*bracket) for bracket in self.tax_table)
        object.__setattr__(self, 'tax_table', validate_tax_table(table))

    @classmethod
    def from_config(cls, config):
        """Builds settings from a Flask config (or any mapping of PAYROLL_* keys)."""
        defaults = cls()
        shift = ShiftPolicy(
            start=_parse_time(config.get('PAYROLL_SHIFT_START', defaults.shift.start)),
            end=_parse_time(config.get('PAYROLL_SHIFT_END', defaults.shift.end)),
            grace_minutes=int(config.get('PAYROLL_GRACE_MINUTES', defaults.shift.grace_minutes)),
            meal_break_minutes=int(config.get('PAYROLL_MEAL_BREAK_MINUTES', defaults.shift.meal_break_minutes)),
        )
        return cls(
            working_days_per_month=int(config.get('PAYROLL_WORKING_DAYS_PER_MONTH', defaults.working_days_per_month)),
            overtime_multiplier=Decimal(str(config.get('PAYROLL_OVERTIME_MULTIPLIER', defaults.overtime_multiplier))),
            non_taxable_allowances=tuple(config.get('PAYROLL_NON_TAXABLE_ALLOWANCES', defaults.non_taxable_allowances)),
            shift=shift,
            max_workers=int(config.get('PAYROLL_MAX_WORKERS', defaults.max_workers)),
            tax_table=config.get('PAYROLL_TAX_TABLE') or defaults.tax_table,
        )


DEFAULT_SETTINGS = PayrollSettings()
