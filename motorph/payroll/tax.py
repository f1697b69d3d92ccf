# motorph/payroll/tax.py

from collections import namedtuple
from decimal import Decimal

from motorph.errors import CalculationError

CENTS = Decimal('0.01')

# (lower, upper, base_tax, rate_percent); tax = base_tax + (income - lower) * rate.
# upper=None marks the open top bracket.
TaxBracket = namedtuple('TaxBracket', ['lower', 'upper', 'base_tax', 'rate_percent'])


# --- WITHHOLDING TAX (Monthly, TRAIN law annual brackets / 12) ---
MONTHLY_TAX_TABLE = (
    # 1. 20,833 and below = 0%
    TaxBracket(Decimal('0.00'), Decimal('20833.00'), Decimal('0.00'), 0),
    # 2. 20,833 - 33,333 = 15% of excess over 20,833
    TaxBracket(Decimal('20833.00'), Decimal('33333.00'), Decimal('0.00'), 15),
    # 3. 33,333 - 66,667 = 1,875 + 20% of excess over 33,333
    TaxBracket(Decimal('33333.00'), Decimal('66667.00'), Decimal('1875.00'), 20),
    # 4. 66,667 - 166,667 = 8,541.80 + 25% of excess over 66,667
    TaxBracket(Decimal('66667.00'), Decimal('166667.00'), Decimal('8541.80'), 25),
    # 5. 166,667 - 666,667 = 33,541.80 + 30% of excess over 166,667
    TaxBracket(Decimal('166667.00'), Decimal('666667.00'), Decimal('33541.80'), 30),
    # 6. Above 666,667 = 183,541.80 + 35% of excess
    TaxBracket(Decimal('666667.00'), None, Decimal('183541.80'), 35),
)

# Contractors are withheld a flat 8% of gross
CONTRACTOR_TAX_TABLE = (
    TaxBracket(Decimal('0.00'), None, Decimal('0.00'), 8),
)


def bracket_tax(bracket, income):
    excess = income - bracket.lower
    return bracket.base_tax + excess * (Decimal(str(bracket.rate_percent)) / 100)


def validate_tax_table(table):
    """
    Checks a bracket table is usable: contiguous, open at the top, rates
    non-decreasing, and each base tax equal to the tax owed at the previous
    bracket's upper bound (so there is no jump at any boundary).
    """
    if not table:
        raise CalculationError("Tax table is empty")
    if table[-1].upper is not None:
        raise CalculationError("Tax table must end with an open bracket")

    previous = None
    for bracket in table:
        if bracket.rate_percent < 0 or bracket.base_tax < 0:
            raise CalculationError(f"Tax bracket starting at {bracket.lower} has a negative rate or base")
        if bracket.upper is not None and bracket.upper <= bracket.lower:
            raise CalculationError(f"Tax bracket starting at {bracket.lower} is empty")
        if previous is not None:
            if bracket.lower != previous.upper:
                raise CalculationError(f"Tax brackets are not contiguous at {previous.upper}")
            if bracket.rate_percent < previous.rate_percent:
                raise CalculationError(f"Tax rate decreases at {bracket.lower}")
            expected_base = bracket_tax(previous, previous.upper).quantize(CENTS)
            if abs(bracket.base_tax - expected_base) > CENTS:
                raise CalculationError(
                    f"Tax table is discontinuous at {bracket.lower}: base {bracket.base_tax}, expected {expected_base}"
                )
        previous = bracket
    return table


def calculate_withholding_tax(taxable_income, table=MONTHLY_TAX_TABLE):
    """Calculates withholding tax on taxable income for the period."""
    if taxable_income <= table[0].lower:
        return Decimal('0.00')

    for bracket in table:
        if bracket.upper is None or taxable_income <= bracket.upper:
            return bracket_tax(bracket, taxable_income).quantize(CENTS)

    # Unreachable for a validated table
    raise CalculationError(f"No tax bracket covers income {taxable_income}")
