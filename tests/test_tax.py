from decimal import Decimal

import pytest

from motorph.errors import CalculationError
from motorph.payroll.tax import (
    CONTRACTOR_TAX_TABLE,
    MONTHLY_TAX_TABLE,
    TaxBracket,
    calculate_withholding_tax,
    validate_tax_table,
)


@pytest.mark.parametrize('income', ['-100', '0', '10000', '20833'])
def test_no_tax_at_or_below_threshold(income):
    assert calculate_withholding_tax(Decimal(income)) == Decimal('0.00')


@pytest.mark.parametrize('income,expected', [
    ('26800', '895.05'),
    ('33333', '1875.00'),
    ('50000', '5208.40'),
    ('66667', '8541.80'),
    ('100000', '16875.05'),
    ('166667', '33541.80'),
    ('700000', '195208.35'),
])
def test_bracket_values(income, expected):
    assert calculate_withholding_tax(Decimal(income)) == Decimal(expected)


def test_tax_is_continuous_at_every_boundary():
    for bracket in MONTHLY_TAX_TABLE[1:]:
        below = calculate_withholding_tax(bracket.lower)
        above = calculate_withholding_tax(bracket.lower + Decimal('0.01'))
        assert Decimal('0') <= above - below <= Decimal('0.01')


def test_tax_never_decreases():
    previous = Decimal('0.00')
    for income in range(0, 800000, 2500):
        current = calculate_withholding_tax(Decimal(income))
        assert current >= previous
        previous = current


def test_default_tables_validate():
    assert validate_tax_table(MONTHLY_TAX_TABLE) is MONTHLY_TAX_TABLE
    assert validate_tax_table(CONTRACTOR_TAX_TABLE) is CONTRACTOR_TAX_TABLE


@pytest.mark.parametrize('table', [
    (),
    # closed top
    (TaxBracket(Decimal('0'), Decimal('1000'), Decimal('0'), 0),),
    # gap between brackets
    (TaxBracket(Decimal('0'), Decimal('1000'), Decimal('0'), 0),
     TaxBracket(Decimal('1500'), None, Decimal('0'), 10)),
    # rate decreases
    (TaxBracket(Decimal('0'), Decimal('1000'), Decimal('0'), 20),
     TaxBracket(Decimal('1000'), None, Decimal('200'), 10)),
    # base does not match the tax owed at the boundary
    (TaxBracket(Decimal('0'), Decimal('1000'), Decimal('0'), 10),
     TaxBracket(Decimal('1000'), None, Decimal('500'), 20)),
    # empty bracket
    (TaxBracket(Decimal('0'), Decimal('0'), Decimal('0'), 0),
     TaxBracket(Decimal('0'), None, Decimal('0'), 10)),
    # negative rate
    (TaxBracket(Decimal('0'), None, Decimal('0'), -5),),
])
def test_broken_tables_are_rejected(table):
    with pytest.raises(CalculationError):
        validate_tax_table(table)


def test_contractor_flat_rate():
    assert calculate_withholding_tax(Decimal('2250.00'), CONTRACTOR_TAX_TABLE) == Decimal('180.00')
    assert calculate_withholding_tax(Decimal('0'), CONTRACTOR_TAX_TABLE) == Decimal('0.00')
