# motorph/payroll/contributions.py

from collections import namedtuple
from decimal import Decimal

CENTS = Decimal('0.01')
ZERO = Decimal('0.00')

GovernmentContributions = namedtuple('GovernmentContributions', ['sss', 'philhealth', 'pagibig'])


# --- SSS CONTRIBUTION ---
SSS_MINIMUM_BRACKET = Decimal('4000.00')
SSS_MAXIMUM_BRACKET = Decimal('25000.00')
SSS_MINIMUM_CONTRIBUTION = Decimal('180.00')
SSS_MAXIMUM_CONTRIBUTION = Decimal('1125.00')
SSS_RATE = Decimal('0.045')


def calculate_sss(basic_salary):
    """Calculates the employee's share of SSS contribution."""
    if basic_salary <= 0:
        return ZERO
    if basic_salary <= SSS_MINIMUM_BRACKET:
        return SSS_MINIMUM_CONTRIBUTION
    if basic_salary <= SSS_MAXIMUM_BRACKET:
        return min(basic_salary * SSS_RATE, SSS_MAXIMUM_CONTRIBUTION).quantize(CENTS)
    return SSS_MAXIMUM_CONTRIBUTION


# --- PHILHEALTH CONTRIBUTION ---
PHILHEALTH_RATE = Decimal('0.025')
PHILHEALTH_FLOOR = Decimal('500.00')
PHILHEALTH_CEILING = Decimal('5000.00')


def calculate_philhealth(basic_salary):
    """Calculates the employee's share of PhilHealth contribution (2.5%, clamped)."""
    if basic_salary <= 0:
        return ZERO
    contribution = basic_salary * PHILHEALTH_RATE
    return max(PHILHEALTH_FLOOR, min(contribution, PHILHEALTH_CEILING)).quantize(CENTS)


# --- PAG-IBIG (HDMF) CONTRIBUTION ---
PAGIBIG_LOW_INCOME_CEILING = Decimal('1500.00')
PAGIBIG_LOW_RATE = Decimal('0.01')
PAGIBIG_RATE = Decimal('0.02')
PAGIBIG_CAP = Decimal('200.00')


def calculate_pagibig(basic_salary):
    """Calculates the employee's share of Pag-IBIG contribution."""
    if basic_salary <= 0:
        return ZERO
    if basic_salary <= PAGIBIG_LOW_INCOME_CEILING:
        return (basic_salary * PAGIBIG_LOW_RATE).quantize(CENTS)
    # Employee share is capped at P200.00
    return min(basic_salary * PAGIBIG_RATE, PAGIBIG_CAP).quantize(CENTS)


def contributions(basic_salary):
    """All three statutory contributions for a monthly basic salary."""
    return GovernmentContributions(
        sss=calculate_sss(basic_salary),
        philhealth=calculate_philhealth(basic_salary),
        pagibig=calculate_pagibig(basic_salary),
    )


NO_CONTRIBUTIONS = GovernmentContributions(ZERO, ZERO, ZERO)
