# motorph/payroll/allowances.py
"""
Allowance eligibility and per-category pay policy.

Employee categories are data: each one maps to a ``CategoryPolicy`` row
that the calculator consults, rather than overriding pay rules itself.
"""

from collections import namedtuple
from decimal import Decimal

from motorph.domain import EmploymentCategory, EmploymentStatus
from motorph.payroll.tax import CONTRACTOR_TAX_TABLE

ZERO = Decimal('0.00')

PAY_BASIS_SALARIED = 'salaried'
PAY_BASIS_HOURLY = 'hourly'

# tax_table=None means the configured salaried schedule applies
CategoryPolicy = namedtuple('CategoryPolicy', [
    'allowances_eligible',
    'overtime_eligible',
    'pay_basis',
    'statutory_contributions',
    'tax_table',
    'management_allowance',
    'team_member_allowance',
    'certification_allowance',
    'confidential_access_allowance',
])

SALARIED_POLICY = CategoryPolicy(
    allowances_eligible=True,
    overtime_eligible=True,
    pay_basis=PAY_BASIS_SALARIED,
    statutory_contributions=True,
    tax_table=None,
    management_allowance=False,
    team_member_allowance=ZERO,
    certification_allowance=ZERO,
    confidential_access_allowance=ZERO,
)

CATEGORY_POLICIES = {
    EmploymentCategory.EMPLOYEE: SALARIED_POLICY,
    # Managers get their management allowance plus P500 per team member
    EmploymentCategory.MANAGER: SALARIED_POLICY._replace(
        management_allowance=True,
        team_member_allowance=Decimal('500.00'),
    ),
    # HR staff get P1,000 per certification and P2,000 for confidential data access
    EmploymentCategory.HR_PERSONNEL: SALARIED_POLICY._replace(
        certification_allowance=Decimal('1000.00'),
        confidential_access_allowance=Decimal('2000.00'),
    ),
    # Contractors are paid for hours logged, get no standard allowances or
    # overtime, and are withheld a flat rate instead of statutory shares.
    EmploymentCategory.CONTRACTOR: SALARIED_POLICY._replace(
        allowances_eligible=False,
        overtime_eligible=False,
        pay_basis=PAY_BASIS_HOURLY,
        statutory_contributions=False,
        tax_table=CONTRACTOR_TAX_TABLE,
    ),
}


def policy_for(profile):
    return CATEGORY_POLICIES[profile.category]


# --- ELIGIBILITY RULES ---
BENEFIT_STATUSES = frozenset({EmploymentStatus.REGULAR, EmploymentStatus.PROBATIONARY})
OVERTIME_STATUSES = frozenset({EmploymentStatus.REGULAR, EmploymentStatus.PROBATIONARY})

ALLOWANCE_ELIGIBILITY = {
    'rice': lambda profile: profile.status in BENEFIT_STATUSES,
    'phone': lambda profile: profile.status is EmploymentStatus.REGULAR,
    'clothing': lambda profile: profile.status in BENEFIT_STATUSES,
}

ALLOWANCE_FIELDS = {
    'rice': 'rice_subsidy',
    'phone': 'phone_allowance',
    'clothing': 'clothing_allowance',
}


def is_overtime_eligible(profile, policy=None):
    policy = policy or policy_for(profile)
    return policy.overtime_eligible and profile.status in OVERTIME_STATUSES


class AllowanceBreakdown(namedtuple('AllowanceBreakdown', ['rice', 'phone', 'clothing', 'category'])):
    """Fixed allowances plus the category-specific amount (always taxable)."""
    __slots__ = ()

    @property
    def total(self):
        return self.rice + self.phone + self.clothing + self.category

    def non_taxable(self, names):
        return sum((getattr(self, name) for name in names), ZERO)


NO_ALLOWANCES = AllowanceBreakdown(ZERO, ZERO, ZERO, ZERO)


def category_allowance(profile, policy=None):
    """Management, team, certification and confidential-access pay for the category."""
    policy = policy or policy_for(profile)
    amount = ZERO
    if policy.management_allowance:
        amount += profile.management_allowance
    amount += policy.team_member_allowance * profile.team_size
    amount += policy.certification_allowance * profile.certification_count
    if profile.confidential_data_access:
        amount += policy.confidential_access_allowance
    return amount.quantize(Decimal('0.01'))


def aggregate_allowances(profile, policy=None):
    """
    Sums the allowances the employee is eligible for.

    Ineligible allowances contribute zero; amounts are already validated as
    non-negative on the profile.
    """
    policy = policy or policy_for(profile)
    if not policy.allowances_eligible:
        return NO_ALLOWANCES

    amounts = {}
    for name, is_eligible in ALLOWANCE_ELIGIBILITY.items():
        amount = getattr(profile, ALLOWANCE_FIELDS[name])
        amounts[name] = amount if is_eligible(profile) else ZERO
    return AllowanceBreakdown(category=category_allowance(profile, policy), **amounts)
