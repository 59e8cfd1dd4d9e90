"""Salary vs dividend split comparator for an owner-managed corporation."""

from decimal import ROUND_HALF_UP, Decimal
from typing import NamedTuple

from src.calculators.dividend_tax import calculate_dividend_tax
from src.calculators.income_tax import calculate_personal_tax
from src.calculators.payroll import (
    Contributions,
    calculate_cpp_contributions,
    calculate_ei_contributions,
)
from src.calculators.tax_data import DEFAULT_TAX_YEAR, get_tax_year
from src.errors import ValidationError

_ZERO = Decimal("0")

# (label, salary share, dividend share); evaluated in this order
SPLIT_SCENARIOS: tuple[tuple[str, Decimal, Decimal], ...] = (
    ("100% Salary", Decimal("1"), _ZERO),
    ("100% Dividend", _ZERO, Decimal("1")),
    ("50% Salary / 50% Dividend", Decimal("0.5"), Decimal("0.5")),
    ("Optimal Mix (65% Salary / 35% Dividend)", Decimal("0.65"), Decimal("0.35")),
)


class SplitOutcome(NamedTuple):
    """Raw amounts for one salary/dividend withdrawal."""

    salary: Decimal
    dividend: Decimal
    personal_income_tax: Decimal
    dividend_tax: Decimal
    cpp: Contributions
    ei: Contributions
    corporate_tax: Decimal
    total_personal_tax: Decimal
    total_payroll: Decimal
    total_tax: Decimal
    net_cash: Decimal
    effective_rate: Decimal
    rrsp_room: Decimal
    corporate_retained: Decimal


def calculate_split_strategy(
    salary: Decimal,
    dividend: Decimal,
    net_business_income: Decimal,
    tax_year: str = DEFAULT_TAX_YEAR,
) -> SplitOutcome:
    """Evaluate one withdrawal mix across personal, payroll and corporate layers.

    Salary and the employer share of CPP/EI are deducted from business
    income; what is left is taxed at the small-business rate. The dividend
    is paid out of after-tax retained earnings.

    Args:
        salary: Salary paid to the owner.
        dividend: Non-eligible dividend paid to the owner.
        net_business_income: Revenue less expenses, before salary.
        tax_year: Tax year key, e.g. "2024".

    Returns:
        SplitOutcome with itemised taxes, net cash and derived figures.
    """
    if salary < 0 or dividend < 0:
        raise ValidationError("Salary and dividend must be non-negative.")

    data = get_tax_year(tax_year)

    cpp = calculate_cpp_contributions(salary, tax_year)
    ei = calculate_ei_contributions(salary, tax_year)
    income_tax = calculate_personal_tax(salary, tax_year)
    dividend_tax = calculate_dividend_tax(dividend, salary, tax_year).tax

    salary_expense = salary + cpp.employer + ei.employer
    corporate_income = max(net_business_income - salary_expense, _ZERO)
    corporate_tax = corporate_income * data.small_business_rate
    retained = corporate_income - corporate_tax

    rrsp_room = min(salary * data.rrsp.rate, data.rrsp.annual_limit)

    total_personal_tax = income_tax + dividend_tax
    total_payroll = cpp.total + ei.total
    total_tax = total_personal_tax + total_payroll + corporate_tax

    personal_burden = income_tax + dividend_tax + cpp.employee + ei.employee
    withdrawal = salary + dividend
    net_cash = withdrawal - personal_burden
    effective_rate = personal_burden / withdrawal * 100 if withdrawal > 0 else _ZERO

    return SplitOutcome(
        salary=salary,
        dividend=dividend,
        personal_income_tax=income_tax,
        dividend_tax=dividend_tax,
        cpp=cpp,
        ei=ei,
        corporate_tax=corporate_tax,
        total_personal_tax=total_personal_tax,
        total_payroll=total_payroll,
        total_tax=total_tax,
        net_cash=net_cash,
        effective_rate=effective_rate,
        rrsp_room=rrsp_room,
        corporate_retained=max(retained - dividend, _ZERO),
    )


def net_business_income(revenue: Decimal, expenses_percentage: Decimal) -> Decimal:
    """Revenue less expenses given as a percentage of revenue."""
    return revenue - revenue * expenses_percentage / 100


def _split_amount(withdrawal: Decimal, share: Decimal) -> Decimal:
    # Partial shares are rounded to whole dollars; full shares pass through.
    if share in (0, 1):
        return withdrawal * share
    return (withdrawal * share).quantize(Decimal("1"), rounding=ROUND_HALF_UP)


def compare_split_strategies(
    revenue: Decimal,
    expenses_percentage: Decimal,
    withdrawal_amount: Decimal,
    tax_year: str = DEFAULT_TAX_YEAR,
) -> list[tuple[str, SplitOutcome]]:
    """Evaluate the four fixed salary/dividend splits.

    Args:
        revenue: Annual business revenue (must be >= 0).
        expenses_percentage: Expenses as a percentage of revenue, 0-100.
        withdrawal_amount: Total the owner wants to take out (must be >= 0).
        tax_year: Tax year key, e.g. "2024".

    Returns:
        (label, outcome) pairs in SPLIT_SCENARIOS order.
    """
    if revenue < 0:
        raise ValidationError("Revenue must be non-negative.")
    if not 0 <= expenses_percentage <= 100:
        raise ValidationError("Expenses percentage must be between 0 and 100.")
    if withdrawal_amount < 0:
        raise ValidationError("Withdrawal amount must be non-negative.")

    nbi = net_business_income(revenue, expenses_percentage)
    return [
        (
            label,
            calculate_split_strategy(
                _split_amount(withdrawal_amount, salary_share),
                _split_amount(withdrawal_amount, dividend_share),
                nbi,
                tax_year,
            ),
        )
        for label, salary_share, dividend_share in SPLIT_SCENARIOS
    ]
