"""CPP/CPP2 and EI payroll contributions."""

from decimal import Decimal
from typing import NamedTuple

from src.calculators.tax_data import DEFAULT_TAX_YEAR, get_tax_year
from src.errors import ValidationError

_ZERO = Decimal("0")


class Contributions(NamedTuple):
    """Employee and employer shares of a payroll contribution."""

    employee: Decimal
    employer: Decimal

    @property
    def total(self) -> Decimal:
        return self.employee + self.employer


def _clamp(value: Decimal, low: Decimal, high: Decimal) -> Decimal:
    return min(max(value, low), high)


def calculate_cpp_contributions(
    salary: Decimal,
    tax_year: str = DEFAULT_TAX_YEAR,
) -> Contributions:
    """Calculate CPP (base + CPP2) contributions on a salary.

    The employer contribution is modelled as equal to the employee
    contribution.

    Args:
        salary: Annual salary (must be >= 0).
        tax_year: Tax year key, e.g. "2024".

    Returns:
        Contributions with matching employee and employer amounts.
    """
    if salary < 0:
        raise ValidationError("Salary must be non-negative.")

    cpp = get_tax_year(tax_year).cpp
    contributory = _clamp(
        salary - cpp.basic_exemption, _ZERO, cpp.ympe - cpp.basic_exemption
    )
    base = contributory * cpp.employee_rate

    cpp2_earnings = _clamp(salary - cpp.ympe, _ZERO, cpp.yampe - cpp.ympe)
    cpp2 = cpp2_earnings * cpp.cpp2_rate

    employee = base + cpp2
    return Contributions(employee=employee, employer=employee)


def calculate_ei_contributions(
    salary: Decimal,
    tax_year: str = DEFAULT_TAX_YEAR,
) -> Contributions:
    """Calculate EI premiums on a salary, capped at maximum insurable earnings."""
    if salary < 0:
        raise ValidationError("Salary must be non-negative.")

    ei = get_tax_year(tax_year).ei
    insurable = min(salary, ei.max_insurable_earnings)
    return Contributions(
        employee=insurable * ei.employee_rate,
        employer=insurable * ei.employer_rate,
    )
