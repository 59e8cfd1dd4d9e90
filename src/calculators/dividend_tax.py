"""Personal tax on non-eligible dividends (gross-up and dividend tax credit)."""

from decimal import Decimal
from typing import NamedTuple

from src.calculators.income_tax import calculate_personal_tax
from src.calculators.tax_data import DEFAULT_TAX_YEAR, get_tax_year
from src.errors import ValidationError


class DividendTax(NamedTuple):
    """Incremental personal tax attributable to a dividend."""

    tax: Decimal
    grossed_up: Decimal


def calculate_dividend_tax(
    dividend: Decimal,
    other_income: Decimal = Decimal("0"),
    tax_year: str = DEFAULT_TAX_YEAR,
) -> DividendTax:
    """Calculate the tax a dividend adds on top of other taxable income.

    The grossed-up dividend is stacked on ``other_income`` so it is taxed
    at the marginal rates it actually reaches. Federal and provincial
    dividend tax credits are then subtracted; the result never goes
    below zero.

    Args:
        dividend: Cash dividend received (must be >= 0).
        other_income: Non-dividend taxable income, e.g. salary.
        tax_year: Tax year key, e.g. "2024".

    Returns:
        DividendTax with the net tax and the grossed-up dividend.
    """
    if dividend < 0:
        raise ValidationError("Dividend must be non-negative.")

    rates = get_tax_year(tax_year).dividend
    grossed_up = dividend + dividend * rates.gross_up

    gross_tax = calculate_personal_tax(
        other_income + grossed_up, tax_year
    ) - calculate_personal_tax(other_income, tax_year)
    credits = grossed_up * rates.federal_dtc + grossed_up * rates.provincial_dtc

    return DividendTax(
        tax=max(gross_tax - credits, Decimal("0")),
        grossed_up=grossed_up,
    )
