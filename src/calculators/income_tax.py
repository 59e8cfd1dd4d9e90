"""Progressive personal income tax, bracket by bracket."""

from decimal import Decimal

from src.calculators.tax_data import DEFAULT_TAX_YEAR, get_tax_year


def calculate_personal_tax(
    taxable_income: Decimal,
    tax_year: str = DEFAULT_TAX_YEAR,
) -> Decimal:
    """Calculate combined federal + provincial personal income tax.

    Each bracket covers ``max - min + 1`` dollars (bounds are inclusive),
    so the walk consumes income in whole-dollar-wide slices. The last
    bracket is unbounded and absorbs whatever income remains.

    Args:
        taxable_income: Taxable income. Zero or negative yields zero tax.
        tax_year: Tax year key, e.g. "2024".

    Returns:
        Total tax owed.
    """
    data = get_tax_year(tax_year)
    tax = Decimal("0")
    remaining = taxable_income

    for bracket in data.brackets:
        if remaining <= 0:
            break

        if bracket.max is None:
            taxable = remaining
        else:
            width = bracket.max - bracket.min + 1
            taxable = min(remaining, width)

        tax += taxable * bracket.rate
        remaining -= taxable

    return tax
