"""Canadian tax constants (combined federal + Ontario) for small-business planning.

Hardcoded Python constants, not DB-driven. Values change once a year;
add a new ``TaxYearData`` entry rather than editing an existing one.
"""

from decimal import Decimal
from typing import NamedTuple

from src.errors import InternalComputationError, ValidationError


class TaxBracket(NamedTuple):
    """A single personal income tax bracket."""

    min: Decimal  # inclusive
    max: Decimal | None  # inclusive, None = no cap
    rate: Decimal


class CppRates(NamedTuple):
    """Canada Pension Plan parameters."""

    ympe: Decimal  # Year's Maximum Pensionable Earnings
    yampe: Decimal  # Year's Additional Maximum Pensionable Earnings
    basic_exemption: Decimal
    employee_rate: Decimal
    cpp2_rate: Decimal  # on earnings between YMPE and YAMPE


class EiRates(NamedTuple):
    """Employment Insurance parameters."""

    max_insurable_earnings: Decimal
    employee_rate: Decimal
    employer_rate: Decimal  # 1.4x employee rate


class DividendRates(NamedTuple):
    """Non-eligible dividend gross-up and dividend tax credits."""

    gross_up: Decimal
    federal_dtc: Decimal
    provincial_dtc: Decimal


class RrspLimits(NamedTuple):
    """RRSP contribution room generated by earned income."""

    rate: Decimal
    annual_limit: Decimal


class TaxYearData(NamedTuple):
    """All tax parameters for a single tax year."""

    brackets: tuple[TaxBracket, ...]
    small_business_rate: Decimal
    cpp: CppRates
    ei: EiRates
    dividend: DividendRates
    rrsp: RrspLimits


def validate_brackets(brackets: tuple[TaxBracket, ...]) -> None:
    """Check that brackets partition [0, inf) with no gaps or overlaps.

    Bracket bounds are inclusive whole dollars, so each bracket must start
    exactly one dollar above the previous bracket's max.

    Raises:
        InternalComputationError: If the table is not a contiguous partition.
    """
    if not brackets:
        raise InternalComputationError("Bracket table is empty.")
    if brackets[0].min != 0:
        raise InternalComputationError(
            f"First bracket must start at 0, got {brackets[0].min}."
        )
    for prev, nxt in zip(brackets, brackets[1:]):
        if prev.max is None:
            raise InternalComputationError("Only the last bracket may be unbounded.")
        if nxt.min != prev.max + 1:
            raise InternalComputationError(
                f"Bracket gap or overlap between {prev.max} and {nxt.min}."
            )
    if brackets[-1].max is not None:
        raise InternalComputationError("Last bracket must be unbounded.")


_BRACKETS_2024 = (
    TaxBracket(Decimal("0"), Decimal("51446"), Decimal("0.2005")),
    TaxBracket(Decimal("51447"), Decimal("55867"), Decimal("0.2415")),
    TaxBracket(Decimal("55868"), Decimal("102894"), Decimal("0.2965")),
    TaxBracket(Decimal("102895"), Decimal("111733"), Decimal("0.3166")),
    TaxBracket(Decimal("111734"), Decimal("150000"), Decimal("0.3716")),
    TaxBracket(Decimal("150001"), Decimal("173205"), Decimal("0.3816")),
    TaxBracket(Decimal("173206"), Decimal("220000"), Decimal("0.4116")),
    TaxBracket(Decimal("220001"), Decimal("246752"), Decimal("0.4216")),
    TaxBracket(Decimal("246753"), None, Decimal("0.4953")),
)

TAX_YEARS: dict[str, TaxYearData] = {
    "2024": TaxYearData(
        brackets=_BRACKETS_2024,
        small_business_rate=Decimal("0.122"),  # 9% federal + 3.2% Ontario
        cpp=CppRates(
            ympe=Decimal("68500"),
            yampe=Decimal("73200"),
            basic_exemption=Decimal("3500"),
            employee_rate=Decimal("0.0595"),
            cpp2_rate=Decimal("0.04"),
        ),
        ei=EiRates(
            max_insurable_earnings=Decimal("63200"),
            employee_rate=Decimal("0.0166"),
            employer_rate=Decimal("0.02324"),
        ),
        dividend=DividendRates(
            gross_up=Decimal("0.15"),
            federal_dtc=Decimal("0.090301"),
            provincial_dtc=Decimal("0.029863"),  # Ontario
        ),
        rrsp=RrspLimits(
            rate=Decimal("0.18"),
            annual_limit=Decimal("31560"),
        ),
    ),
}

DEFAULT_TAX_YEAR = "2024"

for _data in TAX_YEARS.values():
    validate_brackets(_data.brackets)


def get_tax_year(tax_year: str) -> TaxYearData:
    """Look up the constant table for a tax year.

    Raises:
        ValidationError: If the tax year is not configured.
    """
    try:
        return TAX_YEARS[tax_year]
    except KeyError:
        available = ", ".join(sorted(TAX_YEARS))
        raise ValidationError(
            f"Unknown tax year: {tax_year}. Available: {available}"
        ) from None
