"""Rate tables and growth assumptions for the investment comparator.

Rates are keyed by a coarse income-bracket label rather than an exact
income figure. Values are Ontario 2024 approximations.
"""

from decimal import Decimal
from typing import NamedTuple

from src.errors import ValidationError

INCOME_BRACKET_LABELS: tuple[str, ...] = (
    "Under $50K",
    "$50-100K",
    "$100-200K",
    "Over $200K",
)


class LabelRates(NamedTuple):
    """Lookup rates for one income-bracket label."""

    dividend_current: Decimal  # extracting a dividend while working
    dividend_retirement: Decimal  # dividend received at withdrawal time
    personal: Decimal  # marginal rate on ordinary income
    rrsp_refund: Decimal  # refund on an RRSP contribution


class InvestmentAssumptions(NamedTuple):
    """Growth and corporate passive-income parameters."""

    annual_return: Decimal
    capital_gains_inclusion: Decimal
    passive_income_rate: Decimal
    refundable_portion: Decimal  # RDTOH share of taxable gains
    dividend_refund_rate: Decimal  # cap on the refund, as a share of value


RATES_BY_LABEL: dict[str, LabelRates] = {
    "Under $50K": LabelRates(
        dividend_current=Decimal("0.15"),
        dividend_retirement=Decimal("0.10"),
        personal=Decimal("0.20"),
        rrsp_refund=Decimal("0.20"),
    ),
    "$50-100K": LabelRates(
        dividend_current=Decimal("0.25"),
        dividend_retirement=Decimal("0.2028"),
        personal=Decimal("0.2965"),
        rrsp_refund=Decimal("0.35"),
    ),
    "$100-200K": LabelRates(
        dividend_current=Decimal("0.39"),
        dividend_retirement=Decimal("0.30"),
        personal=Decimal("0.35"),
        rrsp_refund=Decimal("0.4116"),
    ),
    "Over $200K": LabelRates(
        dividend_current=Decimal("0.45"),
        dividend_retirement=Decimal("0.35"),
        personal=Decimal("0.45"),
        rrsp_refund=Decimal("0.50"),
    ),
}

ASSUMPTIONS = InvestmentAssumptions(
    annual_return=Decimal("0.07"),
    capital_gains_inclusion=Decimal("0.5"),
    passive_income_rate=Decimal("0.5017"),
    refundable_portion=Decimal("0.3067"),
    dividend_refund_rate=Decimal("0.3833"),
)


def rates_for(label: str) -> LabelRates:
    """Look up the rate row for an income-bracket label.

    Raises:
        ValidationError: If the label is not one of INCOME_BRACKET_LABELS.
    """
    try:
        return RATES_BY_LABEL[label]
    except KeyError:
        valid = ", ".join(INCOME_BRACKET_LABELS)
        raise ValidationError(
            f"Unknown income level: {label!r}. Must be one of: {valid}"
        ) from None
