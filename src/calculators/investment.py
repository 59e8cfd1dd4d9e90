"""Corporate vs personal vs RRSP investment comparator."""

import re
from decimal import Decimal
from typing import NamedTuple

from src.calculators.formatting import NOT_APPLICABLE, format_currency, round_dollars
from src.calculators.investment_data import ASSUMPTIONS, rates_for
from src.errors import ValidationError

_ZERO = Decimal("0")

CORPORATE = "Corporate Investment"
PERSONAL = "Personal Investment"
RRSP = "RRSP Strategy"

OPTIMAL_RECOMMENDATION = "⭐ OPTIMAL - Highest after-tax return for your situation"
UNAVAILABLE_RECOMMENDATION = "Not applicable - No RRSP contribution room available"

_TIMELINE_RE = re.compile(r"^\s*(\d+)\s*(?:years?)?\s*$", re.IGNORECASE)


class InvestmentOutcome(NamedTuple):
    """Raw amounts for one investment vehicle."""

    strategy: str
    available: bool
    initial_investment: Decimal = _ZERO
    refund: Decimal | None = None  # RRSP only
    final_value: Decimal = _ZERO
    gains: Decimal = _ZERO
    total_tax: Decimal = _ZERO
    tax_components: tuple[tuple[str, Decimal], ...] = ()
    final_cash: Decimal = _ZERO
    effective_rate: Decimal | None = None
    audit_risk: str = NOT_APPLICABLE


def parse_timeline(timeline: str | int) -> int:
    """Parse a horizon such as "10 years" (or a bare int) into whole years."""
    if isinstance(timeline, int):
        years = timeline
    else:
        match = _TIMELINE_RE.match(timeline)
        if not match:
            raise ValidationError(f"Invalid timeline: {timeline!r}. Expected e.g. '10 years'.")
        years = int(match.group(1))
    if years < 0:
        raise ValidationError("Timeline must be non-negative.")
    return years


def _effective_rate(total_tax: Decimal, gains: Decimal) -> Decimal | None:
    if gains == 0:
        return None
    return total_tax / gains * 100


def _corporate(amount: Decimal, growth: Decimal, retirement_dividend_rate: Decimal) -> InvestmentOutcome:
    final_value = amount * growth
    gains = final_value - amount

    taxable_gains = gains * ASSUMPTIONS.capital_gains_inclusion
    passive_tax = taxable_gains * ASSUMPTIONS.passive_income_rate
    rdtoh = taxable_gains * ASSUMPTIONS.refundable_portion
    dividend_refund = min(rdtoh, final_value * ASSUMPTIONS.dividend_refund_rate)
    net_corporate_tax = passive_tax - dividend_refund

    available_for_dividend = final_value - net_corporate_tax + dividend_refund
    dividend_tax = available_for_dividend * retirement_dividend_rate
    total_tax = net_corporate_tax + dividend_tax

    return InvestmentOutcome(
        strategy=CORPORATE,
        available=True,
        initial_investment=amount,
        final_value=final_value,
        gains=gains,
        total_tax=total_tax,
        tax_components=(("Passive", net_corporate_tax), ("Dividend", dividend_tax)),
        final_cash=available_for_dividend - dividend_tax,
        effective_rate=_effective_rate(total_tax, gains),
        audit_risk="5-10%",
    )


def _personal(
    amount: Decimal,
    growth: Decimal,
    current_dividend_rate: Decimal,
    personal_rate: Decimal,
) -> InvestmentOutcome:
    extraction_tax = amount * current_dividend_rate
    invested = amount - extraction_tax
    final_value = invested * growth
    gains = final_value - invested
    capital_gains_tax = gains * ASSUMPTIONS.capital_gains_inclusion * personal_rate
    total_tax = extraction_tax + capital_gains_tax

    return InvestmentOutcome(
        strategy=PERSONAL,
        available=True,
        initial_investment=invested,
        final_value=final_value,
        gains=gains,
        total_tax=total_tax,
        final_cash=final_value - capital_gains_tax,
        effective_rate=_effective_rate(total_tax, gains),
        audit_risk="5%",
    )


def _rrsp(
    amount: Decimal,
    rrsp_room: Decimal,
    growth: Decimal,
    refund_rate: Decimal,
    personal_rate: Decimal,
) -> InvestmentOutcome:
    if rrsp_room <= 0:
        return InvestmentOutcome(strategy=RRSP, available=False)

    contributed = min(amount, rrsp_room)
    rrsp_value = contributed * growth
    rrsp_gains = rrsp_value - contributed
    withdrawal_tax = rrsp_value * personal_rate

    # The refund is invested personally alongside the RRSP.
    refund = contributed * refund_rate
    refund_value = refund * growth
    refund_gains = refund_value - refund
    refund_gains_tax = refund_gains * ASSUMPTIONS.capital_gains_inclusion * personal_rate

    total_tax = withdrawal_tax + refund_gains_tax
    gains = rrsp_gains + refund_gains

    return InvestmentOutcome(
        strategy=RRSP,
        available=True,
        initial_investment=contributed,
        refund=refund,
        final_value=rrsp_value + refund_value,
        gains=gains,
        total_tax=total_tax,
        final_cash=(rrsp_value - withdrawal_tax) + (refund_value - refund_gains_tax),
        effective_rate=_effective_rate(total_tax, gains),
        audit_risk="2%",
    )


def compare_investment_strategies(
    investment_amount: Decimal,
    rrsp_room: Decimal,
    current_income_level: str,
    withdrawal_income_level: str,
    years: int,
) -> list[InvestmentOutcome]:
    """Project an investable amount under three vehicles.

    Args:
        investment_amount: Corporate retained earnings available to invest.
        rrsp_room: Available RRSP contribution room; 0 disables the RRSP vehicle.
        current_income_level: Income-bracket label today.
        withdrawal_income_level: Income-bracket label when funds are withdrawn.
        years: Investment horizon in whole years.

    Returns:
        Outcomes in fixed order: corporate, personal, RRSP.
    """
    if investment_amount < 0:
        raise ValidationError("Investment amount must be non-negative.")
    if rrsp_room < 0:
        raise ValidationError("RRSP room must be non-negative.")
    if years < 0:
        raise ValidationError("Timeline must be non-negative.")

    current = rates_for(current_income_level)
    withdrawal = rates_for(withdrawal_income_level)
    growth = (1 + ASSUMPTIONS.annual_return) ** years

    return [
        _corporate(investment_amount, growth, withdrawal.dividend_retirement),
        _personal(investment_amount, growth, current.dividend_current, withdrawal.personal),
        _rrsp(investment_amount, rrsp_room, growth, current.rrsp_refund, withdrawal.personal),
    ]


def rank_investment_strategies(outcomes: list[InvestmentOutcome]) -> list[tuple[int, str]]:
    """Order vehicles by after-tax cash and write a recommendation for each.

    Available vehicles come first, highest final cash first (ties keep
    input order). Unavailable vehicles follow in input order.

    Returns:
        (index into ``outcomes``, recommendation) pairs in ranked order.
    """
    available = [i for i, o in enumerate(outcomes) if o.available]
    unavailable = [i for i, o in enumerate(outcomes) if not o.available]
    available.sort(key=lambda i: outcomes[i].final_cash, reverse=True)

    ranked: list[tuple[int, str]] = []
    if available:
        best_cash = round_dollars(outcomes[available[0]].final_cash)
        ranked.append((available[0], OPTIMAL_RECOMMENDATION))
        for i in available[1:]:
            delta = best_cash - round_dollars(outcomes[i].final_cash)
            ranked.append((
                i,
                f"Consider optimal strategy - potentially {format_currency(delta)} "
                "more after-tax cash",
            ))

    ranked.extend((i, UNAVAILABLE_RECOMMENDATION) for i in unavailable)
    return ranked
