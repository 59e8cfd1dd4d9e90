"""Display rows for calculator outcomes.

The calculators return raw Decimal amounts; this module turns them into
the dollar and percent strings the API and CLI show.
"""

from src.calculators.formatting import (
    NOT_APPLICABLE,
    NOT_AVAILABLE,
    format_currency,
    format_percent,
)
from src.calculators.investment import InvestmentOutcome
from src.calculators.smart_split import SplitOutcome
from src.db.models import InvestmentStrategyRow, SplitStrategyRow

_RISK_LEVELS: dict[str, str] = {
    "2%": "Low",
    "5%": "Medium",
    NOT_APPLICABLE: NOT_APPLICABLE,
}


def format_split_row(label: str, outcome: SplitOutcome) -> SplitStrategyRow:
    """Render a SplitOutcome as display strings."""
    personal_total = outcome.total_personal_tax + outcome.cpp.employee + outcome.ei.employee
    personal_detail = (
        f"{format_currency(personal_total)} "
        f"(Tax: {format_currency(outcome.total_personal_tax)}, "
        f"CPP: {format_currency(outcome.cpp.employee)}, "
        f"EI: {format_currency(outcome.ei.employee)})"
    )
    return SplitStrategyRow(
        strategy=label,
        salary=format_currency(outcome.salary),
        dividends=format_currency(outcome.dividend),
        corporate_tax=format_currency(outcome.corporate_tax),
        personal_tax=personal_detail,
        total_tax=format_currency(outcome.total_tax),
        net_income=format_currency(outcome.net_cash),
        effective_tax_rate=format_percent(outcome.effective_rate),
        rrsp_room=format_currency(outcome.rrsp_room),
        cpp_contributions=format_currency(outcome.cpp.total),
        corporate_retained=format_currency(outcome.corporate_retained),
    )


def risk_level_for(audit_risk: str) -> str:
    return _RISK_LEVELS.get(audit_risk, "Medium-High")


def format_investment_row(outcome: InvestmentOutcome) -> InvestmentStrategyRow:
    """Render an InvestmentOutcome as display strings (narrative left blank)."""
    if not outcome.available:
        return InvestmentStrategyRow(
            strategy=outcome.strategy,
            initial_investment=NOT_AVAILABLE,
            final_value=NOT_AVAILABLE,
            total_tax_paid=NOT_AVAILABLE,
            final_cash_in_pocket=NOT_AVAILABLE,
            effective_tax_rate=NOT_APPLICABLE,
            audit_risk=NOT_APPLICABLE,
            risk_level=risk_level_for(NOT_APPLICABLE),
        )

    initial = format_currency(outcome.initial_investment)
    if outcome.refund is not None:
        initial = f"{initial} (RRSP) + {format_currency(outcome.refund)} (Refund)"

    total_tax = format_currency(outcome.total_tax)
    if outcome.tax_components:
        parts = " + ".join(
            f"{name}: {format_currency(amount)}" for name, amount in outcome.tax_components
        )
        total_tax = f"{total_tax} ({parts})"

    return InvestmentStrategyRow(
        strategy=outcome.strategy,
        initial_investment=initial,
        final_value=format_currency(outcome.final_value),
        total_tax_paid=total_tax,
        final_cash_in_pocket=format_currency(outcome.final_cash),
        effective_tax_rate=format_percent(outcome.effective_rate),
        audit_risk=outcome.audit_risk,
        risk_level=risk_level_for(outcome.audit_risk),
    )
