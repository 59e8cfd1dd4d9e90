"""Tests for the salary/dividend split comparator."""

from decimal import Decimal

import pytest

from src.calculators.smart_split import (
    SPLIT_SCENARIOS,
    calculate_split_strategy,
    compare_split_strategies,
    net_business_income,
)
from src.errors import ValidationError
from src.reports import format_split_row


def _parse_currency(text: str) -> Decimal:
    return Decimal(text.replace("$", "").replace(",", ""))


def _rows(revenue: str = "200000", expenses: str = "30", withdrawal: str = "100000"):  # type: ignore[no-untyped-def]
    outcomes = compare_split_strategies(Decimal(revenue), Decimal(expenses), Decimal(withdrawal))
    return outcomes, [format_split_row(label, outcome) for label, outcome in outcomes]


def test_end_to_end_four_rows() -> None:
    """200k revenue, 30% expenses, 100k withdrawal -> four populated rows."""
    _, rows = _rows()

    assert [r.strategy for r in rows] == [label for label, _, _ in SPLIT_SCENARIOS]
    for row in rows:
        for value in (row.salary, row.dividends, row.corporate_tax, row.total_tax, row.net_income):
            assert value.startswith("$")
        assert _parse_currency(row.total_tax) > 0


def test_split_amounts() -> None:
    outcomes, _ = _rows()
    amounts = [(o.salary, o.dividend) for _, o in outcomes]
    assert amounts == [
        (Decimal("100000"), Decimal("0")),
        (Decimal("0"), Decimal("100000")),
        (Decimal("50000"), Decimal("50000")),
        (Decimal("65000"), Decimal("35000")),
    ]


def test_net_cash_never_exceeds_withdrawal() -> None:
    for withdrawal in ("0", "20000", "100000", "250000"):
        outcomes, _ = _rows(withdrawal=withdrawal)
        for _, outcome in outcomes:
            assert outcome.total_tax >= 0
            assert outcome.net_cash <= Decimal(withdrawal)


def test_all_dividend_has_no_payroll_or_rrsp_room() -> None:
    outcomes, rows = _rows()
    _, dividend_only = outcomes[1]
    assert dividend_only.cpp.total == 0
    assert dividend_only.ei.total == 0
    assert dividend_only.rrsp_room == 0
    assert rows[1].cpp_contributions == "$0"


def test_rrsp_room_capped() -> None:
    outcome = calculate_split_strategy(Decimal("250000"), Decimal("0"), Decimal("400000"))
    assert outcome.rrsp_room == Decimal("31560")


def test_salary_reduces_corporate_tax() -> None:
    nbi = Decimal("140000")
    salary = calculate_split_strategy(Decimal("100000"), Decimal("0"), nbi)
    dividend = calculate_split_strategy(Decimal("0"), Decimal("100000"), nbi)
    assert salary.corporate_tax < dividend.corporate_tax
    assert dividend.corporate_tax == nbi * Decimal("0.122")


def test_corporate_income_floored_at_zero() -> None:
    outcome = calculate_split_strategy(Decimal("100000"), Decimal("0"), Decimal("50000"))
    assert outcome.corporate_tax == 0
    assert outcome.corporate_retained == 0


def test_personal_tax_detail_format() -> None:
    _, rows = _rows()
    assert rows[0].personal_tax.startswith("$")
    assert "(Tax: $" in rows[0].personal_tax
    assert "CPP: $" in rows[0].personal_tax
    assert "EI: $" in rows[0].personal_tax


def test_zero_withdrawal() -> None:
    outcomes, rows = _rows(withdrawal="0")
    for (_, outcome), row in zip(outcomes, rows):
        assert outcome.effective_rate == 0
        assert row.net_income == "$0"


def test_net_business_income() -> None:
    assert net_business_income(Decimal("200000"), Decimal("30")) == Decimal("140000")


@pytest.mark.parametrize(
    "revenue,expenses,withdrawal",
    [
        ("-1", "30", "100000"),
        ("200000", "101", "100000"),
        ("200000", "-5", "100000"),
        ("200000", "30", "-1"),
    ],
)
def test_invalid_inputs(revenue: str, expenses: str, withdrawal: str) -> None:
    with pytest.raises(ValidationError):
        compare_split_strategies(Decimal(revenue), Decimal(expenses), Decimal(withdrawal))


def test_negative_split_rejected() -> None:
    with pytest.raises(ValidationError):
        calculate_split_strategy(Decimal("-1"), Decimal("0"), Decimal("1000"))
