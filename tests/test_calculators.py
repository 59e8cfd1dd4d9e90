"""Tests for the Canadian tax formula functions."""

import inspect
from decimal import Decimal
from types import ModuleType
from unittest.mock import patch

import pytest

from src.calculators import (
    dividend_tax,
    formatting,
    income_tax,
    investment,
    investment_data,
    payroll,
    smart_split,
    tax_data,
)
from src.calculators.dividend_tax import calculate_dividend_tax
from src.calculators.formatting import format_currency, format_percent
from src.calculators.income_tax import calculate_personal_tax
from src.calculators.payroll import calculate_cpp_contributions, calculate_ei_contributions
from src.calculators.tax_data import (
    TAX_YEARS,
    DividendRates,
    TaxBracket,
    get_tax_year,
    validate_brackets,
)
from src.errors import InternalComputationError, ValidationError

# --- Personal income tax ---


class TestPersonalTax:
    def test_zero_income(self) -> None:
        assert calculate_personal_tax(Decimal("0")) == 0

    def test_negative_income_is_zero(self) -> None:
        assert calculate_personal_tax(Decimal("-5000")) == 0

    def test_top_of_first_bracket(self) -> None:
        """$51,446 sits entirely in the 20.05% bracket."""
        assert calculate_personal_tax(Decimal("51446")) == Decimal("51446") * Decimal("0.2005")

    def test_top_bracket_excess(self) -> None:
        """Every dollar above $246,753 is taxed at 49.53%."""
        low = calculate_personal_tax(Decimal("246753"))
        high = calculate_personal_tax(Decimal("300000"))
        assert high - low == Decimal("53247") * Decimal("0.4953")

    def test_monotonic(self) -> None:
        incomes = [Decimal(x) for x in range(0, 400001, 12500)]
        taxes = [calculate_personal_tax(i) for i in incomes]
        assert taxes == sorted(taxes)

    def test_marginal_slope_matches_bracket_rate(self) -> None:
        """Inside a bracket, one extra dollar costs exactly that bracket's rate."""
        for bracket in TAX_YEARS["2024"].brackets:
            income = bracket.min + 10
            delta = calculate_personal_tax(income + 1) - calculate_personal_tax(income)
            assert delta == bracket.rate

    def test_unknown_tax_year(self) -> None:
        with pytest.raises(ValidationError, match="Unknown tax year"):
            calculate_personal_tax(Decimal("50000"), "1999")


# --- Bracket table validation ---


class TestValidateBrackets:
    def test_configured_years_are_valid(self) -> None:
        for data in TAX_YEARS.values():
            validate_brackets(data.brackets)

    def test_gap_rejected(self) -> None:
        brackets = (
            TaxBracket(Decimal("0"), Decimal("100"), Decimal("0.1")),
            TaxBracket(Decimal("150"), None, Decimal("0.2")),
        )
        with pytest.raises(InternalComputationError, match="gap"):
            validate_brackets(brackets)

    def test_must_start_at_zero(self) -> None:
        brackets = (TaxBracket(Decimal("1"), None, Decimal("0.1")),)
        with pytest.raises(InternalComputationError, match="start at 0"):
            validate_brackets(brackets)

    def test_last_must_be_unbounded(self) -> None:
        brackets = (TaxBracket(Decimal("0"), Decimal("100"), Decimal("0.1")),)
        with pytest.raises(InternalComputationError, match="unbounded"):
            validate_brackets(brackets)

    def test_unbounded_in_middle_rejected(self) -> None:
        brackets = (
            TaxBracket(Decimal("0"), None, Decimal("0.1")),
            TaxBracket(Decimal("101"), None, Decimal("0.2")),
        )
        with pytest.raises(InternalComputationError):
            validate_brackets(brackets)

    def test_empty_rejected(self) -> None:
        with pytest.raises(InternalComputationError):
            validate_brackets(())

    def test_get_tax_year(self) -> None:
        assert get_tax_year("2024").small_business_rate == Decimal("0.122")


# --- CPP / EI ---


class TestPayroll:
    def test_cpp_below_basic_exemption(self) -> None:
        cpp = calculate_cpp_contributions(Decimal("3500"))
        assert cpp.employee == 0
        assert cpp.employer == 0

    def test_cpp_at_ympe(self) -> None:
        """At YMPE the full base contribution is due and CPP2 is zero."""
        cpp = calculate_cpp_contributions(Decimal("68500"))
        assert cpp.employee == Decimal("65000") * Decimal("0.0595")

    def test_cpp2_capped_at_yampe(self) -> None:
        base = Decimal("65000") * Decimal("0.0595")
        cpp2 = Decimal("4700") * Decimal("0.04")
        assert calculate_cpp_contributions(Decimal("73200")).employee == base + cpp2
        assert calculate_cpp_contributions(Decimal("500000")).employee == base + cpp2

    def test_employer_cpp_mirrors_employee(self) -> None:
        cpp = calculate_cpp_contributions(Decimal("50000"))
        assert cpp.employer == cpp.employee
        assert cpp.total == cpp.employee * 2

    def test_ei_below_cap(self) -> None:
        ei = calculate_ei_contributions(Decimal("40000"))
        assert ei.employee == Decimal("40000") * Decimal("0.0166")
        assert ei.employer == Decimal("40000") * Decimal("0.02324")

    def test_ei_capped(self) -> None:
        ei = calculate_ei_contributions(Decimal("150000"))
        assert ei.employee == Decimal("63200") * Decimal("0.0166")

    def test_negative_salary_rejected(self) -> None:
        with pytest.raises(ValidationError):
            calculate_cpp_contributions(Decimal("-1"))
        with pytest.raises(ValidationError):
            calculate_ei_contributions(Decimal("-1"))


# --- Dividend tax ---


class TestDividendTax:
    def test_zero_dividend(self) -> None:
        result = calculate_dividend_tax(Decimal("0"))
        assert result.tax == 0
        assert result.grossed_up == 0

    def test_gross_up(self) -> None:
        result = calculate_dividend_tax(Decimal("10000"))
        assert result.grossed_up == Decimal("11500")

    def test_stacks_on_other_income(self) -> None:
        alone = calculate_dividend_tax(Decimal("50000"))
        stacked = calculate_dividend_tax(Decimal("50000"), other_income=Decimal("100000"))
        assert stacked.tax > alone.tax

    def test_never_negative(self) -> None:
        """Credits larger than the gross tax floor the result at zero."""
        generous = TAX_YEARS["2024"]._replace(
            dividend=DividendRates(
                gross_up=Decimal("0.15"),
                federal_dtc=Decimal("0.5"),
                provincial_dtc=Decimal("0.5"),
            )
        )
        with patch.dict(TAX_YEARS, {"2024": generous}):
            assert calculate_dividend_tax(Decimal("20000")).tax == 0

    def test_negative_dividend_rejected(self) -> None:
        with pytest.raises(ValidationError):
            calculate_dividend_tax(Decimal("-100"))


# --- Formatting ---


class TestFormatting:
    def test_currency_thousands_and_rounding(self) -> None:
        assert format_currency(Decimal("12345.49")) == "$12,345"
        assert format_currency(Decimal("12345.5")) == "$12,346"
        assert format_currency(Decimal("0")) == "$0"

    def test_percent(self) -> None:
        assert format_percent(Decimal("12.345")) == "12.3%"
        assert format_percent(Decimal("12.35")) == "12.4%"
        assert format_percent(None) == "N/A"

    def test_module_only_renders(self) -> None:
        """Formatting is one-way; display strings are never parsed back."""
        public = {name for name in vars(formatting) if not name.startswith("_")}
        assert {name for name in public if name.startswith("parse")} == set()


# --- Package boundaries ---


@pytest.mark.parametrize(
    "module",
    [dividend_tax, formatting, income_tax, investment, investment_data, payroll, smart_split, tax_data],
)
def test_calculators_do_not_import_models(module: ModuleType) -> None:
    """Calculators return plain amounts; row models are built in src.reports."""
    assert "src.db" not in inspect.getsource(module)
