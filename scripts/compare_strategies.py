"""Print salary/dividend and investment comparisons from the command line.

Runs the calculators only: no database and no LLM narrative.

Usage:
    python scripts/compare_strategies.py split --revenue 200000 --expenses 30 --withdrawal 100000
    python scripts/compare_strategies.py invest --amount 50000 --rrsp-room 20000 \\
        --current "\\$100-200K" --retirement "\\$50-100K" --years 20
"""

import argparse
import logging
import sys
from decimal import Decimal
from pathlib import Path

# Add project root to path so src and config are importable
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from src.calculators.investment import compare_investment_strategies, rank_investment_strategies
from src.calculators.investment_data import INCOME_BRACKET_LABELS
from src.calculators.smart_split import compare_split_strategies
from src.calculators.tax_data import DEFAULT_TAX_YEAR
from src.errors import SmartSplitError
from src.reports import format_investment_row, format_split_row

logging.basicConfig(level=logging.INFO, format="%(message)s")
logger = logging.getLogger(__name__)


def print_split(revenue: Decimal, expenses: Decimal, withdrawal: Decimal, tax_year: str) -> None:
    """Log the four salary/dividend scenarios as a table."""
    outcomes = compare_split_strategies(revenue, expenses, withdrawal, tax_year)

    logger.info("=" * 100)
    logger.info(
        "SALARY / DIVIDEND SPLIT (revenue %s, expenses %s%%, withdrawal %s, tax year %s)",
        revenue, expenses, withdrawal, tax_year,
    )
    logger.info("=" * 100)
    logger.info(
        "  %-42s %10s %10s %10s %10s %10s %7s",
        "Strategy", "Salary", "Dividends", "Corp tax", "Total tax", "Net", "Rate",
    )
    logger.info("-" * 100)
    for label, outcome in outcomes:
        row = format_split_row(label, outcome)
        logger.info(
            "  %-42s %10s %10s %10s %10s %10s %7s",
            row.strategy, row.salary, row.dividends, row.corporate_tax,
            row.total_tax, row.net_income, row.effective_tax_rate,
        )
        logger.info("      personal: %s", row.personal_tax)


def print_investment(
    amount: Decimal, rrsp_room: Decimal, current: str, retirement: str, years: int
) -> None:
    """Log the three investment vehicles, best first."""
    outcomes = compare_investment_strategies(amount, rrsp_room, current, retirement, years)
    rows = [format_investment_row(outcome) for outcome in outcomes]

    logger.info("=" * 100)
    logger.info(
        "INVESTMENT COMPARISON (%s over %d years, RRSP room %s, %s now, %s at retirement)",
        amount, years, rrsp_room, current, retirement,
    )
    logger.info("=" * 100)
    logger.info(
        "  %-22s %12s %12s %12s %12s %7s",
        "Strategy", "Invested", "Final value", "Tax paid", "Cash", "Rate",
    )
    logger.info("-" * 100)
    for index, recommendation in rank_investment_strategies(outcomes):
        row = rows[index]
        logger.info(
            "  %-22s %12s %12s %12s %12s %7s",
            row.strategy, row.initial_investment, row.final_value,
            row.total_tax_paid, row.final_cash_in_pocket, row.effective_tax_rate,
        )
        logger.info("      %s", recommendation)


def main() -> None:
    """Parse arguments and print the requested comparison."""
    parser = argparse.ArgumentParser(description="SmartSplit strategy comparison")
    sub = parser.add_subparsers(dest="command", required=True)

    split = sub.add_parser("split", help="Compare salary/dividend splits")
    split.add_argument("--revenue", type=Decimal, required=True)
    split.add_argument("--expenses", type=Decimal, default=Decimal("0"),
                       help="Business expenses as a percentage of revenue")
    split.add_argument("--withdrawal", type=Decimal, required=True)
    split.add_argument("--tax-year", default=DEFAULT_TAX_YEAR)

    invest = sub.add_parser("invest", help="Compare corporate, personal and RRSP investing")
    invest.add_argument("--amount", type=Decimal, required=True)
    invest.add_argument("--rrsp-room", type=Decimal, default=Decimal("0"))
    invest.add_argument("--current", choices=INCOME_BRACKET_LABELS, required=True)
    invest.add_argument("--retirement", choices=INCOME_BRACKET_LABELS, required=True)
    invest.add_argument("--years", type=int, default=10)

    args = parser.parse_args()
    try:
        if args.command == "split":
            print_split(args.revenue, args.expenses, args.withdrawal, args.tax_year)
        else:
            print_investment(args.amount, args.rrsp_room, args.current, args.retirement, args.years)
    except SmartSplitError as exc:
        logger.error("Error: %s", exc.message)
        sys.exit(1)


if __name__ == "__main__":
    main()
