"""Tax planning service: run calculators, add AI narrative, keep an audit trail."""

import logging
from decimal import Decimal
from typing import Any

import asyncpg

from config import load_yaml_config
from config.settings import settings
from src.calculators.investment import (
    compare_investment_strategies,
    parse_timeline,
    rank_investment_strategies,
)
from src.calculators.smart_split import compare_split_strategies
from src.db.calculations import count_calculations_for_email, record_calculation
from src.db.models import (
    ClientInfo,
    ExpenseStrategy,
    InvestmentStrategyRow,
    StrategyInsight,
    TaxCalculationResponse,
)
from src.db.users import get_user_by_email
from src.errors import UpstreamServiceError
from src.llm.gateway import LLMGateway
from src.llm.postprocess import merge_insights, parse_expense_strategies, parse_insights
from src.llm.prompts import build_expense_prompt, build_investment_prompt
from src.reports import format_investment_row, format_split_row

logger = logging.getLogger(__name__)

_NARRATIVES = load_yaml_config("narratives.yaml")

EXPENSE_PARSE_ERROR = (
    "Failed to process expense calculation. The AI service returned invalid data. "
    "Please try again."
)


def fallback_insights() -> list[StrategyInsight]:
    """Static insights used when the AI call fails or its output is unusable."""
    return [StrategyInsight.model_validate(item) for item in _NARRATIVES["investment_insights"]]


def _serialisable(values: dict[str, Any]) -> dict[str, Any]:
    return {k: str(v) if isinstance(v, Decimal) else v for k, v in values.items()}


class TaxPlanner:
    """Coordinates the calculators, the LLM and the calculation audit log."""

    def __init__(
        self,
        llm: LLMGateway,
        pool: asyncpg.Pool | None = None,
        tax_year: str | None = None,
    ) -> None:
        self._llm = llm
        self._pool = pool
        self._tax_year = tax_year or settings.tax_year

    async def calculate_tax(
        self,
        *,
        name: str,
        email: str,
        revenue: Decimal,
        expenses_percentage: Decimal,
        withdrawal_amount: Decimal,
        client: ClientInfo | None = None,
    ) -> TaxCalculationResponse:
        """Compare the four salary/dividend splits and record the run.

        Returns:
            TaxCalculationResponse with four formatted rows and, when the
            database is available, the user's calculation sequence number.
        """
        logger.info(
            "SmartSplit calculation revenue=%s expenses=%s%% withdrawal=%s",
            revenue, expenses_percentage, withdrawal_amount,
        )
        outcomes = compare_split_strategies(
            revenue, expenses_percentage, withdrawal_amount, self._tax_year
        )
        rows = [format_split_row(label, outcome) for label, outcome in outcomes]
        logger.info(
            "Calculated strategies: %s",
            "; ".join(f"{r.strategy}: total tax {r.total_tax}, net {r.net_income}" for r in rows),
        )

        calculation_number = await self._record(
            "smart_split",
            name=name,
            email=email,
            inputs={
                "revenue": revenue,
                "expensesPercentage": expenses_percentage,
                "withdrawalAmount": withdrawal_amount,
                "taxYear": self._tax_year,
            },
            strategies=[r.model_dump(by_alias=True) for r in rows],
            client=client,
        )
        return TaxCalculationResponse(result=rows, calculation_number=calculation_number)

    async def calculate_investment(
        self,
        *,
        name: str,
        email: str,
        investment_amount: Decimal,
        rrsp_room: Decimal,
        current_income_level: str,
        withdrawal_income_level: str,
        province: str,
        timeline: str | int,
        client: ClientInfo | None = None,
    ) -> list[InvestmentStrategyRow]:
        """Compare corporate, personal and RRSP investing, ranked by after-tax cash.

        Narrative comes from the LLM when it cooperates and from static
        fallback text otherwise; the numbers never depend on it.
        """
        years = parse_timeline(timeline)
        outcomes = compare_investment_strategies(
            investment_amount, rrsp_room, current_income_level, withdrawal_income_level, years
        )
        rows = [format_investment_row(outcome) for outcome in outcomes]

        prompt = build_investment_prompt(
            investment_amount, rrsp_room, current_income_level,
            withdrawal_income_level, province, years,
        )
        insights = await self._investment_insights(prompt)
        rows = merge_insights(rows, insights, _NARRATIVES["insight_defaults"])

        ranked = [
            rows[index].model_copy(update={"recommendation": recommendation})
            for index, recommendation in rank_investment_strategies(outcomes)
        ]

        await self._record(
            "investment",
            name=name,
            email=email,
            inputs={
                "investmentAmount": investment_amount,
                "rrspRoom": rrsp_room,
                "currentIncomeLevel": current_income_level,
                "withdrawalIncomeLevel": withdrawal_income_level,
                "province": province,
                "years": years,
            },
            strategies=[r.model_dump(by_alias=True) for r in ranked],
            client=client,
        )
        return ranked

    async def analyze_expenses(
        self,
        *,
        revenue: Decimal,
        current_expenses: Decimal,
        home_office_size: Decimal,
        total_home_size: Decimal,
        vehicle_business_use: Decimal,
        vehicle_expenses: Decimal,
        monthly_meals: Decimal,
        professional_development: Decimal,
        equipment_purchases: Decimal,
    ) -> list[ExpenseStrategy]:
        """Ask the LLM for four expense optimisation strategies.

        There is no deterministic result to fall back on, so an unusable
        AI response is an error.

        Raises:
            UpstreamServiceError: If generation fails or returns invalid data.
        """
        prompt = build_expense_prompt(
            revenue, current_expenses, home_office_size, total_home_size,
            vehicle_business_use, vehicle_expenses, monthly_meals,
            professional_development, equipment_purchases,
        )
        result = await self._llm.generate(prompt, "expense_analysis")
        if not result.success or not result.content:
            raise UpstreamServiceError(result.error or "AI service failed")

        try:
            return parse_expense_strategies(result.content)
        except ValueError:
            logger.exception("Unusable expense response from %s", result.provider)
            raise UpstreamServiceError(EXPENSE_PARSE_ERROR, status_code=500) from None

    async def _investment_insights(self, prompt: str) -> list[StrategyInsight | None]:
        result = await self._llm.generate(prompt, "investment_analysis")
        if not result.success or not result.content:
            logger.warning("Insight generation failed, using fallback: %s", result.error)
            return list(fallback_insights())

        try:
            return parse_insights(result.content)
        except (ValueError, TypeError):
            logger.warning("Insight response was not usable, using fallback")
            return list(fallback_insights())

    async def _record(
        self,
        calculation_type: str,
        *,
        name: str,
        email: str,
        inputs: dict[str, Any],
        strategies: list[dict[str, Any]],
        client: ClientInfo | None,
    ) -> int | None:
        """Store an audit record; returns the user's calculation number.

        Best-effort: a missing pool or a failing user lookup never blocks
        the calculation result.
        """
        if self._pool is None:
            return None

        user_id = None
        try:
            user = await get_user_by_email(self._pool, email)
            user_id = user.id if user else None
        except Exception:
            logger.exception("User lookup failed; recording calculation without user")

        calculation_number = await count_calculations_for_email(self._pool, email) + 1
        await record_calculation(
            self._pool,
            calculation_type=calculation_type,
            name=name,
            email=email,
            inputs=_serialisable(inputs),
            strategies=strategies,
            calculation_number=calculation_number,
            user_id=user_id,
            client=client,
        )
        return calculation_number
