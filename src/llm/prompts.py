"""Prompt templates and message builders for chat and tax analysis."""

from decimal import Decimal

from src.db.models import Message

CHAT_SYSTEM_PROMPT = (
    "You are a helpful AI assistant. Give direct, natural responses without "
    "formal business language, headers, or structured analysis. Keep your "
    "answers conversational and friendly, like you're chatting with someone. "
    "Don't use business document formatting."
)

INVESTMENT_PREAMBLE = (
    "You are a Canadian tax planning expert. Provide strategic insights and "
    "explanations without any dollar calculations. "
)

EXPENSE_PREAMBLE = (
    "You are an expert Canadian tax advisor specializing in business expense "
    "optimization. Provide accurate, CRA-compliant advice. "
)

_INVESTMENT_TEMPLATE = """\
You are a Canadian investment tax specialist. Generate strategic insights and \
explanations for these three investment approaches.

Client Profile:
- Available Corporate Retained Earnings: {investment_amount}
- Available RRSP Room: {rrsp_room}
- Current Income: {current_income_level}
- Expected Retirement Income: {withdrawal_income_level}
- Province: {province}
- Timeline: {years} years

The three strategies being compared:

1. **Corporate Investment**: Keep funds in corporation, invest directly, pay \
passive investment tax, then extract as dividends at retirement
2. **Personal Investment**: Extract funds as dividends now, invest personally, \
pay capital gains tax later
3. **RRSP Strategy**: Contribute to RRSP, invest the tax refund personally, \
withdraw at retirement

For EACH strategy, in the order above, provide strategic insights in this \
JSON format:

{{
  "insights": [
    {{
      "strategy": "Corporate Investment",
      "description": "2-3 sentence strategic overview",
      "advantages": ["Key benefit 1", "Key benefit 2", "Key benefit 3"],
      "considerations": ["Important consideration 1", "Risk factor 2", "Limitation 3"],
      "bestFor": "Description of ideal client situation",
      "craCompliance": "CRA compliance notes and form references"
    }}
  ]
}}

Focus on:
- Strategic advantages and trade-offs
- Risk assessments and CRA compliance
- When each strategy works best
- Practical implementation advice
- Tax planning insights

Do NOT include any dollar calculations - focus only on strategic insights \
and explanations. Return only the JSON object.\
"""

_EXPENSE_STRATEGY_NAMES = (
    ("Conservative Approach", "Lower risk, CRA-safe percentages", "Low"),
    ("Aggressive Optimization", "Maximum allowable deductions", "High"),
    ("Balanced Strategy", "Moderate risk/reward balance", "Medium"),
    ("AI Recommended", "Your optimal analysis", "Medium"),
)

_EXPENSE_TEMPLATE = """\
You are a Canadian tax expert specializing in business expense optimization.

Business Details:
- Annual Revenue: {revenue}
- Current Expenses: {current_expenses}
- Home Office: {home_office_size} sq ft out of {total_home_size} sq ft \
({home_office_percentage:.1f}%)
- Vehicle Business Use: {vehicle_business_use}%
- Annual Vehicle Expenses: {vehicle_expenses}
- Annual Meals & Entertainment: {annual_meals}
- Professional Development: {professional_development}
- Equipment Purchases: {equipment_purchases}

Generate 4 expense optimization strategies following Canadian tax law (CRA \
guidelines):

{strategy_list}

For each strategy, calculate:
- Home office deduction (based on percentage of home used)
- Vehicle deduction (business use percentage applied)
- Meals deduction (50% of business meals as per CRA rules)
- Professional development deduction
- Equipment deduction (immediate expensing vs CCA)
- Total deductions
- Estimated annual tax savings (assume ~26.5% marginal tax rate)
- Risk level (Low/Medium/High)
- Audit probability assessment

Return as JSON object with strategies array:
{{
  "strategies": [
{strategy_examples}
  ]
}}

Focus on realistic, compliant Canadian tax strategies with accurate CRA line \
references. Return only the JSON object.\
"""

_EXPENSE_EXAMPLE = """\
    {{
      "strategy": "{name}",
      "homeOfficeDeduction": "$X,XXX",
      "vehicleDeduction": "$X,XXX",
      "mealsDeduction": "$X,XXX",
      "professionalDevDeduction": "$X,XXX",
      "equipmentDeduction": "$X,XXX",
      "totalDeductions": "$XX,XXX",
      "taxSavings": "$X,XXX",
      "riskLevel": "{risk}",
      "auditProbability": "X%"
    }}\
"""


def _dollars(value: Decimal) -> str:
    return f"${value:,}"


def build_chat_messages(
    query: str,
    history: list[Message] | None = None,
) -> list[dict[str, str]]:
    """Build the message list for a chat turn.

    Args:
        query: The user's new message.
        history: Prior messages in chronological order.

    Returns:
        OpenAI-format messages: system prompt, history, then the query.
    """
    messages = [{"role": "system", "content": CHAT_SYSTEM_PROMPT}]
    for msg in history or []:
        messages.append({"role": msg.role, "content": msg.content})
    messages.append({"role": "user", "content": query})
    return messages


def build_investment_prompt(
    investment_amount: Decimal,
    rrsp_room: Decimal,
    current_income_level: str,
    withdrawal_income_level: str,
    province: str,
    years: int,
) -> str:
    """Build the insight-only prompt for the investment comparator."""
    body = _INVESTMENT_TEMPLATE.format(
        investment_amount=_dollars(investment_amount),
        rrsp_room=_dollars(rrsp_room),
        current_income_level=current_income_level,
        withdrawal_income_level=withdrawal_income_level,
        province=province,
        years=years,
    )
    return INVESTMENT_PREAMBLE + body


def build_expense_prompt(
    revenue: Decimal,
    current_expenses: Decimal,
    home_office_size: Decimal,
    total_home_size: Decimal,
    vehicle_business_use: Decimal,
    vehicle_expenses: Decimal,
    monthly_meals: Decimal,
    professional_development: Decimal,
    equipment_purchases: Decimal,
) -> str:
    """Build the expense optimisation prompt.

    Home office share and annual meals are derived here so the model
    does not have to do the arithmetic.
    """
    home_office_percentage = (
        home_office_size / total_home_size * 100 if total_home_size > 0 else Decimal("0")
    )
    strategy_list = "\n".join(
        f"{i}. {name} - {blurb}" for i, (name, blurb, _) in enumerate(_EXPENSE_STRATEGY_NAMES, 1)
    )
    strategy_examples = ",\n".join(
        _EXPENSE_EXAMPLE.format(name=name, risk=risk) for name, _, risk in _EXPENSE_STRATEGY_NAMES
    )
    body = _EXPENSE_TEMPLATE.format(
        revenue=_dollars(revenue),
        current_expenses=_dollars(current_expenses),
        home_office_size=home_office_size,
        total_home_size=total_home_size,
        home_office_percentage=home_office_percentage,
        vehicle_business_use=vehicle_business_use,
        vehicle_expenses=_dollars(vehicle_expenses),
        annual_meals=_dollars(monthly_meals * 12),
        professional_development=_dollars(professional_development),
        equipment_purchases=_dollars(equipment_purchases),
        strategy_list=strategy_list,
        strategy_examples=strategy_examples,
    )
    return EXPENSE_PREAMBLE + body
