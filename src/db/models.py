"""Pydantic models for database rows and API payloads."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model serialised with camelCase keys for the web client."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# --- Database row models ---


class User(CamelModel):
    """A registered calculator user (maps to app_users table)."""

    id: int
    name: str
    email: str
    ip_address: str | None = None
    user_agent: str | None = None
    created_at: datetime


class Message(CamelModel):
    """A chat message (maps to chat_messages table)."""

    id: int
    conversation_id: int
    role: str  # 'user' or 'assistant'
    content: str
    model: str | None = None  # assistant messages only
    created_at: datetime


class Conversation(CamelModel):
    """A chat conversation (maps to conversations table)."""

    id: int
    title: str
    user_id: int
    model: str
    created_at: datetime
    updated_at: datetime


class ConversationWithMessages(Conversation):
    """A conversation with its messages in chronological order."""

    messages: list[Message] = []


class ClientInfo(BaseModel):
    """Request metadata stored alongside calculations for auditing."""

    ip_address: str | None = None
    user_agent: str | None = None
    session_id: str | None = None


# --- Calculator response models ---


class SplitStrategyRow(CamelModel):
    """One salary/dividend split scenario, formatted for display."""

    strategy: str
    salary: str
    dividends: str
    corporate_tax: str
    personal_tax: str
    total_tax: str
    net_income: str
    effective_tax_rate: str
    rrsp_room: str
    cpp_contributions: str
    corporate_retained: str


class StrategyInsight(CamelModel):
    """AI-written narrative for one investment strategy.

    Every field is optional so partially usable model output still merges.
    """

    strategy: str | None = None
    description: str | None = None
    advantages: list[str] | None = None
    considerations: list[str] | None = None
    best_for: str | None = None
    cra_compliance: str | None = None


class InvestmentStrategyRow(CamelModel):
    """One investment vehicle, formatted and decorated with narrative."""

    strategy: str
    initial_investment: str
    final_value: str
    total_tax_paid: str
    final_cash_in_pocket: str
    effective_tax_rate: str
    audit_risk: str
    description: str = ""
    advantages: list[str] = []
    considerations: list[str] = []
    best_for: str = ""
    cra_compliance: str = ""
    risk_level: str = ""
    recommendation: str = ""


class ExpenseStrategy(CamelModel):
    """An AI-generated expense optimisation strategy."""

    strategy: str
    home_office_deduction: str
    vehicle_deduction: str
    meals_deduction: str
    professional_dev_deduction: str
    equipment_deduction: str
    total_deductions: str
    tax_savings: str
    risk_level: str
    audit_probability: str


class TaxCalculationResponse(CamelModel):
    """Response from the /api/tax-calculation endpoint."""

    result: list[SplitStrategyRow]
    calculation_number: int | None = None


class ExpenseAnalysisResponse(BaseModel):
    """Response from the /api/calculate-expenses endpoint."""

    strategies: list[ExpenseStrategy]


class AnalyzeQueryResponse(CamelModel):
    """Response from the /api/analyze-query endpoint."""

    user_message: Message
    assistant_message: Message
    tokens_used: int | None = None
