"""API routes for the SmartSplit tax planner."""

import logging
from decimal import Decimal

import asyncpg
from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from pydantic import EmailStr, Field

from src.db.conversations import (
    create_conversation,
    delete_conversation,
    get_conversation,
    list_conversations,
    update_conversation_title,
)
from src.db.models import (
    AnalyzeQueryResponse,
    CamelModel,
    ClientInfo,
    Conversation,
    ConversationWithMessages,
    ExpenseAnalysisResponse,
    InvestmentStrategyRow,
    TaxCalculationResponse,
    User,
)
from src.db.session import ping
from src.db.users import create_user
from src.errors import NotFoundError, UpstreamServiceError

logger = logging.getLogger(__name__)

router = APIRouter()


class UserRequest(CamelModel):
    """Identifies the person running a calculation."""

    name: str = Field(min_length=1)
    email: EmailStr


class TaxCalculationRequest(UserRequest):
    """Request body for /api/tax-calculation."""

    revenue: Decimal = Field(gt=0)
    expenses_percentage: Decimal = Field(ge=0, le=100)
    withdrawal_amount: Decimal = Field(gt=0)


class InvestmentRequest(UserRequest):
    """Request body for /api/calculate-investment."""

    investment_amount: Decimal = Field(gt=0)
    rrsp_room: Decimal = Field(ge=0)
    current_income_level: str
    withdrawal_income_level: str
    province: str = "Ontario"
    timeline: str | int = "10"


class ExpenseRequest(CamelModel):
    """Request body for /api/calculate-expenses."""

    revenue: Decimal = Field(gt=0)
    current_expenses: Decimal = Field(ge=0)
    home_office_size: Decimal = Field(ge=0)
    total_home_size: Decimal = Field(ge=0)
    vehicle_business_use: Decimal = Field(ge=0, le=100)
    vehicle_expenses: Decimal = Field(ge=0)
    monthly_meals: Decimal = Field(ge=0)
    professional_development: Decimal = Field(ge=0)
    equipment_purchases: Decimal = Field(ge=0)


class ConversationRequest(CamelModel):
    """Request body for POST /api/conversations."""

    title: str = Field(min_length=1)
    user_id: int
    model: str = "gpt-4o"


class TitleRequest(CamelModel):
    """Request body for PATCH /api/conversations/{id}."""

    title: str = Field(min_length=1)


class AnalyzeQueryRequest(CamelModel):
    """Request body for /api/analyze-query."""

    conversation_id: int
    content: str = Field(min_length=1)
    model: str = "gpt-4o"


def _pool(request: Request) -> asyncpg.Pool:
    pool = getattr(request.app.state, "pool", None)
    if pool is None:
        raise UpstreamServiceError("Database unavailable", status_code=503)
    return pool


def client_info(request: Request) -> ClientInfo:
    """Collect request metadata recorded with each calculation."""
    return ClientInfo(
        ip_address=request.client.host if request.client else None,
        user_agent=request.headers.get("user-agent"),
        session_id=request.headers.get("x-session-id"),
    )


@router.get("/health")
async def health(request: Request) -> dict:  # type: ignore[type-arg]
    """Health check endpoint with database reachability."""
    pool = getattr(request.app.state, "pool", None)
    return {
        "status": "ok",
        "database": "ok" if pool is not None and await ping(pool) else "unavailable",
    }


@router.post("/api/register-user", response_model=User, response_model_by_alias=True)
async def register_user(body: UserRequest, request: Request) -> User:
    """Find or create a calculator user by email."""
    client = client_info(request)
    return await create_user(
        _pool(request), body.name, body.email, client.ip_address, client.user_agent
    )


@router.post(
    "/api/tax-calculation",
    response_model=TaxCalculationResponse,
    response_model_by_alias=True,
)
async def tax_calculation(body: TaxCalculationRequest, request: Request) -> TaxCalculationResponse:
    """Compare salary/dividend splits for an owner-operated corporation."""
    planner = request.app.state.planner
    return await planner.calculate_tax(
        name=body.name,
        email=body.email,
        revenue=body.revenue,
        expenses_percentage=body.expenses_percentage,
        withdrawal_amount=body.withdrawal_amount,
        client=client_info(request),
    )


@router.post(
    "/api/calculate-investment",
    response_model=list[InvestmentStrategyRow],
    response_model_by_alias=True,
)
async def calculate_investment(
    body: InvestmentRequest, request: Request
) -> list[InvestmentStrategyRow]:
    """Rank corporate, personal and RRSP investing by after-tax cash."""
    planner = request.app.state.planner
    return await planner.calculate_investment(
        name=body.name,
        email=body.email,
        investment_amount=body.investment_amount,
        rrsp_room=body.rrsp_room,
        current_income_level=body.current_income_level,
        withdrawal_income_level=body.withdrawal_income_level,
        province=body.province,
        timeline=body.timeline,
        client=client_info(request),
    )


@router.post(
    "/api/calculate-expenses",
    response_model=ExpenseAnalysisResponse,
    response_model_by_alias=True,
)
async def calculate_expenses(body: ExpenseRequest, request: Request) -> ExpenseAnalysisResponse:
    """AI-generated expense optimisation strategies."""
    planner = request.app.state.planner
    strategies = await planner.analyze_expenses(**body.model_dump())
    return ExpenseAnalysisResponse(strategies=strategies)


@router.post("/api/conversations", response_model=Conversation, response_model_by_alias=True)
async def new_conversation(body: ConversationRequest, request: Request) -> Conversation:
    return await create_conversation(_pool(request), body.title, body.user_id, body.model)


@router.get(
    "/api/conversations/detail/{conversation_id}",
    response_model=ConversationWithMessages,
    response_model_by_alias=True,
)
async def conversation_detail(conversation_id: int, request: Request) -> ConversationWithMessages:
    conversation = await get_conversation(_pool(request), conversation_id)
    if conversation is None:
        raise NotFoundError("Conversation not found")
    return conversation


@router.get(
    "/api/conversations/{user_id}",
    response_model=list[Conversation],
    response_model_by_alias=True,
)
async def user_conversations(user_id: int, request: Request) -> list[Conversation]:
    return await list_conversations(_pool(request), user_id)


@router.delete("/api/conversations/{conversation_id}")
async def remove_conversation(conversation_id: int, request: Request) -> JSONResponse:
    if not await delete_conversation(_pool(request), conversation_id):
        raise NotFoundError("Conversation not found")
    return JSONResponse({"status": "ok"})


@router.patch("/api/conversations/{conversation_id}")
async def rename_conversation(
    conversation_id: int, body: TitleRequest, request: Request
) -> JSONResponse:
    if not await update_conversation_title(_pool(request), conversation_id, body.title):
        raise NotFoundError("Conversation not found")
    return JSONResponse({"status": "ok"})


@router.post(
    "/api/analyze-query",
    response_model=AnalyzeQueryResponse,
    response_model_by_alias=True,
)
async def analyze_query(body: AnalyzeQueryRequest, request: Request) -> AnalyzeQueryResponse:
    """Answer a chat message within a conversation."""
    chat = request.app.state.chat
    return await chat.analyze_query(body.conversation_id, body.content, body.model)
