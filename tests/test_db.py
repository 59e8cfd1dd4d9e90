"""Tests for the asyncpg query modules."""

from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.db.calculations import count_calculations_for_email, record_calculation
from src.db.conversations import (
    create_message,
    delete_conversation,
    get_conversation,
    update_conversation_title,
)
from src.db.models import ClientInfo
from src.db.session import ping
from src.db.users import create_user, get_user_by_email

_NOW = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)

_USER_ROW = {
    "id": 3,
    "name": "Avery",
    "email": "avery@example.com",
    "ip_address": "10.0.0.1",
    "user_agent": "pytest",
    "created_at": _NOW,
}


@pytest.mark.asyncio
async def test_get_user_by_email(mock_db_pool: MagicMock) -> None:
    mock_db_pool.conn.fetchrow.return_value = _USER_ROW

    user = await get_user_by_email(mock_db_pool, "AVERY@example.com")

    assert user is not None
    assert user.id == 3
    sql = mock_db_pool.conn.fetchrow.call_args.args[0]
    assert "lower(email) = lower($1)" in sql


@pytest.mark.asyncio
async def test_get_user_by_email_missing(mock_db_pool: MagicMock) -> None:
    assert await get_user_by_email(mock_db_pool, "nobody@example.com") is None


@pytest.mark.asyncio
async def test_create_user_is_idempotent_sql(mock_db_pool: MagicMock) -> None:
    mock_db_pool.conn.fetchrow.return_value = _USER_ROW

    user = await create_user(mock_db_pool, "Avery", "avery@example.com", "10.0.0.1", "pytest")

    assert user.email == "avery@example.com"
    assert "ON CONFLICT" in mock_db_pool.conn.fetchrow.call_args.args[0]


@pytest.mark.asyncio
async def test_count_calculations(mock_db_pool: MagicMock) -> None:
    mock_db_pool.conn.fetchval.return_value = 4
    assert await count_calculations_for_email(mock_db_pool, "avery@example.com") == 4


@pytest.mark.asyncio
async def test_count_calculations_failure_is_zero(mock_db_pool: MagicMock) -> None:
    mock_db_pool.conn.fetchval.side_effect = ConnectionError("db down")
    assert await count_calculations_for_email(mock_db_pool, "avery@example.com") == 0


@pytest.mark.asyncio
async def test_record_calculation(mock_db_pool: MagicMock) -> None:
    mock_db_pool.conn.fetchrow.return_value = {"id": 11}

    row_id = await record_calculation(
        mock_db_pool,
        calculation_type="smart_split",
        name="Avery",
        email="avery@example.com",
        inputs={"revenue": "200000"},
        strategies=[{"strategy": "100% Salary"}],
        calculation_number=2,
        client=ClientInfo(ip_address="10.0.0.1", session_id="s-1"),
    )

    assert row_id == 11
    args = mock_db_pool.conn.fetchrow.call_args.args
    assert args[1:5] == (None, "Avery", "avery@example.com", "smart_split")
    assert args[7] == "10.0.0.1"
    assert args[9] == "s-1"
    assert args[10] == 2


@pytest.mark.asyncio
async def test_record_calculation_failure_returns_none(mock_db_pool: MagicMock) -> None:
    mock_db_pool.conn.fetchrow.side_effect = ConnectionError("db down")

    row_id = await record_calculation(
        mock_db_pool,
        calculation_type="investment",
        name="Avery",
        email="avery@example.com",
        inputs={},
        strategies=[],
        calculation_number=1,
    )

    assert row_id is None


@pytest.mark.asyncio
async def test_get_conversation_with_messages(mock_db_pool: MagicMock) -> None:
    mock_db_pool.conn.fetchrow.return_value = {
        "id": 7, "title": "Salary", "user_id": 3, "model": "gpt-4o",
        "created_at": _NOW, "updated_at": _NOW,
    }
    mock_db_pool.conn.fetch.return_value = [
        {"id": 1, "conversation_id": 7, "role": "user", "content": "hi",
         "model": None, "created_at": _NOW},
    ]

    conversation = await get_conversation(mock_db_pool, 7)

    assert conversation is not None
    assert conversation.title == "Salary"
    assert [m.content for m in conversation.messages] == ["hi"]


@pytest.mark.asyncio
async def test_get_conversation_missing(mock_db_pool: MagicMock) -> None:
    assert await get_conversation(mock_db_pool, 99) is None
    mock_db_pool.conn.fetch.assert_not_awaited()


@pytest.mark.asyncio
async def test_delete_and_rename_report_row_counts(mock_db_pool: MagicMock) -> None:
    mock_db_pool.conn.execute.return_value = "DELETE 1"
    assert await delete_conversation(mock_db_pool, 7) is True

    mock_db_pool.conn.execute.return_value = "UPDATE 0"
    assert await update_conversation_title(mock_db_pool, 7, "Renamed") is False


@pytest.mark.asyncio
async def test_create_message_bumps_conversation(mock_db_pool: MagicMock) -> None:
    tx = MagicMock()
    tx.__aenter__ = AsyncMock(return_value=None)
    tx.__aexit__ = AsyncMock(return_value=False)
    mock_db_pool.conn.transaction = MagicMock(return_value=tx)
    mock_db_pool.conn.fetchrow.return_value = {
        "id": 5, "conversation_id": 7, "role": "assistant", "content": "hello",
        "model": "gpt-4o", "created_at": _NOW,
    }

    message = await create_message(mock_db_pool, 7, "assistant", "hello", model="gpt-4o")

    assert message.model == "gpt-4o"
    assert "updated_at = NOW()" in mock_db_pool.conn.execute.call_args.args[0]


@pytest.mark.asyncio
async def test_ping(mock_db_pool: MagicMock) -> None:
    mock_db_pool.conn.fetchval.return_value = 1
    assert await ping(mock_db_pool) is True

    mock_db_pool.conn.fetchval.side_effect = OSError("refused")
    assert await ping(mock_db_pool) is False
