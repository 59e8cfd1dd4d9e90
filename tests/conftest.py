"""Shared test fixtures."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from src.llm.gateway import CompletionResult, GenerationResult


@pytest.fixture
def mock_llm() -> AsyncMock:
    """Async mock of LLMGateway with a canned completion and a failed generation."""
    llm = AsyncMock()
    llm.complete.return_value = CompletionResult(
        content="A mix of salary and dividends usually works best.",
        model="gpt-4o",
        tokens_used=42,
    )
    llm.generate.return_value = GenerationResult(success=False, error="No model available")
    return llm


@pytest.fixture
def mock_db_pool() -> MagicMock:
    """Mock of asyncpg.Pool with context-managed acquire().

    asyncpg.Pool.acquire() returns an async context manager (not a coroutine),
    so we use MagicMock for the pool and configure __aenter__/__aexit__ manually.
    The connection is exposed as ``pool.conn`` for assertions.
    """
    conn = AsyncMock()
    conn.fetch.return_value = []
    conn.fetchrow.return_value = None

    acm = MagicMock()
    acm.__aenter__ = AsyncMock(return_value=conn)
    acm.__aexit__ = AsyncMock(return_value=False)

    pool = MagicMock()
    pool.acquire.return_value = acm
    pool.conn = conn
    return pool
