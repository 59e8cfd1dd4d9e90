"""Audit log of calculator runs in the tax_calculations table."""

import logging
from typing import Any

import asyncpg

from src.db.models import ClientInfo

logger = logging.getLogger(__name__)


async def count_calculations_for_email(pool: asyncpg.Pool, email: str) -> int:
    """Count prior calculations by email.

    Best-effort: errors are logged and reported as zero prior calculations.
    """
    try:
        async with pool.acquire() as conn:
            count = await conn.fetchval(
                "SELECT COUNT(*) FROM tax_calculations WHERE lower(email) = lower($1)",
                email,
            )
            return int(count or 0)
    except Exception:
        logger.exception("Failed to count calculations for user")
        return 0


async def record_calculation(
    pool: asyncpg.Pool,
    *,
    calculation_type: str,
    name: str,
    email: str,
    inputs: dict[str, Any],
    strategies: list[dict[str, Any]],
    calculation_number: int,
    user_id: int | None = None,
    client: ClientInfo | None = None,
) -> int | None:
    """Insert a calculation record and return its ID.

    Fire-and-forget friendly: errors are logged, not raised.
    Returns the row ID on success, None on failure.
    """
    client = client or ClientInfo()
    try:
        async with pool.acquire() as conn:
            row = await conn.fetchrow(
                """
                INSERT INTO tax_calculations
                    (user_id, name, email, calculation_type, inputs, strategies,
                     ip_address, user_agent, session_id, calculation_number)
                VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9, $10)
                RETURNING id
                """,
                user_id,
                name,
                email,
                calculation_type,
                inputs,
                strategies,
                client.ip_address,
                client.user_agent,
                client.session_id,
                calculation_number,
            )
            return int(row["id"]) if row else None
    except Exception:
        logger.exception("Failed to record %s calculation", calculation_type)
        return None
