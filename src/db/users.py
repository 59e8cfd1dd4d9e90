"""Calculator user lookup and registration."""

import logging

import asyncpg

from src.db.models import User

logger = logging.getLogger(__name__)


async def get_user_by_email(pool: asyncpg.Pool, email: str) -> User | None:
    """Fetch a user by email (case-insensitive)."""
    async with pool.acquire() as conn:
        row = await conn.fetchrow(
            """
            SELECT id, name, email, ip_address, user_agent, created_at
            FROM app_users
            WHERE lower(email) = lower($1)
            """,
            email,
        )
    return User.model_validate(dict(row)) if row else None


async def create_user(
    pool: asyncpg.Pool,
    name: str,
    email: str,
    ip_address: str | None = None,
    user_agent: str | None = None,
) -> User:
    """Insert a user, or return the existing row if the email is taken."""
    async with pool.acquire() as conn:
        row = await conn.fetchrow(
            """
            INSERT INTO app_users (name, email, ip_address, user_agent)
            VALUES ($1, $2, $3, $4)
            ON CONFLICT (lower(email)) DO UPDATE SET email = app_users.email
            RETURNING id, name, email, ip_address, user_agent, created_at
            """,
            name,
            email,
            ip_address,
            user_agent,
        )
    logger.info("Registered user id=%s", row["id"])
    return User.model_validate(dict(row))
