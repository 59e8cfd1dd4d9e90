"""Chat conversation and message storage."""

import logging

import asyncpg

from src.db.models import Conversation, ConversationWithMessages, Message

logger = logging.getLogger(__name__)

_CONVERSATION_COLUMNS = "id, title, user_id, model, created_at, updated_at"
_MESSAGE_COLUMNS = "id, conversation_id, role, content, model, created_at"


async def create_conversation(
    pool: asyncpg.Pool,
    title: str,
    user_id: int,
    model: str,
) -> Conversation:
    """Insert a new conversation."""
    async with pool.acquire() as conn:
        row = await conn.fetchrow(
            f"""
            INSERT INTO conversations (title, user_id, model)
            VALUES ($1, $2, $3)
            RETURNING {_CONVERSATION_COLUMNS}
            """,
            title,
            user_id,
            model,
        )
    return Conversation.model_validate(dict(row))


async def list_conversations(pool: asyncpg.Pool, user_id: int) -> list[Conversation]:
    """List a user's conversations, most recently updated first."""
    async with pool.acquire() as conn:
        rows = await conn.fetch(
            f"""
            SELECT {_CONVERSATION_COLUMNS}
            FROM conversations
            WHERE user_id = $1
            ORDER BY updated_at DESC
            """,
            user_id,
        )
    return [Conversation.model_validate(dict(r)) for r in rows]


async def get_conversation(
    pool: asyncpg.Pool,
    conversation_id: int,
) -> ConversationWithMessages | None:
    """Fetch a conversation with its messages in chronological order."""
    async with pool.acquire() as conn:
        row = await conn.fetchrow(
            f"SELECT {_CONVERSATION_COLUMNS} FROM conversations WHERE id = $1",
            conversation_id,
        )
        if row is None:
            return None
        message_rows = await conn.fetch(
            f"""
            SELECT {_MESSAGE_COLUMNS}
            FROM chat_messages
            WHERE conversation_id = $1
            ORDER BY created_at, id
            """,
            conversation_id,
        )
    return ConversationWithMessages(
        **dict(row),
        messages=[Message.model_validate(dict(m)) for m in message_rows],
    )


async def delete_conversation(pool: asyncpg.Pool, conversation_id: int) -> bool:
    """Delete a conversation and its messages. Returns True if a row was removed."""
    async with pool.acquire() as conn:
        result = await conn.execute(
            "DELETE FROM conversations WHERE id = $1", conversation_id
        )
    return result == "DELETE 1"


async def update_conversation_title(
    pool: asyncpg.Pool,
    conversation_id: int,
    title: str,
) -> bool:
    """Rename a conversation. Returns True if the conversation exists."""
    async with pool.acquire() as conn:
        result = await conn.execute(
            """
            UPDATE conversations
            SET title = $2, updated_at = NOW()
            WHERE id = $1
            """,
            conversation_id,
            title,
        )
    return result == "UPDATE 1"


async def create_message(
    pool: asyncpg.Pool,
    conversation_id: int,
    role: str,
    content: str,
    model: str | None = None,
) -> Message:
    """Append a message and bump the conversation's updated_at."""
    async with pool.acquire() as conn:
        async with conn.transaction():
            row = await conn.fetchrow(
                f"""
                INSERT INTO chat_messages (conversation_id, role, content, model)
                VALUES ($1, $2, $3, $4)
                RETURNING {_MESSAGE_COLUMNS}
                """,
                conversation_id,
                role,
                content,
                model,
            )
            await conn.execute(
                "UPDATE conversations SET updated_at = NOW() WHERE id = $1",
                conversation_id,
            )
    return Message.model_validate(dict(row))
