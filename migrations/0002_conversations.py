"""Create conversations and chat_messages tables."""

from yoyo import step

__depends__ = {"0001_app_users"}

steps = [
    step(
        """
        CREATE TABLE conversations (
            id              SERIAL PRIMARY KEY,
            title           TEXT NOT NULL,
            user_id         INTEGER NOT NULL,
            model           TEXT NOT NULL DEFAULT 'gpt-4o',
            created_at      TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            updated_at      TIMESTAMPTZ NOT NULL DEFAULT NOW()
        )
        """,
        "DROP TABLE IF EXISTS conversations",
    ),
    step(
        """
        CREATE TABLE chat_messages (
            id              SERIAL PRIMARY KEY,
            conversation_id INTEGER NOT NULL REFERENCES conversations(id) ON DELETE CASCADE,
            role            TEXT NOT NULL CHECK (role IN ('user', 'assistant')),
            content         TEXT NOT NULL,
            model           TEXT,
            created_at      TIMESTAMPTZ NOT NULL DEFAULT NOW()
        )
        """,
        "DROP TABLE IF EXISTS chat_messages",
    ),
    step(
        "CREATE INDEX idx_conversations_user ON conversations (user_id, updated_at DESC)",
        "DROP INDEX IF EXISTS idx_conversations_user",
    ),
    step(
        "CREATE INDEX idx_chat_messages_conversation ON chat_messages (conversation_id, created_at)",
        "DROP INDEX IF EXISTS idx_chat_messages_conversation",
    ),
]
