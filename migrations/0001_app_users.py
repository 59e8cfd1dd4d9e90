"""Create app_users table for calculator registrations."""

from yoyo import step

steps = [
    step(
        """
        CREATE TABLE app_users (
            id              SERIAL PRIMARY KEY,
            name            TEXT NOT NULL,
            email           TEXT NOT NULL,
            ip_address      TEXT,
            user_agent      TEXT,
            created_at      TIMESTAMPTZ NOT NULL DEFAULT NOW()
        )
        """,
        "DROP TABLE IF EXISTS app_users",
    ),
    step(
        "CREATE UNIQUE INDEX idx_app_users_email ON app_users (lower(email))",
        "DROP INDEX IF EXISTS idx_app_users_email",
    ),
]
