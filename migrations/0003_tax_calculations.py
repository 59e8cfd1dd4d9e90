"""Create tax_calculations audit table for calculator runs."""

from yoyo import step

__depends__ = {"0002_conversations"}

steps = [
    step(
        """
        CREATE TABLE tax_calculations (
            id                  SERIAL PRIMARY KEY,
            user_id             INTEGER REFERENCES app_users(id) ON DELETE SET NULL,
            name                TEXT NOT NULL,
            email               TEXT NOT NULL,
            calculation_type    TEXT NOT NULL
                CHECK (calculation_type IN ('smart_split', 'investment')),
            inputs              JSONB NOT NULL DEFAULT '{}',
            strategies          JSONB NOT NULL DEFAULT '[]',
            ip_address          TEXT,
            user_agent          TEXT,
            session_id          TEXT,
            calculation_number  INTEGER NOT NULL,
            created_at          TIMESTAMPTZ NOT NULL DEFAULT NOW()
        )
        """,
        "DROP TABLE IF EXISTS tax_calculations",
    ),
    step(
        "CREATE INDEX idx_tax_calculations_email ON tax_calculations (lower(email))",
        "DROP INDEX IF EXISTS idx_tax_calculations_email",
    ),
]
