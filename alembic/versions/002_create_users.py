"""002: create users table

Revision ID: 002
Revises: 001
Create Date: 2026-10-19

password holds the serialized "salt:key" credential (32 + 1 + 128 chars with
default hashing parameters). TEXT so larger key sizes need no migration.
"""
from typing import Sequence, Union
from alembic import op

revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE users (
            id              UUID            PRIMARY KEY DEFAULT gen_random_uuid(),
            name            VARCHAR(255)    NOT NULL,
            email           VARCHAR(255)    NOT NULL,
            password        TEXT            NOT NULL,
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT uq_users_email           UNIQUE (email),
            CONSTRAINT ck_users_password_format CHECK (password LIKE '%:%')
        );
    """)
    op.execute("""
        CREATE TRIGGER trg_users_updated_at
            BEFORE UPDATE ON users
            FOR EACH ROW EXECUTE FUNCTION fn_touch_updated_at();
    """)
    op.execute("COMMENT ON TABLE users IS 'Dashboard users: credential login';")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS users CASCADE;")
