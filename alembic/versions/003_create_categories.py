"""003: create categories table

Revision ID: 003
Revises: 002
Create Date: 2026-10-16
"""
from typing import Sequence, Union
from alembic import op

revision: str = "003"
down_revision: Union[str, None] = "002"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE categories (
            id              BIGSERIAL       PRIMARY KEY,
            name            VARCHAR(100)    NOT NULL,
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT uq_categories_name UNIQUE (name),
            CONSTRAINT ck_categories_name_normalized CHECK (name = LOWER(BTRIM(name)) AND name <> '')
        );
    """)
    op.execute("COMMENT ON TABLE categories IS 'Debit categories, created lazily, never updated or deleted';")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS categories CASCADE;")
