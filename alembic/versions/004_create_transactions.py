"""004: create transactions table

Revision ID: 004
Revises: 003
Create Date: 2026-10-16
"""
from typing import Sequence, Union
from alembic import op

revision: str = "004"
down_revision: Union[str, None] = "003"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE transactions (
            id              BIGSERIAL       PRIMARY KEY,
            user_id         VARCHAR(64)     NOT NULL REFERENCES users (id),
            type            VARCHAR(20)     NOT NULL,
            amount          BIGINT          NOT NULL,
            category_id     BIGINT          REFERENCES categories (id),
            date            TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_transactions_type CHECK (type IN ('CREDIT', 'DEBIT', 'SET_WALLET')),
            CONSTRAINT ck_transactions_amount_gte_0 CHECK (amount >= 0),
            CONSTRAINT ck_transactions_category_on_debit CHECK (
                (type = 'DEBIT') = (category_id IS NOT NULL)
            )
        );
    """)
    op.execute("CREATE INDEX idx_transactions_user_date ON transactions (user_id, date DESC, id DESC);")
    op.execute("""
        CREATE INDEX idx_transactions_debit_category
        ON transactions (user_id, category_id, date)
        WHERE type = 'DEBIT';
    """)
    op.execute("COMMENT ON TABLE transactions IS 'Append-only except for undo of the latest row; amounts in paise';")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS transactions CASCADE;")
