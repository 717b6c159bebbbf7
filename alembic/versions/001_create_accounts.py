"""001: create accounts table

Revision ID: 001
Revises:
Create Date: 2026-10-18
"""
from typing import Sequence, Union
from alembic import op

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # No CHECK (balance >= 0): the ledger's debit guard is the only floor
    op.execute("""
        CREATE TABLE accounts (
            user_id     VARCHAR(64) PRIMARY KEY,
            balance     BIGINT      NOT NULL DEFAULT 0
        );
    """)
    op.execute("COMMENT ON TABLE accounts IS 'willowbuck balances, one row per Slack user id';")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS accounts;")
