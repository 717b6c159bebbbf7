"""SQLAlchemy ORM model for wb_account.

Maps to the table created by Alembic migration 001.
DO NOT add/remove columns here without a corresponding migration.
"""

from sqlalchemy import BigInteger, String
from sqlalchemy.orm import Mapped, mapped_column

from src.wb_common.database import Base


class AccountORM(Base):
    __tablename__ = "accounts"

    user_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    # No CHECK (balance >= 0): the debit guard lives in the ledger, not the table
    balance: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
