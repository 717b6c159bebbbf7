"""Pydantic response schemas for wb_account API."""

from pydantic import BaseModel, Field

from src.wb_account.domain.models import (
    Account,
    CreditResult,
    DebitResult,
    TransferResult,
)


class AccountItem(BaseModel):
    user_id: str
    balance: int

    @classmethod
    def from_domain(cls, account: Account) -> "AccountItem":
        return cls(user_id=account.user, balance=account.balance)


class BalanceResponse(BaseModel):
    user_id: str
    balance: int
    is_new: bool

    @classmethod
    def from_domain(cls, account: Account) -> "BalanceResponse":
        return cls(user_id=account.user, balance=account.balance, is_new=account.is_new)


class TopBalancesResponse(BaseModel):
    items: list[AccountItem]

    @classmethod
    def from_domain(cls, accounts: list[Account]) -> "TopBalancesResponse":
        return cls(items=[AccountItem.from_domain(a) for a in accounts])


class CreditResponse(BaseModel):
    user_id: str
    credited: int
    balance: int
    created: bool

    @classmethod
    def from_result(cls, result: CreditResult, amount: int) -> "CreditResponse":
        return cls(
            user_id=result.account.user,
            credited=amount,
            balance=result.account.balance,
            created=result.created,
        )


class DebitResponse(BaseModel):
    user_id: str
    debited: int      # 0 when the guard skipped the write
    balance: int
    applied: bool

    @classmethod
    def from_result(cls, result: DebitResult, amount: int) -> "DebitResponse":
        return cls(
            user_id=result.account.user,
            debited=amount if result.applied else 0,
            balance=result.account.balance,
            applied=result.applied,
        )


class TransferResponse(BaseModel):
    from_user_id: str
    to_user_id: str
    amount: int
    from_balance: int
    to_balance: int
    created: bool

    @classmethod
    def from_result(cls, result: TransferResult, amount: int) -> "TransferResponse":
        return cls(
            from_user_id=result.from_account.user,
            to_user_id=result.to_account.user,
            amount=amount,
            from_balance=result.from_account.balance,
            to_balance=result.to_account.balance,
            created=result.created,
        )


# ---------------------------------------------------------------------------
# Request schemas (operator reconciliation endpoints)
# ---------------------------------------------------------------------------


class AmountRequest(BaseModel):
    amount: int = Field(..., gt=0, description="Willowbucks to credit or debit")


class TransferRequest(BaseModel):
    to_user_id: str = Field(..., min_length=1)
    amount: int = Field(..., gt=0, description="Willowbucks to move")
