"""Domain models for wb_account — pure dataclasses, no SQLAlchemy dependency."""

from dataclasses import dataclass


@dataclass
class Account:
    user: str                # opaque chat-platform user id, primary key
    balance: int             # willowbucks; signed
    is_new: bool = False     # no stored row existed; synthesized in memory, never persisted


@dataclass
class CreditResult:
    account: Account
    created: bool            # account had no stored row before this credit


@dataclass
class DebitResult:
    account: Account
    applied: bool            # False: guard skipped the write (new account or would go negative)


@dataclass
class TransferResult:
    from_account: Account
    to_account: Account
    created: bool            # receiver had no stored row before this transfer
