"""LedgerService — balance rules on top of the account store.

New-account policy:
  - credit / debit / balance lookups treat an unknown user as holding
    DEFAULT_BALANCE_CREDIT (0).
  - transfer seeds an unknown sender (and receiver) with
    DEFAULT_BALANCE_TRANSFER, so a brand-new user can send right away.
  - Looking up an unknown user never writes a row; the row appears on the
    first credit or transfer that touches it.

Concurrency: there is no lock and no version check. Every mutation is a
read-modify-write through the store, so two concurrent operations on the same
user can lose an update. Callers that need stronger guarantees must serialize
per user themselves.
"""

import logging

from config.settings import settings
from src.wb_account.domain.models import (
    Account,
    CreditResult,
    DebitResult,
    TransferResult,
)
from src.wb_account.domain.repository import AccountStoreProtocol
from src.wb_account.infrastructure.persistence import AccountStore
from src.wb_common.errors import (
    InsufficientFundsError,
    PartialTransferFailureError,
    StorageUnavailableError,
)

logger = logging.getLogger(__name__)


def _require_positive(amount: int) -> None:
    if isinstance(amount, bool) or not isinstance(amount, int) or amount <= 0:
        raise ValueError(f"amount must be a positive integer, got {amount!r}")


class LedgerService:
    def __init__(
        self,
        store: AccountStoreProtocol | None = None,
        default_balance_credit: int | None = None,
        default_balance_transfer: int | None = None,
    ) -> None:
        self._store: AccountStoreProtocol = store or AccountStore()
        self.default_balance_credit = (
            settings.DEFAULT_BALANCE_CREDIT
            if default_balance_credit is None
            else default_balance_credit
        )
        self.default_balance_transfer = (
            settings.DEFAULT_BALANCE_TRANSFER
            if default_balance_transfer is None
            else default_balance_transfer
        )

    async def get_account(self, user: str, default_balance: int) -> Account:
        """Stored account, or an unsaved one holding `default_balance` with is_new=True."""
        account, found = await self._store.get(user)
        if not found:
            return Account(user=user, balance=default_balance, is_new=True)
        account.is_new = False
        return account

    async def get_balance(self, user: str, default_balance: int | None = None) -> int:
        if default_balance is None:
            default_balance = self.default_balance_credit
        account = await self.get_account(user, default_balance)
        return account.balance

    async def credit(self, amount: int, to_user: str) -> CreditResult:
        _require_positive(amount)
        account = await self.get_account(to_user, self.default_balance_credit)
        account.balance += amount
        await self._store.put(account)
        logger.info(
            "credit user=%s amount=%d balance=%d new=%s",
            to_user, amount, account.balance, account.is_new,
        )
        return CreditResult(account=account, created=account.is_new)

    async def debit(self, amount: int, user: str) -> DebitResult:
        """Subtract `amount`, or do nothing if the user is new or cannot cover it.

        Skipping is not an error: removing a reaction from someone who already
        spent the currency leaves their balance where it is.
        """
        _require_positive(amount)
        account = await self.get_account(user, self.default_balance_credit)

        if account.is_new or (account.balance - amount) < 0:
            logger.info(
                "debit skipped user=%s amount=%d balance=%d new=%s",
                user, amount, account.balance, account.is_new,
            )
            return DebitResult(account=account, applied=False)

        account.balance -= amount
        await self._store.put(account)
        logger.info("debit user=%s amount=%d balance=%d", user, amount, account.balance)
        return DebitResult(account=account, applied=True)

    async def transfer(self, amount: int, from_user: str, to_user: str) -> TransferResult:
        """Move `amount` from one user to another.

        The two writes are independent. If the sender write lands and the
        receiver write fails, PartialTransferFailureError is raised and the
        sender stays debited; nothing rolls it back.
        """
        _require_positive(amount)
        if from_user == to_user:
            # Both sides would read the same row and the second write would mint `amount`
            raise ValueError(f"cannot transfer from {from_user} to itself")
        from_account = await self.get_account(from_user, self.default_balance_transfer)
        if from_account.balance < amount:
            logger.warning(
                "transfer rejected from=%s to=%s amount=%d balance=%d",
                from_user, to_user, amount, from_account.balance,
            )
            raise InsufficientFundsError(amount, from_account.balance)

        to_account = await self.get_account(to_user, self.default_balance_transfer)

        from_account.balance -= amount
        to_account.balance += amount

        await self._store.put(from_account)
        try:
            await self._store.put(to_account)
        except StorageUnavailableError as e:
            logger.error(
                "PARTIAL TRANSFER from=%s to=%s amount=%d: sender committed at "
                "balance=%d, receiver not credited: %s",
                from_user, to_user, amount, from_account.balance, e,
            )
            raise PartialTransferFailureError(
                from_user, to_user, amount, from_account.balance
            ) from e

        logger.info(
            "transfer from=%s to=%s amount=%d from_balance=%d to_balance=%d new=%s",
            from_user, to_user, amount,
            from_account.balance, to_account.balance, to_account.is_new,
        )
        return TransferResult(
            from_account=from_account,
            to_account=to_account,
            created=to_account.is_new,
        )

    async def top_balances(self, limit: int) -> list[Account]:
        """Highest balances first; limit < 0 returns everyone.

        Reads the whole table on every call, so cost grows with the number of
        accounts. Equal balances keep scan order (stable sort).
        """
        accounts = await self._store.scan_all()
        accounts.sort(key=lambda a: a.balance, reverse=True)
        if 0 <= limit < len(accounts):
            accounts = accounts[:limit]
        return accounts
