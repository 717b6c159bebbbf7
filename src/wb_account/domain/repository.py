"""Storage Protocol — dependency inversion for testability.

Unit tests inject an in-memory fake that conforms to this Protocol.
Infrastructure layer provides the real implementation.
"""

from typing import Protocol

from src.wb_account.domain.models import Account


class AccountStoreProtocol(Protocol):
    async def get(self, user: str) -> tuple[Account, bool]:
        """Return (stored account, True), or (Account(user, 0), False) when absent."""
        ...

    async def put(self, account: Account) -> None:
        """Upsert account.balance for account.user."""
        ...

    async def scan_all(self) -> list[Account]:
        """Every stored (user, balance), unordered."""
        ...
