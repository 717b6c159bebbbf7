"""AccountStore — concrete implementation of AccountStoreProtocol.

Each operation opens its own session and transaction: one call, one round trip.
Nothing is cached and nothing is batched.

Backend failures surface as StorageUnavailableError. Transient ones
(connection drops, timeouts) are retried with backoff first.

Writes are unconditional upserts with no version check. Two concurrent
read-modify-write sequences on the same user can lose an update
(last write wins on `balance`).
"""

import logging
from collections.abc import Awaitable, Callable
from typing import TypeVar

from sqlalchemy import text
from sqlalchemy.exc import InterfaceError, OperationalError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from tenacity import AsyncRetrying

from config.settings import settings
from src.wb_account.domain.models import Account
from src.wb_common.database import async_session_factory
from src.wb_common.errors import StorageUnavailableError
from src.wb_common.retry import async_retrying

T = TypeVar("T")
logger = logging.getLogger(__name__)

_TRANSIENT_EXCEPTIONS: tuple[type[BaseException], ...] = (
    OperationalError,
    InterfaceError,
    TimeoutError,
    OSError,
)

# ---------------------------------------------------------------------------
# SQL
# ---------------------------------------------------------------------------

_GET_ACCOUNT_SQL = text("""
    SELECT user_id, balance
    FROM accounts
    WHERE user_id = :user_id
""")

# Only `balance` is touched on conflict; any other column is left alone
_UPSERT_BALANCE_SQL = text("""
    INSERT INTO accounts (user_id, balance)
    VALUES (:user_id, :balance)
    ON CONFLICT (user_id) DO UPDATE
        SET balance = EXCLUDED.balance
""")

# Full scan, no pagination. Fine for a team-sized table only.
_SCAN_ACCOUNTS_SQL = text("""
    SELECT user_id, balance
    FROM accounts
""")


def _row_to_account(row: object) -> Account:
    return Account(
        user=row.user_id,  # type: ignore[attr-defined]
        balance=int(row.balance),  # type: ignore[attr-defined]
    )


def default_retrying() -> AsyncRetrying:
    return async_retrying(
        attempts=settings.STORAGE_RETRY_ATTEMPTS,
        base_delay_s=settings.STORAGE_RETRY_BASE_DELAY_SECONDS,
        max_delay_s=settings.STORAGE_RETRY_MAX_DELAY_SECONDS,
        transient=_TRANSIENT_EXCEPTIONS,
    )


class AccountStore:
    """Point get / upsert / full scan over the `accounts` table."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession] | None = None,
        retrying: AsyncRetrying | None = None,
    ) -> None:
        self._session_factory = session_factory or async_session_factory
        self._retrying = retrying or default_retrying()

    async def get(self, user: str) -> tuple[Account, bool]:
        async def _op() -> tuple[Account, bool]:
            async with self._session_factory() as db:
                result = await db.execute(_GET_ACCOUNT_SQL, {"user_id": user})
                row = result.fetchone()
            if row is None:
                return Account(user=user, balance=0), False
            return _row_to_account(row), True

        return await self._call("get", _op)

    async def put(self, account: Account) -> None:
        async def _op() -> None:
            async with self._session_factory() as db:
                async with db.begin():
                    await db.execute(
                        _UPSERT_BALANCE_SQL,
                        {"user_id": account.user, "balance": account.balance},
                    )

        await self._call("put", _op)

    async def scan_all(self) -> list[Account]:
        async def _op() -> list[Account]:
            async with self._session_factory() as db:
                result = await db.execute(_SCAN_ACCOUNTS_SQL)
                rows = result.fetchall()
            return [_row_to_account(r) for r in rows]

        return await self._call("scan", _op)

    async def _call(self, operation: str, fn: Callable[[], Awaitable[T]]) -> T:
        try:
            # copy(): each call gets its own attempt state
            return await self._retrying.copy()(fn)
        except (SQLAlchemyError, TimeoutError, OSError) as e:
            logger.error("accounts.%s failed: %s", operation, e)
            raise StorageUnavailableError(operation, str(e)) from e
