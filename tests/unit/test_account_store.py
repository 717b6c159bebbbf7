"""AccountStore against a throwaway SQLite database, plus failure handling."""

from collections.abc import AsyncGenerator
from pathlib import Path

import pytest
from sqlalchemy.exc import OperationalError, ProgrammingError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from tenacity import wait_none

from src.wb_account.domain.models import Account
from src.wb_account.infrastructure.db_models import AccountORM
from src.wb_account.infrastructure.persistence import AccountStore
from src.wb_common.database import Base
from src.wb_common.errors import StorageUnavailableError
from src.wb_common.retry import async_retrying

_NO_WAIT_RETRY = async_retrying(
    attempts=3,
    base_delay_s=0.0,
    max_delay_s=0.0,
    transient=(OperationalError, TimeoutError, OSError),
    wait=wait_none(),
)


@pytest.fixture
async def session_factory(tmp_path: Path) -> AsyncGenerator[async_sessionmaker[AsyncSession], None]:
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'bank.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    await engine.dispose()


@pytest.fixture
def account_store(session_factory: async_sessionmaker[AsyncSession]) -> AccountStore:
    return AccountStore(session_factory=session_factory, retrying=_NO_WAIT_RETRY)


class _FlakySessionFactory:
    """Raises `error` for the first `failures` calls, then delegates."""

    def __init__(self, delegate, error: BaseException, failures: int) -> None:  # type: ignore[no-untyped-def]
        self._delegate = delegate
        self._error = error
        self.remaining = failures
        self.calls = 0

    def __call__(self):  # type: ignore[no-untyped-def]
        self.calls += 1
        if self.remaining > 0:
            self.remaining -= 1
            raise self._error
        return self._delegate()


def _operational_error() -> OperationalError:
    return OperationalError("SELECT 1", {}, Exception("connection refused"))


class TestGet:
    async def test_absent_key_is_not_an_error(self, account_store: AccountStore) -> None:
        account, found = await account_store.get("U_MISSING")

        assert found is False
        assert account.user == "U_MISSING"

    async def test_returns_stored_row(
        self,
        account_store: AccountStore,
        session_factory: async_sessionmaker[AsyncSession],
    ) -> None:
        async with session_factory() as db:
            db.add(AccountORM(user_id="U1", balance=42))
            await db.commit()

        account, found = await account_store.get("U1")

        assert found is True
        assert account == Account(user="U1", balance=42)


class TestPut:
    async def test_inserts_then_updates(self, account_store: AccountStore) -> None:
        await account_store.put(Account(user="U1", balance=3))
        await account_store.put(Account(user="U1", balance=8))

        account, found = await account_store.get("U1")
        assert found is True
        assert account.balance == 8

    async def test_negative_balance_is_stored_as_given(self, account_store: AccountStore) -> None:
        # The table has no floor; the ledger decides what may be written
        await account_store.put(Account(user="U1", balance=-2))

        account, _ = await account_store.get("U1")
        assert account.balance == -2

    async def test_is_new_flag_is_not_persisted(self, account_store: AccountStore) -> None:
        await account_store.put(Account(user="U1", balance=1, is_new=True))

        account, _ = await account_store.get("U1")
        assert account.is_new is False


class TestScanAll:
    async def test_returns_every_row(self, account_store: AccountStore) -> None:
        for user, balance in [("a", 1), ("b", 2), ("c", 3)]:
            await account_store.put(Account(user=user, balance=balance))

        accounts = await account_store.scan_all()

        assert sorted((a.user, a.balance) for a in accounts) == [("a", 1), ("b", 2), ("c", 3)]

    async def test_empty_table(self, account_store: AccountStore) -> None:
        assert await account_store.scan_all() == []


class TestFailures:
    async def test_transient_error_is_retried(
        self, session_factory: async_sessionmaker[AsyncSession]
    ) -> None:
        flaky = _FlakySessionFactory(session_factory, _operational_error(), failures=2)
        account_store = AccountStore(session_factory=flaky, retrying=_NO_WAIT_RETRY)  # type: ignore[arg-type]

        await account_store.put(Account(user="U1", balance=5))

        assert flaky.calls == 3
        account, found = await AccountStore(session_factory=session_factory).get("U1")
        assert found is True
        assert account.balance == 5

    async def test_retries_exhausted_raise_storage_unavailable(
        self, session_factory: async_sessionmaker[AsyncSession]
    ) -> None:
        flaky = _FlakySessionFactory(session_factory, _operational_error(), failures=10)
        account_store = AccountStore(session_factory=flaky, retrying=_NO_WAIT_RETRY)  # type: ignore[arg-type]

        with pytest.raises(StorageUnavailableError) as exc_info:
            await account_store.get("U1")

        assert flaky.calls == 3
        assert exc_info.value.operation == "get"
        assert isinstance(exc_info.value.__cause__, OperationalError)

    async def test_non_transient_error_is_not_retried(
        self, session_factory: async_sessionmaker[AsyncSession]
    ) -> None:
        error = ProgrammingError("SELECT", {}, Exception("no such table"))
        flaky = _FlakySessionFactory(session_factory, error, failures=10)
        account_store = AccountStore(session_factory=flaky, retrying=_NO_WAIT_RETRY)  # type: ignore[arg-type]

        with pytest.raises(StorageUnavailableError):
            await account_store.scan_all()

        assert flaky.calls == 1
