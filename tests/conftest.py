"""Shared test fixtures."""

from unittest.mock import AsyncMock

import pytest
from httpx import ASGITransport, AsyncClient

from src.main import app
from src.wb_account.api.router import get_ledger_service
from src.wb_account.application.service import LedgerService
from src.wb_command.api.router import get_command_service
from src.wb_command.application.service import BalanceCommandService
from src.wb_reaction.api.router import get_reaction_service
from src.wb_reaction.application.service import ReactionEventService
from tests.fakes import InMemoryAccountStore, make_slack_channel, make_slack_user


@pytest.fixture
def store() -> InMemoryAccountStore:
    return InMemoryAccountStore()


@pytest.fixture
def ledger(store: InMemoryAccountStore) -> LedgerService:
    return LedgerService(store=store, default_balance_credit=0, default_balance_transfer=5)


@pytest.fixture
def slack() -> AsyncMock:
    """Slack client mock that knows every user id and channel id it is asked about."""
    mock = AsyncMock()
    mock.user_lookup.side_effect = lambda user_id: make_slack_user(user_id)
    mock.channel_lookup.side_effect = lambda channel_id: make_slack_channel(channel_id)
    return mock


@pytest.fixture
async def client(ledger: LedgerService, slack: AsyncMock) -> AsyncClient:
    """Async HTTP client with ledger and Slack swapped for in-memory fakes."""
    app.dependency_overrides[get_ledger_service] = lambda: ledger
    app.dependency_overrides[get_reaction_service] = lambda: ReactionEventService(
        ledger=ledger, slack=slack, notify_channel="C_NOTIFY", transfer_funds=False
    )
    app.dependency_overrides[get_command_service] = lambda: BalanceCommandService(
        ledger=ledger, slack=slack, top_limit=5
    )
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
