"""BalanceCommandService — answers the balance slash commands.

  /willowbuck-balance            -> caller's balance
  /willowbuck-balance @someone   -> that user's balance, matched by Slack handle
  anything else                  -> top balances

Matching by handle scans every account and asks Slack for each user's name,
so it costs one users.info call per account.
"""

import logging

from config.settings import settings
from src.wb_account.application.service import LedgerService
from src.wb_common.enums import SlashCommand
from src.wb_common.errors import AppError, UserNotFoundError
from src.wb_slack.client import SlackClient

logger = logging.getLogger(__name__)


class BalanceCommandService:
    def __init__(
        self,
        ledger: LedgerService | None = None,
        slack: SlackClient | None = None,
        top_limit: int | None = None,
    ) -> None:
        self._ledger = ledger or LedgerService()
        self._slack = slack or SlackClient()
        self._top_limit = settings.TOP_BALANCE_LIMIT if top_limit is None else top_limit

    async def handle(self, params: dict[str, str]) -> str:
        text = params.get("text", "").strip()
        if text:
            return await self.balance_for_name(text)
        if params.get("command") == SlashCommand.BALANCE:
            return await self.balance_for_user(params.get("user_id", ""))
        return await self.top_balances()

    async def balance_for_user(self, user_id: str) -> str:
        balance = await self._ledger.get_balance(user_id, self._ledger.default_balance_credit)
        return f"You currently have {balance} :willowbuck:"

    async def balance_for_name(self, name: str) -> str:
        try:
            user_id = await self.find_user_id(name)
        except UserNotFoundError:
            # Never received anything, so nothing is stored for them
            return f"{name} currently has 0 :willowbuck:"

        balance = await self._ledger.get_balance(user_id, self._ledger.default_balance_credit)
        return f"{name} currently has {balance} :willowbuck:"

    async def find_user_id(self, name: str) -> str:
        handle = name.removeprefix("@")
        for account in await self._ledger.top_balances(-1):
            try:
                user = await self._slack.user_lookup(account.user)
            except AppError as e:
                logger.warning("Unable to lookup user %s: %s", account.user, e)
                continue
            if user.user.name == handle:
                return user.user.id
        raise UserNotFoundError(handle)

    async def top_balances(self) -> str:
        lines = ["Here's the top users by :willowbuck: balance:"]
        for account in await self._ledger.top_balances(self._top_limit):
            try:
                user = await self._slack.user_lookup(account.user)
            except AppError as e:
                logger.warning("Unable to lookup user %s: %s", account.user, e)
                continue
            lines.append(f"{user.user.real_name}: {account.balance}")
        return "\n".join(lines)
