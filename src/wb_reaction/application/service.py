"""ReactionEventService — turns reaction events into ledger operations.

Flow per event:
  1. decode (unknown reaction -> ignored, missing ids -> Unknown*Error)
  2. resolve channel, receiver and sender through Slack
  3. reject self-reactions
  4. ReactionAdded -> credit receiver (or transfer sender -> receiver)
     ReactionRemoved -> debit receiver
  5. notify: welcome message on first credit, summary to NOTIFY_CHANNEL
"""

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import assert_never

from config.settings import settings
from src.wb_account.application.service import LedgerService
from src.wb_common.errors import (
    AppError,
    InsufficientFundsError,
    SelfReactionError,
    SlackApiError,
    UnknownChannelError,
    UnknownReceiverError,
    UnknownSenderError,
)
from src.wb_reaction.application.messages import (
    WELCOME_MSG,
    credit_message,
    debit_message,
)
from src.wb_reaction.domain.events import (
    ReactionAdded,
    ReactionRemoved,
    SlackEvent,
    decode_reaction,
)
from src.wb_slack.client import SlackClient
from src.wb_slack.schemas import SlackChannelInfo, SlackUserInfo

logger = logging.getLogger(__name__)


@dataclass
class ReactionOutcome:
    action: str          # "ignored" | "credit" | "transfer" | "debit"
    amount: int = 0
    created: bool = False
    applied: bool = True
    message: str | None = None


class ReactionEventService:
    def __init__(
        self,
        ledger: LedgerService | None = None,
        slack: SlackClient | None = None,
        amounts: Mapping[str, int] | None = None,
        transfer_funds: bool | None = None,
        notify_channel: str | None = None,
    ) -> None:
        self._ledger = ledger or LedgerService()
        self._slack = slack or SlackClient()
        self._amounts = dict(settings.REACTION_AMOUNTS if amounts is None else amounts)
        self._transfer_funds = (
            settings.REACTIONS_TRANSFER_FUNDS if transfer_funds is None else transfer_funds
        )
        self._notify_channel = (
            settings.NOTIFY_CHANNEL if notify_channel is None else notify_channel
        )

    async def handle(self, event: SlackEvent) -> ReactionOutcome:
        reaction = decode_reaction(event, self._amounts)
        if reaction is None:
            logger.debug("ignoring reaction %r", event.reaction)
            return ReactionOutcome(action="ignored")

        channel = await self._resolve_channel(reaction.channel)
        to = await self._resolve_user(reaction.receiver, UnknownReceiverError)
        frm = await self._resolve_user(reaction.sender, UnknownSenderError)

        if reaction.sender == reaction.receiver:
            err = SelfReactionError()
            await self._send_ephemeral_quietly(err.message, to.id, channel.id)
            logger.info("%s: sender=%s reaction=%s", err.message, frm.id, reaction.reaction)
            raise err

        if isinstance(reaction, ReactionAdded):
            if self._transfer_funds:
                return await self._handle_transfer(reaction, frm, to, channel)
            return await self._handle_credit(reaction, frm, to, channel)
        if isinstance(reaction, ReactionRemoved):
            return await self._handle_debit(reaction, frm, to, channel)
        assert_never(reaction)

    # ------------------------------------------------------------------
    # Handlers
    # ------------------------------------------------------------------

    async def _handle_credit(
        self,
        reaction: ReactionAdded,
        frm: SlackUserInfo,
        to: SlackUserInfo,
        channel: SlackChannelInfo,
    ) -> ReactionOutcome:
        try:
            result = await self._ledger.credit(reaction.amount, to.id)
        except AppError as e:
            logger.error("Unable to credit %d to [%s]: %s", reaction.amount, to.id, e)
            raise

        if result.created:
            await self._send_ephemeral_quietly(WELCOME_MSG, to.id, channel.id)

        msg = credit_message(
            frm.real_name, to.real_name, channel.name, reaction.amount, result.created
        )
        await self._notify(msg)
        return ReactionOutcome(
            action="credit", amount=reaction.amount, created=result.created, message=msg
        )

    async def _handle_transfer(
        self,
        reaction: ReactionAdded,
        frm: SlackUserInfo,
        to: SlackUserInfo,
        channel: SlackChannelInfo,
    ) -> ReactionOutcome:
        try:
            result = await self._ledger.transfer(reaction.amount, frm.id, to.id)
        except InsufficientFundsError as e:
            await self._send_ephemeral_quietly(e.message, frm.id, channel.id)
            logger.info("Unable to send %d from [%s] to [%s]: %s", reaction.amount, frm.id, to.id, e)
            raise
        except AppError as e:
            logger.error("Unable to send %d from [%s] to [%s]: %s", reaction.amount, frm.id, to.id, e)
            raise

        if result.created:
            await self._send_ephemeral_quietly(WELCOME_MSG, to.id, channel.id)

        msg = credit_message(
            frm.real_name, to.real_name, channel.name, reaction.amount, result.created
        )
        await self._notify(msg)
        return ReactionOutcome(
            action="transfer", amount=reaction.amount, created=result.created, message=msg
        )

    async def _handle_debit(
        self,
        reaction: ReactionRemoved,
        frm: SlackUserInfo,
        to: SlackUserInfo,
        channel: SlackChannelInfo,
    ) -> ReactionOutcome:
        try:
            result = await self._ledger.debit(reaction.amount, to.id)
        except AppError as e:
            logger.error("Unable to debit %d from [%s]: %s", reaction.amount, to.id, e)
            raise

        msg = debit_message(frm.real_name, to.real_name, channel.name)
        await self._notify(msg)
        return ReactionOutcome(
            action="debit", amount=reaction.amount, applied=result.applied, message=msg
        )

    # ------------------------------------------------------------------
    # Slack helpers
    # ------------------------------------------------------------------

    async def _resolve_channel(self, channel_id: str) -> SlackChannelInfo:
        try:
            channel = await self._slack.channel_lookup(channel_id)
        except SlackApiError as e:
            logger.warning("unknown channel %s: %s", channel_id, e)
            raise UnknownChannelError() from e
        if not channel.channel.name:
            logger.warning("unknown channel %s", channel_id)
            raise UnknownChannelError()
        if not channel.channel.id:
            channel.channel.id = channel_id
        return channel.channel

    async def _resolve_user(
        self, user_id: str, missing: Callable[[], AppError]
    ) -> SlackUserInfo:
        user = await self._slack.user_lookup(user_id)
        if not user.user.id:
            raise missing()
        return user.user

    async def _notify(self, msg: str) -> None:
        """Log and post the summary. Runs after the ledger write, so it never raises."""
        logger.info(msg)
        if not self._notify_channel:
            return
        try:
            await self._slack.post_channel(msg, self._notify_channel)
        except AppError as e:
            logger.warning("Unable to post to %s: %s", self._notify_channel, e)

    async def _send_ephemeral_quietly(self, text: str, user: str, channel: str) -> None:
        try:
            await self._slack.send_ephemeral(text, user, channel)
        except AppError as e:
            logger.warning("Unable to send notification to %s: %s", user, e)
