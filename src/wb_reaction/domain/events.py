"""Slack Events API payloads and the reaction events we act on.

`decode_reaction` turns a raw event into one of a closed set of variants
(ReactionAdded | ReactionRemoved), or None for reactions that carry no amount.
"""

from collections.abc import Mapping
from dataclasses import dataclass

from pydantic import BaseModel, Field

from src.wb_common.enums import ReactionEventType
from src.wb_common.errors import (
    UnknownChannelError,
    UnknownEventTypeError,
    UnknownReceiverError,
    UnknownSenderError,
)


class ReactionItem(BaseModel):
    type: str = ""
    channel: str = ""
    ts: str = ""


class SlackEvent(BaseModel):
    type: str = ""
    user: str = ""          # who reacted
    item_user: str = ""     # author of the message reacted to
    reaction: str = ""
    event_ts: str = ""
    item: ReactionItem = Field(default_factory=ReactionItem)


class SlackEventEnvelope(BaseModel):
    type: str = ""
    challenge: str | None = None
    event: SlackEvent | None = None


@dataclass(frozen=True)
class ReactionAdded:
    reaction: str
    amount: int
    sender: str
    receiver: str
    channel: str


@dataclass(frozen=True)
class ReactionRemoved:
    reaction: str
    amount: int
    sender: str
    receiver: str
    channel: str


ReactionEvent = ReactionAdded | ReactionRemoved


def decode_reaction(
    event: SlackEvent, amounts: Mapping[str, int]
) -> ReactionEvent | None:
    amount = amounts.get(event.reaction)
    if amount is None:
        return None  # not a reaction we care about
    if not event.user:
        raise UnknownSenderError()
    if not event.item_user:
        raise UnknownReceiverError()
    if not event.item.channel:
        raise UnknownChannelError()

    fields = dict(
        reaction=event.reaction,
        amount=amount,
        sender=event.user,
        receiver=event.item_user,
        channel=event.item.channel,
    )
    if event.type == ReactionEventType.REACTION_ADDED:
        return ReactionAdded(**fields)
    if event.type == ReactionEventType.REACTION_REMOVED:
        return ReactionRemoved(**fields)
    raise UnknownEventTypeError(event.type)
