"""Global enums — string values are exactly what Slack sends us."""

from enum import Enum


class SlackEventType(str, Enum):
    URL_VERIFICATION = "url_verification"
    EVENT_CALLBACK = "event_callback"


class ReactionEventType(str, Enum):
    REACTION_ADDED = "reaction_added"
    REACTION_REMOVED = "reaction_removed"


class SlashCommand(str, Enum):
    BALANCE = "/willowbuck-balance"
    TOP_BALANCES = "/willowbuck-top-balances"
