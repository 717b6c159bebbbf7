"""Decoding Slack reaction events into ReactionAdded / ReactionRemoved."""

import pytest

from src.wb_common.errors import (
    UnknownChannelError,
    UnknownEventTypeError,
    UnknownReceiverError,
    UnknownSenderError,
)
from src.wb_reaction.domain.events import (
    ReactionAdded,
    ReactionRemoved,
    SlackEvent,
    SlackEventEnvelope,
    decode_reaction,
)

AMOUNTS = {"willowbuck": 1, "willowbuck5": 5}


def _event(**overrides: object) -> SlackEvent:
    payload: dict[str, object] = {
        "type": "reaction_added",
        "user": "U_FROM",
        "item_user": "U_TO",
        "reaction": "willowbuck5",
        "event_ts": "1360782804.083113",
        "item": {"type": "message", "channel": "C1", "ts": "1360782400.498405"},
    }
    payload.update(overrides)
    return SlackEvent.model_validate(payload)


class TestDecodeReaction:
    def test_added(self) -> None:
        decoded = decode_reaction(_event(), AMOUNTS)
        assert decoded == ReactionAdded(
            reaction="willowbuck5", amount=5, sender="U_FROM", receiver="U_TO", channel="C1"
        )

    def test_removed(self) -> None:
        decoded = decode_reaction(_event(type="reaction_removed", reaction="willowbuck"), AMOUNTS)
        assert isinstance(decoded, ReactionRemoved)
        assert decoded.amount == 1

    def test_unknown_reaction_is_ignored(self) -> None:
        assert decode_reaction(_event(reaction="thumbsup", user=""), AMOUNTS) is None

    def test_missing_sender(self) -> None:
        with pytest.raises(UnknownSenderError):
            decode_reaction(_event(user=""), AMOUNTS)

    def test_missing_receiver(self) -> None:
        with pytest.raises(UnknownReceiverError):
            decode_reaction(_event(item_user=""), AMOUNTS)

    def test_missing_channel(self) -> None:
        with pytest.raises(UnknownChannelError):
            decode_reaction(_event(item={"type": "message", "ts": "1"}), AMOUNTS)

    def test_unknown_event_type(self) -> None:
        with pytest.raises(UnknownEventTypeError):
            decode_reaction(_event(type="message"), AMOUNTS)


class TestEnvelope:
    def test_url_verification(self) -> None:
        env = SlackEventEnvelope.model_validate(
            {"type": "url_verification", "challenge": "abc", "token": "ignored"}
        )
        assert env.challenge == "abc"
        assert env.event is None

    def test_event_callback_ignores_extra_fields(self) -> None:
        env = SlackEventEnvelope.model_validate({
            "type": "event_callback",
            "team_id": "T1",
            "event": {"type": "reaction_added", "user": "U1", "reaction": "x", "extra": 1},
        })
        assert env.event is not None
        assert env.event.user == "U1"
        assert env.event.item.channel == ""
