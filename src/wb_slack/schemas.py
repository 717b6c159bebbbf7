"""Subset of Slack Web API payloads that we read. Unknown fields are ignored."""

from pydantic import BaseModel, Field


class SlackUserInfo(BaseModel):
    id: str = ""
    name: str = ""
    real_name: str = ""
    deleted: bool = False
    is_bot: bool = False


class SlackUser(BaseModel):
    ok: bool = False
    user: SlackUserInfo = Field(default_factory=SlackUserInfo)


class SlackChannelInfo(BaseModel):
    id: str = ""
    name: str = ""


class SlackChannel(BaseModel):
    ok: bool = False
    channel: SlackChannelInfo = Field(default_factory=SlackChannelInfo)
