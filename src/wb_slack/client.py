"""Slack Web API client: user/channel lookup and message posting.

Every method is one HTTP call. Slack answers 200 with {"ok": false, "error": ...}
for most failures, so both that and transport/HTTP errors raise SlackApiError.
"""

import logging
from typing import Any

import httpx
from pydantic import ValidationError

from config.settings import settings
from src.wb_common.errors import SlackApiError
from src.wb_slack.schemas import SlackChannel, SlackUser

logger = logging.getLogger(__name__)


class SlackClient:
    def __init__(
        self,
        token: str | None = None,
        base_url: str | None = None,
        timeout_s: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._token = settings.SLACK_BOT_TOKEN if token is None else token
        self._base_url = (base_url or settings.SLACK_API_BASE_URL).rstrip("/")
        self._timeout_s = settings.SLACK_TIMEOUT_SECONDS if timeout_s is None else timeout_s
        self._transport = transport

    async def user_lookup(self, user_id: str) -> SlackUser:
        data = await self._call("users.info", "GET", params={"user": user_id})
        try:
            return SlackUser.model_validate(data)
        except ValidationError as e:
            raise SlackApiError("users.info", f"unexpected response: {e}") from e

    async def channel_lookup(self, channel_id: str) -> SlackChannel:
        data = await self._call("conversations.info", "GET", params={"channel": channel_id})
        try:
            return SlackChannel.model_validate(data)
        except ValidationError as e:
            raise SlackApiError("conversations.info", f"unexpected response: {e}") from e

    async def post_channel(self, text: str, channel: str) -> None:
        await self._call("chat.postMessage", "POST", json={"channel": channel, "text": text})

    async def send_ephemeral(self, text: str, user: str, channel: str) -> None:
        await self._call(
            "chat.postEphemeral",
            "POST",
            json={"channel": channel, "user": user, "text": text},
        )

    async def _call(
        self,
        method: str,
        http_method: str,
        *,
        params: dict[str, str] | None = None,
        json: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        headers = {"Authorization": f"Bearer {self._token}"}
        try:
            async with httpx.AsyncClient(
                headers=headers, transport=self._transport
            ) as client:
                response = await client.request(
                    http_method,
                    f"{self._base_url}/{method}",
                    params=params,
                    json=json,
                    timeout=float(self._timeout_s),
                )
                response.raise_for_status()
                decoded = response.json()
        except httpx.HTTPError as e:
            logger.warning("slack %s transport error: %s", method, e)
            raise SlackApiError(method, str(e)) from e
        except ValueError as e:
            raise SlackApiError(method, f"invalid JSON response: {e}") from e

        if not isinstance(decoded, dict):
            raise SlackApiError(method, "unexpected response: not a JSON object")
        if not decoded.get("ok", False):
            error = str(decoded.get("error", "unknown_error"))
            logger.warning("slack %s returned error: %s", method, error)
            raise SlackApiError(method, error)
        return decoded
