"""Slack slash-command endpoint.

Slack posts application/x-www-form-urlencoded bodies; we decode them here
rather than declaring each field as a Form parameter.
"""

from typing import Annotated
from urllib.parse import parse_qsl

from fastapi import APIRouter, Depends, Request

from src.wb_command.application.service import BalanceCommandService
from src.wb_common.response import SlashCommandResponse

router = APIRouter(prefix="/slack", tags=["slack"])

_service = BalanceCommandService()


def get_command_service() -> BalanceCommandService:
    return _service


def parse_command_body(body: bytes) -> dict[str, str]:
    """Decode a form body; later duplicates win, blank values are kept."""
    return dict(parse_qsl(body.decode("utf-8"), keep_blank_values=True))


@router.post("/commands")
async def slash_command(
    request: Request,
    service: Annotated[BalanceCommandService, Depends(get_command_service)],
) -> SlashCommandResponse:
    params = parse_command_body(await request.body())
    text = await service.handle(params)
    return SlashCommandResponse(text=text)
