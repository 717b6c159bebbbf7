"""Slack Events API endpoint — reaction_added / reaction_removed."""

from dataclasses import asdict
from typing import Annotated, Any

from fastapi import APIRouter, Depends, Request

from src.wb_common.enums import SlackEventType
from src.wb_common.response import ApiResponse, success_response
from src.wb_reaction.application.service import ReactionEventService
from src.wb_reaction.domain.events import SlackEventEnvelope

router = APIRouter(prefix="/slack", tags=["slack"])

_service = ReactionEventService()


def get_reaction_service() -> ReactionEventService:
    return _service


@router.post("/events", response_model=None)
async def slack_events(
    body: SlackEventEnvelope,
    service: Annotated[ReactionEventService, Depends(get_reaction_service)],
    request: Request,
) -> ApiResponse | dict[str, Any]:
    # Slack's one-time endpoint check when the app's event URL is configured
    if body.type == SlackEventType.URL_VERIFICATION:
        return {"challenge": body.challenge}

    if body.event is None:
        resp = success_response({"action": "ignored"})
    else:
        outcome = await service.handle(body.event)
        resp = success_response(asdict(outcome))
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp
