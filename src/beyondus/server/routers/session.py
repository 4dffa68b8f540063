"""Session router: lobby commands, actions and snapshots."""

import logging
from typing import Optional

from fastapi import APIRouter, Query, Request
from pydantic import BaseModel, Field

from ...core.actions import ActionMessage


logger = logging.getLogger(__name__)

router = APIRouter()


class JoinRequest(BaseModel):
    """Request to join the lobby."""
    name: str


class AddBotsRequest(BaseModel):
    """Request to seed bots into the lobby."""
    count: int = Field(ge=0, le=20)


@router.get("")
async def get_session(request: Request, viewer_id: Optional[int] = Query(default=None)):
    """Current snapshot. Includes the viewer's own role when ``viewer_id`` is given."""
    return request.app.state.session.snapshot(viewer_id=viewer_id)


@router.get("/events")
async def get_events(request: Request, limit: Optional[int] = Query(default=None, ge=0)):
    return request.app.state.session.recent_events(limit)


@router.post("/join")
async def join(request: Request, body: JoinRequest):
    session = request.app.state.session
    participant = session.join(body.name)
    return {
        "participant": participant.public_view(),
        "snapshot": session.snapshot(viewer_id=participant.id),
    }


@router.post("/leave/{participant_id}")
async def leave(request: Request, participant_id: int):
    participant = request.app.state.session.leave(participant_id)
    return {"participant": participant.public_view()}


@router.post("/bots")
async def add_bots(request: Request, body: AddBotsRequest):
    bots = request.app.state.session.add_bots(body.count)
    return {"bots": [bot.public_view() for bot in bots]}


@router.post("/start")
async def start(request: Request):
    """Deal roles and start the bot timers."""
    session = request.app.state.session
    session.start()
    request.app.state.bots.start()
    return session.snapshot()


@router.post("/reset")
async def reset(request: Request):
    await request.app.state.bots.stop()
    request.app.state.session.reset()
    return request.app.state.session.snapshot()


@router.post("/actions")
async def submit_action(request: Request, message: ActionMessage):
    event = request.app.state.session.apply(message.actor_id, message.to_action())
    return event.to_dict()
