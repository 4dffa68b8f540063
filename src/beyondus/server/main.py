"""Beyond Us session server - FastAPI application.

Hosts one authoritative GameSession. Views submit lobby commands and
actions over HTTP or a per-participant WebSocket; every resulting event
and snapshot is pushed to connected WebSockets.
"""

import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from .. import __version__
from ..bots import BotController
from ..core.config import GameConfig
from ..core.errors import (
    GameError,
    LobbyClosedError,
    SessionNotActiveError,
    UnknownActorError,
)
from ..core.game_session import GameSession
from .hub import WebSocketHub
from .routers import session as session_router
from .routers import websocket as ws_router


logger = logging.getLogger(__name__)


def error_status(error: GameError) -> int:
    """HTTP status for a rejected command."""
    if isinstance(error, UnknownActorError):
        return 404
    if isinstance(error, (LobbyClosedError, SessionNotActiveError)):
        return 409
    return 400


def create_app(config: Optional[GameConfig] = None, session: Optional[GameSession] = None) -> FastAPI:
    """Build the application around a (new or given) game session."""
    session = session or GameSession(config)

    app = FastAPI(
        title="Beyond Us Session API",
        description="Authoritative game session for the Beyond Us party game",
        version=__version__,
    )
    app.state.session = session
    app.state.bots = BotController(session)
    app.state.hub = WebSocketHub(session)

    app.include_router(session_router.router, prefix="/api/session", tags=["session"])
    app.include_router(ws_router.router, prefix="/ws", tags=["websocket"])

    @app.exception_handler(GameError)
    async def game_error_handler(request: Request, exc: GameError):
        logger.info(f"Rejected {request.method} {request.url.path}: {exc}")
        return JSONResponse(
            status_code=error_status(exc),
            content={"detail": str(exc), "code": type(exc).__name__},
        )

    @app.on_event("shutdown")
    async def shutdown():
        """Stop bot timers before the loop goes away."""
        logger.info("Shutting down Beyond Us session API...")
        await app.state.bots.stop()
        app.state.hub.close()

    return app
