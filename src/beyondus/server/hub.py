"""WebSocket hub for live session connections.

Relays session events to connected participants and routes their action
messages into the authoritative GameSession.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional, Set

from fastapi import WebSocket
from pydantic import ValidationError

from ..core.actions import ActionMessage
from ..core.errors import GameError
from ..core.game_session import GameSession
from ..core.game_state import GameEvent


logger = logging.getLogger(__name__)


@dataclass
class SessionConnection:
    """A participant's WebSocket connection."""

    websocket: WebSocket
    participant_id: int
    connected_at: str = field(default_factory=lambda: datetime.now().isoformat())


class WebSocketHub:
    """
    Broadcasts session events and per-participant snapshots.

    Each connected participant receives every public event plus a snapshot
    that includes only their own role.
    """

    def __init__(self, session: GameSession):
        self.session = session
        self.connections: Dict[int, SessionConnection] = {}
        self._pending: Set[asyncio.Task] = set()
        self._unsubscribe = session.subscribe(self.on_event)

    async def connect(self, connection: SessionConnection):
        old = self.connections.get(connection.participant_id)
        if old is not None:
            logger.warning(f"Participant {connection.participant_id} reconnected; closing old socket")
            try:
                await old.websocket.close()
            except RuntimeError:
                pass
        self.connections[connection.participant_id] = connection
        logger.info(f"Participant {connection.participant_id} connected")
        await self.send_state(connection.participant_id)

    def disconnect(self, participant_id: int, websocket: Optional[WebSocket] = None):
        """Forget a connection. With ``websocket``, only if it is still the current one."""
        conn = self.connections.get(participant_id)
        if conn is None or (websocket is not None and conn.websocket is not websocket):
            return
        del self.connections[participant_id]
        logger.info(f"Participant {participant_id} disconnected")

    def close(self):
        self._unsubscribe()
        for task in list(self._pending):
            task.cancel()

    def on_event(self, event: GameEvent):
        """Session listener: schedule a broadcast on the running loop."""
        if not self.connections:
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.debug(f"No running loop; event {event.seq} not broadcast")
            return
        task = loop.create_task(self.broadcast_event(event))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def broadcast_event(self, event: GameEvent):
        message = {"type": "event", "data": event.to_dict()}
        for participant_id in list(self.connections):
            if await self.send_to(participant_id, message):
                await self.send_state(participant_id)

    async def send_state(self, participant_id: int) -> bool:
        return await self.send_to(participant_id, {
            "type": "session_state",
            "data": self.session.snapshot(viewer_id=participant_id),
        })

    async def send_to(self, participant_id: int, message: Dict[str, Any]) -> bool:
        conn = self.connections.get(participant_id)
        if conn is None:
            return False
        try:
            await conn.websocket.send_json(message)
            return True
        except Exception as e:
            logger.error(f"Failed to send to participant {participant_id}: {e}")
            self.disconnect(participant_id)
            return False

    async def send_error(self, participant_id: int, error: str):
        await self.send_to(participant_id, {"type": "error", "error": error})

    async def handle_message(self, participant_id: int, message: Any):
        """Handle one message received from a participant."""
        if not isinstance(message, dict):
            logger.warning(f"Non-object message from {participant_id}: {type(message).__name__}")
            await self.send_error(participant_id, "Message must be a JSON object")
            return

        msg_type = message.get("type")

        if msg_type == "action":
            await self._handle_action(participant_id, message.get("data") or {})
        elif msg_type == "ping":
            await self.send_to(participant_id, {"type": "pong"})
        elif msg_type == "get_state":
            await self.send_state(participant_id)
        else:
            logger.warning(f"Unknown message type from {participant_id}: {msg_type}")
            await self.send_error(participant_id, f"Unknown message type: {msg_type}")

    async def _handle_action(self, participant_id: int, data: Any):
        if not isinstance(data, dict):
            await self.send_to(participant_id, {
                "type": "action_error",
                "code": "ValidationError",
                "error": "Action data must be a JSON object",
            })
            return

        # A connection may only act as its own participant
        data = {**data, "actorId": participant_id}
        try:
            message = ActionMessage.model_validate(data)
            event = self.session.apply(participant_id, message.to_action())
        except ValidationError as e:
            await self.send_to(participant_id, {
                "type": "action_error",
                "code": "ValidationError",
                "error": str(e),
            })
            return
        except GameError as e:
            await self.send_to(participant_id, {
                "type": "action_error",
                "code": type(e).__name__,
                "error": str(e),
            })
            return

        await self.send_to(participant_id, {"type": "action_ack", "data": event.to_dict()})
