"""WebSocket router for live participant connections."""

import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from ..hub import SessionConnection


logger = logging.getLogger(__name__)

router = APIRouter()


@router.websocket("/{participant_id}")
async def session_websocket(websocket: WebSocket, participant_id: int):
    """
    Live connection for one participant.

    Sends the participant's snapshot on connect, then relays their action
    messages to the session and session events back to them.
    """
    session = websocket.app.state.session
    if participant_id not in session.roster:
        await websocket.close(code=4004, reason="Unknown participant")
        return

    await websocket.accept()
    hub = websocket.app.state.hub
    await hub.connect(SessionConnection(websocket=websocket, participant_id=participant_id))

    try:
        while True:
            try:
                message = await websocket.receive_json()
            except ValueError as e:
                # Undecodable frame; the connection stays open
                logger.warning(f"Invalid JSON from participant {participant_id}: {e}")
                await hub.send_error(participant_id, "Invalid JSON")
                continue
            await hub.handle_message(participant_id, message)
    except WebSocketDisconnect:
        logger.info(f"WebSocket disconnected for participant {participant_id}")
    finally:
        hub.disconnect(participant_id, websocket)
