"""
WebSocket endpoint carrying broadcast events to clients.
"""
import logging

from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect

from organizer.services.broadcast import Broadcaster, get_broadcaster

logger = logging.getLogger(__name__)

router = APIRouter(tags=["events"])


@router.websocket("/events")
async def events(
    websocket: WebSocket,
    broadcaster: Broadcaster = Depends(get_broadcaster),
):
    """
    Stream every change event to the connected client.

    Inbound messages carry no data; they are read only to notice the
    client going away.
    """
    await broadcaster.connect(websocket)
    try:
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        pass
    finally:
        broadcaster.disconnect(websocket)
