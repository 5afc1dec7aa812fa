"""
Broadcast channel - fan-out of authoritative change events.

Events go to every open WebSocket connection and to in-process subscribers.
Delivery is ordered per connection; there is no history, so a connection
opened after an event was published never sees it.
"""
import inspect
import logging
from collections import defaultdict
from typing import Any, Callable, Dict, List, Set

from fastapi import WebSocket
from fastapi.encoders import jsonable_encoder

from organizer.schemas.events import BroadcastMessage, EventKind

logger = logging.getLogger(__name__)

Handler = Callable[[Any], Any]


class Broadcaster:
    """Publish/subscribe hub for item and folder change events."""

    def __init__(self):
        self._connections: Set[WebSocket] = set()
        self._handlers: Dict[EventKind, List[Handler]] = defaultdict(list)

    @property
    def connection_count(self) -> int:
        return len(self._connections)

    async def connect(self, websocket: WebSocket) -> None:
        await websocket.accept()
        self._connections.add(websocket)
        logger.info(f"Client connected ({self.connection_count} open)")

    def disconnect(self, websocket: WebSocket) -> None:
        self._connections.discard(websocket)
        logger.info(f"Client disconnected ({self.connection_count} open)")

    def subscribe(self, kind: EventKind, handler: Handler) -> Callable[[], None]:
        """
        Register an in-process handler for one event kind.

        Returns:
            A callable that removes the handler again
        """
        kind = EventKind(kind)
        self._handlers[kind].append(handler)

        def unsubscribe() -> None:
            if handler in self._handlers[kind]:
                self._handlers[kind].remove(handler)

        return unsubscribe

    async def publish(self, kind: EventKind, payload: Any) -> None:
        """
        Send one event to every subscriber and connection.

        Args:
            kind: Event kind
            payload: Authoritative record, deleted id, or accepted reorder batch
        """
        message = BroadcastMessage(event=kind, data=jsonable_encoder(payload))
        wire = message.model_dump(mode="json")

        for handler in list(self._handlers.get(message.event, [])):
            result = handler(wire["data"])
            if inspect.isawaitable(result):
                await result

        for websocket in list(self._connections):
            try:
                await websocket.send_json(wire)
            except Exception as e:
                logger.warning(f"Dropping connection after failed send: {e}")
                self.disconnect(websocket)

        logger.debug(f"Published {message.event.value} to {self.connection_count} connections")


broadcaster = Broadcaster()


def get_broadcaster() -> Broadcaster:
    """Broadcaster dependency."""
    return broadcaster
