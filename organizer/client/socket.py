"""
Client side of the broadcast channel.

Receives event envelopes over a WebSocket and dispatches them to handlers
registered per event kind. Events published while disconnected are lost,
so every (re)connect runs the on_connect hooks; the engine reloads its full
state there.
"""
import asyncio
import inspect
import json
import logging
from collections import defaultdict
from typing import Any, Awaitable, Callable, Dict, List, Optional, Union

import websockets
from pydantic import ValidationError
from websockets.exceptions import WebSocketException

from organizer.core.config import settings
from organizer.schemas.events import BroadcastMessage, EventKind

logger = logging.getLogger(__name__)

Handler = Callable[[Any], Any]
Hook = Callable[[], Union[None, Awaitable[Any]]]


class BroadcastSubscriber:
    """Listens to the server's event stream and fans events out locally."""

    def __init__(
        self,
        url: Optional[str] = None,
        reconnect_delay: Optional[float] = None,
    ):
        self.url = url or settings.CLIENT_SOCKET_URL
        self.reconnect_delay = (
            settings.CLIENT_RECONNECT_DELAY if reconnect_delay is None else reconnect_delay
        )
        self._handlers: Dict[EventKind, List[Handler]] = defaultdict(list)
        self._connect_hooks: List[Hook] = []
        self._running = False

    def subscribe(self, kind: EventKind, handler: Handler) -> Callable[[], None]:
        """
        Register a handler for one event kind.

        Returns:
            A callable that removes the handler again
        """
        kind = EventKind(kind)
        self._handlers[kind].append(handler)

        def unsubscribe() -> None:
            if handler in self._handlers[kind]:
                self._handlers[kind].remove(handler)

        return unsubscribe

    def on_connect(self, hook: Hook) -> None:
        self._connect_hooks.append(hook)

    def dispatch(self, raw: Union[str, bytes, dict]) -> None:
        """
        Route one envelope to its handlers.

        Malformed envelopes are dropped. A handler rejecting its payload is
        logged and does not stop the other handlers or the stream.
        """
        try:
            if isinstance(raw, (str, bytes)):
                raw = json.loads(raw)
            message = BroadcastMessage.model_validate(raw)
        except (json.JSONDecodeError, ValidationError) as e:
            logger.warning(f"Ignoring malformed event: {e}")
            return

        for handler in list(self._handlers.get(message.event, [])):
            try:
                handler(message.data)
            except Exception as e:
                logger.warning(f"Handler failed for {message.event.value} event: {e}")

    async def _run_connect_hooks(self) -> None:
        for hook in list(self._connect_hooks):
            result = hook()
            if inspect.isawaitable(result):
                await result

    async def listen(self) -> None:
        """Hold one connection open until the server closes it."""
        async with websockets.connect(self.url) as ws:
            logger.info(f"Connected to server at {self.url}")
            await self._run_connect_hooks()
            async for raw in ws:
                self.dispatch(raw)
        logger.info("Disconnected from server")

    async def run_forever(self) -> None:
        """Listen, reconnecting after a fixed delay, until stop() is called."""
        self._running = True
        while self._running:
            try:
                await self.listen()
            except (OSError, WebSocketException, asyncio.TimeoutError) as e:
                logger.warning(f"Event stream lost: {e}")
            if self._running:
                await asyncio.sleep(self.reconnect_delay)

    def stop(self) -> None:
        self._running = False
