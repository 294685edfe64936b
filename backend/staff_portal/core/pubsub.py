# staff_portal/core/pubsub.py
"""
Real-time namespaces over WebSocket.
Each module can ask for a namespace (one per path). Clients connect to
``/ws/<namespace path>`` and exchange ``{"event": ..., "data": ...}`` JSON
messages with it.
"""
import json
import logging
from typing import Any, Awaitable, Callable, Dict, Set

from fastapi import APIRouter, WebSocket
from starlette.websockets import WebSocketDisconnect

from staff_portal.core.introspection import join_path

logger = logging.getLogger("uvicorn.error")

EventHandler = Callable[[WebSocket, Any], Awaitable[None]]

# Close code sent when a client asks for a namespace nobody created
NAMESPACE_NOT_FOUND = 4404


class Namespace:
    """
    A set of connected sockets sharing one path.

    Architecture:
    - The WebSocket endpoint is responsible for ws.accept(); the namespace only
      tracks sockets and routes messages
    - Incoming messages are dispatched by their ``event`` field to handlers
      registered with ``on``
    - Sockets that fail on send are dropped from the namespace
    """

    def __init__(self, path: str):
        self.path = path
        self._sockets: Set[WebSocket] = set()
        self._handlers: Dict[str, EventHandler] = {}

    @property
    def size(self) -> int:
        return len(self._sockets)

    def connect(self, ws: WebSocket) -> None:
        self._sockets.add(ws)

    def disconnect(self, ws: WebSocket) -> None:
        self._sockets.discard(ws)

    def on(self, event: str, handler: EventHandler) -> None:
        """Register the handler for one incoming event name (replaces any previous one)."""
        self._handlers[event] = handler

    async def emit(self, event: str, data: Any = None) -> int:
        """
        Broadcast an event to every connected socket.

        Returns:
            Number of sockets the message was delivered to
        """
        msg = json.dumps({"event": event, "data": data})
        delivered = 0
        for ws in list(self._sockets):
            try:
                await ws.send_text(msg)
                delivered += 1
            except (WebSocketDisconnect, RuntimeError) as e:
                logger.debug("[pubsub] dropping socket from %s: %r", self.path, e)
                self.disconnect(ws)
        return delivered

    async def dispatch(self, ws: WebSocket, message: dict) -> bool:
        """
        Route one incoming message to its handler.

        Returns:
            False when no handler is registered for the event
        """
        handler = self._handlers.get(message.get("event"))
        if handler is None:
            return False
        await handler(ws, message.get("data"))
        return True


class NamespaceServer:
    """Creates namespaces on demand and serves them on one WebSocket endpoint."""

    def __init__(self):
        self._namespaces: Dict[str, Namespace] = {}
        self.router = APIRouter()
        self.router.add_api_websocket_route("/ws/{namespace:path}", self._endpoint)

    @property
    def paths(self) -> list[str]:
        return list(self._namespaces)

    def create_namespace(self, path: str) -> Namespace:
        """Return the namespace for ``path``, creating it on first use."""
        key = join_path(path)
        if key not in self._namespaces:
            self._namespaces[key] = Namespace(key)
        return self._namespaces[key]

    def get(self, path: str) -> Namespace | None:
        return self._namespaces.get(join_path(path))

    async def _endpoint(self, ws: WebSocket, namespace: str):
        ns = self.get(namespace)
        await ws.accept()
        if ns is None:
            # Closing after the handshake so clients see the 4404 code
            await ws.close(code=NAMESPACE_NOT_FOUND)
            return
        ns.connect(ws)
        logger.info("[pubsub] connected to %s", ns.path)
        try:
            while True:
                raw = await ws.receive_text()
                try:
                    msg = json.loads(raw)
                except json.JSONDecodeError:
                    await ws.send_text(json.dumps({"event": "error", "data": "invalid JSON"}))
                    continue
                if not isinstance(msg, dict) or not await ns.dispatch(ws, msg):
                    await ws.send_text(json.dumps({"event": "error", "data": "unknown event"}))
        except WebSocketDisconnect:
            logger.info("[pubsub] disconnected from %s", ns.path)
        finally:
            ns.disconnect(ws)
