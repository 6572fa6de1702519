"""
Real-time report notifications.

The registry only sees the ``ReportNotifier`` protocol. ``ReportBroadcaster``
is the WebSocket-backed implementation created by the application and handed
out through a dependency.
"""

from typing import Any, Dict, List, Protocol

from fastapi import WebSocket

from app.core.logging import logger

REPORT_CREATED = "reports:created"
REPORT_DELETED = "reports:deleted"


class ReportNotifier(Protocol):
    async def notify(self, event: str, payload: Dict[str, Any]) -> None:
        ...


class ReportBroadcaster:
    """Fire-and-forget fan-out of report events to connected WebSocket clients."""

    def __init__(self) -> None:
        self._clients: List[WebSocket] = []

    @property
    def client_count(self) -> int:
        return len(self._clients)

    async def connect(self, websocket: WebSocket) -> None:
        await websocket.accept()
        self._clients.append(websocket)
        logger.info(
            f"Report listener connected from "
            f"{websocket.client.host if websocket.client else 'unknown'}"
        )

    def disconnect(self, websocket: WebSocket) -> None:
        if websocket in self._clients:
            self._clients.remove(websocket)
            logger.info("Report listener disconnected")

    async def notify(self, event: str, payload: Dict[str, Any]) -> None:
        """
        Push ``{"event", "data"}`` to every connected client.

        Clients whose send fails are dropped; nothing is raised to the caller.
        """
        message = {"event": event, "data": payload}
        disconnected = []
        for client in list(self._clients):
            try:
                await client.send_json(message)
            except Exception as e:
                logger.debug(f"Dropping report listener after failed send: {e}")
                disconnected.append(client)

        for client in disconnected:
            self.disconnect(client)

        logger.debug(f"Broadcast {event} to {len(self._clients)} listener(s)")
