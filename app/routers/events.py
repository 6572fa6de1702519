"""
WebSocket endpoint for live report events.

Clients connect here to receive ``reports:created`` and ``reports:deleted``
messages as they happen.
"""

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from app.services.notifications import ReportBroadcaster

router = APIRouter()


@router.websocket("/reports")
async def report_events(websocket: WebSocket):
    """Keep the connection registered until the client goes away."""
    broadcaster: ReportBroadcaster = websocket.app.state.report_notifier
    await broadcaster.connect(websocket)
    try:
        while True:
            # Inbound messages are ignored; this only detects disconnects
            await websocket.receive_text()
    except WebSocketDisconnect:
        pass
    finally:
        broadcaster.disconnect(websocket)
