from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from ..services.realtime import broadcaster

router = APIRouter(tags=["realtime"])


@router.websocket("/ws")
async def events_socket(websocket: WebSocket):
    """Push channel for appointment/blocked-slot change events. Client messages are ignored."""
    await broadcaster.connect(websocket)
    try:
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        broadcaster.disconnect(websocket)
