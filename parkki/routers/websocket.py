# parkki/routers/websocket.py
"""
Live event stream over WebSocket.

Every committed event is pushed as JSON:
    {"camera_id", "event_id", "event_type", "timestamp", "confidence"}

Protocol:
- Server sends a text "ping" every WS_HEARTBEAT_SECONDS
- Client may send "ping" and gets "pong" back; other messages are ignored
- Missed notifications are not replayed; re-read GET /cameras after reconnecting
"""

import asyncio

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from parkki.config import settings
from parkki.services.broadcast_hub import get_broadcast_hub
from parkki.utils.logger import get_logger

router = APIRouter()
logger = get_logger(__name__)


@router.websocket("/ws")
@router.websocket("/events/stream")
async def live_events(websocket: WebSocket):
    hub = get_broadcast_hub()
    await websocket.accept()
    await hub.on_subscriber_connect(websocket)

    heartbeat_task = asyncio.create_task(send_heartbeat(websocket))
    try:
        while True:
            data = await websocket.receive_text()
            if data == "ping":
                await websocket.send_text("pong")
            elif data != "pong":
                logger.debug(f"Ignoring WebSocket message: {data[:100]}")
    except WebSocketDisconnect:
        logger.debug("WebSocket client disconnected")
    except Exception as e:
        logger.error(f"WebSocket error: {e}", exc_info=True)
    finally:
        heartbeat_task.cancel()
        try:
            await heartbeat_task
        except asyncio.CancelledError:
            pass
        await hub.on_subscriber_disconnect(websocket)


async def send_heartbeat(websocket: WebSocket, interval: float = None):
    """Periodic ping so idle proxies keep the connection open. Stops on the first failed send."""
    interval = interval or settings.WS_HEARTBEAT_SECONDS
    while True:
        await asyncio.sleep(interval)
        try:
            await websocket.send_text("ping")
        except Exception as e:
            logger.debug(f"Heartbeat failed: {e}")
            return
