# parkki/services/broadcast_hub.py
"""
Broadcast Hub — pushes event notifications to every live subscriber.

Delivery is at-most-once and best-effort: no acknowledgement, no retry,
no queue for disconnected clients (they re-read the event store on
reconnect). A subscriber whose send fails or exceeds the send timeout is
unregistered and its connection closed; the failure never reaches the
ingestion caller.

Usage:
    @router.websocket("/ws")
    async def ws_endpoint(websocket: WebSocket):
        await websocket.accept()
        await broadcast_hub.on_subscriber_connect(websocket)
        ...
        await broadcast_hub.on_subscriber_disconnect(websocket)

    await broadcast_hub.publish({"camera_id": "cam1", "event_id": "...", ...})
"""

import asyncio
import json
from typing import Any, Dict, Iterable, Optional

from parkki.config import settings
from parkki.exceptions import DeliveryError
from parkki.services.subscriber_registry import Subscriber, SubscriberRegistry
from parkki.utils.logger import get_logger

logger = get_logger(__name__)


class BroadcastHub:
    def __init__(self, registry: Optional[SubscriberRegistry] = None,
                 send_timeout: Optional[float] = None):
        self.registry = registry or SubscriberRegistry()
        self.send_timeout = send_timeout if send_timeout is not None else settings.BROADCAST_SEND_TIMEOUT_SECONDS

    # ── Lifecycle hooks for the transport layer ────────────────────────────
    async def on_subscriber_connect(self, handle: Subscriber) -> None:
        await self.registry.register(handle)
        logger.info(f"Subscriber connected. Active subscribers: {self.registry.count()}")

    async def on_subscriber_disconnect(self, handle: Subscriber) -> None:
        if await self.registry.unregister(handle):
            logger.info(f"Subscriber disconnected. Active subscribers: {self.registry.count()}")

    # ── Fan-out ────────────────────────────────────────────────────────────
    async def _send(self, handle: Subscriber, message: str) -> None:
        try:
            await asyncio.wait_for(handle.send_text(message), timeout=self.send_timeout)
        except asyncio.TimeoutError as e:
            raise DeliveryError(handle, f"send timed out after {self.send_timeout}s") from e
        except Exception as e:
            raise DeliveryError(handle, str(e) or type(e).__name__) from e

    async def _deliver(self, handle: Subscriber, message: str) -> bool:
        try:
            await self._send(handle, message)
            return True
        except DeliveryError as e:
            logger.warning(f"Dropping subscriber after failed send: {e.reason}")
            await self.registry.unregister(e.handle)
            await self._close(e.handle)
            return False

    async def _close(self, handle: Subscriber) -> None:
        """Close a dropped handle so the client sees the disconnect and reconnects."""
        try:
            await asyncio.wait_for(handle.close(code=1011), timeout=self.send_timeout)
        except Exception as e:
            logger.debug(f"Closing dropped subscriber failed: {e!r}")

    async def publish(self, notification: Dict[str, Any]) -> int:
        """
        Send one notification to every registered subscriber.
        Serialized once; returns the number of successful deliveries.
        """
        if not self.registry.count():
            logger.debug("No subscribers to broadcast to")
            return 0

        message = json.dumps(notification)
        results = await self.registry.for_each_active(lambda h: self._deliver(h, message))
        delivered = sum(1 for ok in results if ok)
        logger.debug(f"Broadcast {notification.get('event_id')}: {delivered}/{len(results)} subscribers")
        return delivered

    async def publish_all(self, notifications: Iterable[Dict[str, Any]]) -> int:
        """Publish in order, one notification at a time. Returns total deliveries."""
        total = 0
        for notification in notifications:
            total += await self.publish(notification)
        return total

    def subscriber_count(self) -> int:
        return self.registry.count()


# Global singleton instance
broadcast_hub = BroadcastHub()


def get_broadcast_hub() -> BroadcastHub:
    return broadcast_hub
