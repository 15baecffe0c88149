"""
WebSocket consumer for collaborative coding sessions.

Key behavior:
- URL: /ws/collab/
- Frames are JSON text: {"type": "<event>", "data": <payload>}
- One socket may join any number of sessions; all events go through the EventRouter.
- The Channels channel name doubles as the connection id.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, Optional

from channels.generic.websocket import AsyncWebsocketConsumer

from codeinterview.applib.models.api import ErrorEvent

from .hub import collaboration_hub

logger = logging.getLogger(__name__)


class CollabConsumer(AsyncWebsocketConsumer):
    hub = collaboration_hub

    async def connect(self) -> None:
        await self.accept()
        logger.info("User connected: %s", self.channel_name)

    async def disconnect(self, close_code: int) -> None:
        # Runs once per socket; the channel name is never handed out again.
        left = await self.hub.router.disconnect(self.channel_name)
        logger.info("User disconnected: %s (left %d sessions)", self.channel_name, len(left))

    async def receive(self, text_data: Optional[str] = None, bytes_data: Optional[bytes] = None) -> None:
        if not text_data:
            return

        try:
            msg = json.loads(text_data)
        except json.JSONDecodeError:
            await self.send_json(ErrorEvent(message="Invalid JSON").to_frame())
            return
        if not isinstance(msg, dict):
            await self.send_json(ErrorEvent(message="Invalid message").to_frame())
            return

        # A bad event only affects its own session; keep the socket open.
        try:
            await self.hub.router.dispatch(self.channel_name, msg.get("type"), msg.get("data"))
        except Exception:
            logger.exception("Failed to handle %r from %s", msg.get("type"), self.channel_name)

    async def collab_event(self, event: Dict[str, Any]) -> None:
        """
        Handler for group broadcasts and unicasts from the channel layer.
        """
        if event.get("exclude") == self.channel_name:
            return
        await self.send_json(event["frame"])

    async def send_json(self, payload: Dict[str, Any]) -> None:
        await self.send(text_data=json.dumps(payload, separators=(",", ":"), ensure_ascii=False))
