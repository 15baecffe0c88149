"""
ASGI lifespan handling.

Servers that speak the lifespan protocol (uvicorn, hypercorn) get an orderly
shutdown: pending session cleanup timers are cancelled and the in-memory
registry is dropped before the process exits.

Daphne does not send lifespan events, so under `daphne` this app is never
called and `hub.shutdown()` does not run. Nothing is lost: sessions are never
persisted, and the cleanup timers are tasks on the server's event loop that
die with it. Run under uvicorn or hypercorn to get the explicit shutdown.
"""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)


class LifespanApp:
    def __init__(self, hub):
        self.hub = hub

    async def __call__(self, scope, receive, send):
        if scope.get("type") != "lifespan":
            raise ValueError("LifespanApp only supports the lifespan protocol")

        while True:
            message = await receive()
            if message["type"] == "lifespan.startup":
                logger.info("Collaboration server starting")
                await send({"type": "lifespan.startup.complete"})
            elif message["type"] == "lifespan.shutdown":
                await self.hub.shutdown()
                logger.info("Collaboration server stopped")
                await send({"type": "lifespan.shutdown.complete"})
                return
