import asyncio

import pytest

from codeinterview.lifespan import LifespanApp
from realtime.hub import CollaborationHub

from conftest import SESSION_ID


async def test_shutdown_cancels_timers_and_clears_registry(groups):
    hub = CollaborationHub(groups=groups, grace_seconds=3600)
    hub.registry.create(SESSION_ID)
    hub.cleanup.schedule(SESSION_ID)

    inbound = asyncio.Queue()
    for message_type in ("lifespan.startup", "lifespan.shutdown"):
        inbound.put_nowait({"type": message_type})
    sent = []

    async def send(message):
        sent.append(message["type"])

    await LifespanApp(hub)({"type": "lifespan"}, inbound.get, send)

    assert sent == ["lifespan.startup.complete", "lifespan.shutdown.complete"]
    assert not hub.cleanup.pending(SESSION_ID)
    assert len(hub.registry) == 0


async def test_rejects_other_scopes(hub):
    with pytest.raises(ValueError):
        await LifespanApp(hub)({"type": "http"}, None, None)
