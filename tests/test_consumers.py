"""
End-to-end tests for CollabConsumer over the in-memory channel layer.
"""

import asyncio

import pytest
from channels.layers import get_channel_layer
from channels.routing import URLRouter
from channels.testing import WebsocketCommunicator

from realtime.consumers import CollabConsumer
from realtime.groups import ChannelLayerGroups
from realtime.hub import CollaborationHub
from realtime.routing import websocket_urlpatterns

from conftest import SESSION_ID, STARTER_CODE

application = URLRouter(websocket_urlpatterns)


@pytest.fixture
async def live_hub(monkeypatch):
    channel_layer = get_channel_layer()
    hub = CollaborationHub(groups=ChannelLayerGroups(channel_layer), grace_seconds=0.1)
    monkeypatch.setattr(CollabConsumer, "hub", hub)
    hub.registry.create(SESSION_ID, code=STARTER_CODE, language="javascript")
    yield hub
    await hub.shutdown()
    await channel_layer.flush()


async def connect():
    communicator = WebsocketCommunicator(application, "/ws/collab/")
    connected, _ = await communicator.connect()
    assert connected
    return communicator


async def send(communicator, event_type, data):
    await communicator.send_json_to({"type": event_type, "data": data})


async def test_join_unknown_session_gets_error(live_hub):
    client = await connect()

    await send(client, "join-session", "zzzzzzzzz")

    assert await client.receive_json_from(timeout=1) == {"type": "error", "data": "Session not found"}
    assert await client.receive_nothing(timeout=0.1)
    await client.disconnect()


async def test_invalid_json_gets_error(live_hub):
    client = await connect()

    await client.send_to(text_data="{not json")

    assert await client.receive_json_from(timeout=1) == {"type": "error", "data": "Invalid JSON"}
    await client.disconnect()


async def test_scenario(live_hub):
    a = await connect()
    await send(a, "join-session", SESSION_ID)
    assert await a.receive_json_from(timeout=1) == {
        "type": "code-sync",
        "data": {"code": STARTER_CODE, "language": "javascript"},
    }
    assert await a.receive_json_from(timeout=1) == {"type": "user-joined", "data": {"userCount": 1}}

    b = await connect()
    await send(b, "join-session", SESSION_ID)
    assert await b.receive_json_from(timeout=1) == {
        "type": "code-sync",
        "data": {"code": STARTER_CODE, "language": "javascript"},
    }
    assert await b.receive_json_from(timeout=1) == {"type": "user-joined", "data": {"userCount": 2}}
    assert await a.receive_json_from(timeout=1) == {"type": "user-joined", "data": {"userCount": 2}}

    await send(a, "code-change", {"sessionId": SESSION_ID, "code": "print(1)"})
    assert await b.receive_json_from(timeout=1) == {"type": "code-update", "data": {"code": "print(1)"}}
    assert await a.receive_nothing(timeout=0.1)

    await send(b, "language-change", {"sessionId": SESSION_ID, "language": "python"})
    assert await a.receive_json_from(timeout=1) == {"type": "language-update", "data": {"language": "python"}}
    assert await b.receive_json_from(timeout=1) == {"type": "language-update", "data": {"language": "python"}}

    await b.disconnect()
    assert await a.receive_json_from(timeout=1) == {"type": "user-left", "data": {"userCount": 1}}

    session = live_hub.registry.get(SESSION_ID)
    assert session.code == "print(1)"
    assert session.language == "python"
    assert session.user_count == 1
    await a.disconnect()


async def test_run_code_reaches_sender(live_hub):
    a = await connect()
    await send(a, "join-session", SESSION_ID)
    await a.receive_json_from(timeout=1)
    await a.receive_json_from(timeout=1)

    await send(a, "run-code", {"sessionId": SESSION_ID})

    frame = await a.receive_json_from(timeout=1)
    assert frame["type"] == "code-execution"
    await a.disconnect()


async def test_mutations_on_unknown_session_are_silent(live_hub):
    a = await connect()

    await send(a, "code-change", {"sessionId": "zzzzzzzzz", "code": "x"})
    await send(a, "language-change", {"sessionId": "zzzzzzzzz", "language": "go"})
    await send(a, "run-code", {"sessionId": "zzzzzzzzz"})
    await send(a, "no-such-event", None)

    assert await a.receive_nothing(timeout=0.2)
    await a.disconnect()


async def test_empty_session_is_cleaned_up_after_last_disconnect(live_hub):
    a = await connect()
    await send(a, "join-session", SESSION_ID)
    await a.receive_json_from(timeout=1)
    await a.receive_json_from(timeout=1)

    await a.disconnect()
    assert live_hub.registry.get(SESSION_ID).user_count == 0
    assert live_hub.cleanup.pending(SESSION_ID)

    await asyncio.sleep(0.3)
    assert live_hub.registry.find(SESSION_ID) is None
