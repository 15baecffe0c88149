"""
Shared test fixtures and configuration for entire test suite.

Django is configured here, before any test module imports Channels or the app.
The in-memory channel layer is forced so tests never need Redis.
"""

import os
from collections import defaultdict
from typing import Dict, List, Optional, Set

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "codeinterview.settings")
os.environ.setdefault("DJANGO_DEBUG", "1")
os.environ["REDIS_URL"] = ""

import django  # noqa: E402

django.setup()

from django.test.utils import setup_test_environment  # noqa: E402

setup_test_environment()

import pytest  # noqa: E402

from codeinterview.applib.models.api import OutboundEvent  # noqa: E402
from realtime.hub import CollaborationHub  # noqa: E402

SESSION_ID = "abc123xyz"
STARTER_CODE = "// Write your code here\n"


class RecordingGroups:
    """In-memory BroadcastGroups that records every frame each connection would receive."""

    def __init__(self) -> None:
        self.members: Dict[str, Set[str]] = defaultdict(set)
        self.inbox: Dict[str, List[dict]] = defaultdict(list)

    async def subscribe(self, connection_id: str, session_id: str) -> None:
        self.members[session_id].add(connection_id)

    async def unsubscribe(self, connection_id: str, session_id: str) -> None:
        self.members[session_id].discard(connection_id)

    async def publish(self, session_id: str, event: OutboundEvent, exclude: Optional[str] = None) -> None:
        for connection_id in sorted(self.members[session_id]):
            if connection_id != exclude:
                self.inbox[connection_id].append(event.to_frame())

    async def send(self, connection_id: str, event: OutboundEvent) -> None:
        self.inbox[connection_id].append(event.to_frame())

    def frames(self, connection_id: str, event_type: Optional[str] = None) -> List[dict]:
        frames = self.inbox[connection_id]
        if event_type is None:
            return list(frames)
        return [f for f in frames if f["type"] == event_type]

    def drain(self) -> None:
        self.inbox.clear()


@pytest.fixture
def groups() -> RecordingGroups:
    return RecordingGroups()


@pytest.fixture
async def hub(groups: RecordingGroups):
    """Collaboration hub wired to recording groups with a short grace interval."""
    hub = CollaborationHub(groups=groups, grace_seconds=0.05)
    yield hub
    await hub.shutdown()


@pytest.fixture
def session(hub: CollaborationHub):
    return hub.registry.create(SESSION_ID, code=STARTER_CODE, language="javascript")
