"""
Broadcast groups ("rooms") for collaborative sessions.

The event router and presence manager only talk to the `BroadcastGroups`
interface. The production implementation sits on a Channels channel layer;
tests use an in-memory recorder.
"""

from __future__ import annotations

import re
from typing import Any, Optional, Protocol

from channels.layers import get_channel_layer

from codeinterview.applib.models.api import OutboundEvent

# Consumer handler that receives group and unicast messages (dots map to underscores)
EVENT_MESSAGE_TYPE = "collab.event"


def group_name(session_id: str) -> str:
    """
    Channels group name must be ASCII and relatively short.
    We sanitize session_id so any client-provided value is safe.
    """

    safe = re.sub(r"[^a-zA-Z0-9_.-]", "_", session_id)[:80]
    return f"session.{safe}"


class BroadcastGroups(Protocol):
    async def subscribe(self, connection_id: str, session_id: str) -> None: ...

    async def unsubscribe(self, connection_id: str, session_id: str) -> None: ...

    async def publish(self, session_id: str, event: OutboundEvent, exclude: Optional[str] = None) -> None: ...

    async def send(self, connection_id: str, event: OutboundEvent) -> None: ...


class ChannelLayerGroups:
    """`BroadcastGroups` on top of a channel layer; connection ids are channel names."""

    def __init__(self, channel_layer: Any = None):
        self._channel_layer = channel_layer

    @property
    def channel_layer(self) -> Any:
        # Resolved lazily so settings are loaded before the layer is built.
        if self._channel_layer is None:
            self._channel_layer = get_channel_layer()
        return self._channel_layer

    async def subscribe(self, connection_id: str, session_id: str) -> None:
        await self.channel_layer.group_add(group_name(session_id), connection_id)

    async def unsubscribe(self, connection_id: str, session_id: str) -> None:
        await self.channel_layer.group_discard(group_name(session_id), connection_id)

    async def publish(self, session_id: str, event: OutboundEvent, exclude: Optional[str] = None) -> None:
        # Exclusion is applied by the receiving consumer, which knows its own channel name.
        await self.channel_layer.group_send(
            group_name(session_id),
            {"type": EVENT_MESSAGE_TYPE, "frame": event.to_frame(), "exclude": exclude},
        )

    async def send(self, connection_id: str, event: OutboundEvent) -> None:
        await self.channel_layer.send(
            connection_id,
            {"type": EVENT_MESSAGE_TYPE, "frame": event.to_frame(), "exclude": None},
        )
