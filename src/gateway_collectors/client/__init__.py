"""Event-source interface consumed by the collectors.

Collectors only need an object with ``on``/``off`` and the event names in
:class:`GatewayEvent`.  :class:`LocalEventSource` is an in-process
implementation for tests and for bridging a real gateway client.
"""

from __future__ import annotations

from gateway_collectors.client.events import (
    CHANNEL_BOUND_INTERACTION_TYPES,
    COLLECTABLE_INTERACTION_TYPES,
    ComponentType,
    GatewayEvent,
    InteractionType,
)
from gateway_collectors.client.local import LocalEventSource
from gateway_collectors.client.protocols import (
    Channel,
    Emoji,
    EventSource,
    Guild,
    Interaction,
    Message,
    Reaction,
    User,
)

__all__ = [
    "CHANNEL_BOUND_INTERACTION_TYPES",
    "COLLECTABLE_INTERACTION_TYPES",
    "Channel",
    "ComponentType",
    "Emoji",
    "EventSource",
    "GatewayEvent",
    "Guild",
    "Interaction",
    "InteractionType",
    "LocalEventSource",
    "Message",
    "Reaction",
    "User",
]
