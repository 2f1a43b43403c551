"""Source-specific collectors.

Each ``create_*_collector`` factory builds a
:class:`~gateway_collectors.core.engine.Collector` with its variant strategy
and subscribes it to an event source.
"""

from __future__ import annotations

from gateway_collectors.collectors.interaction import (
    InteractionCollectorOptions,
    InteractionStrategy,
    create_interaction_collector,
)
from gateway_collectors.collectors.message import (
    MessageCollectorOptions,
    MessageStrategy,
    create_message_collector,
)
from gateway_collectors.collectors.reaction import (
    CollectedReaction,
    ReactionCollectorOptions,
    ReactionStrategy,
    create_reaction_collector,
)

__all__ = [
    "CollectedReaction",
    "InteractionCollectorOptions",
    "InteractionStrategy",
    "MessageCollectorOptions",
    "MessageStrategy",
    "ReactionCollectorOptions",
    "ReactionStrategy",
    "create_interaction_collector",
    "create_message_collector",
    "create_reaction_collector",
]
