"""Timed event collectors for chat gateway clients.

Collect messages, interactions or reactions from a live event source until a
limit, a timeout, an idle gap, deletion of the scoped entity, or an explicit
``stop()`` ends the collection::

    from gateway_collectors import create_message_collector

    collector = create_message_collector(client, channel_id=channel.id, max=5,
                                         idle_timeout=30_000)
    collected, reason = await collector.wait()

Re-exports the public API so that callers need not know which sub-module each
symbol lives in.
"""

from __future__ import annotations

from gateway_collectors.attachments import (
    install_collector_methods,
    uninstall_collector_methods,
)
from gateway_collectors.client import GatewayEvent, LocalEventSource
from gateway_collectors.collectors import (
    CollectedReaction,
    InteractionCollectorOptions,
    MessageCollectorOptions,
    ReactionCollectorOptions,
    create_interaction_collector,
    create_message_collector,
    create_reaction_collector,
)
from gateway_collectors.core import (
    Collection,
    Collector,
    CollectorConfigurationError,
    CollectorOptions,
    EndReason,
    GatewayCollectorsError,
    Subscription,
    SubscriptionError,
)

__all__ = [
    # engine
    "Collection",
    "Collector",
    "CollectorOptions",
    "EndReason",
    "Subscription",
    # collectors
    "CollectedReaction",
    "InteractionCollectorOptions",
    "MessageCollectorOptions",
    "ReactionCollectorOptions",
    "create_interaction_collector",
    "create_message_collector",
    "create_reaction_collector",
    # source
    "GatewayEvent",
    "LocalEventSource",
    # attachment layer
    "install_collector_methods",
    "uninstall_collector_methods",
    # errors
    "CollectorConfigurationError",
    "GatewayCollectorsError",
    "SubscriptionError",
]
