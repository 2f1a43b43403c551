"""Interaction collector.

Collects incoming interactions (commands, autocompletes, components, modal
submits), optionally restricted by interaction type, component type and
channel.

Subscriptions:

- ``interactionCreate`` → :meth:`Collector.handle_collect`
- ``channelDelete`` / ``threadDelete`` → ``stop("channelDelete")`` for the
  scoped channel
- ``guildDelete`` → ``stop("guildDelete")`` for the scoped guild

No removal event exists for interactions, so the ``dispose`` option has no
effect here.
"""

from __future__ import annotations

import asyncio
from typing import Any, Optional

from gateway_collectors.client.events import (
    CHANNEL_BOUND_INTERACTION_TYPES,
    COLLECTABLE_INTERACTION_TYPES,
    ComponentType,
    GatewayEvent,
    InteractionType,
)
from gateway_collectors.client.protocols import EventSource, Interaction
from gateway_collectors.collectors.base import (
    SnowflakeId,
    resolve_options,
    same_id,
    stop_when_deleted,
)
from gateway_collectors.core.engine import Collector, CollectorOptions, EndReason
from gateway_collectors.core.subscription import Subscription


class InteractionCollectorOptions(CollectorOptions):
    """Options of an interaction collector.

    Attributes:
        interaction_type: Only collect interactions of this kind.  A kind
            other than command, autocomplete, component or modal submit
            (i.e. ``PING``) matches nothing.
        component_type: Only collect component interactions of this
            subtype.  Other interaction kinds are not affected.
        channel_id: Only collect command, component and modal-submit
            interactions from this channel; also ends the collector when the
            channel is deleted.  Autocomplete interactions are not scoped.
        guild_id: End the collector when this guild is deleted.
    """

    interaction_type: Optional[InteractionType] = None
    component_type: Optional[ComponentType] = None
    channel_id: Optional[SnowflakeId] = None
    guild_id: Optional[SnowflakeId] = None


def _interaction_type(interaction: Interaction) -> InteractionType | None:
    try:
        return InteractionType(getattr(interaction, "type", None))
    except (TypeError, ValueError):
        return None


class InteractionStrategy:
    """Filters interactions by kind, component subtype and channel."""

    kind = "interaction"

    def __init__(
        self,
        interaction_type: InteractionType | None = None,
        component_type: ComponentType | None = None,
        channel_id: str | None = None,
    ) -> None:
        self.interaction_type = interaction_type
        self.component_type = component_type
        self.channel_id = channel_id

    def collect(self, interaction: Interaction) -> tuple[str, Interaction] | None:
        itype = _interaction_type(interaction)

        if self.interaction_type is not None:
            if self.interaction_type not in COLLECTABLE_INTERACTION_TYPES:
                return None
            if itype != self.interaction_type:
                return None

        if (
            self.channel_id
            and itype in CHANNEL_BOUND_INTERACTION_TYPES
            and not same_id(getattr(interaction, "channel_id", None), self.channel_id)
        ):
            return None

        if (
            self.component_type is not None
            and itype == InteractionType.MESSAGE_COMPONENT
            and getattr(interaction, "component_type", None) != self.component_type
        ):
            return None

        return str(interaction.id), interaction

    def dispose(self, interaction: Interaction) -> tuple[str, Interaction]:
        return str(interaction.id), interaction


def create_interaction_collector(
    source: EventSource,
    options: InteractionCollectorOptions | None = None,
    *,
    loop: asyncio.AbstractEventLoop | None = None,
    **kwargs: Any,
) -> Collector:
    """Create a running interaction collector subscribed to *source*.

    Args:
        source: Event source exposing ``on``/``off``.
        options: Options model; keyword arguments override its fields.
        loop: Event loop for the timers (defaults to the running loop).
        **kwargs: Any :class:`InteractionCollectorOptions` field.

    Raises:
        pydantic.ValidationError: On invalid options.
        SubscriptionError: If *source* has no ``on``/``off``.
        CollectorConfigurationError: If timers are set outside a running loop.
    """
    opts = resolve_options(InteractionCollectorOptions, options, kwargs)
    subscription = Subscription(source)
    collector = Collector(
        InteractionStrategy(
            interaction_type=opts.interaction_type,
            component_type=opts.component_type,
            channel_id=opts.channel_id,
        ),
        opts,
        loop=loop,
    )

    on_channel_delete = stop_when_deleted(collector, opts.channel_id, EndReason.CHANNEL_DELETE)

    subscription.add(GatewayEvent.INTERACTION_CREATE, collector.handle_collect)
    subscription.add(GatewayEvent.CHANNEL_DELETE, on_channel_delete)
    subscription.add(GatewayEvent.THREAD_DELETE, on_channel_delete)
    subscription.add(
        GatewayEvent.GUILD_DELETE,
        stop_when_deleted(collector, opts.guild_id, EndReason.GUILD_DELETE),
    )
    collector.bind_subscription(subscription)
    return collector
