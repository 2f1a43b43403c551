"""Reaction collector.

Collects reactions added to messages, keyed by the emoji's string form, so
each distinct emoji is one entry and re-adding an emoji replaces its entry.

Subscriptions:

- ``messageReactionAdd`` → :meth:`Collector.handle_collect`
- ``messageReactionRemove`` → :meth:`Collector.handle_dispose`
- ``messageDelete`` → ``stop("messageDelete")`` for the scoped message
- ``channelDelete`` / ``threadDelete`` → ``stop("channelDelete")`` for the
  scoped channel
- ``guildDelete`` → ``stop("guildDelete")`` for the scoped guild

Reaction events carry ``(reaction, user, message)``; the collector wraps them
into a :class:`CollectedReaction` before evaluation.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Any, Optional

from gateway_collectors.client.events import GatewayEvent
from gateway_collectors.client.protocols import EventSource, Message, Reaction, User
from gateway_collectors.collectors.base import (
    SnowflakeId,
    resolve_options,
    same_id,
    stop_when_deleted,
)
from gateway_collectors.core.engine import Collector, CollectorOptions, EndReason
from gateway_collectors.core.subscription import Subscription


@dataclass(frozen=True)
class CollectedReaction:
    """One reaction event as seen by filters and listeners."""

    reaction: Reaction
    message: Message
    user: User


class ReactionCollectorOptions(CollectorOptions):
    """Options of a reaction collector.

    Attributes:
        message_id: Only collect reactions on this message; also ends the
            collector when the message is deleted.
        channel_id: Only collect reactions in this channel; also ends the
            collector when the channel is deleted.
        guild_id: Only collect reactions in this guild; also ends the
            collector when the guild is deleted.
    """

    message_id: Optional[SnowflakeId] = None
    channel_id: Optional[SnowflakeId] = None
    guild_id: Optional[SnowflakeId] = None


class ReactionStrategy:
    """Scopes reactions by message, channel and guild; keys by emoji."""

    kind = "reaction"

    def __init__(
        self,
        message_id: str | None = None,
        channel_id: str | None = None,
        guild_id: str | None = None,
    ) -> None:
        self.message_id = message_id
        self.channel_id = channel_id
        self.guild_id = guild_id

    def _in_scope(self, collected: CollectedReaction) -> bool:
        message = collected.message
        if self.message_id and not same_id(getattr(message, "id", None), self.message_id):
            return False
        if self.channel_id and not same_id(getattr(message, "channel_id", None), self.channel_id):
            return False
        if self.guild_id and not same_id(getattr(message, "guild_id", None), self.guild_id):
            return False
        return True

    def collect(self, collected: CollectedReaction) -> tuple[str, CollectedReaction] | None:
        if not self._in_scope(collected):
            return None
        return str(collected.reaction.emoji), collected

    def dispose(self, collected: CollectedReaction) -> tuple[str, CollectedReaction] | None:
        if not self._in_scope(collected):
            return None
        return str(collected.reaction.emoji), collected


def create_reaction_collector(
    source: EventSource,
    options: ReactionCollectorOptions | None = None,
    *,
    loop: asyncio.AbstractEventLoop | None = None,
    **kwargs: Any,
) -> Collector:
    """Create a running reaction collector subscribed to *source*.

    Args:
        source: Event source exposing ``on``/``off``.
        options: Options model; keyword arguments override its fields.
        loop: Event loop for the timers (defaults to the running loop).
        **kwargs: Any :class:`ReactionCollectorOptions` field.

    Raises:
        pydantic.ValidationError: On invalid options.
        SubscriptionError: If *source* has no ``on``/``off``.
        CollectorConfigurationError: If timers are set outside a running loop.
    """
    opts = resolve_options(ReactionCollectorOptions, options, kwargs)
    subscription = Subscription(source)
    collector = Collector(
        ReactionStrategy(
            message_id=opts.message_id,
            channel_id=opts.channel_id,
            guild_id=opts.guild_id,
        ),
        opts,
        loop=loop,
    )

    async def on_reaction_add(reaction: Reaction, user: User, message: Message) -> None:
        await collector.handle_collect(
            CollectedReaction(reaction=reaction, message=message, user=user)
        )

    async def on_reaction_remove(reaction: Reaction, user: User, message: Message) -> None:
        await collector.handle_dispose(
            CollectedReaction(reaction=reaction, message=message, user=user)
        )

    on_channel_delete = stop_when_deleted(collector, opts.channel_id, EndReason.CHANNEL_DELETE)

    subscription.add(GatewayEvent.MESSAGE_REACTION_ADD, on_reaction_add)
    subscription.add(GatewayEvent.MESSAGE_REACTION_REMOVE, on_reaction_remove)
    subscription.add(
        GatewayEvent.MESSAGE_DELETE,
        stop_when_deleted(collector, opts.message_id, EndReason.MESSAGE_DELETE),
    )
    subscription.add(GatewayEvent.CHANNEL_DELETE, on_channel_delete)
    subscription.add(GatewayEvent.THREAD_DELETE, on_channel_delete)
    subscription.add(
        GatewayEvent.GUILD_DELETE,
        stop_when_deleted(collector, opts.guild_id, EndReason.GUILD_DELETE),
    )
    collector.bind_subscription(subscription)
    return collector
