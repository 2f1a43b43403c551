"""Message collector.

Collects newly created messages, optionally restricted to one channel.

Subscriptions:

- ``messageCreate`` → :meth:`Collector.handle_collect`
- ``messageDelete`` → :meth:`Collector.handle_dispose`
- ``messageDeleteBulk`` → silent eviction of every deleted message that is
  currently collected.  Unlike single deletions this ignores the ``dispose``
  option and emits no ``dispose`` event.
- ``channelDelete`` / ``threadDelete`` → ``stop("channelDelete")`` for the
  scoped channel
- ``guildDelete`` → ``stop("guildDelete")`` for the scoped guild
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from typing import Any, Iterable, Optional

from gateway_collectors.client.events import GatewayEvent
from gateway_collectors.client.protocols import EventSource, Message
from gateway_collectors.collectors.base import (
    SnowflakeId,
    resolve_options,
    same_id,
    stop_when_deleted,
)
from gateway_collectors.core.engine import Collector, CollectorOptions, EndReason
from gateway_collectors.core.subscription import Subscription

logger = logging.getLogger(__name__)


class MessageCollectorOptions(CollectorOptions):
    """Options of a message collector.

    Attributes:
        channel_id: Only collect messages sent in this channel; also ends the
            collector when the channel is deleted.
        guild_id: End the collector when this guild is deleted.
    """

    channel_id: Optional[SnowflakeId] = None
    guild_id: Optional[SnowflakeId] = None


class MessageStrategy:
    """Scopes messages by channel and keys them by message id."""

    kind = "message"

    def __init__(self, channel_id: str | None = None) -> None:
        self.channel_id = channel_id

    def _in_scope(self, message: Message) -> bool:
        if self.channel_id and not same_id(getattr(message, "channel_id", None), self.channel_id):
            return False
        return True

    def collect(self, message: Message) -> tuple[str, Message] | None:
        if not self._in_scope(message):
            return None
        return str(message.id), message

    def dispose(self, message: Message) -> tuple[str, Message] | None:
        if not self._in_scope(message):
            return None
        return str(message.id), message


def _iter_bulk(messages: Mapping[Any, Message] | Iterable[Message]) -> Iterable[Message]:
    if isinstance(messages, Mapping):
        return messages.values()
    return messages


def evict_bulk(collector: Collector, messages: Mapping[Any, Message] | Iterable[Message]) -> int:
    """Remove every collected message of a bulk deletion; return how many."""
    if collector.ended:
        return 0
    evicted = 0
    for message in _iter_bulk(messages):
        if collector.collected.delete(str(message.id)):
            evicted += 1
    if evicted:
        logger.debug(
            "message_collector: bulk delete evicted %d item(s) from %s",
            evicted,
            collector.id,
        )
    return evicted


def create_message_collector(
    source: EventSource,
    options: MessageCollectorOptions | None = None,
    *,
    loop: asyncio.AbstractEventLoop | None = None,
    **kwargs: Any,
) -> Collector:
    """Create a running message collector subscribed to *source*.

    Args:
        source: Event source exposing ``on``/``off``.
        options: Options model; keyword arguments override its fields.
        loop: Event loop for the timers (defaults to the running loop).
        **kwargs: Any :class:`MessageCollectorOptions` field.

    Returns:
        The collector.  It stops by itself on limit, timeout, idle, or
        deletion of its scoped channel or guild.

    Raises:
        pydantic.ValidationError: On invalid options.
        SubscriptionError: If *source* has no ``on``/``off``.
        CollectorConfigurationError: If timers are set outside a running loop.
    """
    opts = resolve_options(MessageCollectorOptions, options, kwargs)
    subscription = Subscription(source)
    collector = Collector(
        MessageStrategy(channel_id=opts.channel_id),
        opts,
        loop=loop,
    )

    on_channel_delete = stop_when_deleted(collector, opts.channel_id, EndReason.CHANNEL_DELETE)

    def on_bulk_delete(messages: Mapping[Any, Message] | Iterable[Message]) -> None:
        evict_bulk(collector, messages)

    subscription.add(GatewayEvent.MESSAGE_CREATE, collector.handle_collect)
    subscription.add(GatewayEvent.MESSAGE_DELETE, collector.handle_dispose)
    subscription.add(GatewayEvent.CHANNEL_DELETE, on_channel_delete)
    subscription.add(GatewayEvent.THREAD_DELETE, on_channel_delete)
    subscription.add(
        GatewayEvent.GUILD_DELETE,
        stop_when_deleted(collector, opts.guild_id, EndReason.GUILD_DELETE),
    )
    subscription.add(GatewayEvent.MESSAGE_DELETE_BULK, on_bulk_delete)
    collector.bind_subscription(subscription)
    return collector
