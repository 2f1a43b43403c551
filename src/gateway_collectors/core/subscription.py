"""Atomic handler subscriptions on an external event source.

A :class:`Subscription` remembers every ``(event, handler)`` pair it attached
to a source so the whole set can be detached in one call, without relying on
callers to keep the exact bound-method objects around::

    sub = Subscription(client)
    sub.add(GatewayEvent.MESSAGE_CREATE, collector.handle_collect)
    sub.add(GatewayEvent.CHANNEL_DELETE, on_channel_delete)
    ...
    sub.close()          # detaches both; len(sub) == 0 afterwards

The subscription never owns the source: closing it only removes the handlers
it added.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Callable

from gateway_collectors.core.exceptions import SubscriptionError

if TYPE_CHECKING:
    from gateway_collectors.client.protocols import EventSource

logger = logging.getLogger(__name__)


class Subscription:
    """List of handlers attached to one event source.

    Args:
        source: Any object exposing ``on(event, handler)`` and
            ``off(event, handler)``.

    Raises:
        SubscriptionError: If *source* lacks callable ``on``/``off``.
    """

    def __init__(self, source: EventSource) -> None:
        if not callable(getattr(source, "on", None)) or not callable(
            getattr(source, "off", None)
        ):
            raise SubscriptionError(
                f"{type(source).__name__} does not expose on()/off(); "
                "cannot subscribe collector handlers to it"
            )
        self._source = source
        self._entries: list[tuple[str, Callable[..., Any]]] = []
        self._closed = False

    @property
    def source(self) -> EventSource:
        return self._source

    @property
    def closed(self) -> bool:
        return self._closed

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, event: object) -> bool:
        return any(name == event for name, _ in self._entries)

    def add(self, event: str, handler: Callable[..., Any]) -> Subscription:
        """Attach *handler* to *event* on the source and remember the pair."""
        if self._closed:
            raise SubscriptionError(
                f"cannot subscribe to {event!r}: subscription already closed",
                event=str(event),
            )
        self._source.on(event, handler)
        self._entries.append((event, handler))
        return self

    def close(self) -> None:
        """Detach every remembered handler.  Idempotent."""
        if self._closed:
            return
        self._closed = True
        entries, self._entries = self._entries, []
        for event, handler in entries:
            self._source.off(event, handler)
        logger.debug("subscription: detached %d handler(s)", len(entries))
