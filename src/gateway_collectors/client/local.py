"""In-process event source with a single-consumer dispatch point.

:class:`LocalEventSource` satisfies the
:class:`~gateway_collectors.client.protocols.EventSource` protocol and is what
the tests and small bots feed gateway payloads into.  A real gateway client
can be bridged to it by forwarding its dispatch callbacks to
:meth:`LocalEventSource.publish`.

Two ways to deliver events:

- ``await source.dispatch(event, *args)`` runs every handler for *event* to
  completion, in registration order, before returning.
- ``source.publish(event, *args)`` enqueues; a single ``run()`` task drains
  the queue one event at a time, so two events are never processed
  concurrently.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from gateway_collectors.core.emitter import EventEmitter

logger = logging.getLogger(__name__)


class LocalEventSource(EventEmitter):
    """Event source backed by an :class:`EventEmitter` and an asyncio queue.

    Args:
        queue_max: Maximum queued events for :meth:`publish`.  ``0`` means
            unbounded.
    """

    def __init__(self, queue_max: int = 0) -> None:
        super().__init__()
        self._queue: asyncio.Queue[tuple[str, tuple[Any, ...]]] | None = None
        self._queue_max = queue_max

    @property
    def queue(self) -> asyncio.Queue[tuple[str, tuple[Any, ...]]]:
        if self._queue is None:
            self._queue = asyncio.Queue(maxsize=self._queue_max)
        return self._queue

    async def dispatch(self, event: str, *args: Any) -> bool:
        """Deliver *event* to every handler and wait for all of them."""
        return await self.emit_async(event, *args)

    def publish(self, event: str, *args: Any) -> None:
        """Enqueue *event* for the :meth:`run` consumer.

        Raises:
            asyncio.QueueFull: When the queue is bounded and full.
        """
        self.queue.put_nowait((event, args))

    async def run(self) -> None:
        """Consume queued events forever, one at a time, until cancelled."""
        queue = self.queue
        while True:
            try:
                event, args = await queue.get()
            except asyncio.CancelledError:
                logger.info("local_source: consumer cancelled")
                raise
            try:
                await self.dispatch(event, *args)
            finally:
                queue.task_done()

    async def drain(self) -> None:
        """Wait until every published event has been dispatched."""
        await self.queue.join()
