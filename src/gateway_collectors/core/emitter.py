"""Minimal in-process listener registry.

:class:`EventEmitter` provides ``on``/``once``/``off``/``emit`` keyed by event
name.  Listeners may be plain callables or coroutine functions:

- ``emit()`` is synchronous.  Coroutines returned by listeners are scheduled
  on the running loop and tracked until they finish.  Outside a running loop
  they are run to completion before ``emit()`` returns.
- ``emit_async()`` awaits each listener in registration order before calling
  the next one.

A listener that raises is logged with its traceback and skipped; the
remaining listeners still run.  Emission never fails because of a listener.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from typing import Any, Callable

logger = logging.getLogger(__name__)

Listener = Callable[..., Any]


class _OnceWrapper:
    """Listener wrapper that removes itself before the first call."""

    def __init__(self, emitter: EventEmitter, event: str, listener: Listener) -> None:
        self.emitter = emitter
        self.event = event
        self.listener = listener

    def __call__(self, *args: Any) -> Any:
        self.emitter.off(self.event, self)
        return self.listener(*args)


class EventEmitter:
    """Observer registry keyed by event name."""

    def __init__(self) -> None:
        self._listeners: dict[str, list[Listener]] = {}
        self._pending: set[asyncio.Future[Any]] = set()

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def on(self, event: str, listener: Listener) -> EventEmitter:
        self._listeners.setdefault(event, []).append(listener)
        return self

    def once(self, event: str, listener: Listener) -> EventEmitter:
        self._listeners.setdefault(event, []).append(_OnceWrapper(self, event, listener))
        return self

    def off(self, event: str, listener: Listener) -> EventEmitter:
        """Remove the most recently added registration of *listener*.

        Matches both direct registrations and ``once`` wrappers around the
        same callable.  Unknown listeners are ignored.
        """
        listeners = self._listeners.get(event)
        if not listeners:
            return self
        for index in range(len(listeners) - 1, -1, -1):
            registered = listeners[index]
            if registered == listener or (
                isinstance(registered, _OnceWrapper) and registered.listener == listener
            ):
                del listeners[index]
                break
        if not listeners:
            del self._listeners[event]
        return self

    def remove_all_listeners(self, event: str | None = None) -> EventEmitter:
        if event is None:
            self._listeners.clear()
        else:
            self._listeners.pop(event, None)
        return self

    def listener_count(self, event: str) -> int:
        return len(self._listeners.get(event, ()))

    def listeners(self, event: str) -> list[Listener]:
        return list(self._listeners.get(event, ()))

    # ------------------------------------------------------------------
    # Emission
    # ------------------------------------------------------------------

    def emit(self, event: str, *args: Any) -> bool:
        """Call every listener for *event*; return whether there were any."""
        listeners = list(self._listeners.get(event, ()))
        for listener in listeners:
            try:
                result = listener(*args)
                if inspect.isawaitable(result):
                    self._track(event, result)
            except Exception:
                logger.exception("emitter: listener for %r raised", event)
        return bool(listeners)

    async def emit_async(self, event: str, *args: Any) -> bool:
        """Call and await every listener for *event* one after another."""
        listeners = list(self._listeners.get(event, ()))
        for listener in listeners:
            try:
                result = listener(*args)
                if inspect.isawaitable(result):
                    await result
            except Exception:
                logger.exception("emitter: listener for %r raised", event)
        return bool(listeners)

    def _track(self, event: str, awaitable: Any) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # No loop to schedule on: run the coroutine to completion here.
            if inspect.iscoroutine(awaitable):
                asyncio.run(awaitable)
            else:
                logger.warning(
                    "emitter: dropped awaitable from listener for %r; no running loop",
                    event,
                )
            return

        future = asyncio.ensure_future(awaitable, loop=loop)
        self._pending.add(future)

        def _done(fut: asyncio.Future[Any]) -> None:
            self._pending.discard(fut)
            if not fut.cancelled() and fut.exception() is not None:
                logger.error(
                    "emitter: async listener for %r raised",
                    event,
                    exc_info=fut.exception(),
                )

        future.add_done_callback(_done)
