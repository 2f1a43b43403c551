"""Timed event-collection engine.

A :class:`Collector` accumulates a filtered, keyed subset of source events
until one of its termination triggers fires, then emits ``end`` once with the
final :class:`~gateway_collectors.core.accumulator.Collection` and an
:class:`EndReason`.

Variant behaviour is injected rather than inherited: a
:class:`CollectStrategy` decides whether a raw source event qualifies and
under which key it is stored, and a
:class:`~gateway_collectors.core.subscription.Subscription` holds the
handlers wired to the event source.  The variant factories in
:mod:`gateway_collectors.collectors` build all three pieces together.

Lifecycle::

    running --(stop: limit | timeout | idle | variant reason | caller)--> ended

Every trigger goes through :meth:`Collector.stop`, whose first call wins;
later calls are no-ops.  Events that are mid-flight when the collector ends
(e.g. awaiting an async filter) finish evaluating, but their ``collect`` or
``dispose`` emission is suppressed.

Listener events:

- ``collect(item)``: after an accepted item is stored.
- ``dispose(item)``: after a removal event evicted an item (only when the
  ``dispose`` option is enabled).
- ``end(collected, reason)``: exactly once.
"""

from __future__ import annotations

import asyncio
import inspect
import uuid
from enum import Enum
from typing import Any, Awaitable, Callable, Optional, Protocol, Tuple, Union

import structlog
from pydantic import BaseModel, ConfigDict, Field, field_validator

from gateway_collectors.config.settings import get_settings
from gateway_collectors.core.accumulator import Collection
from gateway_collectors.core.emitter import EventEmitter
from gateway_collectors.core.exceptions import CollectorConfigurationError
from gateway_collectors.core.logging_config import collector_id_var
from gateway_collectors.core.subscription import Subscription

logger = structlog.get_logger(__name__)


# ---------------------------------------------------------------------------
# End reasons
# ---------------------------------------------------------------------------


class EndReason(str, Enum):
    """Why a collector ended.

    Values are the strings delivered to ``end`` listeners.  A caller may also
    stop a collector with any other string; it is kept verbatim.

    Attributes:
        LIMIT: The accumulator reached ``max`` items.
        TIMEOUT: The absolute timeout elapsed.
        IDLE: No item was accepted within ``idle_timeout``.
        CHANNEL_DELETE: The scoped channel or thread was deleted.
        GUILD_DELETE: The scoped guild was deleted.
        MESSAGE_DELETE: The scoped message was deleted (reaction collectors).
        USER: ``stop()`` was called without a reason.
    """

    LIMIT = "limit"
    TIMEOUT = "timeout"
    IDLE = "idle"
    CHANNEL_DELETE = "channelDelete"
    GUILD_DELETE = "guildDelete"
    MESSAGE_DELETE = "messageDelete"
    USER = "user"

    def __str__(self) -> str:
        return self.value


def normalize_reason(reason: Union[EndReason, str]) -> Union[EndReason, str]:
    """Map known reason strings to their :class:`EndReason` member."""
    if isinstance(reason, EndReason):
        return reason
    try:
        return EndReason(reason)
    except ValueError:
        return reason


# ---------------------------------------------------------------------------
# Options
# ---------------------------------------------------------------------------


FilterFn = Callable[[Any], Union[bool, Awaitable[bool]]]
"""User predicate over a candidate item.  May be a coroutine function."""


class CollectorOptions(BaseModel):
    """Options shared by every collector.

    Attributes:
        max: Stop with ``"limit"`` once this many items are collected.
            ``None`` or ``0`` means unbounded.
        filter: Predicate deciding whether an item is collected.  ``None``
            accepts everything.  A filter that raises rejects the item.
        dispose: Whether removal events evict already-collected items.
        timeout: Absolute lifetime in milliseconds.  ``None`` or ``0`` means
            no timeout.
        idle_timeout: Maximum gap in milliseconds between accepted items.
            ``None`` or ``0`` means no idle timeout.
    """

    model_config = ConfigDict(extra="forbid", arbitrary_types_allowed=True)

    max: Optional[int] = Field(default=None, ge=0)
    filter: Optional[FilterFn] = None
    dispose: bool = False
    timeout: Optional[float] = Field(default=None, ge=0)
    idle_timeout: Optional[float] = Field(default=None, ge=0)

    @field_validator("max", "timeout", "idle_timeout")
    @classmethod
    def zero_means_unset(cls, v: Optional[float]) -> Optional[float]:
        return None if v == 0 else v


# ---------------------------------------------------------------------------
# Strategy interface
# ---------------------------------------------------------------------------


Collected = Optional[Tuple[str, Any]]


class CollectStrategy(Protocol):
    """Variant-specific decisions the engine delegates.

    Both hooks may be plain functions or coroutine functions.  Returning
    ``None`` means "not for this collector": the event is ignored without
    touching timers or listeners.
    """

    kind: str

    def collect(self, candidate: Any) -> Union[Collected, Awaitable[Collected]]:
        """Return ``(key, item)`` for a qualifying creation event."""
        ...

    def dispose(self, candidate: Any) -> Union[Collected, Awaitable[Collected]]:
        """Return ``(key, item)`` naming the entry a removal event evicts."""
        ...


async def _resolve(result: Any) -> Any:
    if inspect.isawaitable(result):
        return await result
    return result


# ---------------------------------------------------------------------------
# Engine
# ---------------------------------------------------------------------------


class Collector(EventEmitter):
    """The collection state machine.

    Args:
        strategy: Scoping and keying rules of the variant.
        options: Collector options.  Defaults to :class:`CollectorOptions()`.
        loop: Event loop for the timers.  Defaults to the running loop; only
            needed when ``timeout`` or ``idle_timeout`` is set.

    Raises:
        CollectorConfigurationError: If a timer is configured and there is no
            running loop and no *loop* was given.
    """

    def __init__(
        self,
        strategy: CollectStrategy,
        options: CollectorOptions | None = None,
        *,
        loop: asyncio.AbstractEventLoop | None = None,
    ) -> None:
        super().__init__()
        self._strategy = strategy
        self._options = options if options is not None else CollectorOptions()
        self._collected: Collection[Any] = Collection()
        self._ended = False
        self._end_reason: Union[EndReason, str, None] = None
        self._subscription: Subscription | None = None
        self._waiters: list[asyncio.Future[Any]] = []
        self._log_items = get_settings().log_collected_items

        self.id = uuid.uuid4().hex[:12]
        self.kind: str = getattr(strategy, "kind", type(strategy).__name__)
        self._log = logger.bind(collector_id=self.id, kind=self.kind)

        self._loop = loop
        self._timeout_handle: asyncio.TimerHandle | None = None
        self._idle_handle: asyncio.TimerHandle | None = None

        if self._options.timeout is not None or self._options.idle_timeout is not None:
            self._loop = self._resolve_loop(loop)
        if self._options.timeout is not None:
            self._timeout_handle = self._loop.call_later(
                self._options.timeout / 1000, self._handle_timeout
            )
        if self._options.idle_timeout is not None:
            self._arm_idle()

        self._log.debug(
            "collector_started",
            max=self._options.max,
            timeout_ms=self._options.timeout,
            idle_timeout_ms=self._options.idle_timeout,
            dispose=self._options.dispose,
        )

    # ------------------------------------------------------------------
    # Read-only state
    # ------------------------------------------------------------------

    @property
    def ended(self) -> bool:
        return self._ended

    @property
    def end_reason(self) -> Union[EndReason, str, None]:
        return self._end_reason

    @property
    def collected(self) -> Collection[Any]:
        return self._collected

    @property
    def options(self) -> CollectorOptions:
        return self._options

    @property
    def strategy(self) -> CollectStrategy:
        return self._strategy

    @property
    def subscription(self) -> Subscription | None:
        return self._subscription

    def __repr__(self) -> str:
        state = f"ended:{self._end_reason}" if self._ended else "running"
        return f"<Collector kind={self.kind} id={self.id} {state} size={self._collected.size}>"

    # ------------------------------------------------------------------
    # Wiring
    # ------------------------------------------------------------------

    def bind_subscription(self, subscription: Subscription) -> None:
        """Attach the source subscription that :meth:`stop` tears down.

        A previously bound, different subscription is closed.  Binding onto
        an ended collector closes *subscription* right away.
        """
        if self._subscription is not None and self._subscription is not subscription:
            self._subscription.close()
        self._subscription = subscription
        if self._ended:
            subscription.close()

    # ------------------------------------------------------------------
    # Source handlers
    # ------------------------------------------------------------------

    async def handle_collect(self, candidate: Any) -> None:
        """Evaluate one creation event from the source."""
        if self._ended:
            return

        token = collector_id_var.set(self.id)
        try:
            collected = await self._run_hook("collect", candidate)
            if collected is None:
                return
            key, item = collected
            if not await self._passes_filter(item):
                return
        finally:
            collector_id_var.reset(token)

        if self._ended:
            self._log.debug("collect_suppressed", key=str(key))
            return

        self._collected.set(str(key), item)
        if self._log_items:
            self._log.debug("item_collected", key=str(key), size=self._collected.size)
        self.emit("collect", item)
        self._rearm_idle()

        limit = self._options.max
        if limit is not None and self._collected.size >= limit:
            self.stop(EndReason.LIMIT)

    async def handle_dispose(self, candidate: Any) -> None:
        """Evaluate one removal event from the source."""
        if not self._options.dispose or self._ended:
            return

        token = collector_id_var.set(self.id)
        try:
            disposed = await self._run_hook("dispose", candidate)
        finally:
            collector_id_var.reset(token)
        if disposed is None or self._ended:
            return

        key, item = disposed
        self._collected.delete(str(key))
        if self._log_items:
            self._log.debug("item_disposed", key=str(key), size=self._collected.size)
        self.emit("dispose", item)

    async def _run_hook(self, name: str, candidate: Any) -> Collected:
        hook = getattr(self._strategy, name)
        try:
            return await _resolve(hook(candidate))
        except Exception as exc:  # noqa: BLE001
            self._log.warning("strategy_hook_failed", hook=name, error=str(exc), exc_info=True)
            return None

    async def _passes_filter(self, item: Any) -> bool:
        predicate = self._options.filter
        if predicate is None:
            return True
        try:
            return bool(await _resolve(predicate(item)))
        except Exception as exc:  # noqa: BLE001
            self._log.warning("filter_failed", error=str(exc), exc_info=True)
            return False

    # ------------------------------------------------------------------
    # Timers
    # ------------------------------------------------------------------

    def _resolve_loop(
        self, loop: asyncio.AbstractEventLoop | None
    ) -> asyncio.AbstractEventLoop:
        if loop is not None:
            return loop
        try:
            return asyncio.get_running_loop()
        except RuntimeError as exc:
            raise CollectorConfigurationError(
                "timeout/idle_timeout need a running event loop; create the "
                "collector inside a coroutine or pass loop=",
                kind=self.kind,
            ) from exc

    def _arm_idle(self) -> None:
        assert self._loop is not None and self._options.idle_timeout is not None
        self._idle_handle = self._loop.call_later(
            self._options.idle_timeout / 1000, self._handle_idle
        )

    def _rearm_idle(self) -> None:
        if self._ended or self._options.idle_timeout is None:
            return
        if self._idle_handle is not None:
            self._idle_handle.cancel()
        self._arm_idle()

    def _handle_timeout(self) -> None:
        self.stop(EndReason.TIMEOUT)

    def _handle_idle(self) -> None:
        self.stop(EndReason.IDLE)

    # ------------------------------------------------------------------
    # Termination
    # ------------------------------------------------------------------

    def stop(self, reason: Union[EndReason, str] = EndReason.USER) -> None:
        """End the collector.  Only the first call has any effect.

        Detaches the source subscription, cancels both timers, records
        *reason*, emits ``end`` and drops every ``collect``/``dispose``
        listener.  ``end`` listeners are kept.
        """
        if self._ended:
            return
        self._ended = True

        if self._subscription is not None:
            self._subscription.close()
        if self._timeout_handle is not None:
            self._timeout_handle.cancel()
            self._timeout_handle = None
        if self._idle_handle is not None:
            self._idle_handle.cancel()
            self._idle_handle = None

        self._end_reason = normalize_reason(reason)
        self._log.info(
            "collector_ended", reason=str(self._end_reason), size=self._collected.size
        )

        self.emit("end", self._collected, self._end_reason)
        self.remove_all_listeners("collect")
        self.remove_all_listeners("dispose")

        waiters, self._waiters = self._waiters, []
        for waiter in waiters:
            if not waiter.done():
                waiter.set_result((self._collected, self._end_reason))

    async def wait(self) -> tuple[Collection[Any], Union[EndReason, str, None]]:
        """Wait until the collector ends; return ``(collected, reason)``."""
        if self._ended:
            return self._collected, self._end_reason
        waiter = asyncio.get_running_loop().create_future()
        self._waiters.append(waiter)
        return await waiter
