"""Package-wide exception hierarchy for gateway-collectors.

All custom exceptions subclass ``GatewayCollectorsError``, enabling
consistent error handling and structured logging across the package.

Hierarchy::

    GatewayCollectorsError
    ├── CollectorConfigurationError
    └── SubscriptionError

Failures raised by user-supplied filters or strategy hooks are never
surfaced through this hierarchy: the engine treats them as a rejected
item and keeps collecting.  Invalid option values raise
``pydantic.ValidationError`` from the options models.
"""

from __future__ import annotations


class GatewayCollectorsError(Exception):
    """Base class for all gateway-collectors exceptions.

    All package-specific exceptions inherit from this class so that
    callers can catch the entire hierarchy with a single ``except`` clause
    when needed.
    """


# ---------------------------------------------------------------------------
# Collector exceptions
# ---------------------------------------------------------------------------


class CollectorConfigurationError(GatewayCollectorsError):
    """Raised when a collector cannot be set up with the given options.

    The typical cause is constructing a collector with a ``timeout`` or
    ``idle_timeout`` outside of a running event loop and without passing
    ``loop=`` explicitly.

    Args:
        message: Human-readable description of the problem.
        kind: Collector kind (e.g. ``"message"``), if known.
    """

    def __init__(self, message: str, kind: str | None = None) -> None:
        super().__init__(message)
        self.kind = kind


# ---------------------------------------------------------------------------
# Subscription exceptions
# ---------------------------------------------------------------------------


class SubscriptionError(GatewayCollectorsError):
    """Raised when handlers cannot be attached to an event source.

    Either the source does not expose callable ``on``/``off`` methods, or
    a closed :class:`~gateway_collectors.core.subscription.Subscription`
    was asked to attach another handler.

    Args:
        message: Human-readable description of the problem.
        event: Event name being subscribed, if known.
    """

    def __init__(self, message: str, event: str | None = None) -> None:
        super().__init__(message)
        self.event = event
