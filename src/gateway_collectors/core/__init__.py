"""Collector engine and its building blocks."""

from __future__ import annotations

from gateway_collectors.core.accumulator import Collection
from gateway_collectors.core.emitter import EventEmitter
from gateway_collectors.core.engine import (
    CollectStrategy,
    Collector,
    CollectorOptions,
    EndReason,
)
from gateway_collectors.core.exceptions import (
    CollectorConfigurationError,
    GatewayCollectorsError,
    SubscriptionError,
)
from gateway_collectors.core.subscription import Subscription

__all__ = [
    "CollectStrategy",
    "Collection",
    "Collector",
    "CollectorConfigurationError",
    "CollectorOptions",
    "EndReason",
    "EventEmitter",
    "GatewayCollectorsError",
    "Subscription",
    "SubscriptionError",
]
