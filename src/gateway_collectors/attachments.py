"""Contextual collector factories for externally owned model types.

:func:`install_collector_methods` adds ``create_*_collector`` methods to a
gateway library's channel and message classes, so a collector can be started
from the object it is about::

    install_collector_methods(channel_types=[TextChannel, DMChannel],
                              message_types=[Message])

    collector = channel.create_message_collector(max=3, idle_timeout=30_000)
    reactions = message.create_reaction_collector(timeout=60_000)

Installed methods read the event source from the object's ``client``
attribute and pre-fill the scope from the object itself:

==========================================  =====================================
Method                                      Defaults
==========================================  =====================================
``create_message_collector``                ``channel_id``, ``guild_id``
``create_component_interaction_collector``  ``channel_id``, ``guild_id``,
                                            ``interaction_type=MESSAGE_COMPONENT``
``create_modal_submit_collector``           ``channel_id``, ``guild_id``,
                                            ``interaction_type=MODAL_SUBMIT``
``create_reaction_collector``               ``message_id``, ``channel_id``,
                                            ``guild_id``
==========================================  =====================================

Caller options override the defaults, except ``interaction_type`` which is
fixed by the method.  When the caller passes no ``timeout``/``idle_timeout``
the ``default_timeout_ms``/``default_idle_timeout_ms`` settings apply.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Iterable

from gateway_collectors.client.events import InteractionType
from gateway_collectors.collectors.interaction import create_interaction_collector
from gateway_collectors.collectors.message import create_message_collector
from gateway_collectors.collectors.reaction import create_reaction_collector
from gateway_collectors.config.settings import get_settings
from gateway_collectors.core.engine import Collector
from gateway_collectors.core.exceptions import SubscriptionError

logger = logging.getLogger(__name__)


def _source_of(obj: Any) -> Any:
    client = getattr(obj, "client", None)
    if client is None:
        raise SubscriptionError(
            f"{type(obj).__name__} has no client attribute to subscribe the collector to"
        )
    return client


def _contextual_options(defaults: dict[str, Any], options: dict[str, Any]) -> dict[str, Any]:
    settings = get_settings()
    merged = {key: value for key, value in defaults.items() if value is not None}
    if settings.default_timeout_ms is not None:
        merged["timeout"] = settings.default_timeout_ms
    if settings.default_idle_timeout_ms is not None:
        merged["idle_timeout"] = settings.default_idle_timeout_ms
    merged.update(options)
    return merged


def _channel_scope(channel: Any) -> dict[str, Any]:
    return {"channel_id": channel.id, "guild_id": getattr(channel, "guild_id", None)}


# ---------------------------------------------------------------------------
# Methods installed on channel types
# ---------------------------------------------------------------------------


def _create_message_collector(self: Any, **options: Any) -> Collector:
    """Collect messages sent in this channel."""
    return create_message_collector(
        _source_of(self), **_contextual_options(_channel_scope(self), options)
    )


def _create_component_interaction_collector(self: Any, **options: Any) -> Collector:
    """Collect component interactions (buttons, selects) in this channel."""
    merged = _contextual_options(_channel_scope(self), options)
    merged["interaction_type"] = InteractionType.MESSAGE_COMPONENT
    return create_interaction_collector(_source_of(self), **merged)


def _create_modal_submit_collector(self: Any, **options: Any) -> Collector:
    """Collect modal submissions in this channel."""
    merged = _contextual_options(_channel_scope(self), options)
    merged["interaction_type"] = InteractionType.MODAL_SUBMIT
    return create_interaction_collector(_source_of(self), **merged)


# ---------------------------------------------------------------------------
# Methods installed on message types
# ---------------------------------------------------------------------------


def _create_reaction_collector(self: Any, **options: Any) -> Collector:
    """Collect reactions added to this message."""
    defaults = {
        "message_id": self.id,
        "channel_id": getattr(self, "channel_id", None),
        "guild_id": getattr(self, "guild_id", None),
    }
    return create_reaction_collector(_source_of(self), **_contextual_options(defaults, options))


CHANNEL_METHODS: dict[str, Callable[..., Collector]] = {
    "create_message_collector": _create_message_collector,
    "create_component_interaction_collector": _create_component_interaction_collector,
    "create_modal_submit_collector": _create_modal_submit_collector,
}

MESSAGE_METHODS: dict[str, Callable[..., Collector]] = {
    "create_reaction_collector": _create_reaction_collector,
}


# ---------------------------------------------------------------------------
# Installation
# ---------------------------------------------------------------------------


def install_collector_methods(
    channel_types: Iterable[type] = (),
    message_types: Iterable[type] = (),
) -> None:
    """Add the collector factory methods to the given classes.

    Existing attributes with the same names are replaced.
    """
    for cls in channel_types:
        for name, method in CHANNEL_METHODS.items():
            setattr(cls, name, method)
        logger.debug("attachments: installed channel collector methods on %s", cls.__name__)
    for cls in message_types:
        for name, method in MESSAGE_METHODS.items():
            setattr(cls, name, method)
        logger.debug("attachments: installed message collector methods on %s", cls.__name__)


def uninstall_collector_methods(
    channel_types: Iterable[type] = (),
    message_types: Iterable[type] = (),
) -> None:
    """Remove methods added by :func:`install_collector_methods`.

    Attributes that were replaced by something else in the meantime are left
    alone.
    """
    for types, methods in ((channel_types, CHANNEL_METHODS), (message_types, MESSAGE_METHODS)):
        for cls in types:
            for name, method in methods.items():
                if cls.__dict__.get(name) is method:
                    delattr(cls, name)
