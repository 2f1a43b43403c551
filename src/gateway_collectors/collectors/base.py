"""Helpers shared by the message, interaction and reaction collectors.

Each variant module defines an options model, a strategy, and a
``create_*_collector`` factory that wires the strategy and its handlers to an
event source::

    collector = create_message_collector(client, channel_id="123", max=5)
    collector.on("collect", print)
    collected, reason = await collector.wait()
"""

from __future__ import annotations

from typing import Annotated, Any, Callable, Optional, TypeVar

from pydantic import BeforeValidator

from gateway_collectors.core.engine import Collector, CollectorOptions, EndReason

OptionsT = TypeVar("OptionsT", bound=CollectorOptions)


def _snowflake_to_str(value: Any) -> Any:
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    return value


SnowflakeId = Annotated[str, BeforeValidator(_snowflake_to_str)]
"""Entity id option.  Integer snowflakes are accepted and stored as strings."""


def same_id(value: Any, scope: Optional[str]) -> bool:
    """Whether an entity id from a payload equals a scoped id."""
    return value is not None and str(value) == scope


def resolve_options(
    options_cls: type[OptionsT],
    options: OptionsT | None,
    overrides: dict[str, Any],
) -> OptionsT:
    """Build validated options from a model instance and/or keyword overrides.

    Keyword overrides win over fields of *options*.

    Raises:
        pydantic.ValidationError: On unknown or invalid option values.
    """
    if options is None:
        return options_cls(**overrides)
    if not overrides:
        return options
    merged = options.model_dump(exclude_unset=True)
    merged.update(overrides)
    return options_cls(**merged)


def stop_when_deleted(
    collector: Collector,
    scope_id: Optional[str],
    reason: EndReason,
) -> Callable[[Any], None]:
    """Return a deletion handler that stops *collector* for its scoped entity.

    With no *scope_id* the handler never fires.
    """

    def _on_delete(entity: Any) -> None:
        if scope_id and same_id(getattr(entity, "id", None), scope_id):
            collector.stop(reason)

    return _on_delete
