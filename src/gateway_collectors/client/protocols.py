"""Structural types for the event source and the payloads it dispatches.

The collectors never import a concrete gateway library.  Anything with the
attributes below works: library model objects, dataclasses, or mocks.
"""

from __future__ import annotations

from typing import Any, Callable, Optional, Protocol, runtime_checkable


@runtime_checkable
class EventSource(Protocol):
    """Subscribe/unsubscribe primitives of a gateway client."""

    def on(self, event: str, handler: Callable[..., Any]) -> Any: ...

    def off(self, event: str, handler: Callable[..., Any]) -> Any: ...


class Snowflake(Protocol):
    id: str


class Channel(Snowflake, Protocol):
    pass


class Guild(Snowflake, Protocol):
    pass


class User(Snowflake, Protocol):
    pass


class Message(Snowflake, Protocol):
    channel_id: str
    guild_id: Optional[str]


class Interaction(Snowflake, Protocol):
    type: int
    channel_id: Optional[str]
    component_type: Optional[int]


class Emoji(Protocol):
    def __str__(self) -> str: ...


class Reaction(Protocol):
    emoji: Emoji
