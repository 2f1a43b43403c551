"""Factory Boy factories for test data generation.

Available factories
-------------------
MessageFactory      — message in channel C1 / guild G1
InteractionFactory  — button interaction in channel C1
ReactionFactory     — reaction with a 🔥 emoji
EmojiFactory        — emoji rendered by its name
UserFactory         — reacting user
ChannelFactory      — channel C1 in guild G1
GuildFactory        — guild G1
"""

from __future__ import annotations

from tests.factories.gateway import (
    ChannelFactory,
    EmojiFactory,
    GuildFactory,
    InteractionFactory,
    MessageFactory,
    ReactionFactory,
    UserFactory,
)

__all__ = [
    "ChannelFactory",
    "EmojiFactory",
    "GuildFactory",
    "InteractionFactory",
    "MessageFactory",
    "ReactionFactory",
    "UserFactory",
]
