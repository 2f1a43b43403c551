"""Gateway event names and interaction enums consumed by the collectors.

Values follow the camelCase names that gateway clients use for their
dispatch events, and the integer codes Discord uses for interaction and
component types.  They must never change: callers register handlers by
these strings.
"""

from __future__ import annotations

from enum import Enum, IntEnum


class GatewayEvent(str, Enum):
    """Event names the collectors subscribe to.

    Attributes:
        MESSAGE_CREATE: Payload ``(message)``.
        MESSAGE_DELETE: Payload ``(message)``.
        MESSAGE_DELETE_BULK: Payload ``(messages)``, a mapping of message id
            to message or an iterable of messages.
        INTERACTION_CREATE: Payload ``(interaction)``.
        MESSAGE_REACTION_ADD: Payload ``(reaction, user, message)``.
        MESSAGE_REACTION_REMOVE: Payload ``(reaction, user, message)``.
        CHANNEL_DELETE: Payload ``(channel)``.
        THREAD_DELETE: Payload ``(thread)``; treated as a channel.
        GUILD_DELETE: Payload ``(guild)``.
    """

    MESSAGE_CREATE = "messageCreate"
    MESSAGE_DELETE = "messageDelete"
    MESSAGE_DELETE_BULK = "messageDeleteBulk"
    INTERACTION_CREATE = "interactionCreate"
    MESSAGE_REACTION_ADD = "messageReactionAdd"
    MESSAGE_REACTION_REMOVE = "messageReactionRemove"
    CHANNEL_DELETE = "channelDelete"
    THREAD_DELETE = "threadDelete"
    GUILD_DELETE = "guildDelete"

    def __str__(self) -> str:
        return self.value


class InteractionType(IntEnum):
    """Kind of an incoming interaction."""

    PING = 1
    APPLICATION_COMMAND = 2
    MESSAGE_COMPONENT = 3
    APPLICATION_COMMAND_AUTOCOMPLETE = 4
    MODAL_SUBMIT = 5


COLLECTABLE_INTERACTION_TYPES: frozenset[InteractionType] = frozenset({
    InteractionType.APPLICATION_COMMAND,
    InteractionType.MESSAGE_COMPONENT,
    InteractionType.APPLICATION_COMMAND_AUTOCOMPLETE,
    InteractionType.MODAL_SUBMIT,
})
"""Interaction kinds an interaction collector can be restricted to."""

CHANNEL_BOUND_INTERACTION_TYPES: frozenset[InteractionType] = frozenset({
    InteractionType.APPLICATION_COMMAND,
    InteractionType.MESSAGE_COMPONENT,
    InteractionType.MODAL_SUBMIT,
})
"""Interaction kinds that carry a ``channel_id`` and honour channel scoping."""


class ComponentType(IntEnum):
    """Subtype of a message component interaction."""

    ACTION_ROW = 1
    BUTTON = 2
    STRING_SELECT = 3
    TEXT_INPUT = 4
    USER_SELECT = 5
    ROLE_SELECT = 6
    MENTIONABLE_SELECT = 7
    CHANNEL_SELECT = 8
