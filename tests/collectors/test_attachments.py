"""Tests for the contextual collector methods (attachments.py)."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any, Optional

import pytest

from gateway_collectors.attachments import (
    CHANNEL_METHODS,
    MESSAGE_METHODS,
    install_collector_methods,
    uninstall_collector_methods,
)
from gateway_collectors.client.events import InteractionType
from gateway_collectors.client.local import LocalEventSource
from gateway_collectors.collectors.message import create_message_collector
from gateway_collectors.core.engine import EndReason
from gateway_collectors.core.exceptions import SubscriptionError
from tests.factories import InteractionFactory, MessageFactory, ReactionFactory, UserFactory


@dataclass
class TextChannel:
    id: str
    guild_id: Optional[str] = None
    client: Any = None


@dataclass
class ChatMessage:
    id: str
    channel_id: str
    guild_id: Optional[str] = None
    client: Any = None


@pytest.fixture
def installed() -> Iterator[None]:
    install_collector_methods(channel_types=[TextChannel], message_types=[ChatMessage])
    yield
    uninstall_collector_methods(channel_types=[TextChannel], message_types=[ChatMessage])


class TestInstallation:
    def test_install_adds_methods(self, installed: None) -> None:
        for name in CHANNEL_METHODS:
            assert callable(getattr(TextChannel, name))
        for name in MESSAGE_METHODS:
            assert callable(getattr(ChatMessage, name))
        assert not hasattr(ChatMessage, "create_message_collector")

    def test_uninstall_removes_methods(self) -> None:
        install_collector_methods(channel_types=[TextChannel])
        uninstall_collector_methods(channel_types=[TextChannel])
        assert not hasattr(TextChannel, "create_message_collector")

    def test_uninstall_leaves_replaced_attributes(self) -> None:
        install_collector_methods(channel_types=[TextChannel])

        def custom(self: Any) -> str:
            return "mine"

        TextChannel.create_message_collector = custom  # type: ignore[attr-defined]
        uninstall_collector_methods(channel_types=[TextChannel])

        assert TextChannel.__dict__["create_message_collector"] is custom
        del TextChannel.create_message_collector  # type: ignore[attr-defined]
        uninstall_collector_methods(channel_types=[TextChannel])


class TestChannelMethods:
    @pytest.mark.asyncio
    async def test_message_collector_is_scoped_to_channel(
        self, installed: None, source: LocalEventSource
    ) -> None:
        channel = TextChannel(id="C1", guild_id="G1", client=source)
        collector = channel.create_message_collector(max=1)

        assert collector.options.channel_id == "C1"
        assert collector.options.guild_id == "G1"

        await source.dispatch("messageCreate", MessageFactory(channel_id="C2"))
        await source.dispatch("messageCreate", MessageFactory(id="hit", channel_id="C1"))

        assert collector.end_reason is EndReason.LIMIT
        assert list(collector.collected) == ["hit"]

    @pytest.mark.asyncio
    async def test_component_collector_forces_interaction_type(
        self, installed: None, source: LocalEventSource
    ) -> None:
        channel = TextChannel(id="C1", client=source)
        collector = channel.create_component_interaction_collector(
            interaction_type=InteractionType.MODAL_SUBMIT
        )
        assert collector.options.interaction_type is InteractionType.MESSAGE_COMPONENT

        await source.dispatch(
            "interactionCreate", InteractionFactory(type=InteractionType.MODAL_SUBMIT)
        )
        assert collector.collected.size == 0

    def test_modal_submit_collector(self, installed: None, source: LocalEventSource) -> None:
        channel = TextChannel(id="C1", client=source)
        collector = channel.create_modal_submit_collector()

        assert collector.options.interaction_type is InteractionType.MODAL_SUBMIT
        assert collector.options.channel_id == "C1"

    def test_caller_options_override_scope(
        self, installed: None, source: LocalEventSource
    ) -> None:
        channel = TextChannel(id="C1", client=source)
        collector = channel.create_message_collector(channel_id="C7")
        assert collector.options.channel_id == "C7"

    def test_missing_client_raises(self, installed: None) -> None:
        with pytest.raises(SubscriptionError):
            TextChannel(id="C1").create_message_collector()


class TestMessageMethods:
    @pytest.mark.asyncio
    async def test_reaction_collector_is_scoped_to_message(
        self, installed: None, source: LocalEventSource
    ) -> None:
        message = ChatMessage(id="M1", channel_id="C1", guild_id="G1", client=source)
        collector = message.create_reaction_collector()

        assert collector.options.message_id == "M1"
        assert collector.options.channel_id == "C1"
        assert collector.options.guild_id == "G1"

        await source.dispatch("messageReactionAdd", ReactionFactory(), UserFactory(), message)
        await source.dispatch(
            "messageReactionAdd", ReactionFactory(emoji__name="👍"), UserFactory(),
            MessageFactory(id="M2"),
        )
        assert list(collector.collected) == ["🔥"]

        await source.dispatch("messageDelete", message)
        assert collector.end_reason is EndReason.MESSAGE_DELETE


class TestSettingsDefaults:
    @pytest.mark.asyncio
    async def test_default_timeouts_from_environment(
        self, installed: None, source: LocalEventSource, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("GATEWAY_COLLECTORS_DEFAULT_TIMEOUT_MS", "60000")
        monkeypatch.setenv("GATEWAY_COLLECTORS_DEFAULT_IDLE_TIMEOUT_MS", "5000")

        collector = TextChannel(id="C1", client=source).create_message_collector()

        assert collector.options.timeout == 60000
        assert collector.options.idle_timeout == 5000
        collector.stop()

    @pytest.mark.asyncio
    async def test_caller_timeout_wins_over_default(
        self, installed: None, source: LocalEventSource, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("GATEWAY_COLLECTORS_DEFAULT_TIMEOUT_MS", "60000")

        collector = TextChannel(id="C1", client=source).create_message_collector(timeout=0)

        assert collector.options.timeout is None
        collector.stop()

    def test_plain_factories_ignore_defaults(
        self, installed: None, source: LocalEventSource, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("GATEWAY_COLLECTORS_DEFAULT_TIMEOUT_MS", "60000")

        assert create_message_collector(source).options.timeout is None
