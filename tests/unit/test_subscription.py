"""Unit tests for core/subscription.py."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from gateway_collectors.client.local import LocalEventSource
from gateway_collectors.core.exceptions import SubscriptionError
from gateway_collectors.core.subscription import Subscription


class TestSubscription:
    def test_add_attaches_to_source(self, source: LocalEventSource) -> None:
        sub = Subscription(source)
        handler = MagicMock()

        sub.add("messageCreate", handler)

        assert len(sub) == 1
        assert "messageCreate" in sub
        assert source.listener_count("messageCreate") == 1

    def test_close_detaches_everything(self, source: LocalEventSource) -> None:
        sub = Subscription(source)
        shared = MagicMock()
        sub.add("channelDelete", shared)
        sub.add("threadDelete", shared)
        sub.add("guildDelete", MagicMock())

        sub.close()

        assert sub.closed
        assert len(sub) == 0
        for event in ("channelDelete", "threadDelete", "guildDelete"):
            assert source.listener_count(event) == 0

    def test_close_is_idempotent(self) -> None:
        client = MagicMock()
        sub = Subscription(client)
        handler = MagicMock()
        sub.add("messageCreate", handler)

        sub.close()
        sub.close()

        client.off.assert_called_once_with("messageCreate", handler)

    def test_close_leaves_foreign_handlers_alone(self, source: LocalEventSource) -> None:
        foreign = MagicMock()
        source.on("messageCreate", foreign)
        sub = Subscription(source)
        sub.add("messageCreate", MagicMock())

        sub.close()

        assert source.listeners("messageCreate") == [foreign]

    def test_add_after_close_raises(self, source: LocalEventSource) -> None:
        sub = Subscription(source)
        sub.close()
        with pytest.raises(SubscriptionError) as exc_info:
            sub.add("messageCreate", MagicMock())
        assert exc_info.value.event == "messageCreate"

    def test_source_without_on_off_is_rejected(self) -> None:
        with pytest.raises(SubscriptionError):
            Subscription(object())
