"""Unit tests for the listener registry (core/emitter.py)."""

from __future__ import annotations

import asyncio
import logging

import pytest

from gateway_collectors.core.emitter import EventEmitter


class TestRegistration:
    def test_on_and_emit(self) -> None:
        emitter = EventEmitter()
        seen: list[int] = []
        emitter.on("tick", seen.append)

        assert emitter.emit("tick", 1) is True
        assert emitter.emit("tick", 2) is True
        assert seen == [1, 2]

    def test_emit_without_listeners_returns_false(self) -> None:
        assert EventEmitter().emit("nothing") is False

    def test_once_fires_a_single_time(self) -> None:
        emitter = EventEmitter()
        seen: list[str] = []
        emitter.once("tick", seen.append)

        emitter.emit("tick", "a")
        emitter.emit("tick", "b")

        assert seen == ["a"]
        assert emitter.listener_count("tick") == 0

    def test_off_removes_listener(self) -> None:
        emitter = EventEmitter()
        seen: list[str] = []
        emitter.on("tick", seen.append)
        emitter.off("tick", seen.append)

        emitter.emit("tick", "a")
        assert seen == []

    def test_off_removes_once_wrapper(self) -> None:
        emitter = EventEmitter()
        seen: list[str] = []
        emitter.once("tick", seen.append)
        emitter.off("tick", seen.append)

        assert emitter.listener_count("tick") == 0

    def test_off_unknown_listener_is_ignored(self) -> None:
        emitter = EventEmitter()
        emitter.off("tick", print)
        assert emitter.listener_count("tick") == 0

    def test_remove_all_listeners_for_one_event(self) -> None:
        emitter = EventEmitter()
        emitter.on("a", print)
        emitter.on("b", print)

        emitter.remove_all_listeners("a")

        assert emitter.listener_count("a") == 0
        assert emitter.listener_count("b") == 1


class TestEmissionErrors:
    def test_raising_listener_does_not_stop_others(self, caplog: pytest.LogCaptureFixture) -> None:
        emitter = EventEmitter()
        seen: list[str] = []

        def broken(_: str) -> None:
            raise RuntimeError("boom")

        emitter.on("tick", broken)
        emitter.on("tick", seen.append)

        with caplog.at_level(logging.ERROR, logger="gateway_collectors.core.emitter"):
            emitter.emit("tick", "a")

        assert seen == ["a"]
        assert any("listener" in r.getMessage() for r in caplog.records)


class TestAsyncListeners:
    @pytest.mark.asyncio
    async def test_emit_schedules_coroutine_listeners(self) -> None:
        emitter = EventEmitter()
        done = asyncio.Event()

        async def listener(value: int) -> None:
            assert value == 7
            done.set()

        emitter.on("tick", listener)
        emitter.emit("tick", 7)

        await asyncio.wait_for(done.wait(), timeout=1.0)

    @pytest.mark.asyncio
    async def test_emit_async_awaits_in_order(self) -> None:
        emitter = EventEmitter()
        order: list[str] = []

        async def slow(_: object) -> None:
            await asyncio.sleep(0.01)
            order.append("slow")

        def fast(_: object) -> None:
            order.append("fast")

        emitter.on("tick", slow)
        emitter.on("tick", fast)

        await emitter.emit_async("tick", None)

        assert order == ["slow", "fast"]

    def test_emit_runs_coroutine_listener_without_loop(self) -> None:
        emitter = EventEmitter()
        seen: list[int] = []

        async def listener(value: int) -> None:
            await asyncio.sleep(0)
            seen.append(value)

        emitter.on("tick", listener)
        emitter.emit("tick", 3)

        assert seen == [3]
