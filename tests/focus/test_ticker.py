"""Tests for tick sources."""

from __future__ import annotations

import asyncio

import pytest

from pomodoro_cli.focus.ticker import AsyncioTickSource, ManualTickSource


class TestManualTickSource:
    def test_advance_fires_once_per_second(self):
        source = ManualTickSource()
        calls = []
        source.subscribe(lambda: calls.append(1))

        source.advance(3)

        assert len(calls) == 3
        assert source.elapsed == 3

    def test_cancelled_subscription_stops(self):
        source = ManualTickSource()
        calls = []
        sub = source.subscribe(lambda: calls.append(1))
        source.advance(1)
        sub.cancel()
        sub.cancel()
        source.advance(5)

        assert len(calls) == 1
        assert source.subscriber_count == 0

    def test_callback_may_cancel_itself(self):
        source = ManualTickSource()
        calls = []

        def callback():
            calls.append(1)
            sub.cancel()

        sub = source.subscribe(callback)
        source.advance(3)

        assert len(calls) == 1


class TestAsyncioTickSource:
    @pytest.mark.asyncio
    async def test_ticks_on_running_loop(self):
        source = AsyncioTickSource(interval=0.01)
        done = asyncio.Event()
        calls = []

        def callback():
            calls.append(1)
            if len(calls) == 3:
                sub.cancel()
                done.set()

        sub = source.subscribe(callback)
        await asyncio.wait_for(done.wait(), timeout=2)
        await asyncio.sleep(0.05)

        assert len(calls) == 3

    @pytest.mark.asyncio
    async def test_cancel_before_first_tick(self):
        source = AsyncioTickSource(interval=0.01)
        calls = []
        sub = source.subscribe(lambda: calls.append(1))
        sub.cancel()

        await asyncio.sleep(0.05)
        assert calls == []
