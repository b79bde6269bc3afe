"""
Tests for selection-driven request coordination.
"""

import asyncio

import pytest

from analytics.selection import Debouncer, RequestGeneration


class TestRequestGeneration:
    """Tests for request tokens."""

    def test_tokens_increase(self):
        generation = RequestGeneration()
        first = generation.issue()
        second = generation.issue()

        assert second > first
        assert generation.latest == second
        assert not generation.is_current(first)
        assert generation.is_current(second)

    def test_stale_result_not_applied(self):
        generation = RequestGeneration()
        applied = []

        stale = generation.issue()
        fresh = generation.issue()

        assert generation.apply(fresh, applied.append, "fresh") is True
        assert generation.apply(stale, applied.append, "stale") is False
        assert applied == ["fresh"]


class TestDebouncer:
    """Tests for debounced request execution."""

    @pytest.mark.asyncio
    async def test_single_trigger_runs(self):
        debouncer = Debouncer(delay=0.01)

        async def fetch():
            return "result"

        assert await debouncer.trigger(fetch) == "result"

    @pytest.mark.asyncio
    async def test_burst_runs_only_latest(self):
        debouncer = Debouncer(delay=0.05)
        calls = []

        def factory(name):
            async def fetch():
                calls.append(name)
                return name
            return fetch

        results = await asyncio.gather(
            debouncer.trigger(factory("2021")),
            debouncer.trigger(factory("2022")),
            debouncer.trigger(factory("2023")),
        )

        assert results == [None, None, "2023"]
        assert calls == ["2023"]

    @pytest.mark.asyncio
    async def test_result_superseded_while_running(self):
        debouncer = Debouncer(delay=0.01)
        started = asyncio.Event()
        release = asyncio.Event()

        async def slow_fetch():
            started.set()
            await release.wait()
            return "old"

        async def fast_fetch():
            return "new"

        slow = asyncio.create_task(debouncer.trigger(slow_fetch))
        await started.wait()

        newer = asyncio.create_task(debouncer.trigger(fast_fetch))
        await asyncio.sleep(0)
        release.set()

        assert await slow is None
        assert await newer == "new"
