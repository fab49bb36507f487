"""Tests for single-flight request collapsing"""
import asyncio

import pytest

from core.single_flight import SingleFlight


class TestSingleFlight:

    @pytest.mark.asyncio
    async def test_concurrent_same_key_runs_once(self):
        flight = SingleFlight()
        calls = 0
        release = asyncio.Event()

        async def fetch():
            nonlocal calls
            calls += 1
            await release.wait()
            return {"rows": 3}

        tasks = [asyncio.create_task(flight.do("props", fetch)) for _ in range(5)]
        await asyncio.sleep(0)
        assert flight.in_flight() == ["props"]

        release.set()
        results = await asyncio.gather(*tasks)

        assert calls == 1
        assert all(r == {"rows": 3} for r in results)
        assert flight.shared_calls == 4
        assert flight.in_flight() == []

    @pytest.mark.asyncio
    async def test_different_keys_run_independently(self):
        flight = SingleFlight()
        seen = []

        async def fetch(key):
            seen.append(key)
            return key

        results = await asyncio.gather(
            flight.do("a", lambda: fetch("a")),
            flight.do("b", lambda: fetch("b")),
        )
        assert sorted(results) == ["a", "b"]
        assert sorted(seen) == ["a", "b"]

    @pytest.mark.asyncio
    async def test_failure_reaches_every_waiter_and_releases_key(self):
        flight = SingleFlight()
        release = asyncio.Event()

        async def boom():
            await release.wait()
            raise RuntimeError("upstream down")

        tasks = [asyncio.create_task(flight.do("k", boom)) for _ in range(3)]
        await asyncio.sleep(0)
        release.set()
        results = await asyncio.gather(*tasks, return_exceptions=True)

        assert all(isinstance(r, RuntimeError) for r in results)
        assert flight.in_flight() == []

        async def ok():
            return "recovered"

        assert await flight.do("k", ok) == "recovered"

    @pytest.mark.asyncio
    async def test_sequential_calls_are_not_collapsed(self):
        flight = SingleFlight()
        calls = 0

        async def fetch():
            nonlocal calls
            calls += 1
            return calls

        assert await flight.do("k", fetch) == 1
        assert await flight.do("k", fetch) == 2
        assert flight.shared_calls == 0

    @pytest.mark.asyncio
    async def test_cancelled_leader_does_not_cancel_followers(self):
        flight = SingleFlight()
        release = asyncio.Event()

        async def fetch():
            await release.wait()
            return "done"

        leader = asyncio.create_task(flight.do("k", fetch))
        await asyncio.sleep(0)
        follower = asyncio.create_task(flight.do("k", fetch))
        await asyncio.sleep(0)

        leader.cancel()
        await asyncio.sleep(0)
        release.set()

        assert await follower == "done"
        await asyncio.sleep(0)
        assert flight.in_flight() == []
