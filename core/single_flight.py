"""
Single-flight request collapsing

Concurrent callers asking for the same key share one in-flight task
instead of each hitting the upstream. The key is released as soon as the
task settles, so a later call after a failure starts a fresh attempt.

Usage:
    flight = SingleFlight()
    data = await flight.do(cache_key, lambda: client.fetch(params))
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Dict, List

logger = logging.getLogger(__name__)


class SingleFlight:
    """Collapse concurrent identical async calls into one."""

    def __init__(self):
        self._inflight: Dict[str, "asyncio.Task[Any]"] = {}
        self.shared_calls = 0

    async def do(self, key: str, coro_factory: Callable[[], Awaitable[Any]]) -> Any:
        """
        Run coro_factory() once per key at a time.

        Exceptions raised by the shared call propagate to every waiter.
        """
        task = self._inflight.get(key)
        if task is not None:
            self.shared_calls += 1
            logger.debug(f"Joining in-flight request for {key}")
            return await asyncio.shield(task)

        task = asyncio.ensure_future(coro_factory())
        self._inflight[key] = task
        try:
            return await asyncio.shield(task)
        finally:
            if task.done():
                self._inflight.pop(key, None)
            else:
                # Leader was cancelled; release the key once the shared task settles
                task.add_done_callback(lambda _t: self._release(key, _t))

    def _release(self, key: str, task: "asyncio.Task[Any]") -> None:
        if self._inflight.get(key) is task:
            del self._inflight[key]
        if not task.cancelled() and task.exception() is not None:
            logger.debug(f"In-flight request for {key} failed after leader left: {task.exception()}")

    def in_flight(self) -> List[str]:
        return list(self._inflight.keys())


__all__ = ['SingleFlight']
