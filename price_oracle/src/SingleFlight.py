"""SingleFlight: Coalesce concurrent calls for the same key.

While a call for a key is in flight, later callers for that key await the
same result instead of starting their own. Once the call finishes the key is
released and the next caller starts a fresh call.

.. code-block:: python

    flight = SingleFlight()
    # Both callers share one fetch
    a, b = await asyncio.gather(
        flight.do("eth/usd", fetch),
        flight.do("eth/usd", fetch),
    )
"""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class SingleFlight(Generic[T]):
    """At most one in-flight call per key."""

    def __init__(self) -> None:
        self._calls: dict[str, asyncio.Future[T]] = {}

    async def do(self, key: str, fn: Callable[[], Awaitable[T]]) -> T:
        """Run fn, or join the call already running for key.

        The shared call is shielded: a cancelled waiter does not cancel it
        for the other waiters.

        :param key: Coalescing key.
        :param fn: Coroutine factory, only invoked when no call is in flight.
        :returns: Result of the shared call.
        :raises Exception: Whatever the shared call raised.
        """
        future = self._calls.get(key)
        if future is None:
            future = asyncio.ensure_future(fn())
            self._calls[key] = future
            future.add_done_callback(lambda done: self._release(key, done))
        else:
            logger.debug(f"Joining in-flight call for {key}")
        return await asyncio.shield(future)

    def _release(self, key: str, future: asyncio.Future[T]) -> None:
        if self._calls.get(key) is future:
            del self._calls[key]
        # Mark the exception retrieved even if every waiter was cancelled
        if not future.cancelled():
            future.exception()
