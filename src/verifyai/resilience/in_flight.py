"""At most one in-flight analysis per session.

InFlightGuard rejects a second submission for a key that is already
running instead of queueing or deduplicating it: a new text is a new
request, and the caller is expected to wait for the first result.

Single-process only: each worker has its own instance.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import TypeVar

from verifyai.resilience.errors import AnalysisInProgressError

T = TypeVar("T")


class InFlightGuard:
    """Runs async operations with per-key mutual exclusion.

    Usage::

        guard = InFlightGuard()
        result = await guard.execute("user:42", my_async_fn)
    """

    def __init__(self) -> None:
        self._in_flight: set[str] = set()
        self._lock = asyncio.Lock()

    async def execute(
        self,
        key: str,
        operation: Callable[[], Awaitable[T]],
    ) -> T:
        """Run ``operation`` unless ``key`` is already running.

        Raises AnalysisInProgressError for the concurrent caller. The
        key is released when the operation finishes, whether it
        succeeds or raises.
        """
        async with self._lock:
            if key in self._in_flight:
                raise AnalysisInProgressError(key)
            self._in_flight.add(key)
        try:
            return await operation()
        finally:
            async with self._lock:
                self._in_flight.discard(key)

    @property
    def active_keys(self) -> list[str]:
        """Return currently in-flight keys."""
        return sorted(self._in_flight)
