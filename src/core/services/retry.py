"""Async retry executor with fixed backoff.

`RetryExecutor.retry_async` runs an operation, retrying failures after a
fixed delay. Coroutine functions run on the event loop; blocking callables
run on the `concurrent.futures.Executor` passed in (or the loop default).
The executor is borrowed: `shutdown()` only cancels pending retries.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from concurrent.futures import Executor
from typing import Any, Awaitable, Callable, TypeVar

from core.errors import RetryExhaustedError

logger = logging.getLogger(__name__)

T = TypeVar("T")


def pool_size_for(count: int, *, lower: int = 2, upper: int = 8) -> int:
    """Clamp a worker count to `[lower, upper]`."""

    if count < lower:
        return lower
    return min(count, upper)


class RetryExecutor:
    def __init__(self, executor: Executor | None = None) -> None:
        self._executor = executor
        self._sleepers: set[asyncio.Task[None]] = set()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    async def __aenter__(self) -> "RetryExecutor":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        self.shutdown()

    async def _call(self, operation: Callable[[], Any]) -> Any:
        if inspect.iscoroutinefunction(operation):
            return await operation()
        loop = asyncio.get_running_loop()
        result = await loop.run_in_executor(self._executor, operation)
        if inspect.isawaitable(result):
            return await result
        return result

    async def _backoff(self, seconds: float) -> None:
        if seconds <= 0:
            await asyncio.sleep(0)
            return
        task = asyncio.ensure_future(asyncio.sleep(seconds))
        self._sleepers.add(task)
        try:
            await task
        finally:
            self._sleepers.discard(task)

    async def retry_async(
        self,
        operation: Callable[[], T] | Callable[[], Awaitable[T]],
        max_attempts: int,
        backoff: float,
        *,
        retry_on: type[BaseException] | tuple[type[BaseException], ...] = Exception,
    ) -> T:
        """Run `operation` up to `max_attempts` times.

        Raises `RetryExhaustedError` (chained from the last failure) when no
        attempt succeeds, and immediately when `max_attempts <= 0`.
        Exceptions outside `retry_on` propagate on the first occurrence.
        """

        if self._closed:
            raise RuntimeError("RetryExecutor has been shut down")

        last_error: BaseException | None = None
        for attempt in range(1, max_attempts + 1):
            if self._closed:
                raise RuntimeError("RetryExecutor has been shut down") from last_error
            logger.debug("attempting #%d (remaining=%d)", attempt, max_attempts - attempt + 1)
            try:
                value = await self._call(operation)
            except retry_on as exc:
                last_error = exc
                logger.warning("attempt #%d failed: %r", attempt, exc)
                if self._closed:
                    raise RuntimeError("RetryExecutor has been shut down") from exc
                if attempt < max_attempts:
                    try:
                        await self._backoff(backoff)
                    except asyncio.CancelledError:
                        if self._closed:
                            raise RuntimeError("RetryExecutor has been shut down") from exc
                        raise
                continue
            logger.debug("attempt #%d succeeded", attempt)
            return value

        error = RetryExhaustedError(max(max_attempts, 0), last_error)
        logger.error("exhausted retries after %d attempts", max(max_attempts, 0))
        raise error from last_error

    def shutdown(self) -> None:
        """Cancel pending backoff waits and refuse new work."""

        if self._closed:
            return
        logger.debug("shutting down retry executor (pending=%d)", len(self._sleepers))
        self._closed = True
        for task in list(self._sleepers):
            task.cancel()
