r"""Asynchronous retry executor for arbitrary operations.

This module provides the AsyncRetryExecutor class that repeatedly
awaits a zero-argument coroutine function until it succeeds or a stop
condition of its ``RetryPolicy`` fires.
"""

from __future__ import annotations

__all__ = ["AsyncRetryExecutor", "run_with_retry"]

import asyncio
import time
from typing import TYPE_CHECKING, Any, TypeVar

from areliable.logger import get_logger
from areliable.retry.config import RetryPolicy

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from areliable.logger import AppLogger

T = TypeVar("T")

UNBOUNDED = "∞"


class AsyncRetryExecutor:
    """Executes an async operation with retry logic.

    On each failure the executor computes the time elapsed since the
    first attempt and re-raises the exception unchanged if:
    - ``max_retries`` is set and the number of failures exceeds it
    - ``max_total_time`` is set and the elapsed time exceeds it
    - ``abort_if`` returns ``True`` for the exception

    Otherwise it logs a retry notice, waits ``delay`` seconds and tries
    again. Only ``Exception`` subclasses are retried, so task
    cancellation always propagates.

    Args:
        policy: The retry policy.
        logger: Logger receiving progress messages. If ``None``, the
            ``areliable.retry.executor_async`` logger is used.

    Example:
        ```pycon
        >>> import asyncio
        >>> from areliable.retry import AsyncRetryExecutor, RetryPolicy
        >>> async def main():
        ...     calls = []
        ...     async def flaky():
        ...         calls.append(1)
        ...         if len(calls) < 3:
        ...             raise ConnectionError("reset by peer")
        ...         return "ok"
        ...     executor = AsyncRetryExecutor(RetryPolicy(name="flaky", max_retries=5))
        ...     return await executor.execute(flaky), len(calls)
        ...
        >>> asyncio.run(main())
        ('ok', 3)

        ```
    """

    def __init__(self, policy: RetryPolicy, logger: AppLogger | None = None) -> None:
        self.policy = policy
        self.logger = logger if logger is not None else get_logger(__name__)

    def __repr__(self) -> str:
        return f"{self.__class__.__qualname__}(policy={self.policy!r})"

    @property
    def name(self) -> str:
        return self.policy.name or "Unnamed"

    def _format_bounds(self) -> tuple[str, str]:
        retries = UNBOUNDED if self.policy.max_retries is None else str(self.policy.max_retries)
        budget = UNBOUNDED if self.policy.max_total_time is None else f"{self.policy.max_total_time}"
        return retries, budget

    def should_stop(self, exc: Exception, attempt: int, elapsed: float) -> bool:
        """Decide whether a failure ends the retry loop.

        Args:
            exc: The exception raised by the operation.
            attempt: The number of attempts made so far (1-indexed).
            elapsed: Seconds elapsed since the first attempt started.

        Returns:
            ``True`` if the exception must be re-raised.
        """
        policy = self.policy
        if policy.max_retries is not None and attempt > policy.max_retries:
            return True
        if policy.max_total_time is not None and elapsed > policy.max_total_time:
            return True
        return policy.abort_if is not None and bool(policy.abort_if(exc))

    async def execute(self, operation: Callable[[], Awaitable[T]]) -> T:
        """Run the operation until it succeeds or a stop condition fires.

        Args:
            operation: Zero-argument coroutine function to await.

        Returns:
            The result of the first successful attempt.

        Raises:
            Exception: The exception of the last attempt, unchanged, once
                a stop condition fires.
        """
        retries, budget = self._format_bounds()
        self.logger.debug(f"{self.name}: running with {retries} retries and {budget}s timeout...")
        if not self.policy.is_bounded:
            self.logger.warning(f"{self.name}: no retry bound configured, retrying until success")

        start_time = time.time()
        attempt = 1
        while True:
            try:
                result = await operation()
                break
            except Exception as exc:
                elapsed = time.time() - start_time
                if self.should_stop(exc, attempt, elapsed):
                    self.logger.debug(f"{self.name}: giving up after {attempt} attempt(s): {exc}")
                    raise

                self.logger.debug(
                    f"{self.name}: {exc} | Retry #{attempt + 1}/{retries}, "
                    f"elapsed {elapsed:.3f}/{budget}s..."
                )
                attempt += 1
                await asyncio.sleep(self.policy.delay)

        self.logger.debug(f"{self.name}: finished successfully!")
        return result


async def run_with_retry(
    operation: Callable[[], Awaitable[T]],
    policy: RetryPolicy | None = None,
    *,
    logger: AppLogger | None = None,
    **kwargs: Any,
) -> T:
    """Run an async operation with retry logic.

    Args:
        operation: Zero-argument coroutine function to await.
        policy: The retry policy. If ``None``, one is built from ``kwargs``.
        logger: Optional logger receiving progress messages.
        **kwargs: ``RetryPolicy`` fields, used when ``policy`` is ``None``.

    Returns:
        The result of the first successful attempt.

    Raises:
        ValueError: If both ``policy`` and ``kwargs`` are given.

    Example:
        ```pycon
        >>> import asyncio
        >>> from areliable import AsyncHttpsClient, ClientConfig, run_with_retry
        >>> async def main():  # doctest: +SKIP
        ...     async with AsyncHttpsClient() as client:
        ...         client.setup_instance(ClientConfig(base_url="https://api.example.com"))
        ...         return await run_with_retry(
        ...             lambda: client.get("/health"),
        ...             name="health",
        ...             max_retries=3,
        ...             delay=1.0,
        ...         )
        ...
        >>> asyncio.run(main())  # doctest: +SKIP

        ```
    """
    if policy is not None and kwargs:
        msg = f"pass either a policy or policy fields, not both (got {sorted(kwargs)})"
        raise ValueError(msg)
    if policy is None:
        policy = RetryPolicy(**kwargs)
    return await AsyncRetryExecutor(policy, logger=logger).execute(operation)
