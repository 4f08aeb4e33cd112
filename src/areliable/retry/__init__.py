r"""Retry package wrapping any async operation with attempt, time budget
and delay semantics.

Public API:
    - RetryPolicy: Bounds and pacing of a retried operation
    - AsyncRetryExecutor: Asynchronous retry executor
    - run_with_retry: Functional shortcut around AsyncRetryExecutor
"""

from __future__ import annotations

__all__ = ["AsyncRetryExecutor", "RetryPolicy", "run_with_retry"]

from areliable.retry.config import RetryPolicy
from areliable.retry.executor_async import AsyncRetryExecutor, run_with_retry
