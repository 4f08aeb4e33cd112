r"""Configuration dataclass for the retry executor."""

from __future__ import annotations

__all__ = ["RetryPolicy"]

from dataclasses import dataclass
from typing import TYPE_CHECKING

from areliable.core.validation import validate_retry_params

if TYPE_CHECKING:
    from collections.abc import Callable


@dataclass(frozen=True)
class RetryPolicy:
    """Bounds and pacing of a retried operation.

    Without ``max_retries``, ``max_total_time`` and ``abort_if`` the
    operation is retried forever, so callers should set at least one
    bound.

    Attributes:
        name: Name of the operation, used in log messages.
        max_retries: Maximum number of retries after the first attempt.
            ``None`` means unbounded, ``0`` means a single attempt.
        max_total_time: Optional elapsed-time budget in seconds, measured
            from the first attempt. Checked after each failure.
        delay: Seconds to wait between attempts.
        abort_if: Optional predicate receiving the raised exception. When
            it returns ``True`` the exception is re-raised immediately.

    Example:
        ```pycon
        >>> from areliable.retry import RetryPolicy
        >>> policy = RetryPolicy(name="fetch", max_retries=3, delay=0.5)
        >>> policy.max_total_time is None
        True

        ```
    """

    name: str | None = None
    max_retries: int | None = None
    max_total_time: float | None = None
    delay: float = 0.0
    abort_if: Callable[[Exception], bool] | None = None

    def __post_init__(self) -> None:
        validate_retry_params(
            max_retries=self.max_retries,
            max_total_time=self.max_total_time,
            delay=self.delay,
        )

    @property
    def is_bounded(self) -> bool:
        r"""Indicate whether at least one stop condition is configured."""
        return (
            self.max_retries is not None
            or self.max_total_time is not None
            or self.abort_if is not None
        )
