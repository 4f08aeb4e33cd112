r"""Parameter validation utilities for clients and retry policies.

This module provides validation functions to ensure timeouts and retry
bounds meet the required constraints before they are used.
"""

from __future__ import annotations

__all__ = ["validate_retry_params", "validate_timeout"]


def validate_timeout(timeout: float | None) -> None:
    """Validate timeout parameter.

    Args:
        timeout: Maximum seconds to wait for server responses.
            Must be > 0 if provided.

    Raises:
        ValueError: If timeout is a numeric value <= 0.

    Example:
        ```pycon
        >>> from areliable.core.validation import validate_timeout
        >>> validate_timeout(10.0)
        >>> validate_timeout(None)
        >>> validate_timeout(0)  # doctest: +SKIP
        Traceback (most recent call last):
        ...
        ValueError: timeout must be > 0, got 0

        ```
    """
    if timeout is not None and timeout <= 0:
        msg = f"timeout must be > 0, got {timeout}"
        raise ValueError(msg)


def validate_retry_params(
    max_retries: int | None = None,
    max_total_time: float | None = None,
    delay: float = 0.0,
) -> None:
    """Validate retry parameters.

    Args:
        max_retries: Maximum number of retry attempts. ``None`` means
            unbounded, otherwise must be >= 0.
        max_total_time: Maximum elapsed time budget in seconds.
            Must be > 0 if provided.
        delay: Seconds to wait between attempts. Must be >= 0.

    Raises:
        ValueError: If max_retries or delay are negative, or if
            max_total_time is non-positive.

    Example:
        ```pycon
        >>> from areliable.core.validation import validate_retry_params
        >>> validate_retry_params(max_retries=3)
        >>> validate_retry_params(max_total_time=30.0, delay=0.5)
        >>> validate_retry_params(max_retries=-1)  # doctest: +SKIP

        ```
    """
    if max_retries is not None and max_retries < 0:
        msg = f"max_retries must be >= 0, got {max_retries}"
        raise ValueError(msg)
    if max_total_time is not None and max_total_time <= 0:
        msg = f"max_total_time must be > 0, got {max_total_time}"
        raise ValueError(msg)
    if delay < 0:
        msg = f"delay must be >= 0, got {delay}"
        raise ValueError(msg)
