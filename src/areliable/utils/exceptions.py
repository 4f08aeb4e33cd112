r"""Classification of exceptions raised by transports."""

from __future__ import annotations

__all__ = ["classify_exception", "is_timeout_exception"]

import httpx

from areliable.exceptions import ErrorCategory


def is_timeout_exception(exc: BaseException) -> bool:
    """Indicate whether a transport exception reports a timeout.

    An exception is a timeout when it is an ``httpx.TimeoutException`` or
    a ``TimeoutError``, or when its message mentions a timeout.

    Example:
        ```pycon
        >>> import httpx
        >>> from areliable.utils.exceptions import is_timeout_exception
        >>> is_timeout_exception(httpx.ReadTimeout("read operation"))
        True
        >>> is_timeout_exception(OSError("connect timeout after 3s"))
        True
        >>> is_timeout_exception(httpx.ConnectError("connection refused"))
        False

        ```
    """
    if isinstance(exc, (httpx.TimeoutException, TimeoutError)):
        return True
    message = str(exc).lower()
    return "timeout" in message or "timed out" in message


def classify_exception(exc: BaseException) -> ErrorCategory:
    r"""Return ``TIMEOUT`` for timeout-flavoured exceptions and
    ``TRANSPORT_EXCEPTION`` otherwise."""
    if is_timeout_exception(exc):
        return ErrorCategory.TIMEOUT
    return ErrorCategory.TRANSPORT_EXCEPTION
