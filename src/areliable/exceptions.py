r"""Exceptions raised by areliable clients and helpers.

Every failed HTTP call surfaces as a single ``HttpRequestError`` carrying
the resolved request and, when one was received, the response status,
headers and body. The concrete subclass tells the failure category
apart so callers can catch only what they care about.
"""

from __future__ import annotations

__all__ = [
    "AlreadyConfiguredError",
    "CacheDisabledError",
    "ErrorCategory",
    "HttpRequestError",
    "HttpTimeoutError",
    "HttpTransportError",
    "HttpValidationError",
    "NotConfiguredError",
]

import enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Mapping

    from areliable.core.composer import ResolvedRequest


class ErrorCategory(enum.Enum):
    """Failure categories of an HTTP call."""

    TIMEOUT = "timeout"
    VALIDATION_FAILURE = "validation_failure"
    TRANSPORT_EXCEPTION = "transport_exception"


# Human readable prefix of the error message for each category
ERROR_PREFIXES: dict[ErrorCategory, str] = {
    ErrorCategory.TIMEOUT: "Request timeout",
    ErrorCategory.VALIDATION_FAILURE: "Request failed",
    ErrorCategory.TRANSPORT_EXCEPTION: "Request exception",
}


class NotConfiguredError(RuntimeError):
    r"""Raised when a client is used before ``setup_instance`` was
    called."""


class AlreadyConfiguredError(RuntimeError):
    r"""Raised when ``setup_instance`` is called on a configured client."""


class CacheDisabledError(RuntimeError):
    r"""Raised when the key-value cache is used without a configured
    host."""


class HttpRequestError(RuntimeError):
    """Normalized error raised when an HTTP call fails.

    Args:
        message: Human-readable error message.
        category: The failure category.
        request: The resolved request that was sent.
        status_code: Response status code, if a response was received.
        headers: Response headers, if a response was received.
        body: Decoded response body, if a response was received.
        cause: The original exception raised by the transport, if any.

    Example:
        ```pycon
        >>> from areliable.core.composer import ResolvedRequest
        >>> from areliable.exceptions import ErrorCategory, HttpRequestError
        >>> request = ResolvedRequest(method="GET", url="https://example.com", timeout=1.0)
        >>> error = HttpRequestError.from_failure(
        ...     ErrorCategory.VALIDATION_FAILURE, request, status_code=404, body="missing"
        ... )
        >>> str(error)
        'Request failed: GET https://example.com'
        >>> error.status_code
        404

        ```
    """

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory,
        request: ResolvedRequest,
        status_code: int | None = None,
        headers: Mapping[str, str] | None = None,
        body: Any = None,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.category = category
        self.request = request
        self.status_code = status_code
        self.headers = headers
        self.body = body
        self.__cause__ = cause

    @property
    def cause(self) -> BaseException | None:
        return self.__cause__

    @classmethod
    def from_failure(
        cls,
        category: ErrorCategory,
        request: ResolvedRequest,
        *,
        status_code: int | None = None,
        headers: Mapping[str, str] | None = None,
        body: Any = None,
        cause: BaseException | None = None,
    ) -> HttpRequestError:
        """Build the error subclass matching ``category``.

        The message is ``"<prefix>: <METHOD> <url>"`` where the prefix is
        ``Request timeout``, ``Request failed`` or ``Request exception``.
        """
        error_cls = _CATEGORY_CLASSES[category]
        message = f"{ERROR_PREFIXES[category]}: {request.method} {request.url}"
        return error_cls(
            message,
            category=category,
            request=request,
            status_code=status_code,
            headers=headers,
            body=body,
            cause=cause,
        )

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__qualname__}(category={self.category.name}, "
            f"message={self.message!r}, status_code={self.status_code})"
        )


class HttpTimeoutError(HttpRequestError):
    r"""The request did not complete before its timeout."""


class HttpValidationError(HttpRequestError):
    r"""A response was received but rejected by the status validator."""


class HttpTransportError(HttpRequestError):
    r"""The transport raised an exception that is not a timeout."""


_CATEGORY_CLASSES: dict[ErrorCategory, type[HttpRequestError]] = {
    ErrorCategory.TIMEOUT: HttpTimeoutError,
    ErrorCategory.VALIDATION_FAILURE: HttpValidationError,
    ErrorCategory.TRANSPORT_EXCEPTION: HttpTransportError,
}
