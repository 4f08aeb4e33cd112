r"""areliable - Resilient asynchronous HTTP calls.

This package provides a configurable asynchronous HTTP client and a
generic retry executor. Built on top of the httpx library, it
standardizes how remote calls are composed, bounded in time and
reported when they fail.

Key Features:
    - One-time client configuration: base URL, headers, data, timeout,
      status validator and return shape
    - URL templates (``/users/:id``) with percent-encoded substitution
    - Automatic URL-encoding of form bodies
    - Timeout racing with cancellation of the losing request
    - A single normalized ``HttpRequestError`` per failed call, carrying
      the request and the response when one was received
    - Retry executor for any async operation: retry count, time budget,
      abort predicate and fixed delay
    - Optional Redis-backed JSON cache and structured JSON logging

Example:
    ```pycon
    >>> import asyncio
    >>> from areliable import AsyncHttpsClient, ClientConfig, run_with_retry
    >>> async def main():  # doctest: +SKIP
    ...     async with AsyncHttpsClient() as client:
    ...         client.setup_instance(
    ...             ClientConfig(base_url="https://api.example.com", default_timeout=10)
    ...         )
    ...         return await run_with_retry(
    ...             lambda: client.get("/items/:id", replacements={"id": 7}),
    ...             name="get_item",
    ...             max_retries=3,
    ...         )
    ...
    >>> asyncio.run(main())  # doctest: +SKIP

    ```
"""

from __future__ import annotations

__all__ = [
    "AlreadyConfiguredError",
    "AsyncHttpsClient",
    "AsyncRetryExecutor",
    "ClientConfig",
    "ErrorCategory",
    "HttpRequestError",
    "HttpResponse",
    "HttpTimeoutError",
    "HttpTransportError",
    "HttpValidationError",
    "NotConfiguredError",
    "RequestDescriptor",
    "RetryPolicy",
    "ReturnMode",
    "Settings",
    "__version__",
    "create_client",
    "run_with_retry",
]

from importlib.metadata import PackageNotFoundError, version

from areliable.client_async import AsyncHttpsClient, create_client
from areliable.core.composer import RequestDescriptor
from areliable.core.config import ClientConfig, ReturnMode
from areliable.exceptions import (
    AlreadyConfiguredError,
    ErrorCategory,
    HttpRequestError,
    HttpTimeoutError,
    HttpTransportError,
    HttpValidationError,
    NotConfiguredError,
)
from areliable.retry import AsyncRetryExecutor, RetryPolicy, run_with_retry
from areliable.settings import Settings
from areliable.transport import HttpResponse

try:
    __version__ = version(__name__)
except PackageNotFoundError:  # pragma: no cover
    # Package is not installed, fallback if needed
    __version__ = "0.0.0"
