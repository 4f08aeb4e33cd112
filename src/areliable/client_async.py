r"""Configurable asynchronous HTTP client.

This module provides ``AsyncHttpsClient``, a reusable client bound to a
base URL, base headers and data, a default timeout, a status validator
and a return shape. Every call is composed against that configuration,
raced against its timeout and either returns the shaped response or
raises a single ``HttpRequestError``.
"""

from __future__ import annotations

__all__ = ["AsyncHttpsClient", "create_client"]

import asyncio
from typing import TYPE_CHECKING, Any

from areliable.core.composer import RequestDescriptor, compose
from areliable.core.config import ClientConfig, ReturnMode
from areliable.core.user_agent import generate_user_agent
from areliable.core.validation import validate_timeout
from areliable.exceptions import (
    AlreadyConfiguredError,
    ErrorCategory,
    HttpRequestError,
    NotConfiguredError,
)
from areliable.logger import get_logger
from areliable.settings import Settings
from areliable.transport import HttpxTransport
from areliable.utils.exceptions import classify_exception

if TYPE_CHECKING:
    from types import TracebackType
    from typing import Self

    from areliable.core.composer import ResolvedRequest
    from areliable.logger import AppLogger
    from areliable.transport import BaseTransport, HttpResponse


def _discard_result(task: asyncio.Task[Any]) -> None:
    # Retrieve the outcome of an abandoned task so asyncio does not warn
    if not task.cancelled():
        task.exception()


class AsyncHttpsClient:
    r"""Asynchronous HTTP client with timeout racing and normalized
    errors.

    A client is created unconfigured and must be configured exactly once
    with ``setup_instance`` before any request is issued. The
    configuration is read-only afterwards, so a single client can be
    shared by many concurrent tasks.

    Args:
        settings: Settings providing the default timeout. If ``None``,
            settings are loaded from the environment.
        logger: Logger receiving request progress. If ``None``, the
            ``areliable.client_async`` logger is used.
        transport: Optional transport. If ``None``, an ``HttpxTransport``
            is created by ``setup_instance`` and closed by ``aclose``.

    Example:
        ```pycon
        >>> import asyncio
        >>> from areliable import AsyncHttpsClient, ClientConfig
        >>> async def main():  # doctest: +SKIP
        ...     async with AsyncHttpsClient() as client:
        ...         client.setup_instance(ClientConfig(base_url="https://api.example.com"))
        ...         user = await client.get("/users/:id", replacements={"id": 42})
        ...         created = await client.post("/users", json={"name": "Jane"})
        ...
        >>> asyncio.run(main())  # doctest: +SKIP

        ```
    """

    def __init__(
        self,
        *,
        settings: Settings | None = None,
        logger: AppLogger | None = None,
        transport: BaseTransport | None = None,
    ) -> None:
        self.settings = settings if settings is not None else Settings()
        self.logger = logger if logger is not None else get_logger(__name__)
        self._transport = transport
        self._owns_transport = transport is None
        self._config: ClientConfig | None = None

    def __repr__(self) -> str:
        return f"{self.__class__.__qualname__}(config={self._config!r})"

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    @property
    def config(self) -> ClientConfig:
        """The configuration bound by ``setup_instance``.

        Raises:
            NotConfiguredError: If the client was not configured.
        """
        if self._config is None:
            msg = "AsyncHttpsClient must be configured with setup_instance() before use"
            raise NotConfiguredError(msg)
        return self._config

    @property
    def is_configured(self) -> bool:
        return self._config is not None

    def setup_instance(self, config: ClientConfig) -> None:
        """Bind the configuration of this client.

        The default timeout falls back to
        ``settings.https_default_timeout``. When
        ``config.randomize_user_agent`` is set, a user agent is generated
        once and added to the base headers.

        Args:
            config: The client configuration.

        Raises:
            AlreadyConfiguredError: If the client is already configured.
            TypeError: If ``config`` is not a ClientConfig.
        """
        if self._config is not None:
            msg = "AsyncHttpsClient is already configured, create a new client instead"
            raise AlreadyConfiguredError(msg)
        if not isinstance(config, ClientConfig):
            msg = f"config must be a ClientConfig, got {type(config).__name__}"
            raise TypeError(msg)

        base_headers = dict(config.base_headers)
        if config.randomize_user_agent:
            base_headers["user-agent"] = generate_user_agent()

        self._config = config.merge(
            base_headers=base_headers,
            default_timeout=config.default_timeout or self.settings.https_default_timeout,
        )
        if self._transport is None:
            self._transport = HttpxTransport(self._config)
        self.logger.debug(
            f"HTTPS client configured (base_url={self._config.base_url}, "
            f"timeout={self._config.default_timeout}s)"
        )

    async def aclose(self) -> None:
        r"""Close the transport if it was created by this client."""
        if self._owns_transport and self._transport is not None:
            await self._transport.aclose()
            self._transport = None

    async def send(self, descriptor: RequestDescriptor) -> Any:
        """Execute a request descriptor.

        The transport call is raced against the effective timeout. If the
        timer wins, the in-flight call is cancelled.

        Args:
            descriptor: The request to execute.

        Returns:
            The decoded response body for ``ReturnMode.DATA``, or the
            ``HttpResponse`` envelope for ``ReturnMode.FULL``.

        Raises:
            NotConfiguredError: If the client was not configured.
            HttpTimeoutError: If the timeout fired first, or the transport
                raised a timeout.
            HttpValidationError: If the validator rejected the status code.
            HttpTransportError: If the transport raised any other exception.
        """
        config = self.config
        timeout = descriptor.timeout if descriptor.timeout is not None else config.default_timeout
        validate_timeout(timeout)
        request = compose(descriptor, config, timeout)

        self.logger.debug(f"{request.method} {request.url}: sending with {timeout}s timeout...")
        response = await self._race(request)

        validator = descriptor.validator or config.default_validator
        if not validator(response.status_code):
            self.logger.debug(
                f"{request.method} {request.url}: rejected status {response.status_code}"
            )
            raise HttpRequestError.from_failure(
                ErrorCategory.VALIDATION_FAILURE,
                request,
                status_code=response.status_code,
                headers=response.headers,
                body=response.body,
            )

        return_mode = descriptor.return_mode or config.default_return_mode
        if return_mode is ReturnMode.DATA:
            return response.body
        return response

    async def _race(self, request: ResolvedRequest) -> HttpResponse:
        if self._transport is None:
            msg = "AsyncHttpsClient is closed"
            raise RuntimeError(msg)
        task = asyncio.ensure_future(self._transport.execute(request))
        try:
            done, _ = await asyncio.wait({task}, timeout=request.timeout)
        except asyncio.CancelledError:
            task.cancel()
            raise

        if not done:
            task.cancel()
            task.add_done_callback(_discard_result)
            self.logger.debug(f"{request.method} {request.url}: timed out after {request.timeout}s")
            raise HttpRequestError.from_failure(ErrorCategory.TIMEOUT, request)

        try:
            return task.result()
        except Exception as exc:
            category = classify_exception(exc)
            self.logger.debug(f"{request.method} {request.url}: {type(exc).__name__} {exc}")
            raise HttpRequestError.from_failure(category, request, cause=exc) from exc

    async def request(self, method: str, url: str, **kwargs: Any) -> Any:
        r"""Send an HTTP request.

        Args:
            method: HTTP method (GET, POST, PUT, DELETE, etc.).
            url: The URL, relative to the base URL when one is configured.
            **kwargs: Other ``RequestDescriptor`` fields (params, json, form,
                headers, replacements, timeout, validator, return_mode).

        Returns:
            See ``send``.
        """
        return await self.send(RequestDescriptor(method=method, url=url, **kwargs))

    async def get(self, url: str, **kwargs: Any) -> Any:
        r"""Send an HTTP GET request (see ``request``)."""
        return await self.request("GET", url, **kwargs)

    async def post(self, url: str, **kwargs: Any) -> Any:
        r"""Send an HTTP POST request (see ``request``)."""
        return await self.request("POST", url, **kwargs)

    async def put(self, url: str, **kwargs: Any) -> Any:
        r"""Send an HTTP PUT request (see ``request``)."""
        return await self.request("PUT", url, **kwargs)

    async def delete(self, url: str, **kwargs: Any) -> Any:
        r"""Send an HTTP DELETE request (see ``request``)."""
        return await self.request("DELETE", url, **kwargs)


def create_client(
    *,
    settings: Settings | None = None,
    logger: AppLogger | None = None,
    transport: BaseTransport | None = None,
) -> AsyncHttpsClient:
    """Return a fresh, unconfigured client.

    Each caller owns the client it creates. Call ``setup_instance`` on
    it before issuing requests.

    Example:
        ```pycon
        >>> from areliable import create_client
        >>> from areliable.settings import Settings
        >>> client = create_client(settings=Settings())
        >>> client.is_configured
        False

        ```
    """
    return AsyncHttpsClient(settings=settings, logger=logger, transport=transport)
