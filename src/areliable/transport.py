r"""Transports performing the network I/O of AsyncHttpsClient.

A transport turns a ``ResolvedRequest`` into an ``HttpResponse`` or
raises. It never validates status codes and never applies retries,
both are handled by the client. ``HttpxTransport`` is the default
implementation, built on ``httpx.AsyncClient``.
"""

from __future__ import annotations

__all__ = ["BaseTransport", "HttpResponse", "HttpxTransport", "create_ssl_context", "decode_body"]

import logging
import ssl
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

import httpx

if TYPE_CHECKING:
    from areliable.core.composer import ResolvedRequest
    from areliable.core.config import ClientConfig

logger: logging.Logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HttpResponse:
    """Response envelope returned in ``ReturnMode.FULL``.

    Attributes:
        status_code: The HTTP status code.
        headers: The response headers.
        body: The decoded body: parsed JSON for JSON responses, text
            otherwise, ``None`` when the body is empty.
    """

    status_code: int
    headers: dict[str, str] = field(default_factory=dict)
    body: Any = None


def decode_body(response: httpx.Response) -> Any:
    """Decode the body of an httpx response.

    Example:
        ```pycon
        >>> import httpx
        >>> from areliable.transport import decode_body
        >>> decode_body(httpx.Response(200, json={"ok": True}))
        {'ok': True}
        >>> decode_body(httpx.Response(200, text="hello"))
        'hello'
        >>> decode_body(httpx.Response(204)) is None
        True

        ```
    """
    if not response.content:
        return None
    if "json" in response.headers.get("content-type", ""):
        try:
            return response.json()
        except ValueError:
            logger.debug("Response declared as JSON but could not be decoded, returning text")
    return response.text


class BaseTransport(ABC):
    """Abstract base class for transports.

    Implementations must be safe to use from several concurrent tasks
    and must support cancellation of ``execute`` through
    ``asyncio.Task.cancel``.
    """

    @abstractmethod
    async def execute(self, request: ResolvedRequest) -> HttpResponse:
        """Send the request and return its response.

        Args:
            request: The resolved request to send.

        Returns:
            The response, whatever its status code.

        Raises:
            Exception: Any exception raised while sending the request.
        """

    async def aclose(self) -> None:  # noqa: B027
        r"""Release the resources held by the transport."""


def create_ssl_context(config: ClientConfig) -> ssl.SSLContext | bool:
    """Build the ``verify`` argument of ``httpx.AsyncClient``.

    Returns ``False`` when TLS errors are ignored and no client identity
    is configured, ``True`` for the default verification, and an
    ``ssl.SSLContext`` loaded with the client certificate otherwise.
    """
    if config.tls_identity is None:
        return not config.ignore_tls_errors
    context = ssl.create_default_context()
    if config.ignore_tls_errors:
        context.check_hostname = False
        context.verify_mode = ssl.CERT_NONE
    identity = config.tls_identity
    context.load_cert_chain(identity.cert, identity.key, identity.passphrase)
    return context


class HttpxTransport(BaseTransport):
    """Transport sending requests with ``httpx.AsyncClient``.

    Args:
        config: The client configuration providing the TLS options and
            the default timeout.
        client: Optional pre-built ``httpx.AsyncClient``. When ``None``, one
            is created from ``config``.

    Example:
        ```pycon
        >>> import asyncio
        >>> from areliable.core.composer import ResolvedRequest
        >>> from areliable.core.config import ClientConfig
        >>> from areliable.transport import HttpxTransport
        >>> async def main():  # doctest: +SKIP
        ...     transport = HttpxTransport(ClientConfig())
        ...     try:
        ...         request = ResolvedRequest(method="GET", url="https://example.com", timeout=5.0)
        ...         return await transport.execute(request)
        ...     finally:
        ...         await transport.aclose()
        ...
        >>> asyncio.run(main())  # doctest: +SKIP

        ```
    """

    def __init__(self, config: ClientConfig, client: httpx.AsyncClient | None = None) -> None:
        if client is None:
            client = httpx.AsyncClient(
                verify=create_ssl_context(config),
                timeout=config.default_timeout,
            )
        self._client = client

    def __repr__(self) -> str:
        return f"{self.__class__.__qualname__}(client={self._client!r})"

    async def execute(self, request: ResolvedRequest) -> HttpResponse:
        response = await self._client.request(
            request.method,
            request.url,
            params=request.params,
            json=request.json,
            content=request.content,
            headers=request.headers,
            timeout=request.timeout,
        )
        return HttpResponse(
            status_code=response.status_code,
            headers=dict(response.headers),
            body=decode_body(response),
        )

    async def aclose(self) -> None:
        await self._client.aclose()
