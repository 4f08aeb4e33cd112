r"""Network information helpers built on AsyncHttpsClient."""

from __future__ import annotations

__all__ = ["PUBLIC_IP_URL", "ServerIpResolver"]

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from areliable.client_async import AsyncHttpsClient

PUBLIC_IP_URL = "https://api64.ipify.org"


class ServerIpResolver:
    """Resolve and cache the public IP address of the running server.

    Any failure, including a request error or an invalid timeout, is
    logged through the client's logger and reported as ``None`` so that
    status endpoints keep working offline. A failed lookup is retried on
    the next call. Cancellation is never swallowed.

    Args:
        client: A configured client without base URL.
        url: The service returning the caller's IP address as text.
        timeout: Timeout of the lookup in seconds.
    """

    def __init__(self, client: AsyncHttpsClient, url: str = PUBLIC_IP_URL, timeout: float = 5.0) -> None:
        self._client = client
        self._url = url
        self._timeout = timeout
        self._server_ip: str | None = None

    async def get_server_ip(self) -> str | None:
        if self._server_ip is None:
            try:
                body = await self._client.get(self._url, timeout=self._timeout)
            except Exception as exc:
                self._client.logger.error("failed to acquire server ip address", exc)
            else:
                self._server_ip = str(body).strip()
        return self._server_ip
