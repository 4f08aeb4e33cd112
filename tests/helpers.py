r"""Shared test helpers for client and retry tests."""

from __future__ import annotations

__all__ = ["TEST_BASE_URL", "FailingOperation", "FakeTransport", "create_response"]

import asyncio
from typing import TYPE_CHECKING, Any

from areliable.transport import BaseTransport, HttpResponse

if TYPE_CHECKING:
    from areliable.core.composer import ResolvedRequest

TEST_BASE_URL = "https://api.example.com"


def create_response(status_code: int = 200, body: Any = None, **headers: str) -> HttpResponse:
    """Create an HttpResponse with the given status code, body and
    headers."""
    return HttpResponse(status_code=status_code, headers=dict(headers), body=body)


class FakeTransport(BaseTransport):
    """In-memory transport recording the requests it receives.

    Args:
        response: The response returned by every call.
        exc: Optional exception raised instead of returning.
        delay: Seconds to wait before answering.
    """

    def __init__(
        self,
        response: HttpResponse | None = None,
        *,
        exc: Exception | None = None,
        delay: float = 0.0,
    ) -> None:
        self.response = response if response is not None else create_response(200, "ok")
        self.exc = exc
        self.delay = delay
        self.requests: list[ResolvedRequest] = []
        self.cancelled = False
        self.closed = False

    async def execute(self, request: ResolvedRequest) -> HttpResponse:
        self.requests.append(request)
        try:
            if self.delay:
                await asyncio.sleep(self.delay)
        except asyncio.CancelledError:
            self.cancelled = True
            raise
        if self.exc is not None:
            raise self.exc
        return self.response

    async def aclose(self) -> None:
        self.closed = True


class FailingOperation:
    """Async callable failing with the given exceptions, then returning
    ``result``.

    Args:
        errors: Exceptions raised by successive calls. Once exhausted,
            calls return ``result``. When ``always`` is set, the last
            exception is raised forever.
        result: The value returned once all errors were raised.
        always: Whether to keep raising the last exception.
    """

    def __init__(self, *errors: Exception, result: Any = "done", always: bool = False) -> None:
        self.errors = list(errors)
        self.result = result
        self.always = always
        self.call_count = 0

    async def __call__(self) -> Any:
        self.call_count += 1
        if self.always:
            raise self.errors[-1]
        if self.call_count <= len(self.errors):
            raise self.errors[self.call_count - 1]
        return self.result
