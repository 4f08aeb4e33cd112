from __future__ import annotations

import asyncio

import httpx
import pytest

from areliable.exceptions import ErrorCategory
from areliable.utils.exceptions import classify_exception, is_timeout_exception


@pytest.mark.parametrize(
    "exc",
    [
        httpx.ReadTimeout("read"),
        httpx.ConnectTimeout("connect"),
        httpx.PoolTimeout("pool"),
        TimeoutError(),
        asyncio.TimeoutError(),
        OSError("connect timeout after 3000ms"),
        RuntimeError("The operation TIMED OUT"),
    ],
)
def test_is_timeout_exception_true(exc: Exception) -> None:
    assert is_timeout_exception(exc)


@pytest.mark.parametrize(
    "exc",
    [
        httpx.ConnectError("connection refused"),
        httpx.RemoteProtocolError("server disconnected"),
        ValueError("bad value"),
        OSError("Name or service not known"),
    ],
)
def test_is_timeout_exception_false(exc: Exception) -> None:
    assert not is_timeout_exception(exc)


def test_classify_exception() -> None:
    assert classify_exception(httpx.ReadTimeout("read")) is ErrorCategory.TIMEOUT
    assert (
        classify_exception(httpx.ConnectError("refused")) is ErrorCategory.TRANSPORT_EXCEPTION
    )
