from __future__ import annotations

from typing import TYPE_CHECKING
from unittest.mock import Mock, patch

import pytest

from areliable.client_async import AsyncHttpsClient
from areliable.core.config import ClientConfig
from areliable.settings import Settings
from areliable.transport import HttpResponse
from tests.helpers import TEST_BASE_URL, FakeTransport

if TYPE_CHECKING:
    from collections.abc import Generator


@pytest.fixture
def mock_asleep() -> Generator[Mock, None, None]:
    """Patch asyncio.sleep to make tests run faster."""
    with patch("asyncio.sleep", return_value=None) as mock:
        yield mock


@pytest.fixture
def settings() -> Settings:
    """Create settings independent of the environment."""
    return Settings(https_default_timeout=10.0, redis_host=None)


@pytest.fixture
def mock_logger() -> Mock:
    """Create a mock logger exposing the AppLogger methods."""
    return Mock(spec=["debug", "warning", "error", "success"])


@pytest.fixture
def fake_transport() -> FakeTransport:
    """Create a transport answering 200 with a JSON body."""
    return FakeTransport(HttpResponse(200, {"content-type": "application/json"}, {"ok": True}))


@pytest.fixture
def client(settings: Settings, mock_logger: Mock, fake_transport: FakeTransport) -> AsyncHttpsClient:
    """Create a client configured with a base URL over the fake
    transport."""
    client = AsyncHttpsClient(settings=settings, logger=mock_logger, transport=fake_transport)
    client.setup_instance(ClientConfig(base_url=TEST_BASE_URL))
    return client
