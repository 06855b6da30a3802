"""
Pytest configuration and fixtures for api-client-core tests.
"""

import pytest

from api_client.core.cache import CacheStore
from api_client.core.config import ClientConfig, RetryPolicy
from api_client.core.logging import LoggingConfig, reset_logging


class FakeClock:
    """Управляемые часы для проверки TTL."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def base_url():
    """Base URL for testing."""
    return "https://api.example.com/api"


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cache(clock):
    """CacheStore с TTL 1 секунда и управляемыми часами."""
    return CacheStore(ttl_ms=1000, clock=clock)


@pytest.fixture
def fast_retry():
    """RetryPolicy без заметных задержек."""
    return RetryPolicy(max_retries=3, base_delay_ms=1, max_delay_ms=5, jitter=False)


@pytest.fixture
def config(base_url, fast_retry):
    """ClientConfig для тестов клиента."""
    return ClientConfig(base_url=base_url, retry=fast_retry)


@pytest.fixture
def logging_config():
    """LoggingConfig fixture for testing."""
    return LoggingConfig.create(
        level="DEBUG",
        enable_console=True,
        enable_file=False
    )


@pytest.fixture(autouse=True)
def _reset_logging():
    """Handlers from configure_logging must not leak between tests (caplog needs propagation)."""
    reset_logging()
    yield
    reset_logging()
