"""Тесты RetryEngine и compute_delay."""

import logging
from unittest.mock import AsyncMock, patch

import httpx
import pytest

from api_client.core.config import NO_RETRY, RetryPolicy
from api_client.core.exceptions import ApiError, NetworkError, TimeoutError
from api_client.core.retry_engine import (
    RequestAttempt,
    RetryEngine,
    compute_delay,
    default_should_retry,
    execute_with_retry,
)


class FlakyOperation:
    """Падает заданными ошибками, затем возвращает результат."""

    def __init__(self, errors, result="ok"):
        self.errors = list(errors)
        self.result = result
        self.calls = 0

    async def __call__(self):
        self.calls += 1
        if self.errors:
            raise self.errors.pop(0)
        return self.result


# ==================== compute_delay ====================

def test_compute_delay_without_jitter():
    policy = RetryPolicy(base_delay_ms=300, max_delay_ms=10_000, jitter=False)
    assert [compute_delay(n, policy) for n in range(5)] == [300, 600, 1200, 2400, 4800]


def test_compute_delay_capped():
    policy = RetryPolicy(base_delay_ms=300, max_delay_ms=1000, jitter=False)
    assert compute_delay(2, policy) == 1000
    assert compute_delay(10, policy) == 1000


def test_compute_delay_jitter_bounds():
    policy = RetryPolicy(base_delay_ms=300, max_delay_ms=10_000, jitter=True)
    for n in range(6):
        nominal = min(2 ** n * 300, 10_000)
        for _ in range(50):
            delay = compute_delay(n, policy)
            assert int(nominal * 0.75) <= delay <= int(nominal * 1.25)


def test_compute_delay_jitter_extremes():
    policy = RetryPolicy(base_delay_ms=300, jitter=True)
    with patch("api_client.core.retry_engine.random.random", return_value=0.0):
        assert compute_delay(1, policy) == 450
    with patch("api_client.core.retry_engine.random.random", return_value=0.5):
        assert compute_delay(1, policy) == 600


def test_compute_delay_zero_base():
    assert compute_delay(3, RetryPolicy(base_delay_ms=0, jitter=True)) == 0


def test_compute_delay_negative_attempt():
    with pytest.raises(ValueError):
        compute_delay(-1, RetryPolicy())


# ==================== should_retry ====================

@pytest.mark.parametrize("error,expected", [
    (ApiError("x", status=500), True),
    (ApiError("x", status=502), True),
    (ApiError("x", status=507), True),
    (ApiError("x", status=408), True),
    (ApiError("x", status=429), True),
    (ApiError("x", status=400), False),
    (ApiError("x", status=404), False),
    (ApiError("x", status=422), False),
    (TimeoutError("slow"), True),
    (NetworkError("down"), True),
    (ApiError("x", code="unknown_error"), False),
])
def test_default_should_retry(error, expected):
    assert default_should_retry(error, RetryPolicy()) is expected


def test_should_retry_respects_max_retries():
    engine = RetryEngine(RetryPolicy(max_retries=2))
    error = ApiError("x", status=503)

    assert engine.should_retry(error, RequestAttempt(attempt_number=1)) is True
    assert engine.should_retry(error, RequestAttempt(attempt_number=2)) is False


def test_should_retry_no_retry():
    engine = RetryEngine(NO_RETRY)
    assert engine.should_retry(ApiError("x", status=503), RequestAttempt()) is False


def test_custom_predicate_overrides_default():
    policy = RetryPolicy(should_retry=lambda error: error.status == 404)
    engine = RetryEngine(policy)

    assert engine.should_retry(ApiError("x", status=404), RequestAttempt()) is True
    assert engine.should_retry(ApiError("x", status=503), RequestAttempt()) is False


# ==================== execute_with_retry ====================

@pytest.mark.asyncio
async def test_success_first_attempt():
    operation = FlakyOperation([])
    result = await RetryEngine(RetryPolicy(base_delay_ms=1)).execute_with_retry(operation)

    assert result == "ok"
    assert operation.calls == 1


@pytest.mark.asyncio
async def test_retries_then_succeeds():
    operation = FlakyOperation([ApiError("x", status=503), httpx.ConnectError("refused")])
    policy = RetryPolicy(max_retries=3, base_delay_ms=1, jitter=False)

    assert await execute_with_retry(operation, policy) == "ok"
    assert operation.calls == 3


@pytest.mark.asyncio
async def test_exhausted_raises_last_error():
    operation = FlakyOperation([ApiError(f"fail {i}", status=500) for i in range(10)])
    policy = RetryPolicy(max_retries=2, base_delay_ms=1, jitter=False)

    with pytest.raises(ApiError) as exc_info:
        await execute_with_retry(operation, policy)

    assert operation.calls == 3
    assert exc_info.value.message == "fail 2"


@pytest.mark.asyncio
async def test_non_retryable_fails_immediately():
    operation = FlakyOperation([ApiError("bad", status=400)])

    with pytest.raises(ApiError) as exc_info:
        await execute_with_retry(operation, RetryPolicy(base_delay_ms=1))

    assert operation.calls == 1
    assert exc_info.value.code == "bad_request"


@pytest.mark.asyncio
async def test_no_retry_runs_once():
    operation = FlakyOperation([ApiError("x", status=503)])

    with pytest.raises(ApiError):
        await execute_with_retry(operation, NO_RETRY)

    assert operation.calls == 1


@pytest.mark.asyncio
async def test_raw_exception_is_classified():
    operation = FlakyOperation([httpx.ConnectError("refused")])

    with pytest.raises(NetworkError) as exc_info:
        await execute_with_retry(operation, NO_RETRY, context="GET resources")

    assert exc_info.value.code == "network_error"
    assert exc_info.value.endpoint is None
    assert isinstance(exc_info.value.__cause__, httpx.ConnectError)


@pytest.mark.asyncio
async def test_sleeps_with_backoff_delays():
    operation = FlakyOperation([ApiError("x", status=503)] * 3)
    policy = RetryPolicy(max_retries=3, base_delay_ms=300, jitter=False)

    with patch("api_client.core.retry_engine.asyncio.sleep", new_callable=AsyncMock) as sleep:
        assert await execute_with_retry(operation, policy) == "ok"

    assert [c.args[0] for c in sleep.await_args_list] == [0.3, 0.6, 1.2]


@pytest.mark.asyncio
async def test_logs_retry_attempts(caplog):
    operation = FlakyOperation([ApiError("unavailable", status=503)])
    policy = RetryPolicy(max_retries=3, base_delay_ms=1, jitter=False)

    with caplog.at_level(logging.WARNING, logger="api_client"):
        await execute_with_retry(operation, policy, context="GET resources")

    assert len(caplog.records) == 1
    record = caplog.records[0]
    assert "Retry attempt 1/3 for GET resources" in record.getMessage()
    assert record.attempt == 1
    assert record.delay_ms == 1
    assert record.status == 503
