"""
Retry engine для повторных попыток.

Включает:
- Exponential backoff с jitter (compute_delay)
- Стандартный предикат default_should_retry
- RetryEngine.execute_with_retry - цикл попыток вокруг async операции
"""

import asyncio
import logging
import math
import random
import time
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Optional, TypeVar

from .config import NoRetry, RetryPolicy, RetrySetting
from .error_handler import ErrorClassifier
from .exceptions import TRANSPORT_CODES, ApiError

logger = logging.getLogger(__name__)

T = TypeVar("T")

JITTER_FACTOR = 0.25  # ±25%


def compute_delay(attempt_number: int, policy: RetryPolicy) -> int:
    """
    Задержка перед повтором (мс).

    2^attempt * base_delay_ms, ограничено max_delay_ms; с jitter умножается
    на случайный множитель из [0.75, 1.25] и округляется вниз.

    Examples:
        >>> policy = RetryPolicy(base_delay_ms=300, jitter=False)
        >>> [compute_delay(n, policy) for n in range(3)]
        [300, 600, 1200]
    """
    if attempt_number < 0:
        raise ValueError("attempt_number must be non-negative")

    delay = min((2 ** attempt_number) * policy.base_delay_ms, policy.max_delay_ms)

    if policy.jitter:
        random_factor = 1 - JITTER_FACTOR + random.random() * JITTER_FACTOR * 2
        return int(math.floor(delay * random_factor))

    return int(delay)


def default_should_retry(error: ApiError, policy: RetryPolicy) -> bool:
    """
    Стандартное решение о повторе.

    Ретраим статусы из retryable_statuses и любые 5xx; без статуса - только
    транспортные ошибки (таймаут, сеть). Остальные 4xx никогда.
    """
    if error.status:
        return error.status in policy.retryable_statuses or error.status >= 500
    return error.code in TRANSPORT_CODES


@dataclass
class RequestAttempt:
    """Состояние текущей попытки."""
    attempt_number: int = 0
    started_at: float = field(default_factory=time.monotonic)


class RetryEngine:
    """
    Выполняет async операцию с повторами по RetryPolicy.

    Состояния: Attempting -> Succeeded | Retrying -> Attempting | Failed.
    Операция вызывается не более max_retries + 1 раз; финальная ошибка
    пробрасывается как ApiError без обёртки.

    Examples:
        >>> engine = RetryEngine(RetryPolicy(max_retries=2))
        >>> data = await engine.execute_with_retry(lambda: fetch_items(), context="GET items")
    """

    def __init__(self, policy: Optional[RetrySetting] = None):
        """
        Args:
            policy: RetryPolicy или NO_RETRY (по умолчанию RetryPolicy())
        """
        self.policy = policy if policy is not None else RetryPolicy()

    def should_retry(self, error: ApiError, attempt: RequestAttempt) -> bool:
        """Решить, нужен ли повтор после ошибки."""
        if isinstance(self.policy, NoRetry):
            return False

        if attempt.attempt_number >= self.policy.max_retries:
            return False

        if self.policy.should_retry is not None:
            return bool(self.policy.should_retry(error))

        return default_should_retry(error, self.policy)

    async def execute_with_retry(
        self,
        operation: Callable[[], Awaitable[T]],
        context: Optional[str] = None,
    ) -> T:
        """
        Выполнить операцию с повторами.

        Args:
            operation: Фабрика корутины (вызывается заново на каждую попытку)
            context: Описание запроса для логов

        Returns:
            Результат операции

        Raises:
            ApiError: финальная ошибка после исчерпания попыток или неретраибельная
        """
        attempt = RequestAttempt()

        while True:
            try:
                return await operation()
            except Exception as e:
                error = ErrorClassifier.classify(e)

                if not self.should_retry(error, attempt):
                    if error is e:
                        raise
                    raise error from e

                delay_ms = compute_delay(attempt.attempt_number, self.policy)
                logger.warning(
                    f"Retry attempt {attempt.attempt_number + 1}/{self.policy.max_retries} "
                    f"for {context or 'request'} in {delay_ms}ms: {error.message}",
                    extra={
                        "attempt": attempt.attempt_number + 1,
                        "delay_ms": delay_ms,
                        "error_code": error.code,
                        "status": error.status,
                        "context": context,
                    },
                )

                await asyncio.sleep(delay_ms / 1000)
                attempt = RequestAttempt(attempt_number=attempt.attempt_number + 1)


async def execute_with_retry(
    operation: Callable[[], Awaitable[T]],
    policy: Optional[RetrySetting] = None,
    context: Optional[str] = None,
) -> T:
    """Сокращение для RetryEngine(policy).execute_with_retry(operation)."""
    return await RetryEngine(policy).execute_with_retry(operation, context=context)
