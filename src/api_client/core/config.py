"""
Система конфигурации API клиента.

Все конфиги immutable (frozen dataclasses): политика retry живёт только в
рамках одного логического запроса и не меняется по ходу.
"""

from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Callable, Dict, FrozenSet, Mapping, Optional, Union

if TYPE_CHECKING:
    from .exceptions import ApiError
    from .logging import LoggingConfig

DEFAULT_BASE_URL = "http://localhost:5000/api"
DEFAULT_TIMEOUT_MS = 30_000
DEFAULT_CACHE_TTL_MS = 5 * 60 * 1000  # 5 минут

ENVIRONMENTS = ("development", "staging", "production")
CREDENTIALS_MODES = ("omit", "same-origin", "include")


def _freeze_dict(d: Optional[Mapping[str, Any]]) -> Mapping[str, Any]:
    """Вернуть неизменяемую копию словаря (MappingProxyType)."""
    if d is None:
        return MappingProxyType({})
    return MappingProxyType(dict(d))


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# RETRY POLICY
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

@dataclass(frozen=True)
class RetryPolicy:
    """
    Политика повторных попыток.

    Args:
        max_retries: Максимум повторов (не считая первую попытку)
        base_delay_ms: Базовая задержка (мс), попытка n ждёт 2^n * base
        max_delay_ms: Максимальная задержка (мс)
        jitter: Случайный множитель 0.75-1.25 (против thundering herd)
        retryable_statuses: Какие статус коды ретраить (кроме 5xx)
        should_retry: Свой предикат `(ApiError) -> bool` вместо стандартного

    Examples:
        >>> RetryPolicy(max_retries=5, base_delay_ms=100)
        >>> RetryPolicy(jitter=False, should_retry=lambda error: error.status == 503)
    """
    max_retries: int = 3
    base_delay_ms: int = 300
    max_delay_ms: int = 10_000
    jitter: bool = True
    retryable_statuses: FrozenSet[int] = frozenset({408, 429, 500, 502, 503, 504})
    should_retry: Optional[Callable[["ApiError"], bool]] = field(default=None, compare=False)

    def __post_init__(self):
        """Валидация."""
        if self.max_retries < 0:
            raise ValueError("max_retries must be non-negative")
        if self.base_delay_ms < 0:
            raise ValueError("base_delay_ms must be non-negative")
        if self.max_delay_ms < 0:
            raise ValueError("max_delay_ms must be non-negative")
        if not isinstance(self.retryable_statuses, frozenset):
            object.__setattr__(self, "retryable_statuses", frozenset(self.retryable_statuses))


@dataclass(frozen=True)
class NoRetry:
    """Retry отключён: операция выполняется ровно один раз."""

    def __repr__(self) -> str:
        return "NO_RETRY"


NO_RETRY = NoRetry()

RetrySetting = Union[RetryPolicy, NoRetry]


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# REQUEST OPTIONS
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

@dataclass(frozen=True)
class RequestOptions:
    """
    Параметры одного вызова.

    Args:
        cache: Использовать кэш для GET
        timeout_ms: Таймаут попытки (None = таймаут клиента)
        retry: RetryPolicy, NO_RETRY или None (политика клиента)
        headers: Дополнительные заголовки
        credentials: 'omit' убирает Authorization и Cookie из заголовков
        params: Query параметры (входят в ключ кэша)
        invalidate_cache: После успешной мутации сбросить кэш endpoint'а

    Examples:
        >>> RequestOptions(cache=False)
        >>> RequestOptions(params={"type": "book"}, retry=NO_RETRY)
    """
    cache: bool = True
    timeout_ms: Optional[int] = None
    retry: Optional[RetrySetting] = None
    headers: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    credentials: str = "same-origin"
    params: Optional[Mapping[str, Any]] = None
    invalidate_cache: bool = False

    def __post_init__(self):
        """Валидация и заморозка словарей."""
        if self.timeout_ms is not None and self.timeout_ms <= 0:
            raise ValueError("timeout_ms must be positive")
        if self.retry is not None and not isinstance(self.retry, (RetryPolicy, NoRetry)):
            raise ValueError("retry must be a RetryPolicy, NO_RETRY or None")
        if self.credentials not in CREDENTIALS_MODES:
            raise ValueError(f"credentials must be one of {CREDENTIALS_MODES}")
        if isinstance(self.headers, dict):
            object.__setattr__(self, "headers", _freeze_dict(self.headers))
        if isinstance(self.params, dict):
            object.__setattr__(self, "params", _freeze_dict(self.params))

    def merge(self, **overrides: Any) -> "RequestOptions":
        """Новые опции с переопределёнными полями."""
        if not overrides:
            return self
        return replace(self, **overrides)


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# MAIN CONFIG
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

@dataclass(frozen=True)
class ClientConfig:
    """
    Главная конфигурация RequestClient.

    Args:
        base_url: Базовый URL API
        headers: Заголовки по умолчанию
        timeout_ms: Таймаут одной попытки (мс)
        cache_ttl_ms: Время жизни записи кэша (мс)
        retry: Политика retry по умолчанию
        environment: development / staging / production
        logging: Конфигурация логирования (None = не настраивать)

    Examples:
        >>> config = ClientConfig(base_url="https://api.example.com/api")
        >>> config = ClientConfig.create(timeout_ms=10_000, max_retries=5)
    """
    base_url: str = DEFAULT_BASE_URL
    headers: Mapping[str, str] = field(
        default_factory=lambda: MappingProxyType({"Content-Type": "application/json"})
    )
    timeout_ms: int = DEFAULT_TIMEOUT_MS
    cache_ttl_ms: int = DEFAULT_CACHE_TTL_MS
    retry: RetrySetting = field(default_factory=RetryPolicy)
    environment: str = "development"
    logging: Optional["LoggingConfig"] = None

    def __post_init__(self):
        """Валидация, нормализация base_url и заморозка заголовков."""
        if self.timeout_ms <= 0:
            raise ValueError("timeout_ms must be positive")
        if self.cache_ttl_ms <= 0:
            raise ValueError("cache_ttl_ms must be positive")
        if self.environment not in ENVIRONMENTS:
            raise ValueError(f"environment must be one of {ENVIRONMENTS}")
        if not isinstance(self.retry, (RetryPolicy, NoRetry)):
            raise ValueError("retry must be a RetryPolicy or NO_RETRY")

        if isinstance(self.headers, dict):
            object.__setattr__(self, "headers", _freeze_dict(self.headers))

        normalized = self.base_url.rstrip("/")
        if normalized != self.base_url:
            object.__setattr__(self, "base_url", normalized)

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @classmethod
    def create(
        cls,
        base_url: str = DEFAULT_BASE_URL,
        timeout_ms: int = DEFAULT_TIMEOUT_MS,
        cache_ttl_ms: int = DEFAULT_CACHE_TTL_MS,
        max_retries: Optional[int] = 3,
        base_delay_ms: int = 300,
        max_delay_ms: int = 10_000,
        jitter: bool = True,
        headers: Optional[Dict[str, str]] = None,
        environment: str = "development",
        logging: Optional["LoggingConfig"] = None,
    ) -> "ClientConfig":
        """
        Удобный конструктор конфигурации.

        Args:
            base_url: Базовый URL
            timeout_ms: Таймаут попытки (мс)
            cache_ttl_ms: TTL кэша (мс)
            max_retries: Количество повторов; None отключает retry
            base_delay_ms: Базовая задержка backoff (мс)
            max_delay_ms: Максимальная задержка backoff (мс)
            jitter: Jitter для backoff
            headers: Дополнительные заголовки (объединяются с Content-Type)
            environment: Окружение
            logging: Конфигурация логирования

        Examples:
            >>> config = ClientConfig.create(max_retries=None)  # без retry
            >>> config = ClientConfig.create(environment="production")
        """
        if max_retries is None:
            retry: RetrySetting = NO_RETRY
        else:
            retry = RetryPolicy(
                max_retries=max_retries,
                base_delay_ms=base_delay_ms,
                max_delay_ms=max_delay_ms,
                jitter=jitter,
            )

        merged_headers = {"Content-Type": "application/json"}
        merged_headers.update(headers or {})

        return cls(
            base_url=base_url,
            headers=merged_headers,
            timeout_ms=timeout_ms,
            cache_ttl_ms=cache_ttl_ms,
            retry=retry,
            environment=environment,
            logging=logging,
        )

    def with_retry(self, retry: RetrySetting) -> "ClientConfig":
        """Новый конфиг с другой политикой retry."""
        return replace(self, retry=retry)

    def with_headers(self, headers: Dict[str, str]) -> "ClientConfig":
        """Новый конфиг с дополнительными заголовками."""
        merged = dict(self.headers)
        merged.update(headers)
        return replace(self, headers=merged)
