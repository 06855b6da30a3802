# src/api_client/client.py
"""
Асинхронный API клиент на базе httpx.

Кэширует GET ответы, повторяет временные ошибки с exponential backoff,
ограничивает каждую попытку таймаутом и приводит все ошибки к ApiError.
"""

import asyncio
import copy
import logging
import time
from typing import Any, Dict, Mapping, Optional

import httpx

from .core.cache import CacheStore, generate_cache_key, normalize_endpoint
from .core.config import ClientConfig, RequestOptions
from .core.error_handler import ErrorClassifier, log_api_error, process_response
from .core.exceptions import ApiError
from .core.logging import configure_logging
from .core.retry_engine import RetryEngine
from .utils.sanitizer import mask_headers, mask_sensitive_data

logger = logging.getLogger(__name__)

# Заголовки, которые не отправляются при credentials='omit'
CREDENTIAL_HEADERS = frozenset({"authorization", "cookie"})


class RequestClient:
    """
    API клиент с кэшем, retry и таймаутами.

    Example:
        >>> async with RequestClient(ClientConfig(base_url="https://api.example.com/api")) as client:
        ...     result = await client.get("resources", params={"type": "book"})
        ...     await client.post("resources", {"title": "..."}, invalidate_cache=True)

    Features:
        - GET ответы кэшируются (TTL, ленивое устаревание)
        - Повторы по RetryPolicy (или NO_RETRY)
        - Таймаут на каждую попытку через отмену
        - Все ошибки приходят как ApiError
    """

    def __init__(
        self,
        config: Optional[ClientConfig] = None,
        *,
        cache: Optional[CacheStore] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Args:
            config: ClientConfig (по умолчанию ClientConfig())
            cache: Хранилище кэша (по умолчанию своё, с TTL из config)
            http_client: Готовый httpx.AsyncClient (клиент его не закрывает)
        """
        self._config = config or ClientConfig()
        self._cache = cache if cache is not None else CacheStore(ttl_ms=self._config.cache_ttl_ms)

        # Клиент создаётся лениво, если не передан снаружи
        self._client: Optional[httpx.AsyncClient] = http_client
        self._owns_client = http_client is None

        if self._config.logging is not None:
            configure_logging(self._config.logging)

    async def _get_client(self) -> httpx.AsyncClient:
        """Получить или создать httpx клиент."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self._config.timeout_ms / 1000),
            )
        return self._client

    async def __aenter__(self) -> "RequestClient":
        await self._get_client()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def close(self) -> None:
        """Закрыть httpx клиент, если он создан этим клиентом."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    # ==================== URL и заголовки ====================

    def get_full_url(self, endpoint: str) -> str:
        """
        Полный URL для endpoint.

        Examples:
            >>> RequestClient(ClientConfig(base_url="http://localhost:5000/api/")).get_full_url("/resources")
            'http://localhost:5000/api/resources'
        """
        if endpoint.startswith(("http://", "https://")):
            return endpoint
        return f"{self._config.base_url}/{endpoint.lstrip('/')}"

    def _build_headers(self, options: RequestOptions) -> Dict[str, str]:
        headers = dict(self._config.headers)
        headers.update(options.headers)

        if options.credentials == "omit":
            headers = {
                name: value for name, value in headers.items()
                if name.lower() not in CREDENTIAL_HEADERS
            }

        return headers

    @staticmethod
    def _resolve_options(options: Optional[RequestOptions], overrides: Mapping[str, Any]) -> RequestOptions:
        if options is None:
            return RequestOptions(**overrides)
        return options.merge(**overrides)

    # ==================== Транспорт ====================

    async def _send(
        self,
        method: str,
        endpoint: str,
        options: RequestOptions,
        data: Any = None,
    ) -> Any:
        """
        Одна попытка запроса.

        Raises:
            ApiError: любая ошибка, уже классифицированная
        """
        url = self.get_full_url(endpoint)
        headers = self._build_headers(options)
        timeout_ms = options.timeout_ms or self._config.timeout_ms

        # Таймаут httpx равен таймауту попытки
        request_kwargs: Dict[str, Any] = {
            "headers": headers,
            "timeout": httpx.Timeout(timeout_ms / 1000),
        }
        if options.params:
            request_kwargs["params"] = dict(options.params)
        if data is not None and method in ("POST", "PUT"):
            request_kwargs["json"] = data

        client = await self._get_client()

        if not self._config.is_production:
            logger.debug(
                f"Request: {method} {mask_sensitive_data(url)}",
                extra={
                    "method": method,
                    "url": mask_sensitive_data(url),
                    "headers": mask_headers(headers),
                    "params": mask_sensitive_data(request_kwargs.get("params")),
                },
            )

        start = time.monotonic()
        try:
            # wait_for отменяет зависший запрос по истечении таймаута
            response = await asyncio.wait_for(
                client.request(method, url, **request_kwargs),
                timeout=timeout_ms / 1000,
            )
        except Exception as e:
            raise ErrorClassifier.classify(e, endpoint=endpoint, timeout_ms=timeout_ms) from e

        if not self._config.is_production:
            logger.debug(
                f"Response: {response.status_code} {method} {mask_sensitive_data(url)}",
                extra={
                    "method": method,
                    "status_code": response.status_code,
                    "duration_ms": round((time.monotonic() - start) * 1000, 2),
                },
            )

        return process_response(response, endpoint)

    async def _execute(
        self,
        method: str,
        endpoint: str,
        options: RequestOptions,
        data: Any = None,
    ) -> Any:
        """Запрос через RetryEngine с логированием финальной ошибки."""
        policy = options.retry if options.retry is not None else self._config.retry
        engine = RetryEngine(policy)
        context = f"{method} {endpoint}"

        try:
            return await engine.execute_with_retry(
                lambda: self._send(method, endpoint, options, data),
                context=context,
            )
        except ApiError as error:
            log_api_error(error, context, environment=self._config.environment)
            raise

    @staticmethod
    def _envelope(data: Any, cached: bool) -> Dict[str, Any]:
        """{**data, cached}; не-словари кладутся в ключ 'data'. Глубокая копия: запись кэша не меняется."""
        data = copy.deepcopy(data)
        if isinstance(data, dict):
            return {**data, "cached": cached}
        return {"data": data, "cached": cached}

    # ==================== HTTP методы ====================

    async def get(
        self,
        endpoint: str,
        options: Optional[RequestOptions] = None,
        **overrides: Any,
    ) -> Dict[str, Any]:
        """
        GET запрос с кэшем.

        Args:
            endpoint: Endpoint относительно base_url
            options: RequestOptions
            **overrides: Поля RequestOptions (cache=False, params={...}, ...)

        Returns:
            Тело ответа с ключом `cached`

        Raises:
            ApiError: запрос не удался
        """
        opts = self._resolve_options(options, overrides)
        cache_key = generate_cache_key(endpoint, opts.params)

        if opts.cache:
            entry = self._cache.get(cache_key)
            if entry is not None:
                logger.debug(f"Cache HIT for GET {endpoint}", extra={"cache_key": cache_key})
                return self._envelope(entry.value, cached=True)
            logger.debug(f"Cache MISS for GET {endpoint}", extra={"cache_key": cache_key})

        data = await self._execute("GET", endpoint, opts)

        if opts.cache:
            self._cache.set(cache_key, data)

        return self._envelope(data, cached=False)

    async def post(
        self,
        endpoint: str,
        data: Any = None,
        options: Optional[RequestOptions] = None,
        **overrides: Any,
    ) -> Any:
        """POST запрос. Не кэшируется."""
        return await self._mutate("POST", endpoint, data, options, overrides)

    async def put(
        self,
        endpoint: str,
        data: Any = None,
        options: Optional[RequestOptions] = None,
        **overrides: Any,
    ) -> Any:
        """PUT запрос. Не кэшируется."""
        return await self._mutate("PUT", endpoint, data, options, overrides)

    async def delete(
        self,
        endpoint: str,
        options: Optional[RequestOptions] = None,
        **overrides: Any,
    ) -> Any:
        """DELETE запрос. Не кэшируется."""
        return await self._mutate("DELETE", endpoint, None, options, overrides)

    async def _mutate(
        self,
        method: str,
        endpoint: str,
        data: Any,
        options: Optional[RequestOptions],
        overrides: Mapping[str, Any],
    ) -> Any:
        opts = self._resolve_options(options, overrides)
        result = await self._execute(method, endpoint, opts, data)

        if opts.invalidate_cache:
            self.clear_cache(endpoint.split("?", 1)[0])

        return result

    # ==================== Кэш ====================

    def clear_cache(self, endpoint_prefix: Optional[str] = None) -> int:
        """
        Сбросить кэш целиком или для endpoint'а и его под-путей.

        Returns:
            Количество удалённых записей
        """
        removed = self._cache.invalidate(normalize_endpoint(endpoint_prefix) if endpoint_prefix else None)
        if endpoint_prefix:
            logger.info(f"Cache cleared for endpoint: {endpoint_prefix}", extra={"removed": removed})
        else:
            logger.info("Entire cache cleared", extra={"removed": removed})
        return removed

    def is_cache_valid(
        self,
        endpoint: str,
        options: Optional[RequestOptions] = None,
        **overrides: Any,
    ) -> bool:
        """Есть ли свежая запись кэша для такого GET."""
        opts = self._resolve_options(options, overrides)
        return self._cache.is_valid(generate_cache_key(endpoint, opts.params))

    # ==================== Properties ====================

    @property
    def config(self) -> ClientConfig:
        return self._config

    @property
    def cache(self) -> CacheStore:
        return self._cache

    @property
    def base_url(self) -> str:
        """Базовый URL."""
        return self._config.base_url
