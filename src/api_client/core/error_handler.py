# src/api_client/core/error_handler.py

import asyncio
import builtins
import logging
from typing import Any, Dict, Optional

import httpx

from .exceptions import (
    HTTP_ERROR_CLASSES,
    ApiError,
    ErrorCode,
    NetworkError,
    TimeoutError,
    status_to_code,
)

logger = logging.getLogger(__name__)

# Уровни для log_api_error
LOG_LEVELS = {
    "error": logging.ERROR,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "info": logging.INFO,
    "debug": logging.DEBUG,
}


class ErrorClassifier:
    """
    Превращает любую ошибку запроса в ApiError.

    Чистая функция без состояния: не логирует и никогда не выбрасывает
    исключений, даже на битом входе.

    Examples:
        >>> error = ErrorClassifier.classify(httpx.Response(404), endpoint="resources/1")
        >>> error.code
        'not_found'
        >>> ErrorClassifier.classify(httpx.ConnectError("refused")).code
        'network_error'
    """

    @staticmethod
    def classify(
        raw: Any,
        endpoint: Optional[str] = None,
        data: Any = None,
        timeout_ms: Optional[int] = None,
    ) -> ApiError:
        """
        Классифицировать ошибку.

        Args:
            raw: httpx.Response с не-2xx статусом, исключение или что угодно
            endpoint: Endpoint запроса (для контекста)
            data: Уже разобранное тело ответа (если None, разбирается из raw)
            timeout_ms: Таймаут попытки (для сообщения timeout_error)

        Returns:
            ApiError (или подкласс)
        """
        try:
            return ErrorClassifier._classify(raw, endpoint, data, timeout_ms)
        except Exception as e:
            # Битый вход: лучшее доступное сообщение
            message = _safe_str(raw) or _safe_str(e) or "An unexpected error occurred."
            return ApiError(message, code=ErrorCode.UNKNOWN_ERROR.value, endpoint=endpoint)

    @staticmethod
    def _classify(raw: Any, endpoint: Optional[str], data: Any, timeout_ms: Optional[int]) -> ApiError:
        if isinstance(raw, ApiError):
            return raw

        if isinstance(raw, httpx.HTTPStatusError):
            raw = raw.response

        if isinstance(raw, httpx.Response):
            return ErrorClassifier.from_response(raw, endpoint, data)

        # Таймаут проверяем первым: httpx.TimeoutException - TransportError, builtins.TimeoutError - OSError
        if isinstance(raw, (asyncio.TimeoutError, builtins.TimeoutError, httpx.TimeoutException)):
            return TimeoutError("Request timed out", endpoint, timeout_ms)

        # Остальные транспортные сбои (обрыв соединения, RemoteProtocolError) тоже сетевые
        if isinstance(raw, (httpx.TransportError, builtins.ConnectionError, OSError)):
            return NetworkError(_safe_str(raw) or "Network error", endpoint)

        if isinstance(raw, BaseException):
            message = _safe_str(raw) or type(raw).__name__
            return ApiError(message, code=ErrorCode.UNKNOWN_ERROR.value, endpoint=endpoint)

        return ApiError(
            _safe_str(raw) or "An unexpected error occurred.",
            code=ErrorCode.UNKNOWN_ERROR.value,
            endpoint=endpoint,
        )

    @staticmethod
    def from_response(response: httpx.Response, endpoint: Optional[str] = None, data: Any = None) -> ApiError:
        """
        ApiError из HTTP ответа.

        Код: `code` из тела ответа, иначе по таблице статусов.
        Сообщение: `message` из тела, иначе reason phrase, иначе "HTTP <status>".
        """
        status = getattr(response, "status_code", None)
        if data is None:
            data = parse_body(response, strict=False)

        body_message = None
        body_code = None
        if isinstance(data, dict):
            body_message = data.get("message")
            body_code = data.get("code")

        reason = getattr(response, "reason_phrase", "") or ""
        message = str(body_message) if body_message else (reason or (f"HTTP {status}" if status else ""))
        if not message:
            message = "An unexpected error occurred."

        status_code = status_to_code(status)
        error_class = HTTP_ERROR_CLASSES.get(status_code, ApiError)
        return error_class(
            message,
            status=status,
            code=str(body_code) if body_code else status_code,
            endpoint=endpoint,
            data=data,
        )

    @staticmethod
    def is_retryable_error(error: Exception) -> bool:
        """Временная ли ошибка (без учёта политики)."""
        return ErrorClassifier.classify(error).retryable


def _safe_str(value: Any) -> str:
    try:
        return str(value) if value is not None else ""
    except Exception:
        return ""


def parse_body(response: httpx.Response, strict: bool = True) -> Any:
    """
    Разобрать тело ответа по content-type: JSON или текст.

    Args:
        response: httpx.Response
        strict: Пробрасывать ValueError на битом JSON (иначе вернуть текст)
    """
    content_type = response.headers.get("content-type", "")
    if "application/json" in content_type:
        try:
            return response.json()
        except ValueError:
            if strict:
                raise
            return response.text
    return response.text


def process_response(response: httpx.Response, endpoint: Optional[str] = None) -> Any:
    """
    Разобрать ответ или выбросить ApiError.

    Args:
        response: httpx.Response
        endpoint: Endpoint запроса

    Returns:
        Разобранное тело (dict/list для JSON, str иначе)

    Raises:
        ApiError: не-2xx статус или битый JSON в успешном ответе
    """
    if not response.is_success:
        raise ErrorClassifier.from_response(response, endpoint)

    try:
        return parse_body(response)
    except ValueError as e:
        raise ApiError(
            f"Invalid JSON in response: {e}",
            status=response.status_code,
            code=ErrorCode.UNKNOWN_ERROR.value,
            endpoint=endpoint,
            data=response.text[:200],
        ) from e


def log_api_error(
    error: Exception,
    context: str = "",
    level: str = "error",
    environment: str = "development",
) -> None:
    """
    Залогировать ошибку API в едином формате.

    В production логируются только ошибки уровня error.
    """
    if environment == "production" and level != "error":
        return

    if isinstance(error, ApiError):
        details = error.get_log_details()
    else:
        details = {"name": type(error).__name__, "message": str(error)}

    logger.log(
        LOG_LEVELS.get(level, logging.ERROR),
        f"API {level} [{context}]: {details['message']}",
        extra={"context": context, "environment": environment, "error_code": details.get("code")},
    )


def handle_api_error(
    error: Exception,
    context: str = "",
    environment: str = "development",
) -> Dict[str, Any]:
    """
    Классифицировать, залогировать и вернуть конверт ошибки для UI.

    Returns:
        {message, code, status, is_api_error, timestamp, details?}
    """
    api_error = ErrorClassifier.classify(error, endpoint=context or None)
    log_api_error(api_error, context, environment=environment)
    return api_error.to_dict(include_details=environment != "production")
