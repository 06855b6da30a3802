"""
Иерархия исключений API клиента.

Классификация:
- ApiError.retryable=True  - временные ошибки (таймауты, сеть, 5xx, 408/429)
- ApiError.retryable=False - ошибки клиента (остальные 4xx), ретраить нельзя

Все ошибки запросов приходят к вызывающему коду как ApiError со стабильным
полем `code` (см. ErrorCode).
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional


class ErrorCode(str, Enum):
    """Стабильные коды ошибок."""

    # Сетевые
    NETWORK_ERROR = "network_error"
    TIMEOUT_ERROR = "timeout_error"

    # Ошибки сервера
    SERVER_ERROR = "server_error"
    VALIDATION_ERROR = "validation_error"
    NOT_FOUND = "not_found"
    UNAUTHORIZED = "unauthorized"
    FORBIDDEN = "forbidden"

    # Ошибки клиента
    BAD_REQUEST = "bad_request"
    INVALID_PARAMS = "invalid_params"

    UNKNOWN_ERROR = "unknown_error"


# Статусы, которые считаются временными независимо от диапазона
TRANSIENT_STATUSES = frozenset({408, 429})

# Коды транспортных ошибок (ответа от сервера нет)
TRANSPORT_CODES = frozenset({ErrorCode.TIMEOUT_ERROR.value, ErrorCode.NETWORK_ERROR.value})


def status_to_code(status: Optional[int]) -> str:
    """
    Код ошибки по HTTP статусу.

    Examples:
        >>> status_to_code(503)
        'server_error'
        >>> status_to_code(418)
        'unknown_error'
    """
    if not status:
        return ErrorCode.UNKNOWN_ERROR.value

    if status >= 500:
        return ErrorCode.SERVER_ERROR.value
    if status == 404:
        return ErrorCode.NOT_FOUND.value
    if status == 401:
        return ErrorCode.UNAUTHORIZED.value
    if status == 403:
        return ErrorCode.FORBIDDEN.value
    if status == 422:
        return ErrorCode.VALIDATION_ERROR.value
    if status == 400:
        return ErrorCode.BAD_REQUEST.value

    return ErrorCode.UNKNOWN_ERROR.value


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# BASE
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class ApiClientException(Exception):
    """Базовое исключение API клиента."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ConfigurationError(ApiClientException):
    """Ошибка конфигурации."""


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# API ERROR (TypedError)
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class ApiError(ApiClientException):
    """
    Нормализованная ошибка запроса.

    Создаётся ErrorClassifier'ом из HTTP ответа или транспортного исключения
    и после создания не изменяется.

    Args:
        message: Сообщение (из тела ответа, reason phrase или исключения)
        status: HTTP статус (None для транспортных ошибок)
        code: Стабильный код ошибки (по умолчанию выводится из статуса)
        endpoint: Endpoint запроса
        data: Разобранное тело ответа (если было)

    Examples:
        >>> error = ApiError("Not Found", status=404, endpoint="resources/1")
        >>> error.code
        'not_found'
        >>> error.get_user_message()
        'The requested resource could not be found.'
    """

    is_api_error = True

    def __init__(
        self,
        message: str,
        status: Optional[int] = None,
        code: Optional[str] = None,
        endpoint: Optional[str] = None,
        data: Any = None,
    ):
        super().__init__(message)
        self.status = status
        self.code = str(code) if code else status_to_code(status)
        self.endpoint = endpoint
        self.data = data
        self.timestamp = datetime.now(timezone.utc).isoformat()

    @property
    def retryable(self) -> bool:
        """Временная ли это ошибка (без учёта конкретной RetryPolicy)."""
        if self.status:
            return self.status >= 500 or self.status in TRANSIENT_STATUSES
        return self.code in TRANSPORT_CODES

    def get_user_message(self) -> str:
        """Короткое сообщение для показа пользователю."""
        status = self.status or 0

        if status >= 500:
            return "The server encountered an error. Please try again later."
        if status == 404:
            return "The requested resource could not be found."
        if status == 401:
            return "You need to be logged in to perform this action."
        if status == 403:
            return "You do not have permission to perform this action."
        if status == 400:
            return self.message or "The request was invalid. Please check your input."
        if status == 422:
            return self.message or "The submitted data is invalid. Please check your input."

        if self.code == ErrorCode.TIMEOUT_ERROR.value:
            return "The request timed out. Please try again."
        if self.code == ErrorCode.NETWORK_ERROR.value:
            return "Unable to connect to the server. Please check your internet connection."

        return self.message or "An unexpected error occurred."

    def get_log_details(self) -> Dict[str, Any]:
        """Подробности для логирования."""
        return {
            "name": type(self).__name__,
            "message": self.message,
            "status": self.status,
            "code": self.code,
            "endpoint": self.endpoint,
            "timestamp": self.timestamp,
            "data": self.data,
        }

    def to_dict(self, include_details: bool = True) -> Dict[str, Any]:
        """
        Конверт ошибки для UI.

        Args:
            include_details: Добавить `details` (тело ответа). Не включать в production.
        """
        result = {
            "message": self.get_user_message(),
            "code": self.code,
            "status": self.status,
            "is_api_error": True,
            "timestamp": self.timestamp,
        }
        if include_details:
            result["details"] = self.data
        return result

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(code={self.code!r}, status={self.status!r}, "
            f"endpoint={self.endpoint!r}, message={self.message!r})"
        )


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# ТРАНСПОРТНЫЕ ОШИБКИ
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class NetworkError(ApiError):
    """Сервер недоступен (DNS, connection refused, reset)."""

    def __init__(self, message: str, endpoint: Optional[str] = None, code: Optional[str] = None):
        super().__init__(message, code=code or ErrorCode.NETWORK_ERROR.value, endpoint=endpoint)


class TimeoutError(NetworkError):
    """
    Таймаут запроса.

    Args:
        message: Сообщение об ошибке
        endpoint: Endpoint запроса
        timeout_ms: Значение таймаута
    """

    def __init__(self, message: str, endpoint: Optional[str] = None, timeout_ms: Optional[int] = None):
        self.timeout_ms = timeout_ms
        msg = message
        if timeout_ms:
            msg += f" (timeout: {timeout_ms}ms)"
        super().__init__(msg, endpoint, code=ErrorCode.TIMEOUT_ERROR.value)


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# HTTP ОШИБКИ
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class ServerError(ApiError):
    """5xx ошибка сервера."""


class BadRequestError(ApiError):
    """400 Bad Request."""


class UnauthorizedError(ApiError):
    """401 Unauthorized."""


class ForbiddenError(ApiError):
    """403 Forbidden."""


class NotFoundError(ApiError):
    """404 Not Found."""


class ValidationError(ApiError):
    """422 Unprocessable Entity."""


class InvalidParamsError(ApiError):
    """Невалидные параметры вызова, запрос не отправлялся."""

    def __init__(self, message: str, endpoint: Optional[str] = None):
        super().__init__(message, code=ErrorCode.INVALID_PARAMS.value, endpoint=endpoint)


# Класс ошибки для HTTP ответа по коду
HTTP_ERROR_CLASSES = {
    ErrorCode.SERVER_ERROR.value: ServerError,
    ErrorCode.BAD_REQUEST.value: BadRequestError,
    ErrorCode.UNAUTHORIZED.value: UnauthorizedError,
    ErrorCode.FORBIDDEN.value: ForbiddenError,
    ErrorCode.NOT_FOUND.value: NotFoundError,
    ErrorCode.VALIDATION_ERROR.value: ValidationError,
}
