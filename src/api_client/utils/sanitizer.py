# src/api_client/utils/sanitizer.py
"""
Маскирование чувствительных данных перед логированием.

Заголовки Authorization/Cookie, токены и пароли в телах запросов и в
query строках не должны попадать в логи.
"""

import re
from typing import Any, Dict, Mapping

DEFAULT_MASK = "***REDACTED***"

# Точные имена ключей (case-insensitive)
SENSITIVE_KEYS = {
    'authorization', 'proxy-authorization', 'cookie', 'set-cookie',
    'password', 'passwd', 'pwd',
    'token', 'access_token', 'refresh_token', 'id_token', 'jwt',
    'secret', 'client_secret', 'api_key', 'apikey', 'x-api-key',
    'session', 'session_id', 'sessionid', 'csrf_token',
}

# Подстроки: ключ, содержащий любую из них, тоже маскируется
SENSITIVE_SUBSTRINGS = ('password', 'token', 'secret', 'api_key', 'apikey')

SENSITIVE_PATTERNS = [
    # Bearer / Basic в строках
    (re.compile(r'(Bearer\s+)([A-Za-z0-9\-._~+/]+=*)', re.IGNORECASE), r'\1' + DEFAULT_MASK),
    (re.compile(r'(Basic\s+)([A-Za-z0-9+/]+=*)', re.IGNORECASE), r'\1' + DEFAULT_MASK),
    # key=value в query строках и сообщениях
    (re.compile(r'((?:api[_-]?key|token|password|secret)=)([^\s&,;]+)', re.IGNORECASE), r'\1' + DEFAULT_MASK),
]


def is_sensitive_key(key: Any) -> bool:
    """Является ли ключ чувствительным."""
    key_lower = str(key).lower()
    if key_lower in SENSITIVE_KEYS:
        return True
    return any(part in key_lower for part in SENSITIVE_SUBSTRINGS)


def mask_sensitive_data(data: Any, mask: str = DEFAULT_MASK) -> Any:
    """
    Рекурсивно маскирует чувствительные данные в словарях, списках, строках.

    Возвращает копию, исходные данные не меняются.

    Examples:
        >>> mask_sensitive_data({"Authorization": "Bearer abc", "Accept": "application/json"})
        {'Authorization': '***REDACTED***', 'Accept': 'application/json'}

        >>> mask_sensitive_data("resources?token=abc&page=1")
        'resources?token=***REDACTED***&page=1'
    """
    if data is None or isinstance(data, (bool, int, float)):
        return data

    if isinstance(data, str):
        result = data
        for pattern, replacement in SENSITIVE_PATTERNS:
            result = pattern.sub(replacement.replace(DEFAULT_MASK, mask), result)
        return result

    if isinstance(data, Mapping):
        return {
            key: mask if is_sensitive_key(key) else mask_sensitive_data(value, mask)
            for key, value in data.items()
        }

    if isinstance(data, (list, tuple)):
        return type(data)(mask_sensitive_data(item, mask) for item in data)

    # Прочие объекты не трогаем
    return data


def mask_headers(headers: Mapping[str, str], mask: str = DEFAULT_MASK) -> Dict[str, str]:
    """Маскирует чувствительные HTTP заголовки."""
    return mask_sensitive_data(dict(headers), mask)
