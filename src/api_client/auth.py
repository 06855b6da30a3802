# src/api_client/auth.py

import inspect
from typing import Any, Awaitable, Callable, Dict, Optional, Union

TokenProvider = Callable[[], Union[Optional[str], Awaitable[Optional[str]]]]


class BearerTokenAuth:
    """
    Bearer аутентификация.

    Токен берётся у провайдера на каждый запрос, поэтому обновлённый токен
    подхватывается без пересоздания клиента.

    Example:
        >>> auth = BearerTokenAuth(lambda: session.get("token"))
        >>> await auth.headers()
        {'Authorization': 'Bearer ...'}
    """

    def __init__(self, token_provider: TokenProvider):
        """
        Args:
            token_provider: Функция (обычная или async), возвращающая токен или None
        """
        if not callable(token_provider):
            raise TypeError("token_provider must be callable")
        self._token_provider = token_provider

    async def get_token(self) -> Optional[str]:
        """Текущий токен (None, если пользователь не залогинен)."""
        token: Any = self._token_provider()
        if inspect.isawaitable(token):
            token = await token
        return token or None

    async def headers(self) -> Dict[str, str]:
        """Заголовки аутентификации (пустой словарь без токена)."""
        token = await self.get_token()
        if not token:
            return {}
        return {"Authorization": f"Bearer {token}"}
