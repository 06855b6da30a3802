# src/api_client/services/base.py

import logging
from typing import Any, Dict, Mapping, Optional

from ..auth import BearerTokenAuth
from ..client import RequestClient
from ..core.config import RequestOptions
from ..core.exceptions import InvalidParamsError

logger = logging.getLogger(__name__)


class BaseService:
    """
    Базовый сервис для одной коллекции API.

    Подклассы задают `collection` ("resources", "teachers", ...). Мутации
    сбрасывают кэш всей коллекции, чтобы закэшированные списки не
    переживали изменение своих элементов.
    """

    collection: str = ""

    def __init__(self, client: RequestClient, auth: Optional[BearerTokenAuth] = None):
        if not self.collection:
            raise TypeError(f"{type(self).__name__} must define collection")
        self.client = client
        self.auth = auth

    # ==================== Helpers ====================

    def _item_endpoint(self, item_id: Any, *parts: str) -> str:
        if item_id is None or not str(item_id).strip():
            raise InvalidParamsError(f"{self.collection} id is required", endpoint=self.collection)
        return "/".join([self.collection, str(item_id).strip(), *parts])

    async def _options(self, options: Optional[RequestOptions] = None, **overrides: Any) -> RequestOptions:
        """RequestOptions с заголовками аутентификации."""
        opts = options or RequestOptions()
        if self.auth is not None:
            auth_headers = await self.auth.headers()
            if auth_headers:
                headers = dict(auth_headers)
                headers.update(opts.headers)
                overrides["headers"] = headers
        return opts.merge(**overrides)

    @staticmethod
    def _clean_filters(filters: Optional[Mapping[str, Any]]) -> Optional[Dict[str, Any]]:
        """Фильтры без None значений (None, если ничего не осталось)."""
        if not filters:
            return None
        cleaned = {key: value for key, value in filters.items() if value is not None}
        return cleaned or None

    # ==================== CRUD ====================

    async def get_all(
        self,
        filters: Optional[Mapping[str, Any]] = None,
        options: Optional[RequestOptions] = None,
    ) -> Dict[str, Any]:
        """Список элементов коллекции с фильтрами как query параметрами."""
        params = self._clean_filters(filters)
        if params is not None and options is not None and options.params:
            params = {**options.params, **params}
        opts = await self._options(options, **({"params": params} if params is not None else {}))
        return await self.client.get(self.collection, opts)

    async def get_by_id(self, item_id: Any, options: Optional[RequestOptions] = None) -> Dict[str, Any]:
        return await self.client.get(self._item_endpoint(item_id), await self._options(options))

    async def create(self, data: Any) -> Any:
        result = await self.client.post(
            self.collection, data, await self._options(invalidate_cache=True)
        )
        self.clear_cache()
        return result

    async def update(self, item_id: Any, data: Any) -> Any:
        endpoint = self._item_endpoint(item_id)
        result = await self.client.put(endpoint, data, await self._options(invalidate_cache=True))
        self.clear_cache()
        return result

    async def delete(self, item_id: Any) -> Any:
        endpoint = self._item_endpoint(item_id)
        result = await self.client.delete(endpoint, await self._options(invalidate_cache=True))
        self.clear_cache()
        return result

    def clear_cache(self, specific: Optional[str] = None) -> int:
        """Сбросить кэш коллекции или её под-пути (`specific`)."""
        if specific:
            return self.client.clear_cache(f"{self.collection}/{str(specific).strip('/')}")
        return self.client.clear_cache(self.collection)
