# src/api_client/services/resources.py

from typing import Any, Dict, Optional

from ..core.config import RequestOptions
from ..core.exceptions import InvalidParamsError
from .base import BaseService


class ResourcesService(BaseService):
    """Ресурсы: CRUD, поиск, типы и теги."""

    collection = "resources"

    async def search(self, query: str, options: Optional[RequestOptions] = None) -> Dict[str, Any]:
        """
        Поиск ресурсов.

        Raises:
            InvalidParamsError: пустой запрос
        """
        if not query or not query.strip():
            raise InvalidParamsError("Search query is required", endpoint="resources/search")
        opts = await self._options(options, params={"q": query.strip()})
        return await self.client.get("resources/search", opts)

    async def get_resource_types(self, options: Optional[RequestOptions] = None) -> Dict[str, Any]:
        return await self.client.get("resources/types", await self._options(options))

    async def get_tags(self, options: Optional[RequestOptions] = None) -> Dict[str, Any]:
        return await self.client.get("resources/tags", await self._options(options))
