# src/api_client/services/traditions.py

from typing import Any, Dict, Optional

from ..core.config import RequestOptions
from .base import BaseService


class TraditionsService(BaseService):
    """Традиции, их учителя и ресурсы."""

    collection = "traditions"

    async def get_teachers(self, tradition_id: Any, options: Optional[RequestOptions] = None) -> Dict[str, Any]:
        endpoint = self._item_endpoint(tradition_id, "teachers")
        return await self.client.get(endpoint, await self._options(options))

    async def get_resources(self, tradition_id: Any, options: Optional[RequestOptions] = None) -> Dict[str, Any]:
        endpoint = self._item_endpoint(tradition_id, "resources")
        return await self.client.get(endpoint, await self._options(options))
