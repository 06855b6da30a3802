# src/api_client/services/teachers.py

from typing import Any, Dict, Optional

from ..core.config import RequestOptions
from .base import BaseService


class TeachersService(BaseService):
    """Учителя и их ресурсы."""

    collection = "teachers"

    async def get_resources(self, teacher_id: Any, options: Optional[RequestOptions] = None) -> Dict[str, Any]:
        endpoint = self._item_endpoint(teacher_id, "resources")
        return await self.client.get(endpoint, await self._options(options))
