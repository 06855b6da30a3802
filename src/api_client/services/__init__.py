"""
Сервисы коллекций API поверх RequestClient.

Example:
    >>> services = create_services(client, auth=BearerTokenAuth(get_token))
    >>> await services.resources.get_all({"type": "book"})
"""

from dataclasses import dataclass
from typing import Optional

from ..auth import BearerTokenAuth
from ..client import RequestClient
from .base import BaseService
from .resources import ResourcesService
from .teachers import TeachersService
from .traditions import TraditionsService


@dataclass(frozen=True)
class Services:
    """Все сервисы на одном клиенте."""
    resources: ResourcesService
    teachers: TeachersService
    traditions: TraditionsService

    def clear_cache(self) -> None:
        """Сбросить кэш всех коллекций."""
        self.resources.clear_cache()
        self.teachers.clear_cache()
        self.traditions.clear_cache()


def create_services(client: RequestClient, auth: Optional[BearerTokenAuth] = None) -> Services:
    """Создать сервисы с общим клиентом (и кэшем)."""
    return Services(
        resources=ResourcesService(client, auth),
        teachers=TeachersService(client, auth),
        traditions=TraditionsService(client, auth),
    )


__all__ = [
    "BaseService",
    "ResourcesService",
    "TeachersService",
    "TraditionsService",
    "Services",
    "create_services",
]
