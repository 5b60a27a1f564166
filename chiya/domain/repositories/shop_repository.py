"""
Shop repository interface
"""

from abc import ABC, abstractmethod
from typing import Optional

from chiya.domain.entities.shop_entity import Shop


class ShopRepository(ABC):
    """Repository interface for shop operations"""

    @abstractmethod
    async def find_by_id(self, shop_id: str) -> Optional[Shop]:
        """Find shop by ID"""

    @abstractmethod
    async def find_by_slug(self, slug: str) -> Optional[Shop]:
        """Find shop by its customer-facing slug"""

    @abstractmethod
    async def save(self, shop: Shop) -> Shop:
        """Insert or update a shop"""
