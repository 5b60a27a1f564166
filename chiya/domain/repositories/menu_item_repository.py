"""
Menu item repository interface

Defines the contract for catalog data access operations.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from chiya.domain.entities.menu_item_entity import MenuItem


class MenuItemRepository(ABC):
    """Repository interface for menu item operations"""

    @abstractmethod
    async def find_by_id(self, item_id: str) -> Optional[MenuItem]:
        """Find menu item by ID"""

    @abstractmethod
    async def list_by_shop(self, shop_id: str) -> List[MenuItem]:
        """List a shop's menu items, newest first"""

    @abstractmethod
    async def save(self, item: MenuItem) -> MenuItem:
        """Insert or update a menu item; returns the stored item"""

    @abstractmethod
    async def delete(self, item_id: str) -> bool:
        """Delete menu item"""
