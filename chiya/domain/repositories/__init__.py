"""
Domain repository interfaces

Contains abstract repository interfaces that define contracts for data access.
These follow the Repository pattern and Dependency Inversion principle.
"""

from .menu_item_repository import MenuItemRepository
from .order_repository import OrderRepository
from .shop_repository import ShopRepository

__all__ = ["MenuItemRepository", "OrderRepository", "ShopRepository"]
