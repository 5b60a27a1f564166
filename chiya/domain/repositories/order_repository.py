"""
Order repository interface

Defines the contract for order data access operations.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from chiya.domain.entities.order_entity import NewOrder, Order, OrderItem
from chiya.domain.value_objects.order_status import OrderStatus


class OrderRepository(ABC):
    """Repository interface for order operations"""

    @abstractmethod
    async def create_order(self, new_order: NewOrder) -> Order:
        """Persist the header and its item snapshots as one unit"""

    @abstractmethod
    async def get_order_by_id(self, order_id: str) -> Optional[Order]:
        """Get order by ID, with its item snapshots"""

    @abstractmethod
    async def get_order_items(self, order_id: str) -> List[OrderItem]:
        """Get the item snapshots of one order"""

    @abstractmethod
    async def list_orders(self, shop_id: str, limit: int = 200) -> List[Order]:
        """List a shop's orders with items, newest first"""

    @abstractmethod
    async def update_order_status(
        self, order_id: str, status: OrderStatus
    ) -> Optional[Order]:
        """Write a new status and refresh updated_at; None if not found"""

    @abstractmethod
    async def delete_order(self, order_id: str) -> bool:
        """Delete an order"""
