"""
Domain entities package

Contains the core business entities of the ordering platform.
These represent the fundamental business concepts and rules.
"""

from .cart_entity import Cart, CartItem
from .menu_item_entity import MenuItem
from .order_entity import NewOrder, Order, OrderItem, snapshot_cart, total_for
from .shop_entity import Shop
from .table_session_entity import TableSession

__all__ = [
    "Cart",
    "CartItem",
    "MenuItem",
    "NewOrder",
    "Order",
    "OrderItem",
    "Shop",
    "TableSession",
    "snapshot_cart",
    "total_for",
]
