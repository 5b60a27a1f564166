"""
Domain value objects package

Contains immutable value objects that represent concepts in the business domain.
"""

from .discount import DiscountPercent
from .menu_category import MenuCategory
from .money import Money
from .order_status import OrderStatus
from .shop_slug import ShopSlug
from .table_number import TableNumber

__all__ = [
    "DiscountPercent",
    "MenuCategory",
    "Money",
    "OrderStatus",
    "ShopSlug",
    "TableNumber",
]
