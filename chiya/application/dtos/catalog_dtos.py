"""
Catalog DTOs
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import List, Optional

from chiya.domain.entities.menu_item_entity import MenuItem


@dataclass
class MenuItemRequest:
    """Fields an admin submits when creating or editing a menu item"""

    name: str
    price: Decimal
    category: str
    description: str = ""
    is_available: bool = True
    discount: Optional[Decimal] = None
    is_best_seller: bool = False
    is_todays_special: bool = False
    image_url: Optional[str] = None


@dataclass
class CatalogResponse:
    """Response for catalog operations"""

    success: bool
    items: Optional[List[MenuItem]] = None
    item: Optional[MenuItem] = None
    error_message: Optional[str] = None
