"""
SQLAlchemy Menu Item Repository
"""

import logging
from datetime import UTC, datetime
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from chiya.domain.entities.menu_item_entity import MenuItem
from chiya.domain.repositories.menu_item_repository import MenuItemRepository
from chiya.domain.value_objects.money import DEFAULT_CURRENCY
from chiya.infrastructure.database import models
from chiya.infrastructure.database.operations import DatabaseManager
from chiya.infrastructure.repositories.row_mapper import menu_item_from_model
from chiya.infrastructure.repositories.session_handler import managed_session
from chiya.infrastructure.utilities.exceptions import DatabaseError


class SQLAlchemyMenuItemRepository(MenuItemRepository):
    """SQLAlchemy implementation of MenuItemRepository"""

    def __init__(
        self,
        db_manager: Optional[DatabaseManager] = None,
        currency: str = DEFAULT_CURRENCY,
    ):
        self._db_manager = db_manager
        self._currency = currency
        self._logger = logging.getLogger(self.__class__.__name__)

    async def find_by_id(self, item_id: str) -> Optional[MenuItem]:
        try:
            with managed_session(self._db_manager) as session:
                model = session.get(models.MenuItem, item_id)
                return menu_item_from_model(model, self._currency) if model else None
        except SQLAlchemyError as e:
            raise DatabaseError(f"Failed to get menu item {item_id}: {e}", "find_menu_item") from e

    async def list_by_shop(self, shop_id: str) -> List[MenuItem]:
        try:
            with managed_session(self._db_manager) as session:
                rows = session.scalars(
                    select(models.MenuItem)
                    .where(models.MenuItem.shop_id == shop_id)
                    .order_by(models.MenuItem.created_at.desc())
                ).all()
                return [menu_item_from_model(model, self._currency) for model in rows]
        except SQLAlchemyError as e:
            raise DatabaseError(f"Failed to list menu items: {e}", "list_menu_items") from e

    async def save(self, item: MenuItem) -> MenuItem:
        """Insert when the item has no id yet, otherwise update in place"""
        try:
            with managed_session(self._db_manager) as session:
                model = session.get(models.MenuItem, item.id) if item.id else None
                if model is None:
                    model = models.MenuItem(shop_id=item.shop_id)
                    if item.id:
                        model.id = item.id
                    session.add(model)
                    self._logger.info("🆕 MENU ITEM INSERT: %s", item.name)

                model.name = item.name
                model.description = item.description
                model.price = item.price.amount
                model.category = item.category.value
                model.is_available = item.is_available
                model.discount = item.discount.value if item.discount else None
                model.is_best_seller = item.is_best_seller
                model.is_todays_special = item.is_todays_special
                model.image_url = item.image_url
                model.updated_at = datetime.now(UTC)
                session.flush()

                return menu_item_from_model(model, self._currency)
        except SQLAlchemyError as e:
            self._logger.error("💥 DATABASE ERROR saving menu item: %s", e)
            raise DatabaseError(f"Failed to save menu item: {e}", "save_menu_item") from e

    async def delete(self, item_id: str) -> bool:
        try:
            with managed_session(self._db_manager) as session:
                model = session.get(models.MenuItem, item_id)
                if model is None:
                    return False
                session.delete(model)
                return True
        except SQLAlchemyError as e:
            raise DatabaseError(f"Failed to delete menu item: {e}", "delete_menu_item") from e
