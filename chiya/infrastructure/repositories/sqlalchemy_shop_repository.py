"""
SQLAlchemy Shop Repository
"""

import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from chiya.domain.entities.shop_entity import Shop
from chiya.domain.repositories.shop_repository import ShopRepository
from chiya.infrastructure.database import models
from chiya.infrastructure.database.operations import DatabaseManager
from chiya.infrastructure.repositories.row_mapper import shop_from_model
from chiya.infrastructure.repositories.session_handler import managed_session
from chiya.infrastructure.utilities.exceptions import DatabaseError


class SQLAlchemyShopRepository(ShopRepository):
    """SQLAlchemy implementation of ShopRepository"""

    def __init__(self, db_manager: Optional[DatabaseManager] = None):
        self._db_manager = db_manager
        self._logger = logging.getLogger(self.__class__.__name__)

    async def find_by_id(self, shop_id: str) -> Optional[Shop]:
        try:
            with managed_session(self._db_manager) as session:
                model = session.get(models.Shop, shop_id)
                return shop_from_model(model) if model else None
        except SQLAlchemyError as e:
            raise DatabaseError(f"Failed to get shop {shop_id}: {e}", "find_shop") from e

    async def find_by_slug(self, slug: str) -> Optional[Shop]:
        self._logger.debug("🔍 FIND SHOP BY SLUG: %s", slug)
        try:
            with managed_session(self._db_manager) as session:
                model = session.scalar(select(models.Shop).where(models.Shop.slug == slug))
                return shop_from_model(model) if model else None
        except SQLAlchemyError as e:
            raise DatabaseError(f"Failed to get shop {slug}: {e}", "find_shop") from e

    async def save(self, shop: Shop) -> Shop:
        try:
            with managed_session(self._db_manager) as session:
                model = session.get(models.Shop, shop.id) if shop.id else None
                if model is None:
                    model = models.Shop()
                    if shop.id:
                        model.id = shop.id
                    session.add(model)

                model.slug = shop.slug.value
                model.name = shop.name
                model.description = shop.description
                model.logo_url = shop.logo_url
                model.table_count = shop.table_count
                model.is_open = shop.is_open
                model.sound_alerts = shop.sound_alerts
                model.browser_notifications = shop.browser_notifications
                session.flush()

                self._logger.info("💾 SHOP SAVED: %s", model.slug)
                return shop_from_model(model)
        except SQLAlchemyError as e:
            self._logger.error("💥 DATABASE ERROR saving shop: %s", e)
            raise DatabaseError(f"Failed to save shop: {e}", "save_shop") from e
