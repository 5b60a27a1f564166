"""
SQLAlchemy Order Repository

Concrete implementation of OrderRepository using SQLAlchemy ORM. Every
committed write is announced on the change feed.
"""

import logging
from datetime import UTC, datetime
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import selectinload

from chiya.application.interfaces.change_feed import (
    ChangeEvent,
    ChangeEventType,
    ChangeFeed,
)
from chiya.domain.entities.order_entity import NewOrder, Order, OrderItem
from chiya.domain.repositories.order_repository import OrderRepository
from chiya.domain.value_objects.money import DEFAULT_CURRENCY
from chiya.domain.value_objects.order_status import OrderStatus
from chiya.infrastructure.database import models
from chiya.infrastructure.database.operations import DatabaseManager
from chiya.infrastructure.repositories.row_mapper import (
    order_from_model,
    order_item_from_model,
    order_row,
    status_to_storage,
)
from chiya.infrastructure.repositories.session_handler import managed_session
from chiya.infrastructure.utilities.constants import ChangeFeedSettings
from chiya.infrastructure.utilities.exceptions import (
    ChiyaError,
    DatabaseError,
    OrderCreationError,
)


class SQLAlchemyOrderRepository(OrderRepository):
    """SQLAlchemy implementation of OrderRepository"""

    def __init__(
        self,
        db_manager: Optional[DatabaseManager] = None,
        change_feed: Optional[ChangeFeed] = None,
        currency: str = DEFAULT_CURRENCY,
    ):
        self._db_manager = db_manager
        self._change_feed = change_feed
        self._currency = currency
        self._logger = logging.getLogger(self.__class__.__name__)

    async def create_order(self, new_order: NewOrder) -> Order:
        """Insert the header and its item snapshots in one transaction"""
        self._logger.info(
            "📝 CREATE ORDER: shop %s table %s",
            new_order.shop_id,
            new_order.table_number,
        )

        try:
            with managed_session(self._db_manager) as session:
                now = datetime.now(UTC)
                order = models.Order(
                    shop_id=new_order.shop_id,
                    table_number=new_order.table_number,
                    status=status_to_storage(new_order.status),
                    total_amount=new_order.total_amount.amount,
                    created_at=now,
                    updated_at=now,
                )
                session.add(order)
                session.flush()

                for position, item in enumerate(new_order.items):
                    session.add(
                        models.OrderItem(
                            order_id=order.id,
                            menu_item_id=item.menu_item_id,
                            name=item.name,
                            price=item.unit_price.amount,
                            quantity=item.quantity,
                            position=position,
                        )
                    )
                session.flush()
                session.refresh(order)

                created = order_from_model(order, currency=self._currency)
                row = order_row(order)

        except SQLAlchemyError as e:
            self._logger.error("💥 DATABASE ERROR creating order: %s", e)
            raise OrderCreationError(str(e)) from e

        self._logger.info("✅ ORDER CREATION SUCCESS: %s", created.id)
        await self._publish(
            created.shop_id,
            ChangeEvent(ChangeEventType.INSERT, ChangeFeedSettings.ORDERS_TABLE, new=row),
        )
        return created

    async def get_order_by_id(self, order_id: str) -> Optional[Order]:
        self._logger.debug("🔍 GET ORDER BY ID: %s", order_id)
        try:
            with managed_session(self._db_manager) as session:
                order = session.scalar(
                    select(models.Order)
                    .options(selectinload(models.Order.items))
                    .where(models.Order.id == order_id)
                )
                if order is None:
                    self._logger.info("📭 ORDER NOT FOUND: %s", order_id)
                    return None
                return order_from_model(order, currency=self._currency)
        except SQLAlchemyError as e:
            raise DatabaseError(f"Failed to get order {order_id}: {e}", "get_order") from e

    async def get_order_items(self, order_id: str) -> List[OrderItem]:
        try:
            with managed_session(self._db_manager) as session:
                items = session.scalars(
                    select(models.OrderItem)
                    .where(models.OrderItem.order_id == order_id)
                    .order_by(models.OrderItem.position)
                ).all()
                return [order_item_from_model(item, self._currency) for item in items]
        except SQLAlchemyError as e:
            raise DatabaseError(
                f"Failed to get items of order {order_id}: {e}", "get_order_items"
            ) from e

    async def list_orders(self, shop_id: str, limit: int = 200) -> List[Order]:
        self._logger.info("📋 LIST ORDERS: shop %s (limit %d)", shop_id, limit)
        try:
            with managed_session(self._db_manager) as session:
                orders = session.scalars(
                    select(models.Order)
                    .options(selectinload(models.Order.items))
                    .where(models.Order.shop_id == shop_id)
                    .order_by(models.Order.created_at.desc())
                    .limit(limit)
                ).all()
                return [order_from_model(order, currency=self._currency) for order in orders]
        except SQLAlchemyError as e:
            raise DatabaseError(f"Failed to list orders: {e}", "list_orders") from e

    async def update_order_status(
        self, order_id: str, status: OrderStatus
    ) -> Optional[Order]:
        self._logger.info("📝 UPDATE ORDER STATUS: %s → %s", order_id, status)
        try:
            with managed_session(self._db_manager) as session:
                order = session.scalar(
                    select(models.Order)
                    .options(selectinload(models.Order.items))
                    .where(models.Order.id == order_id)
                )
                if order is None:
                    return None
                order.status = status_to_storage(status)
                order.updated_at = datetime.now(UTC)
                session.flush()

                updated = order_from_model(order, currency=self._currency)
                row = order_row(order)
        except SQLAlchemyError as e:
            raise DatabaseError(
                f"Failed to update order {order_id}: {e}", "update_order_status"
            ) from e

        await self._publish(
            updated.shop_id,
            ChangeEvent(
                ChangeEventType.UPDATE,
                ChangeFeedSettings.ORDERS_TABLE,
                new=row,
                old={"id": order_id},
            ),
        )
        return updated

    async def delete_order(self, order_id: str) -> bool:
        self._logger.info("🗑️ DELETE ORDER: %s", order_id)
        try:
            with managed_session(self._db_manager) as session:
                order = session.get(models.Order, order_id)
                if order is None:
                    return False
                shop_id = order.shop_id
                session.delete(order)
        except SQLAlchemyError as e:
            raise DatabaseError(
                f"Failed to delete order {order_id}: {e}", "delete_order"
            ) from e

        await self._publish(
            shop_id,
            ChangeEvent(
                ChangeEventType.DELETE,
                ChangeFeedSettings.ORDERS_TABLE,
                old={"id": order_id, "shop_id": shop_id},
            ),
        )
        return True

    async def _publish(self, shop_id: str, event: ChangeEvent) -> None:
        """Announce a committed change; the write stands even if this fails"""
        if self._change_feed is None:
            return
        try:
            await self._change_feed.publish(shop_id, event)
        except ChiyaError as e:
            self._logger.error(
                "💥 CHANGE FEED PUBLISH FAILED for %s %s: %s",
                event.event_type.value,
                event.record_id,
                e,
            )
