"""
Order Lifecycle Use Case

Handles checkout (cart to persisted order) and status transitions.
"""

import logging
from typing import Optional, Union

from chiya.application.dtos.order_dtos import (
    OrderCreationResponse,
    StatusUpdateResponse,
)
from chiya.application.state import Ref
from chiya.domain.entities.cart_entity import Cart
from chiya.domain.entities.order_entity import NewOrder, Order, snapshot_cart, total_for
from chiya.domain.entities.shop_entity import Shop
from chiya.domain.repositories.order_repository import OrderRepository
from chiya.domain.value_objects.money import Money
from chiya.domain.value_objects.order_status import OrderStatus
from chiya.domain.value_objects.table_number import TableNumber
from chiya.infrastructure.utilities.exceptions import (
    AuthorizationError,
    CartEmptyError,
    ChiyaError,
    ErrorReporter,
    InvalidStatusTransitionError,
    InvalidTableNumberError,
    OrderNotFoundError,
    ShopClosedError,
    ShopNotFoundError,
    ValidationError,
)


class OrderLifecycleUseCase:
    """Use case for creating orders and moving them through the status workflow"""

    def __init__(
        self,
        order_repository: OrderRepository,
        shop_ref: Ref[Shop],
        tracked_order_ref: Optional[Ref[Order]] = None,
    ):
        self._order_repository = order_repository
        self._shop_ref = shop_ref
        self._tracked_order_ref = tracked_order_ref
        self._logger = logging.getLogger(self.__class__.__name__)

    async def create_order(
        self, table_number: Union[int, str, None], cart: Cart
    ) -> OrderCreationResponse:
        """
        Convert the cart into a persisted order.

        Validation happens before any write. On success the cart is cleared
        and the order becomes the tracked current order; on any failure the
        cart is left untouched and no order is returned.
        """
        self._logger.info("📝 ===== ORDER CREATION STARTED =====")
        self._logger.info(
            "📝 ORDER CREATION: table=%s, items=%d", table_number, cart.item_count
        )

        try:
            shop = self._require_shop()
            if cart.is_empty():
                raise CartEmptyError()
            if not shop.is_open:
                raise ShopClosedError(shop.name)
            table = self._validate_table(table_number, shop)

            items = snapshot_cart(cart)
            new_order = NewOrder(
                shop_id=shop.id,
                table_number=table.value,
                items=items,
                total_amount=cart.total(),
            )
            self._logger.info(
                "💰 ORDER TOTAL: %s for %d line(s)",
                new_order.total_amount,
                len(items),
            )

            order = await self._order_repository.create_order(new_order)

            cart.clear()
            current_shop = self._shop_ref.get()
            if self._tracked_order_ref is not None:
                if current_shop is not None and current_shop.id == order.shop_id:
                    self._tracked_order_ref.set(order)
                else:
                    self._logger.warning(
                        "⚠️ Shop changed during checkout, order %s not tracked",
                        order.id,
                    )

            self._logger.info(
                "🎉 ORDER CREATED: %s table %s total %s",
                order.id,
                order.table_number,
                order.total_amount,
            )
            return OrderCreationResponse(success=True, order=order)

        except ValidationError as e:
            self._logger.warning("💥 VALIDATION ERROR: %s", e)
            ErrorReporter.report_business_error(e, "create_order")
            return OrderCreationResponse(success=False, error_message=e.user_message)
        except ChiyaError as e:
            self._logger.error("💥 ORDER CREATION ERROR: %s", e)
            ErrorReporter.report_business_error(e, "create_order")
            return OrderCreationResponse(success=False, error_message=e.user_message)
        except (ValueError, TypeError) as e:
            self._logger.error("💥 ORDER CREATION ERROR: %s", e, exc_info=True)
            return OrderCreationResponse(
                success=False,
                error_message=(
                    "An error occurred while creating your order. Please try again."
                ),
            )

    async def advance_status(
        self, order_id: str, target: Union[OrderStatus, str]
    ) -> StatusUpdateResponse:
        """Move an order along the workflow; repeating the current status is a no-op"""
        self._logger.info("📝 STATUS UPDATE: Order %s → %s", order_id, target)

        try:
            try:
                target_status = OrderStatus.parse(target)
            except ValueError as e:
                raise ValidationError(str(e), "status") from e

            order = await self._order_repository.get_order_by_id(order_id)
            if order is None:
                raise OrderNotFoundError(order_id)

            shop = self._shop_ref.get()
            if shop is not None and order.shop_id != shop.id:
                raise AuthorizationError(
                    f"Order {order_id} does not belong to shop {shop.id}"
                )

            if order.status == target_status:
                self._logger.info(
                    "↔️ STATUS UNCHANGED: Order %s already %s",
                    order_id,
                    target_status.value,
                )
                return StatusUpdateResponse(success=True, order=order, unchanged=True)

            if not order.status.can_transition_to(target_status):
                raise InvalidStatusTransitionError(
                    order.status.label.lower(), target_status.label.lower()
                )

            updated = await self._order_repository.update_order_status(
                order_id, target_status
            )
            if updated is None:
                raise OrderNotFoundError(order_id)

            self._logger.info(
                "✅ STATUS UPDATED: Order %s %s → %s",
                order_id,
                order.status.value,
                updated.status.value,
            )
            return StatusUpdateResponse(success=True, order=updated)

        except ChiyaError as e:
            self._logger.error("💥 STATUS UPDATE ERROR: Order %s, %s", order_id, e)
            ErrorReporter.report_business_error(e, "advance_status")
            return StatusUpdateResponse(success=False, error_message=e.user_message)

    async def cancel_order(self, order_id: str) -> StatusUpdateResponse:
        """Cancel a pending order"""
        return await self.advance_status(order_id, OrderStatus.CANCELLED)

    @staticmethod
    def total_for(order: Order) -> Money:
        """Sum of snapshot price x quantity for an order"""
        return total_for(order.items, order.total_amount.currency)

    def _require_shop(self) -> Shop:
        shop = self._shop_ref.get()
        if shop is None:
            raise ShopNotFoundError("current shop")
        return shop

    @staticmethod
    def _validate_table(table_number, shop: Shop) -> TableNumber:
        if table_number is None or table_number == "":
            raise InvalidTableNumberError(table_number, shop.table_count)
        try:
            return TableNumber.parse(table_number, shop.table_count)
        except ValueError as e:
            raise InvalidTableNumberError(table_number, shop.table_count) from e
