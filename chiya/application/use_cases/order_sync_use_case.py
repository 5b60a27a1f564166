"""
Order Sync Use Case

Keeps in-memory order views consistent with the store by consuming the
orders change feed for one shop: the admin's full order list and the
customer's single tracked order.
"""

import asyncio
import contextlib
import logging
from collections import Counter
from datetime import datetime
from typing import Dict, Iterable, List, Optional, Sequence

from chiya.application.dtos.order_dtos import SyncStartResponse
from chiya.application.interfaces.alert_sink import OrderAlertSink
from chiya.application.interfaces.change_feed import (
    ChangeEvent,
    ChangeEventType,
    ChangeFeed,
    Subscription,
)
from chiya.application.state import Ref
from chiya.domain.entities.order_entity import Order
from chiya.domain.entities.shop_entity import Shop
from chiya.domain.repositories.order_repository import OrderRepository
from chiya.domain.value_objects.money import DEFAULT_CURRENCY
from chiya.domain.value_objects.order_status import OrderStatus
from chiya.infrastructure.logging.logging_config import PerformanceLogger
from chiya.infrastructure.repositories.row_mapper import order_from_row, parse_timestamp
from chiya.infrastructure.utilities.constants import (
    ChangeFeedSettings,
    OrderSettings,
)
from chiya.infrastructure.utilities.exceptions import ChiyaError


class AdminOrderList:
    """A shop's orders, most recent first, unique by id"""

    def __init__(self, orders: Iterable[Order] = ()):
        self._orders: List[Order] = list(orders)

    def reset(self, orders: Iterable[Order]) -> None:
        self._orders = list(orders)

    def upsert_front(self, order: Order) -> bool:
        """Put ``order`` first, replacing any entry with the same id; True if new"""
        is_new = order.id not in self
        self._orders = [existing for existing in self._orders if existing.id != order.id]
        self._orders.insert(0, order)
        return is_new

    def apply_update(
        self,
        order_id: str,
        status: Optional[OrderStatus] = None,
        updated_at: Optional[datetime] = None,
    ) -> Optional[Order]:
        """Apply a partial update in place; None when the id is unknown"""
        for index, existing in enumerate(self._orders):
            if existing.id == order_id:
                updated = existing.with_changes(status=status, updated_at=updated_at)
                self._orders[index] = updated
                return updated
        return None

    def remove(self, order_id: str) -> bool:
        before = len(self._orders)
        self._orders = [order for order in self._orders if order.id != order_id]
        return len(self._orders) != before

    def get(self, order_id: str) -> Optional[Order]:
        for order in self._orders:
            if order.id == order_id:
                return order
        return None

    @property
    def orders(self) -> List[Order]:
        return list(self._orders)

    def filter_by_status(self, status=None) -> List[Order]:
        """Orders with the given status (any alias), or all of them"""
        if status is None or status == "all":
            return self.orders
        wanted = OrderStatus.parse(status)
        return [order for order in self._orders if order.status == wanted]

    def counts_by_status(self) -> Dict[OrderStatus, int]:
        counts = Counter(order.status for order in self._orders)
        return {status: counts.get(status, 0) for status in OrderStatus}

    def __contains__(self, order_id: str) -> bool:
        return any(order.id == order_id for order in self._orders)

    def __len__(self) -> int:
        return len(self._orders)


class OrderSyncUseCase:
    """
    Long-lived consumer of the orders change feed for one shop.

    Current context (shop preferences, tracked order) is read through
    ``Ref`` cells when each event is handled. Every start bumps a
    generation counter; events and in-flight fetches from an older
    generation are dropped, so a superseded shop context never changes
    the views.
    """

    def __init__(
        self,
        order_repository: OrderRepository,
        change_feed: ChangeFeed,
        shop_ref: Ref[Shop],
        tracked_order_ref: Optional[Ref[Order]] = None,
        admin_orders: Optional[AdminOrderList] = None,
        alert_sinks: Sequence[OrderAlertSink] = (),
        order_list_limit: int = OrderSettings.DEFAULT_ORDER_LIST_LIMIT,
        currency: str = DEFAULT_CURRENCY,
    ):
        self._order_repository = order_repository
        self._change_feed = change_feed
        self._shop_ref = shop_ref
        self._tracked_order_ref = tracked_order_ref
        self._admin_orders = admin_orders
        self._alert_sinks = list(alert_sinks)
        self._order_list_limit = order_list_limit
        self._currency = currency
        self._logger = logging.getLogger(self.__class__.__name__)

        self._generation = 0
        self._shop_id: Optional[str] = None
        self._subscription: Optional[Subscription] = None
        self._task: Optional[asyncio.Task] = None
        self._last_error: Optional[ChiyaError] = None

    @property
    def shop_id(self) -> Optional[str]:
        return self._shop_id

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def last_error(self) -> Optional[ChiyaError]:
        """Error that ended the current subscription, if the feed was lost"""
        return self._last_error

    async def start(self, shop_id: Optional[str] = None) -> SyncStartResponse:
        """
        Subscribe to the shop's order changes, then load the baseline.

        The subscription is opened before the baseline fetch so nothing
        committed in between is missed; merge-by-id absorbs the overlap.
        """
        await self.stop()
        self._last_error = None

        if shop_id is None:
            shop = self._shop_ref.get()
            shop_id = shop.id if shop else None
        if not shop_id:
            return SyncStartResponse(success=False, error_message="No shop selected.")

        self._generation += 1
        generation = self._generation
        self._shop_id = shop_id
        self._logger.info("🔌 SYNC START: shop %s (generation %d)", shop_id, generation)

        try:
            subscription = await self._change_feed.subscribe(
                shop_id, ChangeFeedSettings.ORDERS_TABLE
            )
        except ChiyaError as e:
            self._logger.error("💥 SUBSCRIBE ERROR: %s", e)
            return SyncStartResponse(success=False, error_message=e.user_message)

        self._subscription = subscription
        order_count = 0

        if self._admin_orders is not None:
            try:
                with PerformanceLogger("baseline_order_fetch"):
                    orders = await self._order_repository.list_orders(
                        shop_id, limit=self._order_list_limit
                    )
            except ChiyaError as e:
                self._logger.error("💥 BASELINE FETCH ERROR: %s", e)
                await self._close_subscription(subscription)
                return SyncStartResponse(success=False, error_message=e.user_message)

            if generation != self._generation:
                await subscription.close()
                return SyncStartResponse(
                    success=False, error_message="Shop changed while loading orders."
                )
            self._admin_orders.reset(orders)
            order_count = len(orders)
            self._logger.info("📋 BASELINE LOADED: %d orders", order_count)

        try:
            await self._reload_tracked_order(shop_id, generation)
        except ChiyaError as e:
            self._logger.error("💥 TRACKED ORDER FETCH ERROR: %s", e)
            await self._close_subscription(subscription)
            return SyncStartResponse(success=False, error_message=e.user_message)

        if generation != self._generation:
            await subscription.close()
            return SyncStartResponse(
                success=False, error_message="Shop changed while loading orders."
            )

        self._task = asyncio.create_task(self._consume(subscription, generation))
        return SyncStartResponse(success=True, order_count=order_count)

    async def stop(self) -> None:
        """Cancel the consumer and release the subscription"""
        self._generation += 1
        task, self._task = self._task, None
        subscription, self._subscription = self._subscription, None

        if task is not None and not task.done():
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task
        if subscription is not None:
            await self._close_subscription(subscription)
            self._logger.info("🔌 SYNC STOPPED: shop %s", self._shop_id)

    async def switch_shop(self, shop_id: str) -> SyncStartResponse:
        """Tear down the current subscription and follow another shop"""
        return await self.start(shop_id)

    async def apply_event(
        self, event: ChangeEvent, generation: Optional[int] = None
    ) -> None:
        """Reconcile the views with one change event"""
        if generation is None:
            generation = self._generation
        if generation != self._generation:
            return

        order_id = event.record_id
        if not order_id:
            self._logger.warning("⚠️ Change event without id ignored: %s", event)
            return

        if event.event_type == ChangeEventType.INSERT:
            await self._apply_insert(order_id, event, generation)
        elif event.event_type == ChangeEventType.UPDATE:
            self._apply_update(order_id, event)
        elif event.event_type == ChangeEventType.DELETE:
            self._apply_delete(order_id)

    async def _reload_tracked_order(self, shop_id: str, generation: int) -> None:
        """Refresh the tracked order so changes missed while unsubscribed apply"""
        if self._tracked_order_ref is None:
            return
        tracked = self._tracked_order_ref.get()
        if tracked is None or tracked.shop_id != shop_id:
            return

        current = await self._order_repository.get_order_by_id(tracked.id)
        if generation != self._generation:
            return
        latest = self._tracked_order_ref.get()
        if current is None or latest is None or latest.id != current.id:
            return
        if current != latest:
            self._tracked_order_ref.set(current)
            self._logger.info(
                "🔄 TRACKED ORDER RELOADED: %s → %s", current.id, current.status.value
            )

    async def _consume(self, subscription: Subscription, generation: int) -> None:
        try:
            async for event in subscription:
                if generation != self._generation:
                    break
                try:
                    await self.apply_event(event, generation)
                except ChiyaError as e:
                    self._logger.error("💥 CHANGE EVENT ERROR: %s", e)
                except (ValueError, KeyError, TypeError) as e:
                    self._logger.error("💥 MALFORMED CHANGE EVENT: %s", e, exc_info=True)
        except ChiyaError as e:
            if generation != self._generation:
                return
            self._last_error = e
            self._logger.error("💥 CHANGE FEED LOST: shop %s: %s", self._shop_id, e)
            if self._subscription is subscription:
                self._subscription = None
            await self._close_subscription(subscription)

    async def _apply_insert(
        self, order_id: str, event: ChangeEvent, generation: int
    ) -> None:
        if self._admin_orders is None:
            return

        items = await self._order_repository.get_order_items(order_id)
        if generation != self._generation:
            self._logger.debug("Dropping stale insert for order %s", order_id)
            return

        order = order_from_row(event.new, items, self._currency)
        is_new = self._admin_orders.upsert_front(order)
        self._logger.info(
            "🆕 ORDER INSERTED: %s table %s (%s)",
            order_id,
            order.table_number,
            "new" if is_new else "duplicate",
        )
        if is_new:
            await self._alert(order)

    def _apply_update(self, order_id: str, event: ChangeEvent) -> None:
        status = event.new.get("status")
        status = OrderStatus.parse(status) if status is not None else None
        updated_at = parse_timestamp(event.new.get("updated_at"))

        if self._admin_orders is not None:
            if self._admin_orders.apply_update(order_id, status, updated_at) is None:
                self._logger.debug("Update for unknown order %s ignored", order_id)

        if self._tracked_order_ref is not None:
            tracked = self._tracked_order_ref.get()
            if tracked is not None and tracked.id == order_id:
                updated = tracked.with_changes(status=status, updated_at=updated_at)
                if updated != tracked:
                    self._tracked_order_ref.set(updated)
                    self._logger.info(
                        "🔄 TRACKED ORDER UPDATED: %s → %s",
                        order_id,
                        updated.status.value,
                    )

    def _apply_delete(self, order_id: str) -> None:
        if self._admin_orders is not None and self._admin_orders.remove(order_id):
            self._logger.info("🗑️ ORDER REMOVED: %s", order_id)

        if self._tracked_order_ref is not None:
            tracked = self._tracked_order_ref.get()
            if tracked is not None and tracked.id == order_id:
                self._logger.warning(
                    "⚠️ Tracked order %s was deleted; keeping last known status %s",
                    order_id,
                    tracked.status.value,
                )

    async def _alert(self, order: Order) -> None:
        shop = self._shop_ref.get()
        if shop is None or not shop.alerts_enabled:
            return
        for sink in self._alert_sinks:
            try:
                await sink.new_order_alert(order, shop)
            except ChiyaError as e:
                self._logger.error(
                    "💥 ALERT ERROR (%s): %s", type(sink).__name__, e
                )

    async def _close_subscription(self, subscription: Subscription) -> None:
        try:
            await subscription.close()
        except ChiyaError as e:
            self._logger.warning("⚠️ Subscription close failed: %s", e)
