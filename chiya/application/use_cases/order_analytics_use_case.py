"""
Order Analytics Use Case

Dashboard figures computed from a shop's orders.
"""

import logging
from collections import Counter, defaultdict
from datetime import UTC, datetime, timedelta
from typing import Callable, Dict, Iterable, List

from chiya.application.dtos.analytics_dtos import AnalyticsSummary
from chiya.domain.entities.order_entity import Order
from chiya.domain.repositories.order_repository import OrderRepository
from chiya.domain.value_objects.money import DEFAULT_CURRENCY, Money
from chiya.domain.value_objects.order_status import OrderStatus
from chiya.infrastructure.utilities.constants import AnalyticsSettings, OrderSettings


class OrderAnalyticsUseCase:
    """Use case for order analytics and business insights"""

    def __init__(
        self,
        order_repository: OrderRepository,
        currency: str = DEFAULT_CURRENCY,
        clock: Callable[[], datetime] = lambda: datetime.now(UTC),
    ):
        self._order_repository = order_repository
        self._currency = currency
        self._clock = clock
        self._logger = logging.getLogger(self.__class__.__name__)

    async def get_summary(
        self, shop_id: str, limit: int = OrderSettings.DEFAULT_ORDER_LIST_LIMIT
    ) -> AnalyticsSummary:
        """Load the shop's recent orders and summarize them"""
        orders = await self._order_repository.list_orders(shop_id, limit=limit)
        summary = self.summarize(orders)
        self._logger.info(
            "📈 SUMMARY: %d orders, %s revenue",
            summary.total_orders,
            summary.total_revenue,
        )
        return summary

    def summarize(self, orders: Iterable[Order]) -> AnalyticsSummary:
        """Cancelled orders count as orders but never as revenue"""
        orders = list(orders)
        billable = [order for order in orders if order.status != OrderStatus.CANCELLED]

        total_revenue = Money.sum(
            (order.total_amount for order in billable), self._currency
        )
        average = (
            total_revenue.divide(len(billable))
            if billable
            else Money.zero(self._currency)
        )
        status_counts = Counter(order.status for order in orders)

        return AnalyticsSummary(
            total_revenue=total_revenue,
            total_orders=len(orders),
            pending_orders=status_counts.get(OrderStatus.PENDING, 0),
            average_order_value=average,
            top_selling_items=self._top_selling_items(billable),
            orders_by_status={
                status.value: status_counts.get(status, 0) for status in OrderStatus
            },
            revenue_by_hour=self._revenue_by_hour(billable),
            daily_revenue=self._daily_revenue(billable),
        )

    @staticmethod
    def _top_selling_items(orders: List[Order]) -> List[tuple]:
        quantities = Counter()
        for order in orders:
            for item in order.items:
                quantities[item.name] += item.quantity
        return quantities.most_common(AnalyticsSettings.TOP_ITEMS_LIMIT)

    def _revenue_by_hour(self, orders: List[Order]) -> Dict[str, Money]:
        revenue = defaultdict(lambda: Money.zero(self._currency))
        for order in orders:
            if order.created_at is None:
                continue
            hour = f"{order.created_at.hour:02d}:00"
            revenue[hour] = revenue[hour] + order.total_amount
        return dict(sorted(revenue.items()))

    def _daily_revenue(self, orders: List[Order]) -> Dict[str, Money]:
        today = self._clock().date()
        days = [
            today - timedelta(days=offset)
            for offset in reversed(range(AnalyticsSettings.DAILY_REVENUE_DAYS))
        ]
        revenue = {day.isoformat(): Money.zero(self._currency) for day in days}
        for order in orders:
            if order.created_at is None:
                continue
            key = order.created_at.date().isoformat()
            if key in revenue:
                revenue[key] = revenue[key] + order.total_amount
        return revenue

