"""
Analytics DTOs
"""

from dataclasses import dataclass, field
from typing import Dict, List, Tuple

from chiya.domain.value_objects.money import Money


@dataclass
class AnalyticsSummary:
    """Dashboard figures computed from a shop's orders"""

    total_revenue: Money
    total_orders: int
    pending_orders: int
    average_order_value: Money
    top_selling_items: List[Tuple[str, int]] = field(default_factory=list)
    orders_by_status: Dict[str, int] = field(default_factory=dict)
    revenue_by_hour: Dict[str, Money] = field(default_factory=dict)
    daily_revenue: Dict[str, Money] = field(default_factory=dict)
