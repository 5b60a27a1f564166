"""
New-order alert sink interface
"""

from abc import ABC, abstractmethod

from chiya.domain.entities.order_entity import Order
from chiya.domain.entities.shop_entity import Shop


class OrderAlertSink(ABC):
    """Receives one alert per newly inserted order"""

    @abstractmethod
    async def new_order_alert(self, order: Order, shop: Shop) -> None:
        """Signal a new order to the shop's staff"""
