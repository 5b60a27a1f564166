"""
Order DTOs

Data Transfer Objects for order-related operations.
"""

from dataclasses import dataclass
from typing import Optional

from chiya.domain.entities.order_entity import Order


@dataclass
class OrderCreationResponse:
    """Response from order creation"""

    success: bool
    order: Optional[Order] = None
    error_message: Optional[str] = None


@dataclass
class StatusUpdateResponse:
    """Response from a status change request"""

    success: bool
    order: Optional[Order] = None
    error_message: Optional[str] = None
    unchanged: bool = False


@dataclass
class SyncStartResponse:
    """Outcome of starting the realtime mirror for a shop"""

    success: bool
    order_count: int = 0
    error_message: Optional[str] = None
