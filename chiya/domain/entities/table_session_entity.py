"""
Table session entity

Time-boxed, device-local binding of a browsing session to one table.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any


@dataclass(frozen=True)
class TableSession:
    """Table number + shop identity + creation timestamp"""

    table_number: int
    shop_id: str
    shop_slug: str
    timestamp: datetime

    def is_expired(self, now: datetime, ttl: timedelta) -> bool:
        """Expired once strictly more than ``ttl`` has passed"""
        return now - self.timestamp > ttl

    def to_dict(self) -> dict[str, Any]:
        return {
            "table_number": self.table_number,
            "shop_id": self.shop_id,
            "shop_slug": self.shop_slug,
            "timestamp": self.timestamp.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TableSession":
        return cls(
            table_number=int(data["table_number"]),
            shop_id=str(data["shop_id"]),
            shop_slug=str(data["shop_slug"]),
            timestamp=datetime.fromisoformat(data["timestamp"]),
        )
