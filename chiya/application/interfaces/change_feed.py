"""
Change feed interface

Row-level insert/update/delete notifications scoped to one shop. The
persistent store is the producer; views subscribe and reconcile.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, AsyncIterator, Iterable, Optional


class ChangeEventType(str, Enum):
    """Kinds of row change"""

    INSERT = "INSERT"
    UPDATE = "UPDATE"
    DELETE = "DELETE"


ALL_EVENT_TYPES = frozenset(ChangeEventType)


@dataclass(frozen=True)
class ChangeEvent:
    """One row change; ``new`` is empty for deletes, ``old`` may be partial"""

    event_type: ChangeEventType
    table: str
    new: dict[str, Any] = field(default_factory=dict)
    old: dict[str, Any] = field(default_factory=dict)

    @property
    def record_id(self) -> Optional[str]:
        row = self.old if self.event_type == ChangeEventType.DELETE else self.new
        record_id = row.get("id")
        return str(record_id) if record_id is not None else None

    def to_payload(self) -> dict[str, Any]:
        return {
            "eventType": self.event_type.value,
            "table": self.table,
            "new": self.new,
            "old": self.old,
        }

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "ChangeEvent":
        return cls(
            event_type=ChangeEventType(str(payload["eventType"]).upper()),
            table=payload["table"],
            new=dict(payload.get("new") or {}),
            old=dict(payload.get("old") or {}),
        )


class Subscription(ABC):
    """A live stream of change events; iterate it, then close it"""

    @abstractmethod
    def __aiter__(self) -> AsyncIterator[ChangeEvent]:
        """Yield events in delivery order until closed"""

    @abstractmethod
    async def close(self) -> None:
        """Stop delivery and release resources; safe to call twice"""

    @property
    @abstractmethod
    def closed(self) -> bool:
        """Whether close() has been called"""


class ChangeFeed(ABC):
    """Publish/subscribe primitive for row changes"""

    @abstractmethod
    async def subscribe(
        self,
        shop_id: str,
        table: str,
        event_types: Optional[Iterable[ChangeEventType]] = None,
    ) -> Subscription:
        """Subscribe to changes of ``table`` rows owned by ``shop_id``"""

    @abstractmethod
    async def publish(self, shop_id: str, event: ChangeEvent) -> None:
        """Deliver an event to every matching subscriber"""

    async def close(self) -> None:
        """Release feed-wide resources"""
