"""
In-process change feed

Each subscription owns an asyncio queue; ``publish`` fans an event out to
every open subscription for the same (table, shop) key. Suitable for a
single process and for tests.
"""

import asyncio
import logging
from collections import defaultdict
from typing import AsyncIterator, Dict, Iterable, List, Optional, Tuple

from chiya.application.interfaces.change_feed import (
    ALL_EVENT_TYPES,
    ChangeEvent,
    ChangeEventType,
    ChangeFeed,
    Subscription,
)
from chiya.infrastructure.utilities.constants import ChangeFeedSettings

_CLOSED = object()


class InMemorySubscription(Subscription):
    """Queue-backed subscription"""

    def __init__(
        self,
        feed: "InMemoryChangeFeed",
        key: Tuple[str, str],
        event_types: frozenset,
    ):
        self._feed = feed
        self._key = key
        self._event_types = event_types
        self._queue: asyncio.Queue = asyncio.Queue(
            maxsize=ChangeFeedSettings.SUBSCRIPTION_QUEUE_SIZE
        )
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def deliver(self, event: ChangeEvent) -> None:
        if self._closed or event.event_type not in self._event_types:
            return
        self._queue.put_nowait(event)

    async def __aiter__(self) -> AsyncIterator[ChangeEvent]:
        while True:
            event = await self._queue.get()
            try:
                if event is _CLOSED:
                    return
                yield event
            finally:
                self._queue.task_done()

    async def join(self) -> None:
        """Wait until every delivered event has been consumed"""
        await self._queue.join()

    async def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._feed.unregister(self._key, self)
        while not self._queue.empty():
            self._queue.get_nowait()
            self._queue.task_done()
        self._queue.put_nowait(_CLOSED)


class InMemoryChangeFeed(ChangeFeed):
    """Single-process publish/subscribe for row changes"""

    def __init__(self):
        self._subscriptions: Dict[Tuple[str, str], List[InMemorySubscription]] = (
            defaultdict(list)
        )
        self._logger = logging.getLogger(self.__class__.__name__)

    async def subscribe(
        self,
        shop_id: str,
        table: str,
        event_types: Optional[Iterable[ChangeEventType]] = None,
    ) -> Subscription:
        key = (table, shop_id)
        types = frozenset(event_types) if event_types else ALL_EVENT_TYPES
        subscription = InMemorySubscription(self, key, types)
        self._subscriptions[key].append(subscription)
        self._logger.info("📡 SUBSCRIBED: %s for shop %s", table, shop_id)
        return subscription

    async def publish(self, shop_id: str, event: ChangeEvent) -> None:
        subscribers = list(self._subscriptions.get((event.table, shop_id), ()))
        self._logger.debug(
            "📣 PUBLISH %s %s to %d subscriber(s)",
            event.event_type.value,
            event.record_id,
            len(subscribers),
        )
        for subscription in subscribers:
            subscription.deliver(event)

    def unregister(self, key: Tuple[str, str], subscription: InMemorySubscription) -> None:
        subscribers = self._subscriptions.get(key)
        if subscribers and subscription in subscribers:
            subscribers.remove(subscription)
            if not subscribers:
                del self._subscriptions[key]

    def subscriber_count(self, shop_id: str, table: str) -> int:
        return len(self._subscriptions.get((table, shop_id), ()))

    async def join(self) -> None:
        """Wait until every open subscription has consumed its backlog"""
        subscriptions = [
            subscription
            for subscribers in list(self._subscriptions.values())
            for subscription in subscribers
        ]
        await asyncio.gather(*(subscription.join() for subscription in subscriptions))

    async def close(self) -> None:
        for subscribers in list(self._subscriptions.values()):
            for subscription in list(subscribers):
                await subscription.close()
