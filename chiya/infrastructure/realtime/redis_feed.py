"""
Redis pub/sub change feed

Events are published as JSON on ``changes:{table}:{shop_id}`` so any
process subscribed to the same Redis sees every committed write.
"""

import json
import logging
from typing import AsyncIterator, Iterable, Optional

import redis.asyncio as redis
from redis.exceptions import RedisError

from chiya.application.interfaces.change_feed import (
    ALL_EVENT_TYPES,
    ChangeEvent,
    ChangeEventType,
    ChangeFeed,
    Subscription,
)
from chiya.infrastructure.utilities.constants import ChangeFeedSettings
from chiya.infrastructure.utilities.exceptions import ExternalServiceError


def channel_for(table: str, shop_id: str) -> str:
    return f"{ChangeFeedSettings.REDIS_CHANNEL_PREFIX}:{table}:{shop_id}"


class RedisSubscription(Subscription):
    """One pub/sub connection listening on one channel"""

    def __init__(self, pubsub, channel: str, event_types: frozenset):
        self._pubsub = pubsub
        self._channel = channel
        self._event_types = event_types
        self._closed = False
        self._logger = logging.getLogger(self.__class__.__name__)

    @property
    def closed(self) -> bool:
        return self._closed

    async def __aiter__(self) -> AsyncIterator[ChangeEvent]:
        try:
            async for message in self._pubsub.listen():
                if self._closed:
                    return
                if message.get("type") != "message":
                    continue
                try:
                    event = ChangeEvent.from_payload(json.loads(message["data"]))
                except (ValueError, KeyError, TypeError) as e:
                    self._logger.warning(
                        "⚠️ Skipping malformed message on %s: %s", self._channel, e
                    )
                    continue
                if event.event_type in self._event_types:
                    yield event
        except RedisError as e:
            if self._closed:
                return
            raise ExternalServiceError(
                f"Redis subscription on {self._channel} failed: {e}", "redis"
            ) from e

    async def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        try:
            await self._pubsub.unsubscribe(self._channel)
            await self._pubsub.aclose()
        except RedisError as e:
            raise ExternalServiceError(
                f"Failed to close subscription on {self._channel}: {e}", "redis"
            ) from e


class RedisChangeFeed(ChangeFeed):
    """Change feed over Redis pub/sub"""

    def __init__(self, redis_url: Optional[str] = None, client=None):
        if client is None:
            if not redis_url:
                raise ValueError("A redis_url or client is required")
            client = redis.from_url(redis_url, decode_responses=True)
        self._client = client
        self._logger = logging.getLogger(self.__class__.__name__)

    async def subscribe(
        self,
        shop_id: str,
        table: str,
        event_types: Optional[Iterable[ChangeEventType]] = None,
    ) -> Subscription:
        channel = channel_for(table, shop_id)
        types = frozenset(event_types) if event_types else ALL_EVENT_TYPES
        pubsub = self._client.pubsub()
        try:
            await pubsub.subscribe(channel)
        except RedisError as e:
            raise ExternalServiceError(
                f"Failed to subscribe to {channel}: {e}", "redis"
            ) from e
        self._logger.info("📡 SUBSCRIBED: %s", channel)
        return RedisSubscription(pubsub, channel, types)

    async def publish(self, shop_id: str, event: ChangeEvent) -> None:
        channel = channel_for(event.table, shop_id)
        try:
            receivers = await self._client.publish(
                channel, json.dumps(event.to_payload(), default=str)
            )
        except RedisError as e:
            raise ExternalServiceError(f"Failed to publish to {channel}: {e}", "redis") from e
        self._logger.debug(
            "📣 PUBLISH %s %s to %s (%s receivers)",
            event.event_type.value,
            event.record_id,
            channel,
            receivers,
        )

    async def close(self) -> None:
        try:
            await self._client.aclose()
        except RedisError as e:
            self._logger.warning("⚠️ Redis close failed: %s", e)
