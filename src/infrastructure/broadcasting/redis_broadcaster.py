"""
Redis Pub/Sub Broadcaster

Publisher and subscriber sides of the per-user notification channels.

Responsibility:
    - RedisNotificationPublisher: PUBLISH a JSON envelope on "user.<id>"
      (implements NotificationPublisherProtocol, used by workers and API)
    - RedisNotificationSubscriber: async iterator over envelopes of one
      channel (used by the WebSocket relay)

Architecture Notes:
    - Infrastructure Layer
    - Fire-and-forget: a message published while nobody listens is lost;
      clients reconcile through the read endpoints
    - Publisher raises RedisError; the CompletionNotifier decides to swallow
"""

import json
import logging
from typing import Any, AsyncIterator, Optional

import redis.asyncio as aioredis
from redis import Redis

from src.infrastructure.persistence.redis.connection import (
    get_async_redis_client,
    get_redis_client,
)

logger = logging.getLogger(__name__)


class RedisNotificationPublisher:
    def __init__(self, redis_client: Optional[Redis] = None) -> None:
        self.redis: Redis = redis_client or get_redis_client()

    def publish(self, channel: str, message: dict[str, Any]) -> None:
        """
        Publish an envelope.

        Raises:
            RedisError: If Redis operation fails
        """
        receivers = self.redis.publish(channel, json.dumps(message))
        logger.debug(f"Published on {channel} to {receivers} subscriber(s)")


class RedisNotificationSubscriber:
    """
    Async subscription to one notification channel.

    Usage:
        >>> async with RedisNotificationSubscriber("user.5") as subscriber:
        ...     async for envelope in subscriber:
        ...         await websocket.send_json(envelope)
    """

    def __init__(
        self, channel: str, redis_client: Optional[aioredis.Redis] = None
    ) -> None:
        self.channel = channel
        self._owns_client = redis_client is None
        self.redis = redis_client or get_async_redis_client()
        self.pubsub = self.redis.pubsub()

    async def __aenter__(self) -> "RedisNotificationSubscriber":
        await self.pubsub.subscribe(self.channel)
        logger.info(f"Subscribed to {self.channel}")
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        try:
            await self.pubsub.unsubscribe(self.channel)
            await self.pubsub.aclose()
        finally:
            if self._owns_client:
                await self.redis.aclose()
        logger.info(f"Unsubscribed from {self.channel}")

    async def __aiter__(self) -> AsyncIterator[dict[str, Any]]:
        async for message in self.pubsub.listen():
            if message.get("type") != "message":
                continue
            try:
                yield json.loads(message["data"])
            except (TypeError, json.JSONDecodeError):
                logger.warning(f"Dropping malformed message on {self.channel}")
