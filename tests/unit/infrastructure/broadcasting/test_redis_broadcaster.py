"""Tests for the Redis pub/sub publisher and subscriber."""

import json
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.infrastructure.broadcasting import (
    RedisNotificationPublisher,
    RedisNotificationSubscriber,
)


def test_publisher_sends_json_envelope():
    client = MagicMock()
    client.publish.return_value = 1

    RedisNotificationPublisher(client).publish("user.5", {"event": "generation.completed"})

    client.publish.assert_called_once_with(
        "user.5", json.dumps({"event": "generation.completed"})
    )


@pytest.fixture
def async_client():
    messages = [
        {"type": "subscribe", "data": 1},
        {"type": "message", "data": json.dumps({"event": "generation.completed"})},
        {"type": "message", "data": "not json"},
        {"type": "message", "data": json.dumps({"event": "app.execution.completed"})},
    ]

    async def listen():
        for message in messages:
            yield message

    pubsub = MagicMock()
    pubsub.subscribe = AsyncMock()
    pubsub.unsubscribe = AsyncMock()
    pubsub.aclose = AsyncMock()
    pubsub.listen = listen
    client = MagicMock()
    client.pubsub.return_value = pubsub
    client.aclose = AsyncMock()
    return client


@pytest.mark.asyncio
async def test_subscriber_yields_decoded_messages_only(async_client):
    received = []

    async with RedisNotificationSubscriber("user.5", async_client) as subscriber:
        async for envelope in subscriber:
            received.append(envelope["event"])

    pubsub = async_client.pubsub.return_value
    pubsub.subscribe.assert_awaited_once_with("user.5")
    pubsub.unsubscribe.assert_awaited_once_with("user.5")
    assert received == ["generation.completed", "app.execution.completed"]
    # Injected clients belong to the caller
    async_client.aclose.assert_not_awaited()
