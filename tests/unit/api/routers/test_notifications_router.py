"""
Tests for the notifications WebSocket.

Covers:
- Handshake refused without a user id (4401) or for a foreign channel (4403)
- Envelopes from the subscriber are relayed as JSON
- Subscription failure closes with 1011
"""

import pytest
from starlette.websockets import WebSocketDisconnect


def test_connection_without_user_is_refused(client):
    with pytest.raises(WebSocketDisconnect) as exc_info:
        with client.websocket_connect("/ws/notifications"):
            pass

    assert exc_info.value.code == 4401


def test_foreign_channel_is_refused(client, subscriber_factory):
    with pytest.raises(WebSocketDisconnect) as exc_info:
        with client.websocket_connect("/ws/notifications?user_id=5&channel=user.6"):
            pass

    assert exc_info.value.code == 4403
    assert subscriber_factory.created == []


def test_envelopes_are_relayed_to_own_channel(client, subscriber_factory):
    subscriber_factory.envelopes = [
        {"event": "generation.completed", "payload": {"generation_id": 1}},
        {"event": "app.execution.completed", "payload": {"execution_id": 2}},
    ]

    with client.websocket_connect(
        "/ws/notifications", headers={"X-User-Id": "5"}
    ) as websocket:
        first = websocket.receive_json()
        second = websocket.receive_json()

    assert first["payload"]["generation_id"] == 1
    assert second["event"] == "app.execution.completed"
    assert subscriber_factory.created[0].channel == "user.5"
    assert subscriber_factory.created[0].closed is True


def test_subscription_failure_closes_with_internal_error(client, subscriber_factory):
    subscriber_factory.error = ConnectionError("redis down")

    with client.websocket_connect("/ws/notifications?user_id=5") as websocket:
        with pytest.raises(WebSocketDisconnect) as exc_info:
            websocket.receive_json()

    assert exc_info.value.code == 1011
