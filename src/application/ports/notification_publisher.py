"""
NotificationPublisher Port

Contract for pushing a notification envelope onto a named channel.
Implemented by the Redis pub/sub broadcaster in the Infrastructure Layer.
"""

from typing import Any, Protocol


class NotificationPublisherProtocol(Protocol):
    """
    Publishes JSON-serializable envelopes to a channel.

    Implementations may raise on transport errors; callers that need
    best-effort delivery (CompletionNotifier) catch and log.
    """

    def publish(self, channel: str, message: dict[str, Any]) -> None:
        ...
