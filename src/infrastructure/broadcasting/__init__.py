"""
Broadcasting Infrastructure Module

Exports:
    - RedisNotificationPublisher: Publish envelopes on user channels
    - RedisNotificationSubscriber: Async subscription for the WebSocket relay
"""

from .redis_broadcaster import RedisNotificationPublisher, RedisNotificationSubscriber

__all__ = ["RedisNotificationPublisher", "RedisNotificationSubscriber"]
