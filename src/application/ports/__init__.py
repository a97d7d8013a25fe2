"""
Application Layer Ports (Interfaces)

Contains Protocol definitions for dependency inversion.
Infrastructure Layer implements these protocols.
"""

from src.application.ports.generation_provider import (
    GenerationProviderProtocol,
    ProviderResult,
)
from src.application.ports.job_dispatcher import JobDispatcherProtocol
from src.application.ports.media_storage import MediaStorageProtocol
from src.application.ports.notification_publisher import NotificationPublisherProtocol

__all__ = [
    "GenerationProviderProtocol",
    "ProviderResult",
    "JobDispatcherProtocol",
    "MediaStorageProtocol",
    "NotificationPublisherProtocol",
]
