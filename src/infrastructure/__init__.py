"""
Infrastructure Layer - External Dependencies

Implements technical capabilities that support the Domain and Application
layers. Handles all external dependencies: Redis, the AI provider API and
the file system.

Architecture:
    - Implements Domain repository interfaces (Dependency Inversion)
    - Implements Application Layer ports (publisher, provider, media storage)
    - Depends on external libraries (redis, httpx)
    - No Domain business logic (only technical implementations)

Modules:
    - persistence: Redis connection pool and Redis-backed stores
    - broadcasting: Redis pub/sub publisher and subscriber
    - catalog: JSON model/app catalog
    - providers: HTTP AI provider client
    - file_storage: Media uploads

Usage:
    >>> from src.infrastructure import RedisGenerationRepository, JsonAppCatalog
    >>> from src.infrastructure.broadcasting import RedisNotificationPublisher
"""

# Persistence
from .persistence import RedisExecutionRepository, RedisGenerationRepository

# Broadcasting
from .broadcasting import RedisNotificationPublisher, RedisNotificationSubscriber

# Catalog
from .catalog import JsonAppCatalog

# Providers
from .providers import HttpGenerationProvider

# File Storage
from .file_storage import MediaStorageService

__all__ = [
    # Persistence
    "RedisGenerationRepository",
    "RedisExecutionRepository",
    # Broadcasting
    "RedisNotificationPublisher",
    "RedisNotificationSubscriber",
    # Catalog
    "JsonAppCatalog",
    # Providers
    "HttpGenerationProvider",
    # File Storage
    "MediaStorageService",
]
