"""
Composition Root

Builds the process-wide service graph from environment configuration.
Shared by the FastAPI dependencies and the Celery tasks so both sides run
the same wiring.

Every factory is cached: one instance per process. Tests replace pieces
with app.dependency_overrides (API) or by patching the factory (tasks);
reset() clears the caches.
"""

import os
from functools import lru_cache

from src.application.services import (
    AppExecutionService,
    CompletionNotifier,
    ExecutionCoordinator,
    GenerationRunner,
    GenerationService,
)
from src.application.tasks.dispatcher import CeleryJobDispatcher
from src.infrastructure.broadcasting import RedisNotificationPublisher
from src.infrastructure.catalog import JsonAppCatalog
from src.infrastructure.file_storage import MediaStorageService
from src.infrastructure.persistence.repositories import (
    RedisExecutionRepository,
    RedisGenerationRepository,
)
from src.infrastructure.providers import HttpGenerationProvider


@lru_cache
def get_catalog() -> JsonAppCatalog:
    return JsonAppCatalog.from_file()


@lru_cache
def get_generation_repository() -> RedisGenerationRepository:
    return RedisGenerationRepository()


@lru_cache
def get_execution_repository() -> RedisExecutionRepository:
    return RedisExecutionRepository()


@lru_cache
def get_notifier() -> CompletionNotifier:
    return CompletionNotifier(
        RedisNotificationPublisher(),
        get_catalog(),
        channel_prefix=os.getenv("NOTIFICATION_CHANNEL_PREFIX", "user"),
    )


@lru_cache
def get_dispatcher() -> CeleryJobDispatcher:
    return CeleryJobDispatcher()


@lru_cache
def get_media_storage() -> MediaStorageService:
    return MediaStorageService()


@lru_cache
def get_generation_service() -> GenerationService:
    return GenerationService(
        get_generation_repository(), get_catalog(), get_dispatcher()
    )


@lru_cache
def get_app_execution_service() -> AppExecutionService:
    return AppExecutionService(
        get_execution_repository(),
        get_generation_service(),
        get_catalog(),
        get_notifier(),
        get_dispatcher(),
    )


@lru_cache
def get_execution_coordinator() -> ExecutionCoordinator:
    return ExecutionCoordinator(
        get_execution_repository(), get_app_execution_service(), get_notifier()
    )


@lru_cache
def get_generation_runner() -> GenerationRunner:
    return GenerationRunner(
        get_generation_repository(),
        HttpGenerationProvider(),
        get_execution_coordinator(),
        get_notifier(),
        get_catalog(),
    )


def reset() -> None:
    for factory in (
        get_catalog,
        get_generation_repository,
        get_execution_repository,
        get_notifier,
        get_dispatcher,
        get_media_storage,
        get_generation_service,
        get_app_execution_service,
        get_execution_coordinator,
        get_generation_runner,
    ):
        factory.cache_clear()
