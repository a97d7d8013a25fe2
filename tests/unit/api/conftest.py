"""
Common fixtures for API unit tests.

Provides:
- FastAPI TestClient whose dependencies are wired to the in-memory stores,
  recording dispatcher and recording publisher from tests/unit/conftest.py
- A fake subscriber factory for the notifications WebSocket
"""

import pytest
from fastapi.testclient import TestClient

from src.api import dependencies
from src.api.main import app
from src.application.queries import (
    GetExecutionQueryHandler,
    GetGenerationQueryHandler,
    ListGenerationsQueryHandler,
)
from src.application.services import (
    ApproveStepUseCase,
    CreateGenerationUseCase,
    StartAppUseCase,
)
from src.infrastructure.file_storage import MediaStorageService


class FakeSubscriber:
    """Async context manager + iterator over pre-set envelopes."""

    def __init__(self, channel, envelopes, error=None):
        self.channel = channel
        self.envelopes = envelopes
        self.error = error
        self.closed = False

    async def __aenter__(self):
        if self.error is not None:
            raise self.error
        return self

    async def __aexit__(self, exc_type, exc, tb):
        self.closed = True

    async def __aiter__(self):
        for envelope in self.envelopes:
            yield envelope


class FakeSubscriberFactory:
    def __init__(self):
        self.envelopes = []
        self.error = None
        self.created = []

    def __call__(self, channel):
        subscriber = FakeSubscriber(channel, list(self.envelopes), self.error)
        self.created.append(subscriber)
        return subscriber


@pytest.fixture
def media_storage(tmp_path):
    return MediaStorageService(
        media_root=str(tmp_path), base_url="http://testserver/media", max_size_mb=1
    )


@pytest.fixture
def subscriber_factory():
    return FakeSubscriberFactory()


@pytest.fixture
def client(
    generation_service,
    app_execution_service,
    generation_repository,
    execution_repository,
    notifier,
    media_storage,
    subscriber_factory,
):
    """
    FastAPI TestClient with every dependency overridden.

    Nothing touches Redis or Celery; queued jobs land in the recording
    dispatcher.
    """
    overrides = {
        dependencies.get_create_generation_use_case: lambda: CreateGenerationUseCase(
            generation_service
        ),
        dependencies.get_start_app_use_case: lambda: StartAppUseCase(app_execution_service),
        dependencies.get_approve_step_use_case: lambda: ApproveStepUseCase(
            app_execution_service
        ),
        dependencies.get_generation_query_handler: lambda: GetGenerationQueryHandler(
            generation_repository
        ),
        dependencies.get_list_generations_query_handler: lambda: ListGenerationsQueryHandler(
            generation_service
        ),
        dependencies.get_execution_query_handler: lambda: GetExecutionQueryHandler(
            execution_repository
        ),
        dependencies.get_media_storage: lambda: media_storage,
        dependencies.get_notifier: lambda: notifier,
        dependencies.get_subscriber_factory: lambda: subscriber_factory,
    }
    app.dependency_overrides.update(overrides)
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    return {"X-User-Id": "5"}
