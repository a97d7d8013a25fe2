"""
In-memory fakes for unit tests.

Stores keep serialized copies (to_dict / from_dict) so every get() returns a
fresh object, the way the Redis stores do. That makes "re-read the
execution" behaviour observable in tests.
"""

from typing import Any, Optional

import pytest

from src.application.services import (
    AppExecutionService,
    CompletionNotifier,
    ExecutionCoordinator,
    GenerationRunner,
    GenerationService,
)
from src.application.ports import ProviderResult
from src.domain.generation.entities import AppExecution, Generation
from src.infrastructure.catalog import JsonAppCatalog


class InMemoryGenerationRepository:
    def __init__(self) -> None:
        self.records: dict[int, dict[str, Any]] = {}
        self.save_calls = 0
        self._next_id = 0

    def save(self, generation: Generation) -> Generation:
        if generation.id is None:
            self._next_id += 1
            generation.id = self._next_id
        self.records[generation.id] = generation.to_dict()
        self.save_calls += 1
        return generation

    def get(self, generation_id: int) -> Optional[Generation]:
        data = self.records.get(generation_id)
        return Generation.from_dict(data) if data else None

    def list_for_user(self, user_id: int, offset: int = 0, limit: int = 20) -> list:
        ids = sorted(
            (gid for gid, data in self.records.items() if data["user_id"] == user_id),
            reverse=True,
        )
        return [self.get(gid) for gid in ids[offset : offset + limit]]

    def count_for_user(self, user_id: int) -> int:
        return sum(1 for data in self.records.values() if data["user_id"] == user_id)


class InMemoryExecutionRepository:
    def __init__(self) -> None:
        self.records: dict[int, dict[str, Any]] = {}
        self.save_calls = 0
        self._next_id = 0

    def save(self, execution: AppExecution) -> AppExecution:
        if execution.id is None:
            self._next_id += 1
            execution.id = self._next_id
        self.records[execution.id] = execution.to_dict()
        self.save_calls += 1
        return execution

    def get(self, execution_id: int) -> Optional[AppExecution]:
        data = self.records.get(execution_id)
        return AppExecution.from_dict(data) if data else None


class RecordingPublisher:
    def __init__(self) -> None:
        self.messages: list[tuple[str, dict]] = []

    def publish(self, channel: str, message: dict) -> None:
        self.messages.append((channel, message))

    def events(self, name: Optional[str] = None) -> list[dict]:
        return [m for _, m in self.messages if name is None or m["event"] == name]


class RecordingDispatcher:
    def __init__(self) -> None:
        self.generations: list[int] = []
        self.executions: list[tuple[int, bool]] = []

    def dispatch_generation(self, generation_id: int) -> None:
        self.generations.append(generation_id)

    def dispatch_execution(self, execution_id: int, skip_approval: bool = False) -> None:
        self.executions.append((execution_id, skip_approval))


class StubProvider:
    """Returns queued results (or raises queued exceptions) in order."""

    def __init__(self, *outcomes) -> None:
        self.outcomes = list(outcomes)
        self.calls: list[tuple[str, dict]] = []

    def generate(self, model, input_data):
        self.calls.append((model.slug, dict(input_data)))
        outcome = self.outcomes.pop(0) if self.outcomes else ProviderResult(
            output={"result": "https://cdn.example.com/out.png"}
        )
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


@pytest.fixture
def catalog(sample_catalog_data):
    return JsonAppCatalog.from_dict(sample_catalog_data)


@pytest.fixture
def generation_repository():
    return InMemoryGenerationRepository()


@pytest.fixture
def execution_repository():
    return InMemoryExecutionRepository()


@pytest.fixture
def publisher():
    return RecordingPublisher()


@pytest.fixture
def dispatcher():
    return RecordingDispatcher()


@pytest.fixture
def provider():
    return StubProvider()


@pytest.fixture
def notifier(publisher, catalog):
    return CompletionNotifier(publisher, catalog)


@pytest.fixture
def generation_service(generation_repository, catalog, dispatcher):
    return GenerationService(generation_repository, catalog, dispatcher)


@pytest.fixture
def app_execution_service(
    execution_repository, generation_service, catalog, notifier, dispatcher
):
    return AppExecutionService(
        execution_repository, generation_service, catalog, notifier, dispatcher
    )


@pytest.fixture
def coordinator(execution_repository, app_execution_service, notifier):
    return ExecutionCoordinator(execution_repository, app_execution_service, notifier)


@pytest.fixture
def runner(generation_repository, provider, coordinator, notifier, catalog):
    return GenerationRunner(generation_repository, provider, coordinator, notifier, catalog)
