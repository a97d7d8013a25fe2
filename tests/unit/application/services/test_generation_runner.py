"""
Tests for GenerationRunner (Job Runner completion path).

Covers:
- Standalone generation: processing -> completed, one generation.completed event
- Provider errors are captured into the record, never raised
- Linked generation: coordinator advances the execution, no generation event
- Already terminal / missing generations
- Store errors propagate (so the Celery task can retry)
"""

from unittest.mock import MagicMock

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from src.application.ports import ProviderResult
from src.application.services import ExecutionCoordinator, GenerationRunner
from src.domain.generation.entities import Generation
from src.domain.generation.value_objects import ExecutionStatus, GenerationStatus
from src.domain.shared.exceptions import ProviderRequestError


def _save_pending(repository, **kwargs):
    generation = Generation(
        user_id=5, model_slug="flux-dev", model_name="Flux Dev", input_data={"prompt": "cat"}
    )
    for key, value in kwargs.items():
        setattr(generation, key, value)
    repository.save(generation)
    return generation


def test_standalone_generation_completes_and_notifies(
    runner, generation_repository, provider, publisher
):
    provider.outcomes.append(
        ProviderResult(
            output={"result": "https://x/out.png"},
            thumbnail_url="https://x/t.png",
            duration=2.5,
        )
    )
    generation = _save_pending(generation_repository)

    result = runner.run(generation.id)

    assert result.status == GenerationStatus.COMPLETED
    stored = generation_repository.get(generation.id)
    assert stored.status == GenerationStatus.COMPLETED
    assert stored.result_url == "https://x/out.png"
    assert stored.thumbnail_url == "https://x/t.png"
    assert stored.duration == 2.5
    assert provider.calls == [("flux-dev", {"prompt": "cat"})]

    events = publisher.events()
    assert len(events) == 1
    assert events[0]["event"] == "generation.completed"
    assert events[0]["payload"]["generation_id"] == generation.id
    assert events[0]["payload"]["status"] == "completed"


def test_standalone_generation_never_touches_executions(
    generation_repository, provider, notifier, catalog
):
    coordinator = MagicMock()
    execution_repository = MagicMock()
    real_coordinator = ExecutionCoordinator(execution_repository, MagicMock(), notifier)
    coordinator.on_generation_status_changed.side_effect = (
        real_coordinator.on_generation_status_changed
    )
    runner = GenerationRunner(
        generation_repository, provider, coordinator, notifier, catalog
    )
    generation = _save_pending(generation_repository)

    runner.run(generation.id)

    # pending -> processing, processing -> completed
    assert coordinator.on_generation_status_changed.call_count == 2
    execution_repository.get.assert_not_called()
    execution_repository.save.assert_not_called()


def test_provider_error_marks_generation_failed(
    runner, generation_repository, provider, publisher
):
    provider.outcomes.append(
        ProviderRequestError("Provider API error: 500", status_code=500)
    )
    generation = _save_pending(generation_repository)

    result = runner.run(generation.id)

    assert result.status == GenerationStatus.FAILED
    stored = generation_repository.get(generation.id)
    assert stored.error_message == "Provider API error: 500"
    assert stored.output_data == {"error": "Provider API error: 500"}
    assert publisher.events()[0]["payload"]["status"] == "failed"


def test_unexpected_error_marks_generation_failed(
    runner, generation_repository, provider
):
    provider.outcomes.append(ValueError("bad payload"))
    generation = _save_pending(generation_repository)

    result = runner.run(generation.id)

    assert result.status == GenerationStatus.FAILED
    assert result.error_message == "bad payload"


def test_inactive_model_marks_generation_failed(runner, generation_repository, provider):
    generation = _save_pending(generation_repository, model_slug="retired")

    result = runner.run(generation.id)

    assert result.status == GenerationStatus.FAILED
    assert "retired" in result.error_message
    assert provider.calls == []


def test_missing_generation_returns_none(runner, provider):
    assert runner.run(999) is None
    assert provider.calls == []


def test_terminal_generation_is_not_rerun(runner, generation_repository, provider, publisher):
    generation = _save_pending(generation_repository)
    generation.mark_completed({"result": "https://x/first.png"})
    generation_repository.save(generation)

    result = runner.run(generation.id)

    assert result.result_url == "https://x/first.png"
    assert provider.calls == []
    assert publisher.messages == []


def test_processing_generation_is_resumed(runner, generation_repository, provider):
    generation = _save_pending(generation_repository)
    generation.mark_processing()
    generation_repository.save(generation)

    result = runner.run(generation.id)

    assert result.status == GenerationStatus.COMPLETED
    assert len(provider.calls) == 1


def test_store_errors_propagate(provider, notifier, catalog):
    repository = MagicMock()
    repository.get.return_value = Generation(user_id=5, model_slug="flux-dev", id=1)
    repository.save.side_effect = ConnectionError("redis down")
    runner = GenerationRunner(repository, provider, MagicMock(), notifier, catalog)

    with pytest.raises(ConnectionError):
        runner.run(1)


def test_linked_generation_does_not_send_generation_event(
    runner, generation_repository, execution_repository, app_execution_service, publisher, dispatcher
):
    execution = app_execution_service.start_app("two-step", 5, {"prompt": "cat"})
    app_execution_service.execute_next_step(execution.id)
    generation_id = dispatcher.generations[-1]

    runner.run(generation_id)

    assert publisher.events("generation.completed") == []
    stored = execution_repository.get(execution.id)
    assert stored.current_step == 1
    assert stored.step_result(0).get("result") == "https://cdn.example.com/out.png"


def test_retry_after_failed_execution_write_fails_the_execution(
    runner,
    generation_repository,
    execution_repository,
    app_execution_service,
    provider,
    publisher,
    dispatcher,
    monkeypatch,
):
    execution = app_execution_service.start_app("two-step", 5, {"prompt": "cat"})
    app_execution_service.execute_next_step(execution.id)
    generation_id = dispatcher.generations[-1]
    provider.outcomes.append(ProviderRequestError("Provider timeout"))

    save = execution_repository.save
    attempts = []

    def save_failing_once(record):
        attempts.append(record.id)
        if len(attempts) == 1:
            raise RedisConnectionError("redis down")
        return save(record)

    monkeypatch.setattr(execution_repository, "save", save_failing_once)

    with pytest.raises(RedisConnectionError):
        runner.run(generation_id)
    assert generation_repository.get(generation_id).status == GenerationStatus.FAILED
    assert execution_repository.get(execution.id).status == ExecutionStatus.PROCESSING

    # Celery retry of the same job
    runner.run(generation_id)

    stored = execution_repository.get(execution.id)
    assert stored.status == ExecutionStatus.FAILED
    assert stored.step_result(0).error_message == "Provider timeout"
    assert [e["payload"]["status"] for e in publisher.events()] == ["failed"]
    assert len(provider.calls) == 1


def test_redelivered_completed_step_does_not_advance_twice(
    runner, execution_repository, app_execution_service, dispatcher
):
    execution = app_execution_service.start_app("two-step", 5, {"prompt": "cat"})
    app_execution_service.execute_next_step(execution.id)
    generation_id = dispatcher.generations[-1]
    runner.run(generation_id)
    queued = list(dispatcher.executions)

    runner.run(generation_id)

    assert execution_repository.get(execution.id).current_step == 1
    assert dispatcher.executions == queued
