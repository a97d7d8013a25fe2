"""Tests for GenerationService (create + list)."""

import pytest

from src.application.services import GenerationService
from src.application.services.generation_service import MAX_PAGE_SIZE
from src.domain.generation.value_objects import GenerationStatus
from src.domain.shared.exceptions import InvalidGenerationInputError, ModelNotFoundError


def test_create_generation_saves_pending_and_dispatches(
    generation_service, generation_repository, dispatcher
):
    generation = generation_service.create_generation(5, "flux-dev", {"prompt": "cat"})

    assert generation.id == 1
    assert generation.status == GenerationStatus.PENDING
    assert generation.model_name == "Flux Dev"
    assert generation.belongs_to_execution is False
    assert generation_repository.get(1).input_data == {"prompt": "cat"}
    assert dispatcher.generations == [1]


def test_create_linked_generation_without_dispatch(generation_service, dispatcher):
    generation = generation_service.create_generation(
        5, "real-esrgan", {}, execution_id=3, step_index=1, dispatch=False
    )

    assert generation.app_execution_id == 3
    assert generation.app_step_index == 1
    assert dispatcher.generations == []


@pytest.mark.parametrize("slug", ["unknown", "retired"])
def test_create_generation_for_missing_model(generation_service, dispatcher, slug):
    with pytest.raises(ModelNotFoundError):
        generation_service.create_generation(5, slug, {})

    assert dispatcher.generations == []


def test_create_generation_rejects_non_mapping_input(generation_service):
    with pytest.raises(InvalidGenerationInputError):
        generation_service.create_generation(5, "flux-dev", ["not", "a", "dict"])


def test_list_generations_is_newest_first_and_paginated(generation_service):
    for _ in range(5):
        generation_service.create_generation(5, "flux-dev", {})
    generation_service.create_generation(6, "flux-dev", {})

    first = generation_service.list_generations(5, page=1, per_page=2)
    last = generation_service.list_generations(5, page=3, per_page=2)

    assert [g.id for g in first.items] == [5, 4]
    assert first.total == 5
    assert [g.id for g in last.items] == [1]


def test_list_generations_clamps_page_arguments(generation_repository, catalog, dispatcher):
    service = GenerationService(generation_repository, catalog, dispatcher)

    page = service.list_generations(5, page=0, per_page=10_000)

    assert page.page == 1
    assert page.per_page == MAX_PAGE_SIZE
    assert page.items == []
    assert page.total == 0
