"""
Generation Service

Responsibility:
    Creates generation records and enqueues the Job Runner for them; lists a
    user's generations for the read endpoints.

Architecture Notes:
    - Part of Application Layer (Services)
    - Used by the generate endpoint (standalone generations) and by
      AppExecutionService (linked generations, one per step)
    - Inputs must already be normalised: uploads are replaced by durable URLs
      before they reach this service
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Optional

from src.application.ports.job_dispatcher import JobDispatcherProtocol
from src.domain.generation.entities import Generation
from src.domain.generation.repositories import (
    AppCatalogProtocol,
    GenerationRepositoryProtocol,
)
from src.domain.shared.exceptions import InvalidGenerationInputError

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100


@dataclass
class GenerationPage:
    """One page of a user's generations, newest first."""

    items: list[Generation] = field(default_factory=list)
    page: int = 1
    per_page: int = DEFAULT_PAGE_SIZE
    total: int = 0


class GenerationService:
    def __init__(
        self,
        generation_repository: GenerationRepositoryProtocol,
        catalog: AppCatalogProtocol,
        dispatcher: JobDispatcherProtocol,
    ):
        self.generation_repository = generation_repository
        self.catalog = catalog
        self.dispatcher = dispatcher

    def create_generation(
        self,
        user_id: int,
        model_slug: str,
        input_data: Optional[dict[str, Any]] = None,
        execution_id: Optional[int] = None,
        step_index: Optional[int] = None,
        dispatch: bool = True,
    ) -> Generation:
        """
        Persist a pending generation and enqueue it.

        Args:
            user_id: Owner
            model_slug: Catalog slug of the model to run
            input_data: Normalised inputs
            execution_id: Owning app execution, for step generations
            step_index: Step of that execution
            dispatch: Enqueue the Job Runner right away. Callers that must
                persist a back-reference first pass False and call
                dispatcher.dispatch_generation() themselves

        Returns:
            The saved Generation (id assigned)

        Raises:
            ModelNotFoundError: Unknown or inactive model
            InvalidGenerationInputError: input_data is not a mapping
        """
        if input_data is not None and not isinstance(input_data, dict):
            raise InvalidGenerationInputError(
                "Generation input must be an object", field_name="input_data"
            )

        model = self.catalog.get_model(model_slug)
        generation = Generation(
            user_id=user_id,
            model_slug=model.slug,
            model_name=model.name,
            input_data=dict(input_data or {}),
        )
        if execution_id is not None:
            generation.link_to_execution(execution_id, step_index or 0)

        self.generation_repository.save(generation)
        logger.info(
            f"Created generation {generation.id} (model={model.slug}, user={user_id}"
            + (
                f", execution={execution_id}, step={step_index}"
                if execution_id is not None
                else ""
            )
            + ")"
        )

        if dispatch:
            self.dispatcher.dispatch_generation(generation.id)
        return generation

    def list_generations(
        self, user_id: int, page: int = 1, per_page: int = DEFAULT_PAGE_SIZE
    ) -> GenerationPage:
        page = max(1, page)
        per_page = min(max(1, per_page), MAX_PAGE_SIZE)
        offset = (page - 1) * per_page

        items = self.generation_repository.list_for_user(
            user_id, offset=offset, limit=per_page
        )
        total = self.generation_repository.count_for_user(user_id)
        return GenerationPage(items=items, page=page, per_page=per_page, total=total)
