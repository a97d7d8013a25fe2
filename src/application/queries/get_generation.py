"""
GetGenerationQuery - CQRS Read Query

Query object and handler for reading one generation of the caller.
Used by clients that missed a notification to reconcile state by polling.

Architecture Notes:
    - Part of Application Layer (Queries)
    - Handler reads the Generation Store directly (no side effects)
    - Ownership enforced here: another user's generation -> ForbiddenResourceError
"""

import logging

from pydantic import BaseModel, Field

from src.application.models import GenerationResult
from src.domain.generation.repositories import GenerationRepositoryProtocol
from src.domain.shared.exceptions import (
    ForbiddenResourceError,
    GenerationNotFoundError,
)

logger = logging.getLogger(__name__)


class GetGenerationQuery(BaseModel):
    generation_id: int = Field(ge=1)
    user_id: int = Field(ge=1, description="Authenticated caller")


class GetGenerationQueryHandler:
    def __init__(self, generation_repository: GenerationRepositoryProtocol):
        self.generation_repository = generation_repository

    async def handle(self, query: GetGenerationQuery) -> GenerationResult:
        """
        Raises:
            GenerationNotFoundError: No generation with this id
            ForbiddenResourceError: Generation belongs to another user
        """
        generation = self.generation_repository.get(query.generation_id)
        if generation is None:
            raise GenerationNotFoundError(query.generation_id)
        if generation.user_id != query.user_id:
            logger.warning(
                f"User {query.user_id} denied access to generation {query.generation_id}"
            )
            raise ForbiddenResourceError("generation", query.generation_id, query.user_id)
        return GenerationResult.from_entity(generation)
