"""
ListGenerationsQuery - CQRS Read Query

Paginated list of the caller's generations, newest first.
"""

from pydantic import BaseModel, Field

from src.application.models import GenerationListResult, GenerationResult
from src.application.services.generation_service import (
    DEFAULT_PAGE_SIZE,
    MAX_PAGE_SIZE,
    GenerationService,
)


class ListGenerationsQuery(BaseModel):
    user_id: int = Field(ge=1)
    page: int = Field(default=1, ge=1)
    per_page: int = Field(default=DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE)


class ListGenerationsQueryHandler:
    def __init__(self, generation_service: GenerationService):
        self.generation_service = generation_service

    async def handle(self, query: ListGenerationsQuery) -> GenerationListResult:
        page = self.generation_service.list_generations(
            query.user_id, query.page, query.per_page
        )
        return GenerationListResult(
            items=[GenerationResult.from_entity(g) for g in page.items],
            page=page.page,
            per_page=page.per_page,
            total=page.total,
        )
